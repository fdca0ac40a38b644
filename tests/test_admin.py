import pytest

from models import Assignment, Category, CategoryType, Evaluation, Judge, JudgeGroup, Project, Submission
from routes.admin import parse_csv_lines


def test_parse_csv_lines():
    assert parse_csv_lines('a, b ,c\n\n d,e,f', 3) == [('a', 'b', 'c'), ('d', 'e', 'f')]
    with pytest.raises(ValueError):
        parse_csv_lines('a,b', 3)


def test_create_categories_and_judges(auth_client, db):
    auth_client.post('/admin/categories', data={'id': 'general', 'name': 'General', 'type': 'General'})
    auth_client.post('/admin/categories/bulk', data={'rows': 'acme,Acme Prize,Sponsor\nui,Best UI,inhouse'})
    auth_client.post('/admin/judges', data={'name': 'Kim', 'email': 'KIM@judges.test', 'category_id': 'general'})
    response = auth_client.post('/admin/judges/bulk', data={'rows': 'Lee,lee@judges.test,acme\nMo,mo@judges.test,ui'},
                                follow_redirects=True)

    assert response.status_code == 200
    assert db.session.get(Category, 'acme').type is CategoryType.SPONSOR
    assert db.session.get(Category, 'ui').type is CategoryType.INHOUSE
    assert sorted(j.email for j in Judge.query.all()) == ['kim@judges.test', 'lee@judges.test', 'mo@judges.test']


def test_bulk_judges_with_unknown_category_add_nothing(auth_client, general):
    response = auth_client.post('/admin/judges/bulk', data={'rows': 'Kim,kim@judges.test,general\nLee,lee@j.test,ghost'},
                                follow_redirects=True)
    assert b'Unknown categories: ghost' in response.data
    assert Judge.query.count() == 0


def test_duplicate_category_id(auth_client, general):
    response = auth_client.post('/admin/categories', data={'id': 'general', 'name': 'Again', 'type': 'General'},
                                follow_redirects=True)
    assert b'already exists' in response.data


def test_rename_category_moves_children(auth_client, db, general, make_judges):
    make_judges(general, 2)
    project = Project(name='Rover')
    db.session.add(project)
    db.session.flush()
    db.session.add(Submission(project_id=project.id, category_id='general'))
    db.session.commit()

    auth_client.post('/admin/category/general/edit', data={'id': 'main', 'name': 'General', 'type': 'General'})

    db.session.expire_all()
    assert db.session.get(Category, 'general') is None
    assert db.session.get(Category, 'main') is not None
    assert {j.category_id for j in Judge.query.all()} == {'main'}
    assert Submission.query.one().category_id == 'main'


def test_category_with_judges_cannot_be_deleted(auth_client, general, make_judges):
    make_judges(general, 1)
    response = auth_client.post('/admin/category/general/delete', follow_redirects=True)
    assert b'still has judges or submissions' in response.data
    assert Category.query.count() == 1


def test_empty_category_is_deleted(auth_client, make_category):
    make_category('mlh', 'MLH', CategoryType.MLH)
    auth_client.post('/admin/category/mlh/delete')
    assert Category.query.count() == 0


def test_judging_flow(auth_client, db, general, make_category, make_judges):
    sponsor = make_category('acme', 'Acme Prize', CategoryType.SPONSOR)
    make_judges(general, 6)
    make_judges(sponsor, 2)
    for name in ('Rover', 'Lamp'):
        project = Project(name=name)
        db.session.add(project)
        db.session.flush()
        db.session.add(Submission(project_id=project.id, category_id='general'))
    db.session.add(Submission(project_id=project.id, category_id='acme'))
    db.session.commit()

    response = auth_client.post('/admin/judge-groups/regenerate', follow_redirects=True)
    assert b'Created 4 judge groups.' in response.data
    assert JudgeGroup.query.count() == 4

    response = auth_client.post('/admin/assignments/regenerate', follow_redirects=True)
    assert response.status_code == 200
    assert b'Created' in response.data
    assert Assignment.query.count() > 0

    response = auth_client.post('/admin/scorings/generate', follow_redirects=True)
    assert b'Generated scores for' in response.data
    evaluations = Evaluation.query.all()
    assert evaluations
    assert all(len(e.scores) == 3 and all(1 <= s <= 5 for s in e.scores) for e in evaluations)

    response = auth_client.get('/admin/scorings?sort=avg_z_score&dir=desc')
    assert response.status_code == 200
    assert b'Rover' in response.data and b'Lamp' in response.data


def test_assignment_error_is_flashed(auth_client, general, make_judges):
    make_judges(general, 3)
    response = auth_client.post('/admin/assignments/regenerate', follow_redirects=True)
    assert b'There must be at least 6 General judges. Currently have 3.' in response.data


def test_scorings_shows_placeholder_for_unscored_projects(auth_client, db):
    db.session.add(Project(name='Quiet project'))
    db.session.commit()
    response = auth_client.get('/admin/scorings?sort=bogus')
    assert response.status_code == 200
    assert b'<td>-</td>' in response.data


def test_disqualify_and_reinstate(auth_client, db):
    project = Project(name='Rover')
    db.session.add(project)
    db.session.commit()

    auth_client.post(f'/admin/project/{project.id}/disqualify', data={'reason': 'Built before the event'})
    db.session.expire_all()
    assert project.status == 'disqualified'
    assert project.disqualify_reason == 'Built before the event'

    auth_client.post(f'/admin/project/{project.id}/reinstate')
    db.session.expire_all()
    assert project.status == 'created'
    assert project.disqualify_reason is None


def test_pages_render(auth_client, general, make_judges):
    judge = make_judges(general, 1)[0]
    for url in ('/admin/judges-and-categories', '/admin/projects', '/admin/assignments',
                '/admin/category/general/edit', f'/admin/judge/{judge.id}/edit',
                '/qr', '/plan', '/emails', '/emails/send'):
        assert auth_client.get(url).status_code == 200, url


def test_edit_judge_rejects_unknown_category(auth_client, db, general, make_judges):
    judge = make_judges(general, 1)[0]
    response = auth_client.post(f'/admin/judge/{judge.id}/edit',
                                data={'name': 'Renamed', 'email': judge.email, 'category_id': 'ghost'},
                                follow_redirects=True)

    assert b'Category &#34;ghost&#34; does not exist.' in response.data
    db.session.expire_all()
    stored = db.session.get(Judge, judge.id)
    assert stored.category_id == 'general'
    assert stored.name == 'general judge 01'

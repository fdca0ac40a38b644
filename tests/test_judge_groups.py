import pytest

import logic.judge_groups as judge_groups_logic
from logic import JudgeGroupingError, plan_judge_groups, regenerate_judge_groups
from logic.judge_groups import JudgeRow, category_letter
from models import Assignment, CategoryType, Judge, JudgeGroup, Project


def rows(category_id, category_type, count):
    return [JudgeRow(f'{category_id}-{i}', category_id, category_type) for i in range(count)]


def test_sponsor_category_gets_one_group_with_every_judge():
    plans = plan_judge_groups(rows('acme', CategoryType.SPONSOR, 5), ['acme'])
    assert len(plans) == 1
    assert len(plans[0].member_ids) == 5


def test_mlh_category_gets_one_group():
    plans = plan_judge_groups(rows('mlh', CategoryType.MLH, 3), ['mlh'])
    assert [len(p.member_ids) for p in plans] == [3]


def test_general_judges_are_paired():
    plans = plan_judge_groups(rows('general', CategoryType.GENERAL, 5), ['general'])
    assert [len(p.member_ids) for p in plans] == [2, 2, 1]
    assert plans[0].member_ids == ['general-0', 'general-1']


def test_group_names_use_category_position_by_id():
    judges = rows('general', CategoryType.GENERAL, 3) + rows('acme', CategoryType.SPONSOR, 2)
    plans = plan_judge_groups(judges, ['general', 'acme', 'best-ui'])
    assert sorted(p.name for p in plans) == ['A1', 'C1', 'C2']


def test_unknown_category_raises():
    with pytest.raises(JudgeGroupingError):
        plan_judge_groups(rows('ghost', CategoryType.GENERAL, 1), ['general'])


@pytest.mark.parametrize('index, letter', [(0, 'A'), (1, 'B'), (25, 'Z'), (26, 'AA'), (27, 'AB'), (52, 'BA')])
def test_category_letter(index, letter):
    assert category_letter(index) == letter


def test_regenerate_replaces_groups(app, db, general, make_category, make_judges):
    sponsor = make_category('acme', 'Acme', CategoryType.SPONSOR)
    make_judges(general, 5)
    make_judges(sponsor, 3)

    first = regenerate_judge_groups()
    second = regenerate_judge_groups()

    assert first == {'success': True, 'group_count': 4}
    assert second == first
    assert JudgeGroup.query.count() == 4
    assert Judge.query.filter(Judge.judge_group_id.is_(None)).count() == 0
    sponsor_groups = JudgeGroup.query.filter_by(category_id='acme').all()
    assert [g.name for g in sponsor_groups] == ['A1']
    assert len(sponsor_groups[0].judges) == 3
    assert sorted(g.name for g in JudgeGroup.query.filter_by(category_id='general')) == ['B1', 'B2', 'B3']


def test_regenerate_clears_assignments_of_old_groups(app, db, general, make_judges):
    make_judges(general, 2)
    regenerate_judge_groups()
    project = Project(name='Rover')
    db.session.add(project)
    db.session.flush()
    db.session.add(Assignment(judge_group_id=JudgeGroup.query.first().id, project_id=project.id))
    db.session.commit()

    assert regenerate_judge_groups()['success'] is True
    assert Assignment.query.count() == 0


def test_failed_write_keeps_previous_groups(app, db, general, make_judges, monkeypatch):
    make_judges(general, 4)
    regenerate_judge_groups()
    project = Project(name='Rover')
    db.session.add(project)
    db.session.flush()
    db.session.add(Assignment(judge_group_id=JudgeGroup.query.first().id, project_id=project.id))
    db.session.commit()
    groups_before = sorted((g.id, g.name) for g in JudgeGroup.query.all())
    members_before = {j.id: j.judge_group_id for j in Judge.query.all()}

    original_plan = judge_groups_logic.plan_judge_groups

    def plan_with_unnamed_group(judges, category_ids):
        plans = original_plan(judges, category_ids)
        plans[1].name = None
        return plans

    monkeypatch.setattr(judge_groups_logic, 'plan_judge_groups', plan_with_unnamed_group)
    result = regenerate_judge_groups()

    assert result['success'] is False
    db.session.expire_all()
    assert sorted((g.id, g.name) for g in JudgeGroup.query.all()) == groups_before
    assert {j.id: j.judge_group_id for j in Judge.query.all()} == members_before
    assert Assignment.query.count() == 1

import pytest

from models import Participant


@pytest.fixture
def participants(db):
    people = [
        Participant(first_name='Ada', last_name='Lovelace', email='ada@example.com', status='CONFIRMED'),
        Participant(first_name='Alan', last_name='Turing', email='alan@example.com', status='WAITLISTED'),
        Participant(first_name='Grace', last_name='Hopper', email='grace@example.com', status='CHECKED_IN',
                    checked_in=True),
        Participant(first_name='Linus', last_name='Adams', email='linus@example.com'),
    ]
    db.session.add_all(people)
    db.session.commit()
    return people


def test_dashboard_stats(auth_client, participants):
    response = auth_client.get('/api/dashboard/stats')
    assert response.get_json() == {'total': 4, 'confirmed': 1, 'waitlisted': 1, 'checkedIn': 1}


def test_dashboard_page(auth_client, participants):
    assert auth_client.get('/dashboard').status_code == 200


def test_search_matches_first_or_last_name(auth_client, participants):
    response = auth_client.get('/search?q=ad')
    assert response.status_code == 200
    assert b'Ada' in response.data
    assert b'Adams' in response.data
    assert b'Turing' not in response.data


def test_search_clamps_page(auth_client, participants):
    response = auth_client.get('/search?page=99')
    assert response.status_code == 200
    assert b'Page 1 of 1' in response.data


def test_update_status(auth_client, db, participants):
    alan = participants[1]
    response = auth_client.patch(f'/api/participants/{alan.id}/status', json={'status': 'CHECKED_IN'})

    assert response.status_code == 200
    assert response.get_json() == {'ok': True}
    updated = db.session.get(Participant, alan.id)
    assert updated.status == 'CHECKED_IN'
    assert updated.checked_in is True


def test_update_status_back_clears_check_in(auth_client, db, participants):
    grace = participants[2]
    auth_client.patch(f'/api/participants/{grace.id}/status', json={'status': 'CONFIRMED'})
    assert db.session.get(Participant, grace.id).checked_in is False


def test_update_status_validation(auth_client, participants):
    url = f'/api/participants/{participants[0].id}/status'
    assert auth_client.patch(url, data='not json', content_type='application/json').status_code == 400
    assert auth_client.patch(url, json={'status': 'ARRIVED'}).status_code == 400
    missing = auth_client.patch('/api/participants/missing/status', json={'status': 'CONFIRMED'})
    assert missing.status_code == 404


def test_participant_qr_png_is_cached(auth_client, db, participants):
    ada = participants[0]
    response = auth_client.get(f'/participants/{ada.id}/qr.png')

    assert response.status_code == 200
    assert response.mimetype == 'image/png'
    assert response.data.startswith(b'\x89PNG')
    assert db.session.get(Participant, ada.id).qr_base64

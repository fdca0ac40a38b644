import pytest

from models import Event, EventRegistration, Participant


@pytest.fixture
def participant(db):
    participant = Participant(first_name='Ada', last_name='Lovelace', email='ada@example.com', status='CONFIRMED')
    db.session.add(participant)
    db.session.commit()
    return participant


@pytest.fixture
def workshop(db):
    event = Event(name='Intro to Flask', event_type='WORKSHOP', capacity=1)
    db.session.add(event)
    db.session.commit()
    return event


def test_lookup(auth_client, participant):
    response = auth_client.get(f'/api/qr?id={participant.id}')
    assert response.status_code == 200
    assert response.get_json()['data']['firstName'] == 'Ada'

    assert auth_client.get('/api/qr').status_code == 400
    assert auth_client.get('/api/qr?id=missing').status_code == 404


def test_check_in_once(auth_client, db, participant):
    payload = {'participantId': participant.id, 'mode': 'checkin'}

    first = auth_client.post('/api/qr', json=payload)
    second = auth_client.post('/api/qr', json=payload)

    assert first.status_code == 200
    assert first.get_json()['data']['checkedIn'] is True
    assert second.status_code == 409
    assert db.session.get(Participant, participant.id).status == 'CHECKED_IN'


def test_invalid_mode(auth_client, participant):
    response = auth_client.post('/api/qr', json={'participantId': participant.id, 'mode': 'dance'})
    assert response.status_code == 400


def test_workshop_registration(auth_client, participant, workshop):
    payload = {'participantId': participant.id, 'mode': 'workshop', 'eventId': workshop.id}

    response = auth_client.post('/api/qr', json=payload)
    duplicate = auth_client.post('/api/qr', json=payload)

    assert response.status_code == 200
    assert response.get_json()['message'] == 'Successfully registered for Intro to Flask'
    assert duplicate.status_code == 409
    assert EventRegistration.query.count() == 1


def test_registration_checks(auth_client, db, participant, workshop):
    base = {'participantId': participant.id}
    assert auth_client.post('/api/qr', json={**base, 'mode': 'food'}).status_code == 400
    assert auth_client.post('/api/qr', json={**base, 'mode': 'food', 'eventId': 'nope'}).status_code == 404
    mismatch = auth_client.post('/api/qr', json={**base, 'mode': 'food', 'eventId': workshop.id})
    assert mismatch.status_code == 400
    assert 'Expected FOOD' in mismatch.get_json()['error']


def test_event_at_capacity(auth_client, db, participant, workshop):
    other = Participant(first_name='Alan', last_name='Turing', email='alan@example.com')
    db.session.add(other)
    db.session.add(EventRegistration(participant_id=participant.id, event_id=workshop.id))
    db.session.commit()

    response = auth_client.post('/api/qr', json={'participantId': other.id, 'mode': 'workshop',
                                                 'eventId': workshop.id})
    assert response.status_code == 409
    assert response.get_json()['message'] == 'Event is at full capacity'


def test_events_are_grouped(auth_client, db, workshop):
    db.session.add_all([Event(name='Lunch', event_type='FOOD'), Event(name='Doors', event_type='CHECKIN')])
    db.session.commit()

    data = auth_client.get('/api/qr/events').get_json()['data']
    assert len(data['events']) == 3
    assert [e['name'] for e in data['grouped']['workshops']] == ['Intro to Flask']
    assert [e['name'] for e in data['grouped']['food']] == ['Lunch']
    assert [e['name'] for e in data['grouped']['other']] == ['Doors']

    food_only = auth_client.get('/api/qr/events?type=food').get_json()['data']
    assert [e['name'] for e in food_only['events']] == ['Lunch']


def test_scan_rejects_non_object_body(auth_client, participant):
    response = auth_client.post('/api/qr', json=[participant.id, 'checkin'])
    assert response.status_code == 400
    assert response.get_json() == {'error': 'Invalid JSON body'}

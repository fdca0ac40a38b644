# routes/qr.py
# QR scanner: main check-in and workshop/food registration

import logging

from flask import Blueprint, render_template, request, jsonify
from sqlalchemy.exc import IntegrityError

from extensions import db
from models import Participant, Event, EventRegistration, SCANNER_EVENT_TYPES
from routes.auth import login_required

logger = logging.getLogger(__name__)

qr_bp = Blueprint('qr', __name__)

SCANNER_MODES = ('checkin', 'workshop', 'food')


def _short(participant):
    return {
        'id': participant.id,
        'firstName': participant.first_name,
        'lastName': participant.last_name,
    }


def _event_short(event):
    return {'id': event.id, 'name': event.name, 'eventType': event.event_type}


@qr_bp.route('/qr')
@login_required
def scanner():
    return render_template('qr.html', modes=SCANNER_MODES)


@qr_bp.route('/api/qr', methods=['GET'])
@login_required
def lookup_participant():
    participant_id = request.args.get('id')
    if not participant_id:
        return jsonify({'error': 'Missing participant ID'}), 400

    participant = db.session.get(Participant, participant_id)
    if participant is None:
        return jsonify({'error': 'Participant not found'}), 404

    return jsonify({'success': True, 'data': participant.summary()})


@qr_bp.route('/api/qr', methods=['POST'])
@login_required
def scan():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({'error': 'Invalid JSON body'}), 400
    participant_id = body.get('participantId')
    mode = body.get('mode')
    event_id = body.get('eventId')

    if not participant_id:
        return jsonify({'error': 'Missing participant ID'}), 400
    if mode not in SCANNER_MODES:
        return jsonify({'error': "Invalid or missing mode. Must be 'checkin', 'workshop', or 'food'"}), 400

    participant = db.session.get(Participant, participant_id)
    if participant is None:
        return jsonify({'error': 'Participant not found'}), 404

    try:
        if mode == 'checkin':
            return _check_in(participant)
        return _register_for_event(participant, mode, event_id)
    except Exception:
        db.session.rollback()
        logger.exception('Error processing QR scan')
        return jsonify({'error': 'Internal server error'}), 500


def _check_in(participant):
    if participant.checked_in:
        return jsonify({
            'success': False,
            'message': 'Participant already checked in',
            'data': participant.summary(),
        }), 409

    participant.checked_in = True
    participant.status = 'CHECKED_IN'
    db.session.commit()
    logger.info('Participant %s checked in', participant.id)
    return jsonify({
        'success': True,
        'message': 'Participant checked in successfully',
        'data': participant.summary(),
    })


def _register_for_event(participant, mode, event_id):
    if not event_id:
        return jsonify({'error': 'Event ID is required for workshop/food registration'}), 400

    event = db.session.get(Event, event_id)
    if event is None:
        return jsonify({'error': 'Event not found'}), 404

    expected_type = SCANNER_EVENT_TYPES[mode]
    if event.event_type != expected_type:
        return jsonify({'error': f'Event type mismatch. Expected {expected_type} but got {event.event_type}'}), 400

    existing = EventRegistration.query.filter_by(participant_id=participant.id, event_id=event.id).first()
    if existing:
        return jsonify({
            'success': False,
            'message': f'Participant already registered for this {mode}',
            'data': {
                'participant': _short(participant),
                'event': _event_short(event),
                'registeredAt': existing.registered_at.isoformat(),
            },
        }), 409

    if event.capacity is not None:
        current = EventRegistration.query.filter_by(event_id=event.id).count()
        if current >= event.capacity:
            return jsonify({
                'success': False,
                'message': 'Event is at full capacity',
                'data': {'event': {'id': event.id, 'name': event.name, 'capacity': event.capacity,
                                   'currentRegistrations': current}},
            }), 409

    registration = EventRegistration(participant_id=participant.id, event_id=event.id)
    db.session.add(registration)
    try:
        db.session.commit()
    except IntegrityError:
        # Another scanner registered the same pair first
        db.session.rollback()
        return jsonify({'success': False, 'message': f'Participant already registered for this {mode}'}), 409

    return jsonify({
        'success': True,
        'message': f'Successfully registered for {event.name}',
        'data': {
            'participant': _short(participant),
            'event': _event_short(event),
            'registeredAt': registration.registered_at.isoformat(),
        },
    })


@qr_bp.route('/api/qr/events')
@login_required
def list_events():
    event_type = request.args.get('type')
    query = Event.query
    if event_type and event_type != 'all':
        query = query.filter(Event.event_type == event_type.upper())
    events = [e.to_dict() for e in query.order_by(Event.start_time, Event.name).all()]

    grouped = {
        'workshops': [e for e in events if e['eventType'] == 'WORKSHOP'],
        'food': [e for e in events if e['eventType'] == 'FOOD'],
        'other': [e for e in events if e['eventType'] not in ('WORKSHOP', 'FOOD')],
    }
    return jsonify({'success': True, 'data': {'events': events, 'grouped': grouped}})

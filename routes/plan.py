# routes/plan.py
# Day-of schedule shown on the plan calendar

import logging
from datetime import datetime, timezone

from flask import Blueprint, render_template, request, jsonify, session

from extensions import db
from models import ScheduleItem
from routes.auth import login_required

logger = logging.getLogger(__name__)

plan_bp = Blueprint('plan', __name__)

VISIBILITIES = ('internal', 'public')


def parse_datetime(value):
    """ISO 8601 string -> naive UTC datetime. Raises ValueError."""
    if not value:
        raise ValueError('missing datetime')
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@plan_bp.route('/plan')
@login_required
def plan():
    items = ScheduleItem.query.order_by(ScheduleItem.start_time).all()
    return render_template('plan.html', items=items)


@plan_bp.route('/api/day-of-schedule', methods=['GET'])
@login_required
def list_schedule():
    items = ScheduleItem.query.order_by(ScheduleItem.start_time).all()
    return jsonify([item.to_dict() for item in items])


@plan_bp.route('/api/day-of-schedule', methods=['POST'])
@login_required
def create_schedule_item():
    body = request.get_json(silent=True) or {}
    name = (body.get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Name is required'}), 400

    try:
        start_time = parse_datetime(body.get('startTime'))
        end_time = parse_datetime(body.get('endTime'))
    except ValueError:
        return jsonify({'error': 'Valid start and end times are required'}), 400
    if end_time <= start_time:
        return jsonify({'error': 'End time must be after start time'}), 400

    visibility = body.get('visibility') or 'internal'
    if visibility not in VISIBILITIES:
        return jsonify({'error': "Visibility must be 'internal' or 'public'"}), 400

    capacity = body.get('capacity')
    if capacity in ('', None):
        capacity = None
    else:
        try:
            capacity = int(capacity)
        except (TypeError, ValueError):
            return jsonify({'error': 'Capacity must be a number'}), 400

    item = ScheduleItem(name=name, start_time=start_time, end_time=end_time,
                        location=body.get('location') or None, capacity=capacity,
                        visibility=visibility, created_by=session.get('user_id'))
    db.session.add(item)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Error creating schedule item')
        return jsonify({'error': 'Failed to create event'}), 500

    return jsonify(item.to_dict()), 201


@plan_bp.route('/api/day-of-schedule/<item_id>', methods=['DELETE'])
@login_required
def delete_schedule_item(item_id):
    item = db.session.get(ScheduleItem, item_id)
    if item is None:
        return jsonify({'error': 'Event not found'}), 404
    db.session.delete(item)
    db.session.commit()
    return jsonify({'ok': True})

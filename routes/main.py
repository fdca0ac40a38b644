# routes/main.py
# Dashboard, participant search and participant status updates

import base64
import logging
import math

from flask import Blueprint, render_template, request, jsonify, current_app, Response
from sqlalchemy import case, func, or_

from extensions import db
from logic.qr_codes import participant_qr_base64
from models import Participant, is_participant_status
from routes.auth import login_required

logger = logging.getLogger(__name__)

main_bp = Blueprint('main', __name__)


def to_positive_int(value, fallback):
    try:
        n = int(value)
    except (TypeError, ValueError):
        return fallback
    return n if n > 0 else fallback


def participant_stats():
    total, confirmed, waitlisted, checked_in = db.session.query(
        func.count(Participant.id),
        func.count(case((Participant.status == 'CONFIRMED', 1))),
        func.count(case((Participant.status == 'WAITLISTED', 1))),
        func.count(case((Participant.status == 'CHECKED_IN', 1))),
    ).one()
    return {
        'total': total or 0,
        'confirmed': confirmed or 0,
        'waitlisted': waitlisted or 0,
        'checkedIn': checked_in or 0,
    }


@main_bp.route('/dashboard')
@login_required
def dashboard():
    return render_template('dashboard.html', stats=participant_stats())


@main_bp.route('/api/dashboard/stats')
@login_required
def dashboard_stats():
    try:
        return jsonify(participant_stats())
    except Exception:
        logger.exception('Error fetching dashboard stats')
        return jsonify({'error': 'Failed to fetch dashboard stats'}), 500


@main_bp.route('/search')
@login_required
def search():
    page_size = current_app.config.get('PARTICIPANTS_PAGE_SIZE', 20)
    page = to_positive_int(request.args.get('page'), 1)
    q = (request.args.get('q') or '').strip()

    query = Participant.query
    if q:
        pattern = f'%{q}%'
        query = query.filter(or_(Participant.first_name.ilike(pattern), Participant.last_name.ilike(pattern)))

    total = query.count()
    total_pages = max(1, math.ceil(total / page_size))
    page = min(page, total_pages)

    participants = query.order_by(Participant.created_at.desc(), Participant.last_name) \
        .offset((page - 1) * page_size).limit(page_size).all()

    return render_template('search.html',
                           participants=participants,
                           q=q,
                           page=page,
                           total=total,
                           total_pages=total_pages,
                           first_shown=(page - 1) * page_size + 1 if total else 0,
                           last_shown=min(page * page_size, total))


@main_bp.route('/api/participants/<participant_id>/status', methods=['PATCH'])
@login_required
def update_participant_status(participant_id):
    body = request.get_json(silent=True)
    if body is None:
        return jsonify({'message': 'Invalid JSON body'}), 400

    next_status = body.get('status') if isinstance(body, dict) else None
    if not is_participant_status(next_status):
        return jsonify({'message': 'Invalid status'}), 400

    participant = db.session.get(Participant, participant_id)
    if participant is None:
        return jsonify({'message': 'Participant not found'}), 404

    participant.status = next_status
    participant.checked_in = next_status == 'CHECKED_IN'
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Error updating participant %s', participant_id)
        return jsonify({'message': 'Failed to update participant'}), 500

    return jsonify({'ok': True})


@main_bp.route('/participants/<participant_id>/qr.png')
@login_required
def participant_qr(participant_id):
    participant = Participant.query.get_or_404(participant_id)
    encoded = participant_qr_base64(participant)
    db.session.commit()
    return Response(base64.b64decode(encoded), mimetype='image/png')

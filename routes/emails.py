# routes/emails.py
# Bulk emails to participants

import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify, session, current_app

from models import Participant, PARTICIPANT_STATUSES
from logic.emails import EMAIL_TEMPLATES, SMTPConfig, get_template_by_id, is_valid_email, send_bulk_email
from routes.auth import login_required

logger = logging.getLogger(__name__)

emails_bp = Blueprint('emails', __name__)

RECIPIENT_TYPES = ('all', 'status', 'specific')


def resolve_recipients(recipient_type, status=None, specific_emails=None):
    if recipient_type == 'all':
        return [p.email for p in Participant.query.order_by(Participant.email).all()]
    if recipient_type == 'status':
        return [p.email for p in Participant.query.filter_by(status=status).order_by(Participant.email).all()]
    return [e.strip() for e in (specific_emails or []) if e and e.strip()]


def process_send_request(data):
    """Validates a send request and sends it. Returns (payload, http_status)."""
    template_id = data.get('templateId')
    recipient_type = data.get('recipientType')
    status = data.get('status')
    specific_emails = data.get('specificEmails') or []

    if not template_id:
        return {'error': 'Template ID is required'}, 400
    if not recipient_type:
        return {'error': 'Recipient type is required'}, 400
    if recipient_type not in RECIPIENT_TYPES:
        return {'error': f'Unknown recipient type: {recipient_type}'}, 400
    if recipient_type == 'status' and not status:
        return {'error': 'Status is required when filtering by status'}, 400
    if recipient_type == 'specific' and not specific_emails:
        return {'error': 'At least one email is required for specific recipients'}, 400

    try:
        recipients = resolve_recipients(recipient_type, status, specific_emails)
    except Exception:
        logger.exception('Database query error')
        return {'error': 'Failed to fetch recipients from database'}, 500

    if not recipients:
        return {'error': 'No recipients found matching the criteria'}, 400

    template = get_template_by_id(template_id)
    if template is None:
        return {'error': 'Template not found'}, 404

    invalid = [e for e in recipients if not is_valid_email(e)]
    if invalid:
        return {'error': f"Invalid email addresses: {', '.join(invalid)}"}, 400

    config = SMTPConfig.from_app()
    if config is None:
        return {'error': 'Mail server configuration is missing'}, 500

    subject = data.get('subject') or template.subject
    results = send_bulk_email(config, recipients, template.id, subject, body=data.get('body'),
                              batch_size=current_app.config.get('EMAIL_BATCH_SIZE', 1000))

    logger.info('Email batch completed: template=%s recipient_type=%s status=%s recipients=%d sent_by=%s',
                template.id, recipient_type, status if recipient_type == 'status' else None,
                len(recipients), session.get('user_name'))
    failed = sum(r['count'] for r in results if not r['success'])
    if failed == len(recipients):
        return {
            'success': False,
            'error': f'Failed to send emails to all {failed} recipient(s)',
            'failed': failed,
            'batches': results,
        }, 500
    return {
        'success': True,
        'message': f'Emails queued for {len(recipients)} recipient(s)',
        'failed': failed,
        'batches': results,
    }, 200


@emails_bp.route('/emails')
@login_required
def index():
    return render_template('emails/index.html', templates=EMAIL_TEMPLATES)


@emails_bp.route('/emails/send', methods=['GET', 'POST'])
@login_required
def send():
    if request.method == 'POST':
        specific = request.form.get('specific_emails', '')
        payload, status_code = process_send_request({
            'templateId': request.form.get('template_id'),
            'subject': request.form.get('subject'),
            'body': request.form.get('body'),
            'recipientType': request.form.get('recipient_type'),
            'status': request.form.get('status'),
            'specificEmails': [e for e in specific.replace('\n', ',').split(',') if e.strip()],
        })
        if status_code == 200:
            if payload['failed']:
                flash(f"{payload['message']}, but {payload['failed']} could not be sent.", 'error')
            else:
                flash(payload['message'], 'success')
        else:
            flash(payload['error'], 'error')
        return redirect(url_for('emails.send'))

    return render_template('emails/send.html',
                           templates=EMAIL_TEMPLATES,
                           statuses=PARTICIPANT_STATUSES,
                           selected=request.args.get('template'))


@emails_bp.route('/api/emails/send', methods=['POST'])
@login_required
def send_api():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Invalid JSON body'}), 400
    payload, status_code = process_send_request(data)
    return jsonify(payload), status_code

# logic/emails.py
# Email templates and bulk sending over SMTP

import logging
import re
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

from flask import current_app, render_template

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


@dataclass(frozen=True)
class EmailTemplate:
    id: str
    name: str
    subject: str
    description: str


EMAIL_TEMPLATES = [
    EmailTemplate('welcome', 'Welcome Email', 'Welcome to RevolutionUC!',
                  'Sent to new registrants after they sign up'),
    EmailTemplate('acceptance', 'Application Accepted', "You're in! Welcome to RevolutionUC",
                  "Sent when a participant's application is accepted"),
    EmailTemplate('custom', 'Custom Email', '', 'A blank template for custom messages'),
]


def get_template_by_id(template_id):
    return next((t for t in EMAIL_TEMPLATES if t.id == template_id), None)


def render_email(template_id, name, subject, body=None):
    """Returns (html, text) for the template, or None if the id is unknown."""
    if get_template_by_id(template_id) is None:
        return None
    context = dict(name=name, first_name=name, subject=subject, body=body)
    html = render_template(f'emails/{template_id}.html', **context)
    text = render_template(f'emails/{template_id}.txt', **context)
    return html, text


def extract_name_from_email(email):
    """'jane.doe@x.com' -> 'Jane Doe', 'bob@x.com' -> 'Bob'"""
    local_part = email.split('@')[0]
    parts = [p for p in re.split(r'[._-]', local_part) if p]
    if len(parts) >= 2:
        return ' '.join(p[:1].upper() + p[1:].lower() for p in parts)
    return local_part[:1].upper() + local_part[1:]


def is_valid_email(email):
    return bool(EMAIL_RE.match(email or ''))


@dataclass
class SMTPConfig:
    host: str
    port: int
    user: Optional[str]
    password: Optional[str]
    use_tls: bool
    use_ssl: bool
    sender: str

    @classmethod
    def from_app(cls, app=None):
        config = (app or current_app).config
        if not config.get('MAIL_SERVER') or not config.get('MAIL_DEFAULT_SENDER'):
            return None
        return cls(host=config['MAIL_SERVER'], port=int(config.get('MAIL_PORT', 587)),
                   user=config.get('MAIL_USERNAME'), password=config.get('MAIL_PASSWORD'),
                   use_tls=config.get('MAIL_USE_TLS', True), use_ssl=config.get('MAIL_USE_SSL', False),
                   sender=config['MAIL_DEFAULT_SENDER'])


def open_smtp(config):
    if config.use_ssl:
        server = smtplib.SMTP_SSL(config.host, config.port, context=ssl.create_default_context(), timeout=20)
    else:
        server = smtplib.SMTP(config.host, config.port, timeout=20)
        server.ehlo()
        if config.use_tls:
            server.starttls(context=ssl.create_default_context())
            server.ehlo()
    if config.user and config.password:
        server.login(config.user, config.password)
    return server


def build_message(config, to_email, subject, html, text):
    message = EmailMessage()
    message['From'] = config.sender
    message['To'] = to_email
    message['Subject'] = subject
    message.set_content(text)
    message.add_alternative(html, subtype='html')
    return message


def send_bulk_email(config, recipients, template_id, subject, body=None, batch_size=1000):
    """
    Sends the template to every recipient, personalised with a name taken
    from the address. One SMTP connection per batch; a failing batch is
    reported and the next one still goes out.
    Returns a list of per-batch result dicts.
    """
    results = []
    for start in range(0, len(recipients), batch_size):
        batch = recipients[start:start + batch_size]
        batch_number = start // batch_size + 1
        try:
            with open_smtp(config) as server:
                for email in batch:
                    html, text = render_email(template_id, extract_name_from_email(email), subject, body)
                    server.send_message(build_message(config, email, subject, html, text))
            logger.info('Batch %d sent (%d recipients)', batch_number, len(batch))
            results.append({'batch': batch_number, 'count': len(batch), 'success': True})
        except (smtplib.SMTPException, OSError) as e:
            logger.error('Batch %d failed: %s', batch_number, e)
            results.append({'batch': batch_number, 'count': len(batch), 'success': False, 'error': str(e)})
    return results

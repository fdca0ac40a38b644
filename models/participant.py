# models/participant.py

import uuid

from extensions import db
from sqlalchemy import CheckConstraint

PARTICIPANT_STATUSES = ('PENDING', 'CONFIRMED', 'WAITLISTED', 'CHECKED_IN')


def is_participant_status(value):
    return isinstance(value, str) and value in PARTICIPANT_STATUSES


class Participant(db.Model):
    __tablename__ = 'participants'

    # The id doubles as the QR code payload
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(50), nullable=False, default='')
    age = db.Column(db.Integer, nullable=False, default=18)
    gender = db.Column(db.String(50), nullable=False, default='')
    school = db.Column(db.String(255), nullable=False, default='')
    level_of_study = db.Column(db.String(100), nullable=False, default='')
    country = db.Column(db.String(100), nullable=False, default='')
    major = db.Column(db.String(255), nullable=False, default='')
    diet_restrictions = db.Column(db.String(255), nullable=True)
    linkedin_url = db.Column(db.String(255), nullable=True)
    github_url = db.Column(db.String(255), nullable=True)
    resume_url = db.Column(db.String(255), nullable=True)
    shirt_size = db.Column(db.String(10), nullable=False, default='M')
    hackathons = db.Column(db.String(50), nullable=False, default='0')
    qr_base64 = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='PENDING', index=True)
    checked_in = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, server_default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())

    registrations = db.relationship('EventRegistration', backref='participant', cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("status IN ('PENDING', 'CONFIRMED', 'WAITLISTED', 'CHECKED_IN')",
                        name="check_participant_status"),
    )

    @property
    def full_name(self):
        return f'{self.first_name} {self.last_name}'

    def summary(self):
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'email': self.email,
            'status': self.status,
            'checkedIn': self.checked_in,
            'shirtSize': self.shirt_size,
            'dietRestrictions': self.diet_restrictions,
        }

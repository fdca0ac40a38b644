# models/event.py

import uuid
from datetime import datetime

from extensions import db
from sqlalchemy import UniqueConstraint

# Event types the QR scanner registers against
SCANNER_EVENT_TYPES = {'workshop': 'WORKSHOP', 'food': 'FOOD'}


class Event(db.Model):
    __tablename__ = 'events'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    # CHECKIN, WORKSHOP, FOOD, ...
    event_type = db.Column(db.String(50), nullable=False, index=True)
    start_time = db.Column(db.DateTime, nullable=True)
    end_time = db.Column(db.DateTime, nullable=True)
    location = db.Column(db.String(255), nullable=True)
    capacity = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    registrations = db.relationship('EventRegistration', backref='event', cascade="all, delete-orphan")

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'eventType': self.event_type,
            'startTime': self.start_time.isoformat() if self.start_time else None,
            'endTime': self.end_time.isoformat() if self.end_time else None,
            'location': self.location,
            'capacity': self.capacity,
        }


class EventRegistration(db.Model):
    __tablename__ = 'event_registrations'
    id = db.Column(db.Integer, primary_key=True)
    participant_id = db.Column(db.String(36), db.ForeignKey('participants.id', ondelete='CASCADE'),
                               nullable=False, index=True)
    event_id = db.Column(db.String(36), db.ForeignKey('events.id', ondelete='CASCADE'),
                         nullable=False, index=True)
    registered_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint('participant_id', 'event_id', name='unique_participant_event'),
    )

# models/schedule_item.py

import uuid

from extensions import db
from sqlalchemy import CheckConstraint


class ScheduleItem(db.Model):
    """An entry of the day-of plan shown on the calendar."""
    __tablename__ = 'day_of_schedule'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    start_time = db.Column(db.DateTime, nullable=True)
    end_time = db.Column(db.DateTime, nullable=True)
    location = db.Column(db.String(255), nullable=True)
    capacity = db.Column(db.Integer, nullable=True)
    visibility = db.Column(db.String(20), nullable=False, default='internal', index=True)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, server_default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())

    __table_args__ = (
        CheckConstraint("visibility IN ('internal', 'public')", name="check_schedule_visibility"),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'startTime': self.start_time.isoformat() if self.start_time else None,
            'endTime': self.end_time.isoformat() if self.end_time else None,
            'location': self.location,
            'capacity': self.capacity,
            'visibility': self.visibility,
            'createdBy': self.created_by,
            'creatorName': self.creator.name if self.creator else None,
            'creatorEmail': self.creator.email if self.creator else None,
        }

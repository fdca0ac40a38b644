# models/project.py

import uuid

from extensions import db
from sqlalchemy import CheckConstraint


class Project(db.Model):
    __tablename__ = 'projects'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='created', index=True)
    url = db.Column(db.String(500), nullable=True)
    location = db.Column(db.String(100), nullable=False, default='', index=True)
    location2 = db.Column(db.String(100), nullable=False, default='')
    disqualify_reason = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    submissions = db.relationship('Submission', backref='project', cascade="all, delete-orphan")
    assignments = db.relationship('Assignment', backref='project', cascade="all, delete-orphan")
    evaluations = db.relationship('Evaluation', backref='project', cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("status IN ('created', 'disqualified')", name="check_project_status"),
    )


class Submission(db.Model):
    """A project's opt-in to be judged in a category."""
    __tablename__ = 'submissions'
    project_id = db.Column(db.String(36), db.ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True)
    category_id = db.Column(db.String(64), db.ForeignKey('categories.id', ondelete='CASCADE', onupdate='CASCADE'),
                            primary_key=True, index=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

# models/judge.py

import uuid

from extensions import db


class JudgeGroup(db.Model):
    __tablename__ = 'judge_groups'
    id = db.Column(db.Integer, primary_key=True)
    # Derived label such as "A1"
    name = db.Column(db.String(20), nullable=False, index=True)
    category_id = db.Column(db.String(64), db.ForeignKey('categories.id', ondelete='CASCADE', onupdate='CASCADE'),
                            nullable=False, index=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    judges = db.relationship('Judge', backref='judge_group', lazy=True)
    assignments = db.relationship('Assignment', backref='judge_group', cascade="all, delete-orphan")


class Judge(db.Model):
    __tablename__ = 'judges'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    category_id = db.Column(db.String(64), db.ForeignKey('categories.id', ondelete='CASCADE', onupdate='CASCADE'),
                            nullable=False, index=True)
    judge_group_id = db.Column(db.Integer, db.ForeignKey('judge_groups.id', ondelete='SET NULL'),
                               nullable=True, index=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    evaluations = db.relationship('Evaluation', backref='judge', cascade="all, delete-orphan")

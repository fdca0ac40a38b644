from extensions import db
from sqlalchemy import CheckConstraint


class Evaluation(db.Model):
    __tablename__ = 'evaluations'
    id = db.Column(db.Integer, primary_key=True)
    judge_id = db.Column(db.String(36), db.ForeignKey('judges.id', ondelete='CASCADE'), nullable=False)
    project_id = db.Column(db.String(36), db.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False)
    category_id = db.Column(db.String(64), db.ForeignKey('categories.id', ondelete='CASCADE', onupdate='CASCADE'),
                            nullable=False)
    # Ordered sub-scores, one per judging criterion
    scores = db.Column(db.JSON, nullable=False, default=list)
    category_relevance = db.Column(db.Integer, nullable=False, default=0)
    # Stored for ranked voting, not computed yet
    borda_score = db.Column(db.Integer, nullable=False, default=0)
    scored_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    __table_args__ = (
        db.UniqueConstraint('judge_id', 'project_id', name='unique_judge_project'),
        CheckConstraint("category_relevance >= 0", name="check_category_relevance"),
    )

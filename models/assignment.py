from extensions import db


class Assignment(db.Model):
    """This judge group must evaluate this project."""
    __tablename__ = 'assignments'
    # The composite key makes every (judge_group, project) pair unique
    judge_group_id = db.Column(db.Integer, db.ForeignKey('judge_groups.id', ondelete='CASCADE'), primary_key=True)
    project_id = db.Column(db.String(36), db.ForeignKey('projects.id', ondelete='CASCADE'),
                           primary_key=True, index=True)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

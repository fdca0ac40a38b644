# models/category.py

import enum

from extensions import db


class CategoryType(enum.Enum):
    SPONSOR = 'Sponsor'
    INHOUSE = 'Inhouse'
    GENERAL = 'General'
    MLH = 'MLH'

    @classmethod
    def parse(cls, value):
        """Accepts 'General', 'general' or 'GENERAL'. Raises ValueError otherwise."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if str(value).strip().lower() in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f'Unknown category type: {value!r}')

    @property
    def groups_per_submission(self):
        """How many judge groups of its own category a submission gets."""
        return GROUPS_PER_SUBMISSION[self]

    @property
    def single_judge_group(self):
        """Sponsor and MLH judges all sit in one group."""
        return self in (CategoryType.SPONSOR, CategoryType.MLH)


GROUPS_PER_SUBMISSION = {
    CategoryType.GENERAL: 1,
    CategoryType.INHOUSE: 2,
    CategoryType.SPONSOR: 1,
    CategoryType.MLH: 0,
}


class Category(db.Model):
    __tablename__ = 'categories'
    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(
        db.Enum(CategoryType, name='category_type', values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=CategoryType.GENERAL, index=True
    )
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, server_default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())

    judges = db.relationship('Judge', backref='category', lazy=True)
    judge_groups = db.relationship('JudgeGroup', backref='category', lazy=True)
    submissions = db.relationship('Submission', backref='category', lazy=True)

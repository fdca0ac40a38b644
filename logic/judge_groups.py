# logic/judge_groups.py
# Partitioning of judges into judge groups

import logging
from dataclasses import dataclass, field

from extensions import db
from models import Assignment, Category, CategoryType, Judge, JudgeGroup
from logic.exceptions import JudgeGroupingError

logger = logging.getLogger(__name__)

GROUP_SIZE = 2


@dataclass(frozen=True)
class JudgeRow:
    id: str
    category_id: str
    category_type: CategoryType


@dataclass
class GroupPlan:
    category_id: str
    member_ids: list = field(default_factory=list)
    name: str = ''


def category_letter(index):
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA', 27 -> 'AB', ..."""
    if index < 0:
        raise JudgeGroupingError(f'Invalid category position {index}')
    letters = ''
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


def plan_judge_groups(judges, category_ids):
    """
    Splits `judges` into groups and names them.

    Sponsor and MLH categories get one group holding all of their judges,
    every other category is chunked into pairs (the last one may be alone).
    Names are '<letter><n>': the letter comes from the category's position
    in `category_ids` sorted, n counts groups within the category from 1.
    """
    judges_by_category = {}
    types = {}
    for judge in judges:
        judges_by_category.setdefault(judge.category_id, []).append(judge.id)
        types[judge.category_id] = judge.category_type

    plans = []
    for category_id, member_ids in judges_by_category.items():
        if types[category_id].single_judge_group:
            plans.append(GroupPlan(category_id, list(member_ids)))
        else:
            for i in range(0, len(member_ids), GROUP_SIZE):
                plans.append(GroupPlan(category_id, member_ids[i:i + GROUP_SIZE]))

    positions = {category_id: i for i, category_id in enumerate(sorted(category_ids))}
    counters = {}
    for plan in plans:
        if plan.category_id not in positions:
            raise JudgeGroupingError(f'Judge category {plan.category_id!r} does not exist')
        counters[plan.category_id] = counters.get(plan.category_id, 0) + 1
        plan.name = f'{category_letter(positions[plan.category_id])}{counters[plan.category_id]}'

    return plans


def fetch_judge_rows():
    rows = db.session.query(Judge.id, Judge.category_id, Category.type) \
        .join(Category, Judge.category_id == Category.id) \
        .order_by(Judge.name, Judge.email).all()
    return [JudgeRow(judge_id, category_id, category_type) for judge_id, category_id, category_type in rows]


def regenerate_judge_groups():
    """
    Throws away every judge group and builds new ones from the current judges.
    Assignments point at groups, so they are cleared as well.
    Returns {'success': True, 'group_count'} or {'success': False, 'error'}.
    """
    try:
        category_ids = [c.id for c in Category.query.order_by(Category.id).all()]
        plans = plan_judge_groups(fetch_judge_rows(), category_ids)

        Judge.query.update({Judge.judge_group_id: None}, synchronize_session=False)
        Assignment.query.delete(synchronize_session=False)
        JudgeGroup.query.delete(synchronize_session=False)

        for plan in plans:
            group = JudgeGroup(name=plan.name, category_id=plan.category_id)
            db.session.add(group)
            db.session.flush()
            Judge.query.filter(Judge.id.in_(plan.member_ids)) \
                .update({Judge.judge_group_id: group.id}, synchronize_session=False)

        db.session.commit()
    except JudgeGroupingError as e:
        db.session.rollback()
        logger.warning('Judge grouping aborted: %s', e)
        return {'success': False, 'error': str(e)}
    except Exception as e:
        db.session.rollback()
        logger.exception('Error assigning judges to groups')
        return {'success': False, 'error': str(e) or 'Failed to assign judges to groups'}

    logger.info('Created %d judge groups', len(plans))
    return {'success': True, 'group_count': len(plans)}

# logic/assignments.py
# Distribution of submitted projects across judge groups

import logging
from collections import Counter
from dataclasses import dataclass

from flask import current_app
from sqlalchemy import func

from extensions import db
from models import Assignment, Category, CategoryType, Judge, JudgeGroup, Submission
from logic.exceptions import AssignmentError
from logic.rotating_queue import RotatingQueue

logger = logging.getLogger(__name__)

DEFAULT_MIN_JUDGES_PER_PROJECT = 6
DEFAULT_SAFETY_LIMIT = 100


@dataclass(frozen=True)
class GroupSlot:
    id: int
    category_id: str
    judge_count: int


@dataclass(frozen=True)
class SubmissionRow:
    project_id: str
    category_id: str
    category_type: CategoryType


def build_group_queues(groups):
    """One round-robin queue per category, groups kept in the order given."""
    queues = {}
    for group in groups:
        queues.setdefault(group.category_id, RotatingQueue()).append(group)
    return queues


def judge_totals(planned):
    totals = {}
    for project_id, group in planned:
        totals[project_id] = totals.get(project_id, 0) + group.judge_count
    return totals


def find_duplicate_pairs(planned):
    counts = Counter((group.id, project_id) for project_id, group in planned)
    return [pair for pair, n in counts.items() if n > 1]


def plan_assignments(submissions, groups, general_category_id,
                     min_judges=DEFAULT_MIN_JUDGES_PER_PROJECT, safety_limit=DEFAULT_SAFETY_LIMIT):
    """
    Builds the (project_id, GroupSlot) list for the given submissions.

    First pass: every submission takes groups of its own category from that
    category's round-robin queue, as many as its category type asks for
    (never more than the category has). Second pass: every project still
    short of `min_judges` gets further General groups it doesn't already
    have, giving up after `safety_limit` draws.

    Raises AssignmentError if a project is still short of judges or a
    (group, project) pair appears twice. Nothing is written to the database.
    """
    queues = build_group_queues(groups)
    planned = []

    for submission in submissions:
        queue = queues.get(submission.category_id)
        if not queue:
            continue
        how_many = min(len(queue), submission.category_type.groups_per_submission)
        for _ in range(how_many):
            planned.append((submission.project_id, queue.next()))

    groups_by_project = {}
    for project_id, group in planned:
        groups_by_project.setdefault(project_id, []).append(group)

    general_queue = queues.get(general_category_id)
    if general_queue:
        for project_id, project_groups in groups_by_project.items():
            judge_count = sum(g.judge_count for g in project_groups)
            used_group_ids = {g.id for g in project_groups}
            draws = 0
            while judge_count < min_judges and draws < safety_limit:
                group = general_queue.next()
                draws += 1
                if group.id in used_group_ids:
                    continue
                planned.append((project_id, group))
                used_group_ids.add(group.id)
                judge_count += group.judge_count

    short_projects = [pid for pid, total in judge_totals(planned).items() if total < min_judges]
    if short_projects:
        raise AssignmentError(
            f'{len(short_projects)} project(s) have insufficient judges. '
            f'Need at least {min_judges} judges per project.',
            project_ids=short_projects
        )

    duplicates = find_duplicate_pairs(planned)
    if duplicates:
        raise AssignmentError(f'Found {len(duplicates)} duplicate assignments.',
                              project_ids=[pid for _, pid in duplicates])

    return planned


def fetch_submission_rows():
    # Fetch order is the round-robin order
    rows = db.session.query(Submission.project_id, Submission.category_id, Category.type) \
        .join(Category, Submission.category_id == Category.id) \
        .order_by(Submission.created_at, Submission.project_id, Submission.category_id).all()
    return [SubmissionRow(project_id, category_id, category_type) for project_id, category_id, category_type in rows]


def fetch_group_slots():
    rows = db.session.query(JudgeGroup.id, JudgeGroup.category_id, func.count(Judge.id)) \
        .outerjoin(Judge, Judge.judge_group_id == JudgeGroup.id) \
        .group_by(JudgeGroup.id, JudgeGroup.category_id) \
        .order_by(JudgeGroup.id).all()
    return [GroupSlot(group_id, category_id, judge_count) for group_id, category_id, judge_count in rows]


def regenerate_assignments():
    """
    Replaces every Assignment with a freshly planned set.
    Returns {'success': True, 'count', 'projects_assigned'} or {'success': False, 'error'}.
    """
    min_judges = current_app.config.get('MIN_JUDGES_PER_PROJECT', DEFAULT_MIN_JUDGES_PER_PROJECT)
    safety_limit = current_app.config.get('ASSIGNMENT_SAFETY_LIMIT', DEFAULT_SAFETY_LIMIT)

    try:
        general = Category.query.filter_by(type=CategoryType.GENERAL).order_by(Category.id).first()
        if general is None:
            raise AssignmentError('General category not found. Please create a General category first.')

        general_judges = Judge.query.filter_by(category_id=general.id).count()
        if general_judges < min_judges:
            raise AssignmentError(
                f'There must be at least {min_judges} General judges. Currently have {general_judges}.'
            )

        groups = fetch_group_slots()
        if not groups:
            raise AssignmentError('Need judge groups before assigning projects. Please create judge groups first.')

        planned = plan_assignments(fetch_submission_rows(), groups, general.id,
                                   min_judges=min_judges, safety_limit=safety_limit)

        # Old and new assignments are swapped in a single transaction
        Assignment.query.delete()
        db.session.add_all([Assignment(judge_group_id=group.id, project_id=project_id)
                            for project_id, group in planned])
        db.session.commit()
    except AssignmentError as e:
        db.session.rollback()
        logger.warning('Assignment run aborted: %s', e)
        return {'success': False, 'error': str(e)}
    except Exception as e:
        db.session.rollback()
        logger.exception('Error assigning submissions to judge groups')
        return {'success': False, 'error': str(e) or 'Failed to assign submissions to judge groups'}

    projects_assigned = len({project_id for project_id, _ in planned})
    logger.info('Created %d assignments for %d projects', len(planned), projects_assigned)
    return {'success': True, 'count': len(planned), 'projects_assigned': projects_assigned}

# logic/scoring.py
# Score table: raw averages and per-judge normalised z-scores

import logging
import random
from dataclasses import dataclass, field

import numpy as np

from extensions import db
from models import Assignment, Evaluation, Judge, Project

logger = logging.getLogger(__name__)

SCORE_SLOTS = 3

SORT_FIELDS = (
    'name',
    'avg_score_1', 'avg_z_score_1',
    'avg_score_2', 'avg_z_score_2',
    'avg_score_3', 'avg_z_score_3',
    'avg_raw_score', 'avg_z_score',
)


def mean(values):
    return float(np.mean(values)) if len(values) else 0.0


def std_dev(values):
    # Population standard deviation (ddof=0)
    return float(np.std(values)) if len(values) else 0.0


@dataclass
class JudgeStats:
    means: list
    std_devs: list

    def z_score(self, slot, value):
        if self.std_devs[slot] == 0:
            return 0.0
        return (value - self.means[slot]) / self.std_devs[slot]


@dataclass
class ProjectScores:
    project_id: str
    name: str
    raw: list = field(default_factory=list)
    z: list = field(default_factory=list)
    avg_scores: list = field(default_factory=list)
    avg_z_scores: list = field(default_factory=list)
    avg_raw_score: float = 0.0
    avg_z_score: float = 0.0

    @property
    def has_scores(self):
        return any(self.raw)

    def sort_value(self, sort_field):
        if sort_field == 'name':
            return self.name.lower()
        if sort_field in ('avg_raw_score', 'avg_z_score'):
            return getattr(self, sort_field)
        prefix, slot = sort_field.rsplit('_', 1)
        values = self.avg_z_scores if prefix == 'avg_z_score' else self.avg_scores
        return values[int(slot) - 1]


def _slot_scores(evaluation, slots):
    scores = list(evaluation.scores or [])[:slots]
    return [(i, s) for i, s in enumerate(scores) if s is not None]


def compute_judge_stats(judges, evaluations, slots=SCORE_SLOTS):
    """
    Mean and standard deviation of every judge's own scores, per slot,
    across all the projects the judge evaluated.
    """
    collected = {judge.id: [[] for _ in range(slots)] for judge in judges}
    for evaluation in evaluations:
        if evaluation.judge_id not in collected:
            continue
        for slot, score in _slot_scores(evaluation, slots):
            collected[evaluation.judge_id][slot].append(score)

    stats = {}
    for judge_id, per_slot in collected.items():
        means = [mean(values) for values in per_slot]
        stats[judge_id] = JudgeStats(means=means,
                                     std_devs=[std_dev(values) for values in per_slot])
    return stats


def assigned_judges_by_project(judges, assignments):
    judges_by_group = {}
    for judge in judges:
        if judge.judge_group_id is not None:
            judges_by_group.setdefault(judge.judge_group_id, []).append(judge.id)

    assigned = {}
    for assignment in assignments:
        ordered = assigned.setdefault(assignment.project_id, {})
        for judge_id in judges_by_group.get(assignment.judge_group_id, []):
            ordered[judge_id] = True
    return {project_id: list(ordered) for project_id, ordered in assigned.items()}


def build_score_table(projects, judges, evaluations, assignments, slots=SCORE_SLOTS):
    """
    One ProjectScores row per project, in the order given.

    Only judges whose group is assigned to a project count towards it.
    Projects nobody evaluated come back with zero averages and
    has_scores False.
    """
    evaluations = list(evaluations)
    stats = compute_judge_stats(judges, evaluations, slots)
    by_pair = {(e.project_id, e.judge_id): e for e in evaluations}
    assigned = assigned_judges_by_project(judges, assignments)

    table = []
    for project in projects:
        raw = [[] for _ in range(slots)]
        z = [[] for _ in range(slots)]
        for judge_id in assigned.get(project.id, []):
            evaluation = by_pair.get((project.id, judge_id))
            if evaluation is None:
                continue
            for slot, score in _slot_scores(evaluation, slots):
                raw[slot].append(score)
                z[slot].append(stats[judge_id].z_score(slot, score))

        all_raw = [s for values in raw for s in values]
        all_z = [s for values in z for s in values]
        table.append(ProjectScores(
            project_id=project.id,
            name=project.name,
            raw=raw,
            z=z,
            avg_scores=[mean(values) for values in raw],
            avg_z_scores=[mean(values) for values in z],
            avg_raw_score=mean(all_raw),
            avg_z_score=mean(all_z),
        ))
    return table


def sort_score_table(table, sort_field='name', direction='asc'):
    if sort_field not in SORT_FIELDS:
        raise ValueError(f'Unknown sort field: {sort_field}')
    return sorted(table, key=lambda row: row.sort_value(sort_field), reverse=(direction == 'desc'))


def load_score_table():
    """Reads everything the score table needs. Returns (rows, evaluation count)."""
    projects = Project.query.order_by(Project.name).all()
    judges = Judge.query.order_by(Judge.name).all()
    evaluations = Evaluation.query.all()
    assignments = Assignment.query.all()
    return build_score_table(projects, judges, evaluations, assignments), len(evaluations)


def generate_random_scores(rng=None):
    """
    Fills in an evaluation for every judge of every assigned group, with
    random 1-5 scores. Meant for rehearsing the judging flow.
    Returns the number of evaluations written.
    """
    rng = rng or random.Random()
    judges_by_group = {}
    for judge in Judge.query.filter(Judge.judge_group_id.isnot(None)).all():
        judges_by_group.setdefault(judge.judge_group_id, []).append(judge)

    existing = {(e.judge_id, e.project_id): e for e in Evaluation.query.all()}
    written = 0
    for assignment in Assignment.query.all():
        for judge in judges_by_group.get(assignment.judge_group_id, []):
            scores = [rng.randint(1, 5) for _ in range(SCORE_SLOTS)]
            relevance = rng.randint(1, 5)
            evaluation = existing.get((judge.id, assignment.project_id))
            if evaluation:
                evaluation.scores = scores
                evaluation.category_relevance = relevance
            else:
                evaluation = Evaluation(judge_id=judge.id, project_id=assignment.project_id,
                                        category_id=judge.category_id, scores=scores,
                                        category_relevance=relevance, borda_score=0)
                db.session.add(evaluation)
                existing[(judge.id, assignment.project_id)] = evaluation
            written += 1

    db.session.commit()
    logger.info('Generated random scores for %d evaluations', written)
    return written

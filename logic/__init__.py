# logic/__init__.py
# Business logic behind the dashboard routes

from .exceptions import JudgingError, AssignmentError, JudgeGroupingError
from .rotating_queue import RotatingQueue
from .assignments import plan_assignments, regenerate_assignments
from .judge_groups import plan_judge_groups, regenerate_judge_groups
from .scoring import build_score_table, sort_score_table, load_score_table, generate_random_scores
from .project_import import import_projects_from_devpost

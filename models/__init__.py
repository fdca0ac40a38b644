# models/__init__.py

from .user import User
from .participant import Participant, PARTICIPANT_STATUSES, is_participant_status
from .event import Event, EventRegistration, SCANNER_EVENT_TYPES
from .schedule_item import ScheduleItem
from .category import Category, CategoryType, GROUPS_PER_SUBMISSION
from .judge import Judge, JudgeGroup
from .project import Project, Submission
from .assignment import Assignment
from .evaluation import Evaluation

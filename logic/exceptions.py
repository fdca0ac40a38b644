class JudgingError(Exception):
    """A judging operation cannot run or produced an invalid result."""


class AssignmentError(JudgingError):

    def __init__(self, message, project_ids=None):
        super().__init__(message)
        # Projects that broke a postcondition, if any
        self.project_ids = list(project_ids or [])


class JudgeGroupingError(JudgingError):
    pass

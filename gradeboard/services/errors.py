"""Domain errors raised by the grading services.

Each error carries the HTTP status the API answers with; the handler in
``gradeboard.main`` turns them into ``{"detail": ...}`` JSON responses.
"""


class GradeboardError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(GradeboardError):
    status_code = 404


class ForbiddenError(GradeboardError):
    status_code = 403


class ConflictError(GradeboardError):
    status_code = 409


class InvalidGradeError(GradeboardError):
    status_code = 400


class InvalidTaskStateError(GradeboardError):
    status_code = 400


class NotGroupMemberError(GradeboardError):
    status_code = 400


class NoGradedTasksError(GradeboardError):
    status_code = 400

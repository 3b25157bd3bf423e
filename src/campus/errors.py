"""Service-level exceptions.

Services raise these; routers translate them into HTTP responses.
"""

from __future__ import annotations


class CampusError(Exception):
    """Base class for all domain errors."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(CampusError):
    status_code = 400


class AuthorizationDenied(CampusError):
    status_code = 403


class NotFoundError(CampusError):
    status_code = 404


class SubmissionNotFoundError(NotFoundError):
    pass


class MaterialNotFoundError(NotFoundError):
    pass


class MaterialViewNotFoundError(NotFoundError):
    pass


class CourseworkNotFoundError(NotFoundError):
    pass


class FeeRecordNotFoundError(NotFoundError):
    pass


class NotificationNotFoundError(NotFoundError):
    pass


class UnknownWeekError(NotFoundError):
    pass


class StudentNotFoundError(NotFoundError):
    pass


class ReportNotFoundError(NotFoundError):
    pass


class AnnouncementNotFoundError(NotFoundError):
    pass


class DuplicateActivityError(CampusError):
    status_code = 409


class DuplicateSubmissionError(DuplicateActivityError):
    pass


class DuplicateFeeRecordError(CampusError):
    status_code = 409


class PointsTransactionError(CampusError):
    """The award/revoke transaction aborted; nothing was applied."""

    status_code = 500

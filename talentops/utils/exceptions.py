"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Pre-configured HTTPException subclasses shared by services and routers.
Batch code catches these per item and records them instead of aborting.

Usage:
    from talentops.utils.exceptions import NotFoundError, DateRangeError
    raise NotFoundError("Timecard not found")
"""

from datetime import date

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 고유 제약 위반 시 사용.

    409 Conflict exception (e.g. duplicate talent group name within a project).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 비즈니스 규칙 위반 시 사용.

    400 Bad Request exception.
    Raised when request data is invalid beyond what Pydantic validation catches.

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidStatusError(BadRequestError):
    """잘못된 상태 전이 — Invalid timecard status transition.

    Args:
        current: 현재 상태 (Current status)
        action: 시도한 동작 (Attempted action)
    """

    def __init__(self, current: str, action: str) -> None:
        super().__init__(
            f"'{current}' 상태에서는 {action}할 수 없습니다 (Cannot {action} a {current} timecard)"
        )
        self.current: str = current
        self.action: str = action


class DateRangeError(BadRequestError):
    """배정 날짜가 프로젝트 기간을 벗어남 — Assignment date outside the project range.

    Args:
        assignment_date: 거부된 날짜 (Rejected date)
        start_date: 프로젝트 시작일 (Project start date)
        end_date: 프로젝트 종료일 (Project end date)
    """

    def __init__(self, assignment_date: date, start_date: date, end_date: date) -> None:
        super().__init__(
            f"배정 날짜 {assignment_date}가 프로젝트 기간을 벗어났습니다 "
            f"(Assignment date {assignment_date} is outside project range {start_date} to {end_date})"
        )
        self.assignment_date: date = assignment_date
        self.start_date: date = start_date
        self.end_date: date = end_date

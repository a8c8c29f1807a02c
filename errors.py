from __future__ import annotations

from typing import Any


class BookingAppError(Exception):
    """Base error for everything the booking pages can report to a visitor."""

    def __init__(
        self,
        message: str = "حدث خطأ غير متوقع",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFound(BookingAppError):
    def __init__(self, entity: str, id: Any, message: str = "الشقة غير موجودة"):
        super().__init__(
            message=message,
            status_code=404,
            details={"entity": entity, "id": id},
        )


class ValidationError(BookingAppError):
    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message=message, status_code=400, details=details)


class Unavailable(BookingAppError):
    """The requested stay overlaps an existing booking."""

    def __init__(self, apartment_id: int, message: str = "عذراً، الشقة غير متاحة في هذه التواريخ"):
        super().__init__(
            message=message,
            status_code=400,
            details={"apartment_id": apartment_id},
        )


class StorageUnavailable(BookingAppError):
    """The backing document is missing, corrupt or cannot be written."""

    def __init__(self, path: Any, reason: str):
        super().__init__(
            message="تعذر قراءة قاعدة البيانات المحلية",
            status_code=503,
            details={"path": str(path), "reason": reason},
        )
        self.reason = reason

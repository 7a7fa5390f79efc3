"""
Domain errors raised by the business services.

Each error carries the HTTP status the API layer answers with and an optional
``extra`` payload merged into the JSON body next to ``detail``.
"""
from typing import Any, Dict, Optional

from fastapi import status


class BusinessError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra or {}


class ValidationError(BusinessError):
    """Missing or malformed input"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail, extra={"field": field} if field else None)
        self.field = field


class ConflictError(BusinessError):
    """Unique value already taken or a state rule forbids the action"""

    status_code = status.HTTP_409_CONFLICT


class SlugConflict(ConflictError):
    """Insert lost the race for a slug; the caller may allocate another one"""

    def __init__(self, slug: str):
        super().__init__(
            "slug already exists. Please choose a different business name.",
            extra={"field": "slug", "slug": slug},
        )
        self.slug = slug


class AuthorizationError(BusinessError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(BusinessError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalInvariantError(BusinessError):
    """A storage check constraint fired; indicates a defect upstream"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_detail = "Internal error while saving business"

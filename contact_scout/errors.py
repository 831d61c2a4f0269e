# contact_scout/errors.py
"""
Error taxonomy for ContactScout.

Every exception carries an :class:`ErrorCode`; callers that only need to log
and skip can rely on ``exc.code`` without knowing the concrete class.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    FETCH_TIMEOUT = "FETCH_TIMEOUT"
    FETCH_TOO_LARGE = "FETCH_TOO_LARGE"
    FETCH_BAD_STATUS = "FETCH_BAD_STATUS"
    FETCH_NOT_HTML = "FETCH_NOT_HTML"
    FETCH_NETWORK = "FETCH_NETWORK"
    HOMEPAGE_UNREACHABLE = "HOMEPAGE_UNREACHABLE"
    CLASSIFIER_UNAVAILABLE = "CLASSIFIER_UNAVAILABLE"
    COUNTRY_LLM_UNAVAILABLE = "COUNTRY_LLM_UNAVAILABLE"
    INPUT_INVALID = "INPUT_INVALID"


class FetchReason(str, Enum):
    """Why a single page fetch failed."""

    TIMEOUT = "TIMEOUT"
    TOO_LARGE = "TOO_LARGE"
    BAD_STATUS = "BAD_STATUS"
    NOT_HTML = "NOT_HTML"
    NETWORK = "NETWORK"

    @property
    def code(self) -> ErrorCode:
        return ErrorCode(f"FETCH_{self.value}")


class ContactScoutError(Exception):
    """Base class for all project errors."""

    code: ErrorCode = ErrorCode.INPUT_INVALID

    def __init__(self, message: str = "", *, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class FetchError(ContactScoutError):
    """A page could not be fetched. Always skippable by the caller."""

    def __init__(self, reason: FetchReason, url: str, detail: str = "") -> None:
        self.reason = reason
        self.url = url
        self.detail = detail
        message = f"{reason.value} fetching {url}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, code=reason.code)


class HomepageUnreachable(ContactScoutError):
    code = ErrorCode.HOMEPAGE_UNREACHABLE

    def __init__(self, url: str, cause: FetchError) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"homepage unreachable {url} ({cause.reason.value})")


class LLMUnavailable(ContactScoutError):
    """The completion service is missing, failed, or answered with garbage."""

    code = ErrorCode.CLASSIFIER_UNAVAILABLE


class InputInvalid(ContactScoutError):
    code = ErrorCode.INPUT_INVALID

    def __init__(self, message: str, *, details: Optional[list] = None) -> None:
        self.details = details or []
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"code": self.code.value, "message": str(self)}
        if self.details:
            body["details"] = self.details
        return {"error": body}


__all__ = [
    "ErrorCode",
    "FetchReason",
    "ContactScoutError",
    "FetchError",
    "HomepageUnreachable",
    "LLMUnavailable",
    "InputInvalid",
]

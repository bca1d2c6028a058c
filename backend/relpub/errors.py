"""
relpub — Structured error catalog.

Each error class declares its code and a default remedy. Fatal errors
abort a publish run; UploadError is caught per task by the dispatcher
and never escapes a batch.
"""

from __future__ import annotations

from typing import Any


class PublisherError(Exception):
    """Base error. Subclasses set `code`, `suggestion` and `fatal`."""

    code = "PUBLISH_FAILED"
    suggestion = ""
    fatal = True

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        suggestion: str | None = None,
        detail: Any = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if suggestion is not None:
            self.suggestion = suggestion
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "error_code": self.code,
            "message": self.message,
            "fatal": self.fatal,
        }
        if self.suggestion:
            d["suggestion"] = self.suggestion
        if self.detail:
            d["detail"] = self.detail
        return d


class ConfigurationError(PublisherError):
    code = "CONFIGURATION_INVALID"
    suggestion = "Check the action inputs or RELPUB_* environment variables."

    def __init__(self, message: str, missing: list[str] | None = None):
        self.missing = missing or []
        super().__init__(message, detail=self.missing or None)


class InvalidVersionFormatError(PublisherError):
    code = "INVALID_VERSION_FORMAT"
    suggestion = "Use major.minor.patch with an optional -suffix, e.g. 1.2.3 or 2.0.0-beta."

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid version format: {value}. Expected x.y.z-w")


class RepackIOError(PublisherError):
    code = "REPACK_IO_FAILED"
    suggestion = "The source folder may be partially renamed. Restore it before retrying."

    def __init__(self, path: str, cause: BaseException | str):
        self.path = path
        self.cause = cause
        super().__init__(f"Error processing {path}: {cause}", detail=path)


class UploadError(PublisherError):
    code = "UPLOAD_FAILED"
    suggestion = "Check bucket permissions, credentials and network access."
    fatal = False

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Upload to {key} failed: {reason}", detail=key)

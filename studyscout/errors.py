"""
Pipeline errors.

Only ConfigurationMissing and QuerySynthesisFailed end a run with an error
response; TransientUpstreamOverload is retried by the backoff executor and
everything else degrades to an empty or default stage value.
"""

from __future__ import annotations


class StudyScoutError(Exception):
    """Base class for errors raised by the resource pipeline."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationMissing(StudyScoutError):
    """Raised when a required credential is not configured."""

    def __init__(self, setting: str) -> None:
        self.setting = setting
        super().__init__(
            f"{setting} is not configured. Please set {setting} in your .env file."
        )


class QuerySynthesisFailed(StudyScoutError):
    """Raised when the model output cannot be turned into search queries."""

    def __init__(self, reason: str, raw_text: str = "") -> None:
        self.reason = reason
        self.raw_text = raw_text
        super().__init__(reason)


class TransientUpstreamOverload(StudyScoutError):
    """Upstream reported temporary overload (HTTP 503)."""

    def __init__(self, message: str, status_code: int = 503) -> None:
        self.status_code = status_code
        super().__init__(message)

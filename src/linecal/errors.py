from __future__ import annotations
from typing import Any, Optional


class LinecalError(Exception):
    """Base class for every error raised by linecal."""

    # Set by NotifySchedule.execute to the RunResult of the aborted run.
    result: Optional[Any] = None


class ConfigurationError(LinecalError):
    pass


class RetrievalError(LinecalError):
    pass


class NormalizationError(LinecalError):
    def __init__(self, field: str, message: str, event_id: str = "") -> None:
        super().__init__(message)
        self.field = field
        self.event_id = event_id


class MissingTimeField(NormalizationError):
    def __init__(self, field: str, event_id: str = "") -> None:
        super().__init__(field, f"event has no {field} time", event_id)


class InvalidTimeField(NormalizationError):
    def __init__(self, field: str, raw_value: str, event_id: str = "") -> None:
        super().__init__(field, f"could not parse {field} value {raw_value!r}", event_id)
        self.raw_value = raw_value


class DeliveryError(LinecalError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

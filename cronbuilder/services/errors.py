from __future__ import annotations

from typing import Any, Optional


class ExpressionError(ValueError):
    """Basisklasse für alle Fehler beim Aufbau einer Cron-Expression."""


class UnknownFieldError(ExpressionError):
    def __init__(self, field: Any):
        super().__init__(f"invalid cron field: {field!r}")
        self.field = field


class InvalidValueError(ExpressionError):
    """A value could not be added to a field."""


class OutOfRangeError(InvalidValueError):
    def __init__(self, field: str, value: int, bounds: tuple[int, int]):
        super().__init__(
            f"value {value} is outside the valid range for {field} ({bounds[0]}-{bounds[1]})"
        )
        self.field = field
        self.value = value
        self.bounds = bounds


class InvalidShapeError(InvalidValueError):
    def __init__(self, field: str, value: Any, part: Optional[str] = None):
        if part:
            msg = f"invalid value for {part} in {field}: {value!r}"
        else:
            msg = f"invalid value shape for {field}: {value!r}"
        super().__init__(msg)
        self.field = field
        self.value = value
        self.part = part

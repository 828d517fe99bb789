from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from cronbuilder.services.errors import InvalidShapeError, OutOfRangeError, UnknownFieldError

logger = logging.getLogger(__name__)

WILDCARD = "*"

# "5", "5.0", ".5", "1e1" ...
_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")


class CronField(str, Enum):
    """Die fünf Felder einer Cron-Expression, in Render-Reihenfolge."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY_OF_MONTH = "dayOfMonth"
    MONTH = "month"
    DAY_OF_WEEK = "dayOfWeek"


class Bounds(NamedTuple):
    min: int
    max: int


FIELD_BOUNDS: Mapping[CronField, Bounds] = MappingProxyType(
    {
        CronField.MINUTE: Bounds(0, 59),
        CronField.HOUR: Bounds(0, 23),
        CronField.DAY_OF_MONTH: Bounds(0, 31),
        CronField.MONTH: Bounds(1, 12),
        CronField.DAY_OF_WEEK: Bounds(0, 7),
    }
)


@dataclass(frozen=True)
class Number:
    value: int

    def render(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Literal:
    """Opaque token (z.B. "MON", "L"), wird unverändert ausgegeben."""

    token: str

    def render(self) -> str:
        return self.token


@dataclass(frozen=True)
class Range:
    min: int
    max: int
    step: int = 1

    def render(self) -> str:
        if self.step == 1:
            return f"{self.min}-{self.max}"
        return f"{self.min}-{self.max}/{self.step}"


ValueSpec = Union[Number, Literal, Range]

# Accepted input for append/overwrite; sequences (not str/bytes) may nest.
FieldValue = Union[int, float, str, Range, Mapping[str, Any], Sequence[Any]]


def _is_numeric_string(value: Any) -> bool:
    return isinstance(value, str) and bool(_NUMERIC_RE.match(value))


def _as_int(value: Any) -> Optional[int]:
    """
    Liefert `value` als int, wenn es eine ganze Zahl ist (auch "5" oder "5.0" als String), sonst None.
    bool zählt bewusst nicht als Zahl.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if _is_numeric_string(value):
        s = value.strip()
        try:
            return int(s)
        except ValueError:
            return _as_int(float(s))
    return None


def resolve_field(field: Union[CronField, str]) -> CronField:
    try:
        return CronField(field)
    except (ValueError, TypeError):
        raise UnknownFieldError(field) from None


class Expression:
    """
    Builder for a five-field cron expression (m h dom mon dow).

    Values are accumulated per field and rendered in insertion order.
    An empty field renders as "*".

    Example:
        expr = Expression()
        expr.append(CronField.MINUTE, {"min": 0, "max": 29, "step": 5})
        expr.append(CronField.MINUTE, {"min": 30, "max": 59, "step": 10})
        expr.append(CronField.MINUTE, 7)
        expr.append(CronField.MINUTE, [0, 15, 30, 45])
        expr.render()  # "0-29/5,30-59/10,7,0,15,30,45 * * * *"

    A list is applied element by element. If an element fails validation,
    the elements before it stay applied. A list that contains itself is
    rejected with InvalidShapeError.
    """

    def __init__(self) -> None:
        self._values: Dict[CronField, List[ValueSpec]] = {f: [] for f in CronField}

    def append(self, field: Union[CronField, str], value: FieldValue) -> "Expression":
        key = resolve_field(field)
        self._append(key, value)
        return self

    def overwrite(self, field: Union[CronField, str], value: FieldValue) -> "Expression":
        """
        Ersetzt den Inhalt von `field` durch `value`.

        Das Feld wird zuerst geleert; schlägt das anschließende append fehl,
        bleibt es (teilweise) leer.
        """
        key = resolve_field(field)
        logger.debug("overwriting %s (had %d values)", key.value, len(self._values[key]))
        self._values[key] = []
        self._append(key, value)
        return self

    def clear(self, field: Union[CronField, str, None] = None) -> "Expression":
        if field is None:
            for key in CronField:
                self._values[key] = []
        else:
            self._values[resolve_field(field)] = []
        return self

    def get_values(self, field: Union[CronField, str]) -> Tuple[ValueSpec, ...]:
        return tuple(self._values[resolve_field(field)])

    def render_field(self, field: Union[CronField, str]) -> str:
        values = self._values[resolve_field(field)]
        if not values:
            return WILDCARD
        return ",".join(v.render() for v in values)

    def render(self) -> str:
        return " ".join(self.render_field(key) for key in CronField)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Expression({self.render()!r})"

    def _append(self, key: CronField, value: Any, _seen: Tuple[int, ...] = ()) -> None:
        number = _as_int(value)
        if number is not None:
            self._check_bounds(key, number)
            self._values[key].append(Number(number))

        elif _is_numeric_string(value):
            # numerisch, aber keine ganze Zahl ("5.5", "1e400")
            raise InvalidShapeError(key.value, value)

        elif isinstance(value, str):
            if value == WILDCARD:
                logger.debug("wildcard given for %s, resetting field", key.value)
                self._values[key] = []
            else:
                self._values[key].append(Literal(value))

        elif isinstance(value, (Range, Mapping)):
            self._values[key].append(self._build_range(key, value))

        elif isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            if id(value) in _seen:
                raise InvalidShapeError(key.value, value)
            for item in value:
                self._append(key, item, _seen + (id(value),))

        else:
            raise InvalidShapeError(key.value, value)

    def _build_range(self, key: CronField, value: Union[Range, Mapping[str, Any]]) -> Range:
        if isinstance(value, Range):
            raw: Mapping[str, Any] = {"min": value.min, "max": value.max, "step": value.step}
        else:
            raw = value

        bounds: Dict[str, int] = {}
        for part in ("min", "max"):
            number = _as_int(raw.get(part))
            if number is None:
                raise InvalidShapeError(key.value, raw.get(part), part)
            self._check_bounds(key, number)
            bounds[part] = number

        step = 1
        if raw.get("step") is not None:
            parsed = _as_int(raw["step"])
            if parsed is None:
                raise InvalidShapeError(key.value, raw["step"], "step")
            step = parsed

        return Range(min=bounds["min"], max=bounds["max"], step=step)

    def _check_bounds(self, key: CronField, number: int) -> None:
        lo, hi = FIELD_BOUNDS[key]
        if number < lo or number > hi:
            raise OutOfRangeError(key.value, number, (lo, hi))

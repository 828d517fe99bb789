from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt

# StrictInt: JSON true/false darf nicht als 1/0 durchrutschen
Bound = Union[StrictInt, str]


class RangeSpec(BaseModel):
    min: Bound
    max: Bound
    step: Optional[Bound] = None


# Nested lists are passed through as-is and validated by Expression.
FieldInput = Union[StrictInt, str, RangeSpec, List[Any]]


class ExpressionRequest(BaseModel):
    # Unbekannte Keys (z.B. "dayofweek") -> 422 statt stillschweigend "*"
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    # Nicht gesetzte Felder bleiben "*"
    minute: Optional[FieldInput] = None
    hour: Optional[FieldInput] = None
    day_of_month: Optional[FieldInput] = Field(default=None, alias="dayOfMonth")
    month: Optional[FieldInput] = None
    day_of_week: Optional[FieldInput] = Field(default=None, alias="dayOfWeek")

    def field_values(self) -> Dict[str, Any]:
        """Field id (minute, dayOfMonth, ...) -> raw value, only for fields that were sent."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RenderedExpression(BaseModel):
    expression: str

    # field id -> gerenderter Teil, z.B. {"minute": "0-29/5", "hour": "*", ...}
    segments: Dict[str, str] = Field(default_factory=dict)

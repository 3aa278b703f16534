from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any, Iterable

from pydantic import AfterValidator, Field

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Coerce to a Decimal with exactly two fractional digits."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


# Amounts are kept as Decimal end to end; pydantic renders them as JSON strings.
Money = Annotated[Decimal, AfterValidator(to_money)]
PositiveAmount = Annotated[
    Decimal,
    Field(gt=0, max_digits=12, decimal_places=2),
    AfterValidator(to_money),
]
AssetValue = Annotated[
    Decimal,
    Field(gt=0, max_digits=14, decimal_places=2),
    AfterValidator(to_money),
]


def reject_nulls(model: Any, fields: Iterable[str]) -> Any:
    """Partial updates may omit a field but may not clear a required one."""
    for name in fields:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{name} cannot be null")
    return model

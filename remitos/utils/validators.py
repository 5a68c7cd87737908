import math
from typing import Any


def require_positive_number(v: float, name: str = "value") -> None:
    if v <= 0:
        raise ValueError(f"{name} debe ser mayor a 0")


def parse_quantity(raw: Any, default: float = 1.0) -> float:
    """Form text -> quantity. Empty or non-numeric falls back to `default`; '2,5' is accepted."""
    if raw is None:
        return default
    if isinstance(raw, (int, float)):
        v = float(raw)
    else:
        try:
            v = float(str(raw).strip().replace(",", "."))
        except ValueError:
            return default
    if math.isnan(v) or math.isinf(v):
        return default
    return v

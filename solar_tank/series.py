"""Labeled time series handed to plotting consumers."""

import math
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Dict, Any, List, Tuple, Iterable, Optional

import numpy as np


# Output values are rounded for display; simulation state never is
DISPLAY_DECIMALS = 2
_QUANTUM = Decimal(1).scaleb(-DISPLAY_DECIMALS)


def display_round(value: float) -> float:
    """
    Round half away from zero on the exact binary value, like a fixed-point
    formatter: 0.125 -> 0.13 (``round`` gives 0.12), 1.005 -> 1.0 since
    1.005 is stored just below the half. Non-finite values pass through.
    """
    value = float(value)
    if not math.isfinite(value):
        return value
    exact = Decimal(value)
    return float(exact.quantize(_QUANTUM, rounding=ROUND_HALF_UP,
                                context=Context(prec=len(exact.as_tuple().digits) + 2)))


@dataclass
class Series:
    """
    One plottable line: chronologically ordered (time, value) points plus
    rendering hints. ``dashed`` marks reference lines such as ambient temperature.
    """
    id: str
    data: List[Tuple[float, float]] = field(default_factory=list)
    color: Optional[str] = None
    dashed: bool = False

    def append(self, x: float, y: float):
        self.data.append((display_round(x), display_round(y)))

    @property
    def x(self) -> np.ndarray:
        return np.array([p[0] for p in self.data], dtype=float)

    @property
    def y(self) -> np.ndarray:
        return np.array([p[1] for p in self.data], dtype=float)

    def __len__(self) -> int:
        return len(self.data)

    def to_dict(self) -> Dict[str, Any]:
        """Shape expected by the charting front end."""
        out: Dict[str, Any] = {
            'id': self.id,
            'color': self.color,
            'data': [{'x': x, 'y': y} for x, y in self.data],
        }
        if self.dashed:
            out['dashed'] = True
        return out


def series_by_id(collection: Iterable[Series]) -> 'OrderedDict[str, Series]':
    """Index a series collection by id, keeping its order."""
    return OrderedDict((s.id, s) for s in collection)

"""Numeric capability interface shared by the engine and the space mapper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass(frozen=True)
class Precision:
    """A floating-point field together with its complex counterpart.

    Everything the core needs from a number type goes through this object:
    arithmetic comes from the numpy scalar types themselves, while the
    constructors below bridge Python ints and floats into the chosen width.
    """

    name: str
    real_type: type
    complex_type: type

    @property
    def infinity(self) -> Any:
        return self.real_type(np.inf)

    @property
    def zero(self) -> Any:
        return self.complex_type(0)

    def real(self, value: float) -> Any:
        return self.real_type(value)

    def from_int(self, value: int) -> Any:
        return self.real_type(value)

    def complex(self, re: float, im: float) -> Any:
        return self.complex_type(complex(float(re), float(im)))

    def to_complex(self, value: Any) -> Any:
        """Accept a complex number or an ``(re, im)`` pair."""

        if isinstance(value, (tuple, list)):
            re, im = value
            return self.complex(re, im)
        return self.complex_type(value)


DOUBLE = Precision("double", np.float64, np.complex128)
SINGLE = Precision("single", np.float32, np.complex64)

PRECISIONS = {precision.name: precision for precision in (DOUBLE, SINGLE)}

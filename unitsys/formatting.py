"""Formatting quantities with a chosen unit and display style."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction

from .dimension import Dimension
from .quantity import Quantity
from .storage import StorageType, _round_f32
from .units import Unit

_INTEGER_KINDS = "bodxXn"


class DisplayStyle(Enum):
    """How the unit is written after the value."""

    ABBREVIATION = "abbreviation"
    DESCRIPTION = "description"


def _shortest_float(value: float, bits: int) -> str:
    """Shortest text that reads back as ``value`` at the given width."""
    if bits == 32:
        for precision in range(1, 10):
            text = format(value, f".{precision}g")
            if _round_f32(float(text)) == value:
                return text
    return repr(value)


def _plain_float(value: float, bits: int) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return format(Decimal(_shortest_float(value, bits)).normalize(), "f")


def _debug_float(value: float, bits: int) -> str:
    text = _plain_float(value, bits)
    if math.isfinite(value) and "." not in text:
        text += ".0"
    return text


def _real_text(value: float, bits: int, spec: str, debug: bool) -> str:
    if spec:
        return format(value, spec)
    return _debug_float(value, bits) if debug else _plain_float(value, bits)


def _fraction_text(value: Fraction, spec: str, debug: bool) -> str:
    if debug and not spec:
        return f"Ratio {{ numer: {value.numerator}, denom: {value.denominator} }}"
    if not spec:
        return str(value)
    if value.denominator == 1:
        return format(value.numerator, spec)
    kind = spec[-1] if spec[-1] in _INTEGER_KINDS else ""
    return f"{format(value.numerator, kind)}/{format(value.denominator, kind)}"


def _complex_text(value: complex, bits: int, spec: str, debug: bool) -> str:
    re, im = value.real, value.imag
    if debug:
        return (
            f"Complex {{ re: {_real_text(re, bits, spec, True)}, "
            f"im: {_real_text(im, bits, spec, True)} }}"
        )
    sign = "+"
    if im < 0:
        sign, im = "-", -im
    return f"{_real_text(re, bits, spec, False)}{sign}{_real_text(im, bits, spec, False)}i"


def _value_text(value, storage: StorageType, spec: str, debug: bool) -> str:
    if storage.is_float():
        return _real_text(value, storage.bits, spec, debug)
    if storage.is_complex():
        return _complex_text(value, storage.bits, spec, debug)
    if isinstance(value, Fraction):
        return _fraction_text(value, spec, debug)
    return format(value, spec)


def _unit_text(unit: Unit, style: DisplayStyle, value) -> str:
    if style is DisplayStyle.ABBREVIATION:
        return unit.abbreviation
    return unit.singular if value == 1 else unit.plural


@dataclass(frozen=True, eq=False)
class Arguments:
    """A unit and display style for formatting quantities of one dimension."""

    dimension: Dimension
    unit: Unit
    style: DisplayStyle

    __hash__ = None

    def __post_init__(self) -> None:
        if not isinstance(self.dimension, Dimension):
            raise TypeError(f"{self.dimension!r} is not a Dimension")
        if not isinstance(self.unit, Unit):
            raise TypeError(f"{self.unit!r} is not a Unit")
        if not isinstance(self.style, DisplayStyle):
            raise TypeError(f"{self.style!r} is not a DisplayStyle")

    def with_quantity(self, quantity: Quantity) -> QuantityArguments:
        """Bind a quantity of this dimension for formatting."""
        if not isinstance(quantity, Quantity):
            raise TypeError(f"{quantity!r} is not a Quantity")
        if quantity.dimension != self.dimension:
            raise TypeError("quantity dimension does not match the format arguments")
        return QuantityArguments(self, quantity)


@dataclass(frozen=True, eq=False, repr=False)
class QuantityArguments:
    """A quantity together with the unit and style to display it in."""

    arguments: Arguments
    quantity: Quantity

    __hash__ = None

    def _render(self, spec: str, debug: bool) -> str:
        value = self.quantity.get(self.arguments.unit)
        text = _value_text(value, self.quantity.storage, spec, debug)
        return f"{text} {_unit_text(self.arguments.unit, self.arguments.style, value)}"

    def __format__(self, spec: str) -> str:
        return self._render(spec, False)

    def __str__(self) -> str:
        return self._render("", False)

    def __repr__(self) -> str:
        return self._render("", True)


def into_format_args(quantity: Quantity, unit: Unit, style: DisplayStyle) -> QuantityArguments:
    """Format arguments showing ``quantity`` in ``unit`` with ``style``."""
    return Arguments(quantity.dimension, unit, style).with_quantity(quantity)


def debug_format(quantity: Quantity, spec: str = "") -> str:
    """The stored value followed by each base unit raised to its exponent."""
    if not isinstance(quantity, Quantity):
        raise TypeError(f"{quantity!r} is not a Quantity")
    parts = [_value_text(quantity.value, quantity.storage, spec, True)]
    for unit, exponent in zip(quantity.base_units.units, quantity.dimension.exponents):
        if exponent:
            parts.append(f"{unit.abbreviation}^{exponent}")
    return " ".join(parts)
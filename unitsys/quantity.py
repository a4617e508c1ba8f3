"""Quantities: a value stored in a system's base units, tagged with a dimension."""

from __future__ import annotations

import cmath
import math
import sys
from enum import Enum
from fractions import Fraction

from .dimension import BaseUnits, Dimension, change_base, from_base, to_base
from .storage import StorageType, _int_bounds


class FpCategory(Enum):
    """Floating-point classification of a value."""

    NAN = "nan"
    INFINITE = "infinite"
    ZERO = "zero"
    SUBNORMAL = "subnormal"
    NORMAL = "normal"


_INTEGER_FAMILIES = ("int", "bigint", "biguint")
_RATIO_FAMILIES = ("ratio", "bigratio")


def _component(storage: StorageType) -> StorageType:
    return StorageType.F32 if storage.bits == 32 else StorageType.F64


def _convert_complex(func, value, storage):
    part = _component(storage)
    z = complex(value)
    return complex(func(z.real, part), func(z.imag, part))


def _to_base(dimension, base_units, value, unit, storage):
    if storage.is_complex():
        return _convert_complex(
            lambda v, s: to_base(dimension, base_units, v, unit, s), value, storage
        )
    return to_base(dimension, base_units, value, unit, storage)


def _from_base(dimension, base_units, value, unit, storage):
    if storage.is_complex():
        return _convert_complex(
            lambda v, s: from_base(dimension, base_units, v, unit, s), value, storage
        )
    return from_base(dimension, base_units, value, unit, storage)


def _change_base(dimension, left, right, value, storage):
    if left == right:
        return value
    if storage.is_complex():
        return _convert_complex(
            lambda v, s: change_base(dimension, left, right, v, s), value, storage
        )
    return change_base(dimension, left, right, value, storage)


def _float_div(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _trunc_div(a: int, b: int) -> int:
    if b == 0:
        raise ZeroDivisionError("integer division by zero")
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _div(a, b, storage: StorageType):
    family = storage.family
    if family == "float":
        return storage.convert(_float_div(a, b))
    if family == "complex":
        if b == 0:
            return complex(math.nan, math.nan)
        return storage.convert(a / b)
    if family in _INTEGER_FAMILIES:
        return storage.convert(_trunc_div(a, b))
    return storage.convert(Fraction(a) / Fraction(b))


def _rem(a, b, storage: StorageType):
    family = storage.family
    if family == "float":
        try:
            return storage.convert(math.fmod(a, b))
        except ValueError:
            return storage.convert(math.nan)
    if family == "complex":
        if b == 0:
            return complex(math.nan, math.nan)
        q = a / b
        q = complex(math.trunc(q.real), math.trunc(q.imag))
        return storage.convert(a - q * b)
    if family in _INTEGER_FAMILIES:
        return storage.convert(a - b * _trunc_div(a, b))
    q = Fraction(a) / Fraction(b)
    return storage.convert(a - b * math.trunc(q))


def _float_pow(v: float, n: int) -> float:
    try:
        return float(v) ** n
    except ZeroDivisionError:
        return math.copysign(math.inf, v) if n % 2 else math.inf
    except OverflowError:
        return math.copysign(math.inf, v) if n % 2 else math.inf


def _cbrt(v: float) -> float:
    if math.isnan(v) or math.isinf(v) or v == 0:
        return v
    return math.copysign(abs(v) ** (1.0 / 3.0), v)


class Quantity:
    """A value held in ``base_units`` for the given ``dimension`` and ``storage``."""

    __slots__ = ("dimension", "base_units", "storage", "value")

    def __init__(self, dimension, base_units, value, storage=StorageType.F64):
        if not isinstance(dimension, Dimension):
            raise TypeError(f"{dimension!r} is not a Dimension")
        if not isinstance(base_units, BaseUnits):
            raise TypeError(f"{base_units!r} is not a BaseUnits")
        if dimension.names != base_units.names:
            raise ValueError("dimension and base units belong to different systems")
        if not isinstance(storage, StorageType):
            raise TypeError(f"{storage!r} is not a StorageType")
        self.dimension = dimension
        self.base_units = base_units
        self.storage = storage
        self.value = storage.convert(value)

    @classmethod
    def new(cls, dimension, base_units, unit, value, storage):
        """A quantity from a value expressed in ``unit``."""
        return cls(
            dimension, base_units, _to_base(dimension, base_units, value, unit, storage), storage
        )

    def get(self, unit):
        """The value expressed in ``unit``."""
        return _from_base(self.dimension, self.base_units, self.value, unit, self.storage)

    @classmethod
    def zero(cls, dimension, base_units, storage):
        """The additive identity."""
        return cls(dimension, base_units, 0, storage)

    def is_zero(self) -> bool:
        return self.value == 0

    def _with(self, value, dimension=None) -> Quantity:
        return Quantity(
            self.dimension if dimension is None else dimension,
            self.base_units,
            value,
            self.storage,
        )

    def _check_storage(self, other: Quantity) -> None:
        if other.storage is not self.storage:
            raise TypeError(
                f"storage types differ: {self.storage.label} and {other.storage.label}"
            )
        if other.dimension.names != self.dimension.names:
            raise TypeError("quantities belong to different systems of quantities")

    def _same(self, other) -> object:
        """The other quantity's value in this quantity's base units."""
        if not isinstance(other, Quantity):
            raise TypeError(f"{other!r} is not a Quantity")
        self._check_storage(other)
        if other.dimension != self.dimension:
            raise TypeError("quantities have different dimensions")
        return _change_base(
            self.dimension, self.base_units, other.base_units, other.value, self.storage
        )

    def _require(self, predicate, what: str) -> None:
        if not predicate:
            raise TypeError(f"{what} is not supported for {self.storage.label} storage")

    def _require_float(self, what: str) -> None:
        self._require(self.storage.is_float(), what)

    def _require_floatlike(self, what: str) -> None:
        self._require(self.storage.is_float() or self.storage.is_complex(), what)

    # Arithmetic

    def __add__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self._with(self.storage.convert(self.value + self._same(other)))

    def __sub__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self._with(self.storage.convert(self.value - self._same(other)))

    def __mod__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self._with(_rem(self.value, self._same(other), self.storage))

    def __mul__(self, other):
        if isinstance(other, Quantity):
            self._check_storage(other)
            rhs = _change_base(
                other.dimension, self.base_units, other.base_units, other.value, self.storage
            )
            return self._with(
                self.storage.convert(self.value * rhs), self.dimension * other.dimension
            )
        try:
            scalar = self.storage.convert(other)
        except TypeError:
            return NotImplemented
        return self._with(self.storage.convert(self.value * scalar))

    def __rmul__(self, other):
        try:
            scalar = self.storage.convert(other)
        except TypeError:
            return NotImplemented
        return self._with(self.storage.convert(scalar * self.value))

    def __truediv__(self, other):
        if isinstance(other, Quantity):
            self._check_storage(other)
            rhs = _change_base(
                other.dimension, self.base_units, other.base_units, other.value, self.storage
            )
            return self._with(
                _div(self.value, rhs, self.storage), self.dimension / other.dimension
            )
        try:
            scalar = self.storage.convert(other)
        except TypeError:
            return NotImplemented
        return self._with(_div(self.value, scalar, self.storage))

    def __rtruediv__(self, other):
        try:
            scalar = self.storage.convert(other)
        except TypeError:
            return NotImplemented
        return self._with(_div(scalar, self.value, self.storage), self.dimension.recip())

    def __neg__(self):
        self._require(self.storage.is_signed() or self.storage.is_complex(), "negation")
        return self._with(self.storage.convert(-self.value))

    # Comparison

    def __eq__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.value == self._same(other)

    def __ne__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.value != self._same(other)

    def _ordered(self, other):
        if not isinstance(other, Quantity):
            return None
        self._require(not self.storage.is_complex(), "ordering")
        return self._same(other)

    def __lt__(self, other):
        rhs = self._ordered(other)
        return NotImplemented if rhs is None else self.value < rhs

    def __le__(self, other):
        rhs = self._ordered(other)
        return NotImplemented if rhs is None else self.value <= rhs

    def __gt__(self, other):
        rhs = self._ordered(other)
        return NotImplemented if rhs is None else self.value > rhs

    def __ge__(self, other):
        rhs = self._ordered(other)
        return NotImplemented if rhs is None else self.value >= rhs

    def __hash__(self):
        self._require(not self.storage.is_float() and not self.storage.is_complex(), "hashing")
        exact = Fraction(self.value)
        for unit, exponent in zip(self.base_units.units, self.dimension.exponents):
            exact *= Fraction(unit.coefficient) ** exponent
        return hash((self.dimension, exact))

    def __repr__(self) -> str:
        powers = ", ".join(f"{n}^{e}" for n, e in self.dimension.items() if e)
        return f"Quantity({self.value!r}, [{powers}], {self.storage.label})"

    # Numeric methods

    def abs(self) -> Quantity:
        """The absolute value."""
        self._require(self.storage.is_signed(), "abs")
        return self._with(self.storage.convert(abs(self.value)))

    def signum(self) -> Quantity:
        """One of the base unit carrying the sign of the value."""
        self._require(self.storage.is_signed(), "signum")
        v = self.value
        if self.storage.is_float():
            return self._with(v if math.isnan(v) else math.copysign(1.0, v))
        return self._with((v > 0) - (v < 0))

    def recip(self) -> Quantity:
        """The reciprocal, with the inverse dimension."""
        self._require_float("recip")
        return self._with(_float_div(1.0, self.value), self.dimension.recip())

    def _pick(self, other, use_max: bool) -> Quantity:
        self._require(not self.storage.is_complex(), "max/min")
        a, b = self.value, self._same(other)
        if self.storage.is_float():
            if math.isnan(a):
                return self._with(b)
            if math.isnan(b):
                return self._with(a)
        if use_max:
            return self._with(b if b >= a else a)
        return self._with(b if b < a else a)

    def max(self, other) -> Quantity:
        """The larger of two quantities; a NaN loses to a number."""
        return self._pick(other, True)

    def min(self, other) -> Quantity:
        """The smaller of two quantities; a NaN loses to a number."""
        return self._pick(other, False)

    def hypot(self, other) -> Quantity:
        """Hypotenuse of a right triangle with these legs."""
        self._require_float("hypot")
        return self._with(math.hypot(self.value, self._same(other)))

    def cbrt(self) -> Quantity:
        """Cube root; dimension exponents must divide by three."""
        self._require_floatlike("cbrt")
        dimension = self.dimension.root(3)
        v = self.value
        if self.storage.is_complex():
            if v.imag == 0 and not math.isnan(v.real):
                result = complex(_cbrt(v.real), v.imag)
            else:
                result = v ** (1.0 / 3.0)
        else:
            result = _cbrt(v)
        return self._with(result, dimension)

    def sqrt(self) -> Quantity:
        """Square root; dimension exponents must divide by two."""
        self._require_floatlike("sqrt")
        dimension = self.dimension.root(2)
        v = self.value
        if self.storage.is_complex():
            result = cmath.sqrt(v)
        elif math.isnan(v) or v < 0:
            result = math.nan
        else:
            result = math.sqrt(v)
        return self._with(result, dimension)

    def powi(self, exponent) -> Quantity:
        """Raise to an integer power."""
        self._require_floatlike("powi")
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            raise TypeError(f"exponent {exponent!r} is not an integer")
        v = self.value
        if self.storage.is_complex():
            try:
                result = v**exponent
            except (ZeroDivisionError, OverflowError):
                result = complex(math.inf, math.nan)
        else:
            result = _float_pow(v, exponent)
        return self._with(result, self.dimension**exponent)

    def mul_add(self, a, b) -> Quantity:
        """``self * a + b``."""
        self._require_floatlike("mul_add")
        product = self * a
        return self._with(
            self.storage.convert(product.value + product._same(b)), product.dimension
        )

    def _parts(self):
        v = self.value
        return (v.real, v.imag) if self.storage.is_complex() else (v,)

    def is_nan(self) -> bool:
        self._require_floatlike("is_nan")
        return any(math.isnan(p) for p in self._parts())

    def is_infinite(self) -> bool:
        self._require_floatlike("is_infinite")
        return not self.is_nan() and any(math.isinf(p) for p in self._parts())

    def is_finite(self) -> bool:
        self._require_floatlike("is_finite")
        return all(math.isfinite(p) for p in self._parts())

    def is_normal(self) -> bool:
        self._require_floatlike("is_normal")
        if self.storage.is_complex():
            return self.is_finite()
        return self.classify() is FpCategory.NORMAL

    def is_sign_positive(self) -> bool:
        self._require_float("is_sign_positive")
        return math.copysign(1.0, self.value) > 0

    def is_sign_negative(self) -> bool:
        self._require_float("is_sign_negative")
        return math.copysign(1.0, self.value) < 0

    def classify(self) -> FpCategory:
        """Floating-point category of the value."""
        self._require_float("classify")
        v = self.value
        if math.isnan(v):
            return FpCategory.NAN
        if math.isinf(v):
            return FpCategory.INFINITE
        if v == 0:
            return FpCategory.ZERO
        smallest = 2.0**-126 if self.storage.bits == 32 else sys.float_info.min
        return FpCategory.SUBNORMAL if abs(v) < smallest else FpCategory.NORMAL

    def _saturate(self, result) -> Quantity:
        family = self.storage.family
        self._require(family in _INTEGER_FAMILIES, "saturating arithmetic")
        if family == "int":
            lo, hi = _int_bounds(self.storage)
            result = min(max(result, lo), hi)
        elif family == "biguint":
            result = max(result, 0)
        return self._with(result)

    def saturating_add(self, other) -> Quantity:
        return self._saturate(self.value + self._same(other))

    def saturating_sub(self, other) -> Quantity:
        return self._saturate(self.value - self._same(other))


def sum_quantities(quantities, dimension, base_units, storage) -> Quantity:
    """Sum quantities of ``dimension``; an empty input gives zero."""
    total = Quantity.zero(dimension, base_units, storage)
    for quantity in quantities:
        total = total + quantity
    return total
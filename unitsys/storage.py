"""Numeric storage types that a quantity's value can be held in."""

from __future__ import annotations

import math
import numbers
import struct
from enum import Enum
from fractions import Fraction


def _round_f32(x: float) -> float:
    """Round a float to the nearest single-precision value."""
    try:
        return struct.unpack("<f", struct.pack("<f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


class StorageType(Enum):
    """A concrete representation for quantity values.

    Each member carries a ``label`` (its conventional name), a ``family``
    (``int``, ``bigint``, ``biguint``, ``ratio``, ``bigratio``, ``complex`` or
    ``float``) and a ``bits`` width (0 for unbounded types; for rational and
    complex types the width of the component type).
    """

    USIZE = ("usize", "int", 64, False)
    U8 = ("u8", "int", 8, False)
    U16 = ("u16", "int", 16, False)
    U32 = ("u32", "int", 32, False)
    U64 = ("u64", "int", 64, False)
    U128 = ("u128", "int", 128, False)
    ISIZE = ("isize", "int", 64, True)
    I8 = ("i8", "int", 8, True)
    I16 = ("i16", "int", 16, True)
    I32 = ("i32", "int", 32, True)
    I64 = ("i64", "int", 64, True)
    I128 = ("i128", "int", 128, True)
    BIGINT = ("BigInt", "bigint", 0, True)
    BIGUINT = ("BigUint", "biguint", 0, False)
    RATIONAL = ("Rational", "ratio", 64, True)
    RATIONAL32 = ("Rational32", "ratio", 32, True)
    RATIONAL64 = ("Rational64", "ratio", 64, True)
    BIGRATIONAL = ("BigRational", "bigratio", 0, True)
    COMPLEX32 = ("Complex32", "complex", 32, False)
    COMPLEX64 = ("Complex64", "complex", 64, False)
    F32 = ("f32", "float", 32, True)
    F64 = ("f64", "float", 64, True)

    def __init__(self, label: str, family: str, bits: int, signed: bool) -> None:
        self.label = label
        self.family = family
        self.bits = bits
        self._signed = signed

    def is_float(self) -> bool:
        """True for the real floating-point types."""
        return self.family == "float"

    def is_complex(self) -> bool:
        """True for the complex floating-point types."""
        return self.family == "complex"

    def is_signed(self) -> bool:
        """True for the types in the ``Signed`` category."""
        return self._signed

    def _float_component(self, x: float) -> float:
        return _round_f32(x) if self.bits == 32 else float(x)

    def convert(self, value):
        """Coerce ``value`` into this storage type's representation.

        Raises TypeError for values of an unusable kind, ValueError for values
        the type cannot represent exactly and OverflowError for values out of
        range.
        """
        if not isinstance(value, numbers.Number):
            raise TypeError(f"{value!r} is not a number")
        family = self.family
        if family == "float":
            if not isinstance(value, numbers.Real):
                raise TypeError(f"{value!r} is not a real number")
            return self._float_component(float(value))
        if family == "complex":
            z = complex(value)
            return complex(self._float_component(z.real), self._float_component(z.imag))
        if family in ("ratio", "bigratio"):
            if isinstance(value, numbers.Rational):
                result = Fraction(value)
                if family == "ratio":
                    lo, hi = _int_bounds(self)
                    if not (lo <= result.numerator <= hi and result.denominator <= hi):
                        raise OverflowError(f"{value!r} does not fit in {self.label}")
                return result
            if isinstance(value, numbers.Real):
                return self.from_float(float(value))
            raise TypeError(f"{value!r} is not a real number")
        number = _as_integer(value, self.label)
        if family == "int":
            lo, hi = _int_bounds(self)
            if not lo <= number <= hi:
                raise OverflowError(f"{value!r} does not fit in {self.label}")
        elif family == "biguint" and number < 0:
            raise OverflowError(f"{value!r} does not fit in {self.label}")
        return number

    def from_float(self, value):
        """Convert a float into this storage type the way a primitive cast does.

        Integers truncate toward zero; fixed-size rationals take the closest
        continued-fraction approximation their range allows.
        """
        if not isinstance(value, numbers.Real):
            raise TypeError(f"{value!r} is not a real number")
        x = float(value)
        family = self.family
        if family == "float":
            return self._float_component(x)
        if family == "complex":
            return complex(self._float_component(x), 0.0)
        if math.isnan(x):
            raise ValueError(f"NaN cannot be represented as {self.label}")
        if family == "ratio":
            _, hi = _int_bounds(self)
            result = _approximate_ratio(x, hi, signed=True)
            if result is None:
                raise OverflowError(f"{x!r} does not fit in {self.label}")
            return result
        if math.isinf(x):
            raise OverflowError(f"{x!r} does not fit in {self.label}")
        if family == "bigratio":
            return Fraction(x)
        number = math.trunc(x)
        if family == "int":
            lo, hi = _int_bounds(self)
            if not lo <= number <= hi:
                raise OverflowError(f"{x!r} does not fit in {self.label}")
        elif family == "biguint" and number < 0:
            raise OverflowError(f"{x!r} does not fit in {self.label}")
        return number


class StorageCategory(Enum):
    """Named groups of storage types."""

    ALL = "All"
    PRIM_INT = "PrimInt"
    RATIO = "Ratio"
    FLOAT = "Float"
    SIGNED = "Signed"
    UNSIGNED = "Unsigned"
    COMPLEX = "Complex"


_CATEGORY_MEMBERS: dict[StorageCategory, tuple[StorageType, ...]] = {
    StorageCategory.ALL: tuple(StorageType),
    StorageCategory.PRIM_INT: tuple(t for t in StorageType if t.family == "int"),
    StorageCategory.RATIO: tuple(
        t for t in StorageType if t.family in ("ratio", "bigratio")
    ),
    StorageCategory.FLOAT: tuple(t for t in StorageType if t.family == "float"),
    StorageCategory.SIGNED: tuple(t for t in StorageType if t.is_signed()),
    StorageCategory.UNSIGNED: tuple(
        t
        for t in StorageType
        if t.family in ("int", "biguint") and not t.is_signed()
    ),
    StorageCategory.COMPLEX: tuple(t for t in StorageType if t.family == "complex"),
}

_BY_LABEL: dict[str, StorageType] = {t.label: t for t in StorageType}
_CATEGORY_BY_LABEL: dict[str, StorageCategory] = {c.value: c for c in StorageCategory}


def _expand(arg) -> tuple[StorageType, ...]:
    if isinstance(arg, StorageType):
        return (arg,)
    if isinstance(arg, StorageCategory):
        return _CATEGORY_MEMBERS[arg]
    if isinstance(arg, str):
        if arg in _BY_LABEL:
            return (_BY_LABEL[arg],)
        if arg in _CATEGORY_BY_LABEL:
            return _CATEGORY_MEMBERS[_CATEGORY_BY_LABEL[arg]]
        raise ValueError(f"unknown storage type or category {arg!r}")
    raise TypeError(f"{arg!r} is not a storage type or category")


def resolve_types(*args) -> tuple[StorageType, ...]:
    """Expand storage types and categories into an ordered tuple of types.

    With no arguments every storage type is returned. Naming a type twice,
    directly or through overlapping categories, is an error.
    """
    if not args:
        args = (StorageCategory.ALL,)
    result: list[StorageType] = []
    for arg in args:
        for storage in _expand(arg):
            if storage in result:
                raise ValueError(f"storage type {storage.label} is listed more than once")
            result.append(storage)
    return tuple(result)


def _int_bounds(storage: StorageType) -> tuple[int, int]:
    """Range of the fixed-width integer behind an integer or rational type."""
    bits = storage.bits
    if storage.is_signed():
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def _as_integer(value, label: str) -> int:
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Rational):
        if value.denominator == 1:
            return int(value.numerator)
        raise ValueError(f"{value!r} is not an integer value for {label}")
    if isinstance(value, numbers.Real):
        x = float(value)
        if x.is_integer():
            return int(x)
        raise ValueError(f"{value!r} is not an integer value for {label}")
    raise TypeError(f"{value!r} is not a real number")


def _approximate_ratio(
    value: float,
    limit: int,
    signed: bool,
    max_error: float = 10e-20,
    max_iterations: int = 30,
) -> Fraction | None:
    """Continued-fraction approximation with numerator and denominator <= limit.

    Returns None when the value cannot be represented.
    """
    if math.isnan(value):
        return None
    negative = math.copysign(1.0, value) < 0
    if negative and not signed:
        if value < 0:
            return None
        negative = False
    val = abs(value)
    limit_f = float(limit)
    epsilon = 1.0 / limit_f
    if val > limit_f:
        return None

    q = val
    n0, d0, n1, d1 = 0, 1, 1, 0
    for _ in range(max_iterations):
        a = int(q)
        if a > limit:
            break
        f = q - float(a)
        if a and (
            n1 > limit // a
            or d1 > limit // a
            or a * n1 > limit - n0
            or a * d1 > limit - d0
        ):
            break
        n = a * n1 + n0
        d = a * d1 + d0
        n0, d0, n1, d1 = n1, d1, n, d
        g = math.gcd(n1, d1)
        if g:
            n1 //= g
            d1 //= g
        if abs(n / d - val) < max_error:
            break
        if f < epsilon:
            break
        q = 1.0 / f

    if d1 == 0:
        return None
    return Fraction(-n1 if negative else n1, d1)
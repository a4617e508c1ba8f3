"""Systems of quantities, dimensions and conversions between base units."""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Iterator

from .storage import StorageType
from .units import ConstantOp, Unit


@dataclass(frozen=True)
class Dimension:
    """Exponents of a system's base quantities, with an optional kind label.

    Quantities of the same exponents but different kinds are not comparable.
    """

    names: tuple[str, ...]
    exponents: tuple[int, ...]
    kind: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(self.names))
        object.__setattr__(self, "exponents", tuple(self.exponents))
        if len(self.names) != len(self.exponents):
            raise ValueError("a dimension needs one exponent per base quantity")
        if len(set(self.names)) != len(self.names):
            raise ValueError("base quantity names must be unique")
        for exponent in self.exponents:
            if isinstance(exponent, bool) or not isinstance(exponent, int):
                raise TypeError(f"exponent {exponent!r} is not an integer")

    def __getitem__(self, name: str) -> int:
        try:
            return self.exponents[self.names.index(name)]
        except ValueError:
            raise KeyError(name) from None

    def items(self) -> Iterator[tuple[str, int]]:
        """Pairs of base quantity name and exponent, in system order."""
        return zip(self.names, self.exponents)

    def _check_same_system(self, other: Dimension) -> None:
        if not isinstance(other, Dimension):
            raise TypeError(f"{other!r} is not a Dimension")
        if self.names != other.names:
            raise ValueError("dimensions belong to different systems of quantities")

    def __mul__(self, other: Dimension) -> Dimension:
        if not isinstance(other, Dimension):
            return NotImplemented
        self._check_same_system(other)
        return Dimension(
            self.names, tuple(a + b for a, b in zip(self.exponents, other.exponents))
        )

    def __truediv__(self, other: Dimension) -> Dimension:
        if not isinstance(other, Dimension):
            return NotImplemented
        self._check_same_system(other)
        return Dimension(
            self.names, tuple(a - b for a, b in zip(self.exponents, other.exponents))
        )

    def __pow__(self, exponent: int) -> Dimension:
        if isinstance(exponent, bool) or not isinstance(exponent, int):
            return NotImplemented
        return Dimension(self.names, tuple(e * exponent for e in self.exponents))

    def recip(self) -> Dimension:
        """The dimension with every exponent negated."""
        return Dimension(self.names, tuple(-e for e in self.exponents))

    def root(self, n: int) -> Dimension:
        """The n-th root; every exponent must be divisible by ``n``."""
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            raise ValueError(f"root index {n!r} must be a positive integer")
        if any(e % n for e in self.exponents):
            raise ValueError(f"dimension exponents are not divisible by {n}")
        return Dimension(self.names, tuple(e // n for e in self.exponents))

    def is_one(self) -> bool:
        """True when every exponent is zero."""
        return all(e == 0 for e in self.exponents)


@dataclass(frozen=True)
class BaseQuantity:
    """A base quantity of a system: its name, base unit and dimension symbol."""

    name: str
    unit: Unit
    symbol: str


@dataclass(frozen=True)
class System:
    """A system of quantities together with its default system of units."""

    name: str
    quantities: tuple[BaseQuantity, ...]
    units_name: str = "U"

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantities", tuple(self.quantities))
        if not self.quantities:
            raise ValueError("a system needs at least one base quantity")
        names = [q.name for q in self.quantities]
        symbols = [q.symbol for q in self.quantities]
        if len(set(names)) != len(names):
            raise ValueError("base quantity names must be unique")
        if len(set(symbols)) != len(symbols):
            raise ValueError("base quantity symbols must be unique")
        if "kind" in names or "kind" in symbols:
            raise ValueError("'kind' cannot name a base quantity")
        for quantity in self.quantities:
            if not isinstance(quantity.unit, Unit):
                raise TypeError(f"base unit of {quantity.name!r} is not a Unit")

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(q.name for q in self.quantities)

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(q.symbol for q in self.quantities)

    def _index(self, key: str) -> int:
        for index, quantity in enumerate(self.quantities):
            if key in (quantity.name, quantity.symbol):
                return index
        raise ValueError(f"{key!r} is not a base quantity of {self.name}")

    def dimension(self, **kwargs) -> Dimension:
        """A dimension from exponents keyed by base quantity name or symbol.

        Omitted base quantities get exponent zero; ``kind`` sets the kind label.
        """
        kind = kwargs.pop("kind", None)
        exponents = [0] * len(self.quantities)
        seen: set[int] = set()
        for key, exponent in kwargs.items():
            index = self._index(key)
            if index in seen:
                raise ValueError(f"exponent for {key!r} given more than once")
            seen.add(index)
            if isinstance(exponent, bool) or not isinstance(exponent, int):
                raise TypeError(f"exponent {exponent!r} is not an integer")
            exponents[index] = exponent
        return Dimension(self.names, tuple(exponents), kind)

    def dimension_one(self) -> Dimension:
        """The dimension whose exponents are all zero."""
        return Dimension(self.names, (0,) * len(self.quantities))

    def base_units(self, **kwargs) -> BaseUnits:
        """The system's base units, with any overridden by base quantity name."""
        units = [q.unit for q in self.quantities]
        for key, unit in kwargs.items():
            if not isinstance(unit, Unit):
                raise TypeError(f"{unit!r} is not a Unit")
            units[self._index(key)] = unit
        return BaseUnits(self, tuple(units))


@dataclass(frozen=True)
class BaseUnits:
    """One unit per base quantity of a system, used to store values."""

    system: System
    units: tuple[Unit, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "units", tuple(self.units))
        if len(self.units) != len(self.system.quantities):
            raise ValueError("base units need one unit per base quantity")

    @property
    def names(self) -> tuple[str, ...]:
        return self.system.names

    def __getitem__(self, name: str) -> Unit:
        try:
            return self.units[self.system.names.index(name)]
        except ValueError:
            raise KeyError(name) from None

    def items(self) -> Iterator[tuple[BaseQuantity, Unit]]:
        """Pairs of base quantity and its unit, in system order."""
        return zip(self.system.quantities, self.units)


def _check_compatible(dimension: Dimension, base_units: BaseUnits) -> None:
    if not isinstance(dimension, Dimension):
        raise TypeError(f"{dimension!r} is not a Dimension")
    if not isinstance(base_units, BaseUnits):
        raise TypeError(f"{base_units!r} is not a BaseUnits")
    if dimension.names != base_units.names:
        raise ValueError("dimension and base units belong to different systems")


def _one(storage: StorageType):
    return 1.0 if storage.family in ("float", "complex") else Fraction(1)


def _to_conversion(value, storage: StorageType):
    converted = storage.convert(value)
    if storage.family in ("float", "complex"):
        return converted
    return Fraction(converted)


def _from_conversion(result, storage: StorageType):
    if storage.family in ("int", "bigint", "biguint"):
        return storage.convert(int(result))
    return storage.convert(result)


def _base_factor(dimension: Dimension, base_units: BaseUnits, storage: StorageType):
    factor = _one(storage)
    for unit, exponent in zip(base_units.units, dimension.exponents):
        factor = factor * unit.coefficient_as(storage) ** exponent
    return factor


def from_base(dimension, base_units, value, unit, storage):
    """Convert a value stored in ``base_units`` into ``unit``."""
    _check_compatible(dimension, base_units)
    v = _to_conversion(value, storage)
    n_coef = unit.coefficient_as(storage)
    f = _base_factor(dimension, base_units, storage)
    n_cons = unit.constant(ConstantOp.SUB, storage)
    if n_coef < f:
        result = v * (f / n_coef) - n_cons
    else:
        result = v / (n_coef / f) - n_cons
    return _from_conversion(result, storage)


def to_base(dimension, base_units, value, unit, storage):
    """Convert a value given in ``unit`` into ``base_units``."""
    _check_compatible(dimension, base_units)
    v = _to_conversion(value, storage)
    n_coef = unit.coefficient_as(storage)
    f = _base_factor(dimension, base_units, storage)
    n_cons = unit.constant(ConstantOp.ADD, storage)
    if n_coef >= f:
        result = (v + n_cons) * (n_coef / f)
    else:
        result = ((v + n_cons) * n_coef) / f
    return _from_conversion(result, storage)


def change_base(dimension, left, right, value, storage):
    """Convert a value stored in ``right`` base units into ``left`` base units."""
    _check_compatible(dimension, left)
    _check_compatible(dimension, right)
    result = _to_conversion(value, storage)
    for unit_l, unit_r, exponent in zip(left.units, right.units, dimension.exponents):
        result = (
            result
            * unit_r.coefficient_as(storage) ** exponent
            / unit_l.coefficient_as(storage) ** exponent
        )
    return _from_conversion(result, storage)
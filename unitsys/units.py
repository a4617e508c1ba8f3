"""Measurement units and their conversion factors to a quantity's base unit."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction

from .storage import StorageType, _approximate_ratio, _int_bounds


class ConstantOp(Enum):
    """Direction of a conversion, which decides the default constant's sign."""

    ADD = "add"
    SUB = "sub"


def _factor(value: float, storage: StorageType):
    """Express a conversion factor in the factor type used with ``storage``."""
    family = storage.family
    if family == "float":
        return storage.convert(value)
    if family == "complex":
        return storage.convert(value).real
    if family == "ratio":
        return storage.from_float(value)
    if family == "int":
        _, hi = _int_bounds(storage)
        result = _approximate_ratio(value, hi, signed=storage.is_signed())
        if result is None:
            raise OverflowError(
                f"conversion factor {value!r} does not fit in a ratio of {storage.label}"
            )
        return result
    result = Fraction(value)
    if family == "biguint" and result < 0:
        raise OverflowError(
            f"conversion factor {value!r} does not fit in a ratio of {storage.label}"
        )
    return result


@dataclass(frozen=True)
class Unit:
    """A measurement unit: names plus the conversion to the base unit.

    A value in this unit converts to the base unit as
    ``(value + offset) * coefficient``.
    """

    name: str
    coefficient: float
    abbreviation: str
    singular: str
    plural: str
    offset: float | None = None

    def coefficient_as(self, storage: StorageType):
        """The coefficient in the factor type used with ``storage``.

        Floats for float and complex storage, fractions otherwise.
        """
        return _factor(self.coefficient, storage)

    def constant(self, op: ConstantOp, storage: StorageType):
        """The constant term for ``op`` in the factor type used with ``storage``.

        Units without an offset give -0.0 for addition and 0.0 for subtraction.
        """
        if not isinstance(op, ConstantOp):
            raise TypeError(f"{op!r} is not a ConstantOp")
        if self.offset is not None:
            value = self.offset
        elif op is ConstantOp.ADD:
            value = -0.0
        else:
            value = 0.0
        return _factor(value, storage)


def define_units(*args) -> dict[str, Unit]:
    """Build units from ``(name, conversion, abbreviation, singular, plural)`` specs.

    ``conversion`` is either a coefficient or a ``(coefficient, constant)``
    pair. The units are returned by name, in the order given.
    """
    if not args:
        raise ValueError("at least one unit must be defined")
    units: dict[str, Unit] = {}
    for spec in args:
        try:
            name, conversion, abbreviation, singular, plural = spec
        except (TypeError, ValueError) as exc:
            raise TypeError(
                "a unit is (name, conversion, abbreviation, singular, plural)"
            ) from exc
        if not isinstance(name, str) or not name:
            raise TypeError(f"unit name {name!r} must be a non-empty string")
        if name in units:
            raise ValueError(f"unit {name!r} is defined more than once")
        if isinstance(conversion, tuple):
            if len(conversion) != 2:
                raise ValueError(
                    f"conversion for {name!r} must be a coefficient or (coefficient, constant)"
                )
            coefficient, offset = conversion
            offset = float(offset)
        else:
            coefficient, offset = conversion, None
        units[name] = Unit(
            name=name,
            coefficient=float(coefficient),
            abbreviation=abbreviation,
            singular=singular,
            plural=plural,
            offset=offset,
        )
    return units
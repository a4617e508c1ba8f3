import math
from fractions import Fraction

import pytest
from hypothesis import given
from hypothesis import strategies as st

from unitsys.storage import StorageType
from unitsys.units import ConstantOp, Unit, define_units

LENGTH = define_units(
    ("kilometer", 1.0e3, "km", "kilometer", "kilometers"),
    ("meter", 1.0, "m", "meter", "meters"),
)
MASS = define_units(("kilogram", 1.0, "kg", "kilogram", "kilograms"))
TEMPERATURE = define_units(
    ("kelvin", 1.0, "K", "kelvin", "kelvins"),
    ("degree_fahrenheit", (5.0 / 9.0, 459.67), "°F", "degree Fahrenheit",
     "degrees Fahrenheit"),
)

kilometer = LENGTH["kilometer"]
meter = LENGTH["meter"]
kilogram = MASS["kilogram"]
degree_fahrenheit = TEMPERATURE["degree_fahrenheit"]


def test_abbreviation():
    assert kilometer.abbreviation == "km"
    assert meter.abbreviation == "m"
    assert kilogram.abbreviation == "kg"


def test_singular():
    assert kilometer.singular == "kilometer"
    assert meter.singular == "meter"
    assert kilogram.singular == "kilogram"


def test_plural():
    assert kilometer.plural == "kilometers"
    assert meter.plural == "meters"
    assert kilogram.plural == "kilograms"


def test_units_order():
    units_iter = iter(LENGTH.values())
    assert next(units_iter).abbreviation == "km"
    assert sum(1 for _ in units_iter) == 1


@pytest.mark.parametrize(
    ("storage", "expected"),
    [
        (StorageType.F64, 1000.0),
        (StorageType.F32, 1000.0),
        (StorageType.COMPLEX64, 1000.0),
        (StorageType.I16, Fraction(1000)),
        (StorageType.I32, Fraction(1000)),
        (StorageType.U16, Fraction(1000)),
        (StorageType.BIGINT, Fraction(1000)),
        (StorageType.BIGUINT, Fraction(1000)),
        (StorageType.RATIONAL64, Fraction(1000)),
        (StorageType.BIGRATIONAL, Fraction(1000)),
    ],
)
def test_kilometer_coefficient(storage, expected):
    result = kilometer.coefficient_as(storage)
    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize("storage", [StorageType.U8, StorageType.I8])
def test_coefficient_too_large_for_small_ints(storage):
    with pytest.raises(OverflowError):
        kilometer.coefficient_as(storage)


@pytest.mark.parametrize("storage", [StorageType.F64, StorageType.I32, StorageType.RATIONAL])
def test_unit_coefficients_of_one(storage):
    assert meter.coefficient_as(storage) == 1
    assert kilogram.coefficient_as(storage) == 1


def test_fahrenheit_coefficient():
    assert degree_fahrenheit.coefficient_as(StorageType.F64) == 5.0 / 9.0
    ratio = degree_fahrenheit.coefficient_as(StorageType.RATIONAL64)
    assert ratio == StorageType.RATIONAL64.from_float(5.0 / 9.0)
    assert abs(float(ratio) - 5.0 / 9.0) < 1e-15
    assert degree_fahrenheit.coefficient_as(StorageType.F32) == StorageType.F32.convert(5.0 / 9.0)


def test_constant_defaults():
    added = kilogram.constant(ConstantOp.ADD, StorageType.F64)
    subtracted = kilogram.constant(ConstantOp.SUB, StorageType.F64)
    assert added == 0.0 and math.copysign(1.0, added) == -1.0
    assert subtracted == 0.0 and math.copysign(1.0, subtracted) == 1.0
    assert kilogram.constant(ConstantOp.ADD, StorageType.RATIONAL64) == Fraction(0)
    assert kilogram.constant(ConstantOp.ADD, StorageType.I32) == Fraction(0)


def test_fahrenheit_constant():
    assert degree_fahrenheit.constant(ConstantOp.ADD, StorageType.F64) == 459.67
    assert degree_fahrenheit.constant(ConstantOp.SUB, StorageType.F64) == 459.67
    assert degree_fahrenheit.constant(ConstantOp.ADD, StorageType.RATIONAL64) == Fraction(45967, 100)


def test_constant_requires_op():
    with pytest.raises(TypeError):
        kilogram.constant("add", StorageType.F64)


def test_biguint_negative_coefficient():
    unit = Unit("negative", -1.0, "n", "negative", "negatives")
    with pytest.raises(OverflowError):
        unit.coefficient_as(StorageType.BIGUINT)


def test_bigint_coefficient_is_exact():
    unit = Unit("tenth", 0.1, "t", "tenth", "tenths")
    assert unit.coefficient_as(StorageType.BIGINT) == Fraction(3602879701896397, 36028797018963968)


def test_define_units_offset_stored():
    assert degree_fahrenheit.offset == 459.67
    assert kilometer.offset is None
    assert kilometer.coefficient == 1000.0


def test_define_units_duplicate():
    with pytest.raises(ValueError):
        define_units(("meter", 1.0, "m", "meter", "meters"),
                     ("meter", 1.0, "m", "meter", "meters"))


def test_define_units_empty():
    with pytest.raises(ValueError):
        define_units()


def test_define_units_malformed():
    with pytest.raises(TypeError):
        define_units(("meter", 1.0, "m"))


@given(st.floats(min_value=1e-12, max_value=1e12, allow_nan=False))
def test_bigrational_coefficient_exact(coefficient):
    unit = Unit("u", coefficient, "u", "unit", "units")
    assert float(unit.coefficient_as(StorageType.BIGRATIONAL)) == coefficient
    assert unit.coefficient_as(StorageType.F64) == coefficient
import math

import pytest
from hypothesis import given, strategies as st

from unitsys.dimension import BaseQuantity, System
from unitsys.formatting import (
    Arguments,
    DisplayStyle,
    QuantityArguments,
    debug_format,
    into_format_args,
)
from unitsys.quantity import Quantity
from unitsys.storage import StorageType
from unitsys.units import define_units

LENGTH_UNITS = define_units(
    ("kilometer", 1.0e3, "km", "kilometer", "kilometers"),
    ("meter", 1.0, "m", "meter", "meters"),
    ("centimeter", 1.0e-2, "cm", "centimeter", "centimeters"),
)
MASS_UNITS = define_units(("kilogram", 1.0, "kg", "kilogram", "kilograms"))
TEMP_UNITS = define_units(
    ("kelvin", 1.0, "K", "kelvin", "kelvins"),
    (
        "degree_fahrenheit",
        (5.0 / 9.0, 459.67),
        "°F",
        "degree Fahrenheit",
        "degrees Fahrenheit",
    ),
)
KM = LENGTH_UNITS["kilometer"]
M = LENGTH_UNITS["meter"]
CM = LENGTH_UNITS["centimeter"]
KG = MASS_UNITS["kilogram"]
K = TEMP_UNITS["kelvin"]
DEG_F = TEMP_UNITS["degree_fahrenheit"]

SYSTEM = System(
    "Q",
    (
        BaseQuantity("length", M, "L"),
        BaseQuantity("mass", KG, "M"),
        BaseQuantity("thermodynamic_temperature", K, "Th"),
    ),
)
LENGTH = SYSTEM.dimension(length=1)
MASS = SYSTEM.dimension(mass=1)
TEMPERATURE = SYSTEM.dimension(thermodynamic_temperature=1)
BASE = SYSTEM.base_units()


def length(value, unit=M, storage=StorageType.F64, base=BASE):
    return Quantity.new(LENGTH, base, unit, value, storage)


def mass(value, storage=StorageType.F64):
    return Quantity.new(MASS, BASE, KG, value, storage)


def suffix(value):
    return "" if value == 1 else "s"


def test_description_in_centimeters():
    q = length(1.0)
    assert format(into_format_args(q, CM, DisplayStyle.DESCRIPTION)) == "100 centimeters"
    args = Arguments(LENGTH, CM, DisplayStyle.DESCRIPTION)
    assert str(args.with_quantity(q)) == "100 centimeters"


def test_abbreviation():
    q = length(1.0)
    assert str(into_format_args(q, KM, DisplayStyle.ABBREVIATION)) == "0.001 km"
    assert str(into_format_args(q, M, DisplayStyle.ABBREVIATION)) == "1 m"


def test_singular_and_plural():
    assert str(into_format_args(mass(1.0), KG, DisplayStyle.DESCRIPTION)) == "1 kilogram"
    assert str(into_format_args(mass(2.0), KG, DisplayStyle.DESCRIPTION)) == "2 kilograms"
    assert str(into_format_args(mass(0.5), KG, DisplayStyle.DESCRIPTION)) == "0.5 kilograms"


def test_offset_unit():
    q = Quantity.new(TEMPERATURE, BASE, K, 0.0, StorageType.F64)
    assert str(into_format_args(q, DEG_F, DisplayStyle.ABBREVIATION)) == "-459.67 °F"


@given(st.floats(), st.sampled_from(["+", "05", "e", "E", ".3f"]))
def test_float_specs_match_value_format(v, spec):
    args = into_format_args(mass(v), KG, DisplayStyle.DESCRIPTION)
    assert format(args, spec) == f"{format(v, spec)} kilogram{suffix(v)}"


@given(
    st.integers(min_value=-(2**31), max_value=2**31 - 1),
    st.sampled_from(["", "+", "05", "b", "x", "o", "X"]),
)
def test_integer_specs_match_value_format(v, spec):
    args = into_format_args(mass(v, StorageType.I32), KG, DisplayStyle.DESCRIPTION)
    assert format(args, spec) == f"{format(v, spec)} kilogram{suffix(v)}"


def test_debug_format():
    one = length(1.0)
    assert debug_format(one) == "1.0 m^1"
    assert debug_format(1.0 / one) == "1.0 m^-1"
    assert debug_format(one, ".2f") == "1.00 m^1"
    assert debug_format(length(1.23) * mass(1.0)) == "1.23 m^1 kg^1"


def test_other_base_units():
    kbase = SYSTEM.base_units(length=KM)
    q = length(1000.0, base=kbase)
    assert debug_format(q) == "1.0 km^1"
    assert str(into_format_args(q, M, DisplayStyle.ABBREVIATION)) == "1000 m"


def test_repr_uses_debug_value():
    assert repr(into_format_args(mass(1.0), KG, DisplayStyle.DESCRIPTION)) == "1.0 kilogram"


def test_rational_storage():
    q = length(1, storage=StorageType.RATIONAL64)
    assert str(into_format_args(q, KM, DisplayStyle.ABBREVIATION)) == "1/1000 km"
    assert str(into_format_args(q, M, DisplayStyle.DESCRIPTION)) == "1 meter"
    assert debug_format(q) == "Ratio { numer: 1, denom: 1 } m^1"


def test_bigint_storage():
    assert str(into_format_args(mass(5, StorageType.BIGINT), KG, DisplayStyle.ABBREVIATION)) == "5 kg"


def test_complex_storage():
    one = length(1, storage=StorageType.COMPLEX64)
    assert str(into_format_args(one, M, DisplayStyle.DESCRIPTION)) == "1+0i meter"
    other = length(complex(1.5, -2.0), storage=StorageType.COMPLEX64)
    assert str(into_format_args(other, M, DisplayStyle.DESCRIPTION)) == "1.5-2i meters"


def test_f32_uses_shortest_text():
    assert str(into_format_args(mass(0.1, StorageType.F32), KG, DisplayStyle.ABBREVIATION)) == "0.1 kg"


def test_non_finite_and_large_values():
    desc = DisplayStyle.DESCRIPTION
    assert str(into_format_args(mass(math.nan), KG, desc)) == "NaN kilograms"
    assert str(into_format_args(mass(math.inf), KG, desc)) == "inf kilograms"
    assert str(into_format_args(mass(-math.inf), KG, desc)) == "-inf kilograms"
    assert str(into_format_args(mass(1e20), KG, DisplayStyle.ABBREVIATION)) == (
        "100000000000000000000 kg"
    )
    assert str(into_format_args(mass(-0.0), KG, DisplayStyle.ABBREVIATION)) == "-0 kg"


def test_with_quantity_rejects_other_dimension():
    args = Arguments(LENGTH, M, DisplayStyle.ABBREVIATION)
    with pytest.raises(TypeError):
        args.with_quantity(mass(1.0))


def test_arguments_reject_bad_style():
    with pytest.raises(TypeError):
        Arguments(LENGTH, M, "abbreviation")


def test_arguments_are_not_hashable():
    args = Arguments(LENGTH, M, DisplayStyle.ABBREVIATION)
    bound = args.with_quantity(length(1.0))
    assert isinstance(bound, QuantityArguments)
    assert str(bound) == "1 m"
    with pytest.raises(TypeError):
        hash(args)
    with pytest.raises(TypeError):
        hash(bound)


def test_debug_format_rejects_non_quantity():
    with pytest.raises(TypeError):
        debug_format(1.0)
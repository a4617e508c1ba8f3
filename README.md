# unitsys

`unitsys` is a library for quantities that carry a dimension. You describe a
system of quantities and its base units. The library then converts values
between units, does arithmetic that keeps dimensions consistent, and formats
values in any unit you choose.

## Example

```python
from unitsys.dimension import BaseQuantity, System
from unitsys.formatting import DisplayStyle, debug_format, into_format_args
from unitsys.quantity import Quantity
from unitsys.storage import StorageType
from unitsys.units import define_units

length = define_units(
    ("kilometer", 1.0e3, "km", "kilometer", "kilometers"),
    ("meter", 1.0, "m", "meter", "meters"),
)
mass = define_units(("kilogram", 1.0, "kg", "kilogram", "kilograms"))

system = System("Q", (
    BaseQuantity("length", length["meter"], "L"),
    BaseQuantity("mass", mass["kilogram"], "M"),
))
L = system.dimension(length=1)
base = system.base_units()

d = Quantity.new(L, base, length["kilometer"], 1.0, StorageType.F64)
d.get(length["meter"])                                               # 1000.0
str(into_format_args(d, length["meter"], DisplayStyle.DESCRIPTION))  # "1000 meters"
debug_format(d)                                                      # "1000.0 m^1"
```

## Modules

- **`unitsys.storage`**: the numeric type that holds a value.
  - `StorageType` covers fixed-width integers, big integers, rationals,
    floats (`F32`, `F64`) and complex numbers.
  - `convert` coerces a value into the type. It raises `TypeError`,
    `ValueError` or `OverflowError` when the value does not fit.
  - `from_float` casts a float into the type: integers truncate toward zero,
    and fixed-size rationals take a continued-fraction approximation.
  - `StorageCategory` names groups of types (all, prim-int, ratio, float,
    signed, unsigned, complex).
  - `resolve_types(*args)` expands types, categories or their labels into an
    ordered tuple of types. It rejects duplicates, and with no arguments it
    returns every type.
- **`unitsys.units`**: a `Unit` has a name, a coefficient, an abbreviation,
  singular and plural names, and an optional offset.
  - A value in the unit converts to the base unit as
    `(value + offset) * coefficient`.
  - `coefficient_as(storage)` and `constant(op, storage)` give the factors in
    the type used with a storage type. `ConstantOp` is `ADD` or `SUB`, and a
    unit without an offset gives `-0.0` or `0.0`.
  - `define_units(...)` builds units from
    `(name, conversion, abbreviation, singular, plural)` tuples, where
    `conversion` is a coefficient or a `(coefficient, constant)` pair.
- **`unitsys.dimension`**: a `System` is made of `BaseQuantity` entries.
  - `System.dimension(**exponents)` builds a `Dimension`. Keys may be
    base-quantity names or symbols, and `kind=` sets a kind label.
  - `System.dimension_one()` gives the dimension with every exponent zero.
  - `System.base_units(**overrides)` gives the `BaseUnits` that values are
    stored in.
  - `Dimension` supports `*`, `/` and `**`, plus `recip()`, `root(n)` and
    `is_one()`.
  - `from_base`, `to_base` and `change_base` convert raw values between base
    units and a given unit, or between two sets of base units.
- **`unitsys.quantity`**: a `Quantity` holds a value in base units.
  - Build one with `Quantity.new(dimension, base_units, unit, value, storage)`
    or `Quantity.zero(...)`, and read it back in any unit with `get(unit)`.
  - Addition, subtraction, `%` and comparisons need equal dimensions. They
    convert the right-hand side into the left-hand side's base units.
  - Multiplication and division combine dimensions and also accept plain
    numbers.
  - Other methods: `abs`, `signum`, `recip`, `max`, `min`, `hypot`, `cbrt`,
    `sqrt`, `powi`, `mul_add`, `is_nan`, `is_infinite`, `is_finite`,
    `is_normal`, `is_sign_positive` and `is_sign_negative`.
  - `classify` returns an `FpCategory`.
  - `saturating_add` and `saturating_sub` work on integer storage.
  - An operation the storage type does not support raises `TypeError`.
  - `sum_quantities` adds up an iterable and gives zero for an empty one.
- **`unitsys.formatting`**: formats quantities in a chosen unit.
  - `into_format_args(quantity, unit, style)`, or
    `Arguments(...).with_quantity(q)`, gives a `QuantityArguments`. It prints
    the value in that unit, and also works with `format()` specs.
  - `DisplayStyle.ABBREVIATION` prints the abbreviation, such as `"100 cm"`.
  - `DisplayStyle.DESCRIPTION` prints the singular name for a value of one and
    the plural name otherwise, such as `"100 centimeters"`.
  - `debug_format(quantity)` writes the stored value followed by each base
    unit with a nonzero exponent, for example `"1.0 m^1 kg^1"`.

## What it does not do

- It comes with no predefined system such as SI. You define every system and
  unit yourself.
- It does not parse quantities from text such as `"1 km"`.
- It has no command-line interface.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```
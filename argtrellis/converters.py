"""
Built-in conversion steps for positional arguments.

First steps (``str -> T``): string, integer, unsigned, number, existing.
Constraint steps (``T -> T``): within(...).

Each step raises ConversionError with a short, user-facing sentence on failure.
"""
import pathlib

from .pipelines import ConversionError
from .utils import *


def string(token, /):
    """Identity conversion: keep the raw token."""
    return token


def integer(token, /):
    try:
        return int(token)
    except ValueError:
        raise ConversionError("Could not interpret argument as integer.") from None


def unsigned(token, /):
    try:
        value = int(token)
    except ValueError:
        value = -1
    if value < 0:
        raise ConversionError("Could not interpret argument as integer greater or equal to 0.")
    return value


def number(token, /):
    try:
        return float(token)
    except ValueError:
        raise ConversionError("Could not interpret argument as number.") from None


def existing(token, /):
    """
    Resolve ``token`` to a pathlib.Path naming an existing file.
    """
    path = pathlib.Path(token)
    if not path.is_file():
        raise ConversionError("File %s does not exist." % token)
    return path


def within(minimum, maximum, /, *, inclusive=(True, True)):
    """
    Build a range constraint step for already-converted numbers.

    Parameters
    - minimum, maximum: bounds of the accepted range.
    - inclusive: pair of booleans, whether each bound is itself accepted.
    """
    if minimum > maximum:
        raise ValueError("within() minimum cannot be greater than maximum")
    low, high = inclusive

    @rename("within")
    def constraint(value, /):
        if value < minimum or value > maximum or (value == minimum and not low) or (value == maximum and not high):
            raise ConversionError("Expected value to be between %s%s and %s%s." % (
                minimum, "(inclusive)" if low else "(exclusive)",
                maximum, "(inclusive)" if high else "(exclusive)",
            ))
        return value

    return constraint


__all__ = (
    "string",
    "integer",
    "unsigned",
    "number",
    "existing",
    "within",
)

"""
Argtrellis conversion pipelines.

A pipeline turns the raw token of a positional argument into a typed value:

- the first step maps ``str -> T`` (a converter such as ``int`` or ``integer``),
- every following step maps ``T -> T`` (constraints and refinements).

Steps run left to right; the first failing step aborts the chain. A step fails by
raising ConversionError with a user-facing message. ValueError, TypeError and OSError
raised by plain callables (``int("x")``, ``open(path)``) count as failures too, their
text becoming the message.

Quick example:
    >>> from argtrellis.pipelines import chain
    >>> from argtrellis.converters import integer, within
    >>> watts = chain(integer, within(0, 50))
    >>> watts("10")
    10
"""
from .utils import *


class ConversionError(ValueError):
    """
    Failure signal for a conversion step; carries the message shown to the user.
    """

    def __init__(self, message, /):
        if not isinstance(message, str):
            raise TypeError("ConversionError() argument must be a string")
        super().__init__(message)
        self.message = message


class Pipeline[_T]:
    """
    Ordered, immutable composition of conversion steps.

    Pipelines are built at configuration time and invoked at most once per
    positional argument per parse. Steps are stored as plain callables, so trees can
    be assembled at runtime from any configuration source.
    """

    __slots__ = ("_steps",)

    steps = mirror("steps")

    def __init__(self, first, /, *steps):
        for step in (first, *steps):
            if not callable(step):
                raise TypeError("pipeline steps must be callable")
        self._steps = (first, *steps)

    def __call__(self, token, /):
        """
        Run every step on ``token`` and return the final value.

        Raises
        - ConversionError: with the message of the first failing step.
        """
        value = token
        for step in self._steps:
            try:
                value = step(value)
            except ConversionError:
                raise
            except (ValueError, TypeError, OSError) as exception:
                message = str(exception) or "could not convert %r" % (token,)
                raise ConversionError(message) from exception
        return value

    def then(self, *steps):
        """
        Return a new pipeline extended with ``steps`` (the receiver is unchanged).
        """
        return Pipeline(*self._steps, *steps)

    def __len__(self):
        return len(self._steps)

    def __repr__(self):
        return "pipeline(%s)" % " -> ".join(getattr(step, "__name__", repr(step)) for step in self._steps)


def chain(first, /, *steps):
    """
    Compose conversion steps into a Pipeline.

    Accepts callables or an existing Pipeline as the first element; a Pipeline given
    alone is returned unchanged.
    """
    if isinstance(first, Pipeline):
        return first.then(*steps) if steps else first
    return Pipeline(first, *steps)


__all__ = (
    "ConversionError",
    "Pipeline",
    "chain",
)

"""
Small helpers shared by the argtrellis node tree.

- Unset: sentinel for "argument not given", distinct from None. An Arg that was never
  parsed holds Unset internally and reports None through ``value``.
- coalesce(): materialize Unset into a default.
- rename(): give generated callables (constraint steps, metaclass methods) a stable
  name for pipeline reprs and tracebacks.
- mirror(): read-only property over a "_<name>" attribute. Lists, dicts and sets
  are copied on access so callers cannot reshape a tree after configuration.
"""
import builtins
import functools
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel: a falsey singleton that cannot be subclassed.
    """

    def __or__(self, other, /):
        # allows "str | Unset" in isinstance checks and annotations
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    __ror__ = __or__

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """Return ``object`` unless it is Unset, in which case return ``default``."""
    return default if object is Unset else object


def rename(*parameters):
    """
    Set __name__ and __qualname__ of a callable.

    ``rename(callable, name)`` renames in place and returns the callable;
    ``rename(name)`` returns a decorator doing the same.
    """
    match parameters:
        case (callable, str() as name):
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            try:
                callable.__name__ = callable.__qualname__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case (str() as name,):
            return rename(functools.partial(_renamer, name=name), "rename")
        case (_, _) | (_,):
            raise TypeError("rename() name must be a string")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _renamer(callable, /, *, name):
    if not builtins.callable(callable):
        raise TypeError("@rename() must be applied to a callable")
    return rename(callable, name)


def _detach(object):
    match object:
        case str():
            return object
        case Sequence():
            return [_detach(item) for item in object]
        case Mapping():
            return {key: _detach(value) for key, value in object.items()}
        case Set():
            return {_detach(item) for item in object}
        case _:
            return object


def mirror(name, /):
    """
    Build a read-only property returning a detached copy of ``self._<name>``.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)

r"""
Argtrellis parse nodes: policies, the node base, and positional arguments.

Overview
- Policy: MANDATORY or OPTIONAL, attached to every node. Governs completeness
  checking and usage bracketing ("[...]" for optional units).
- Node: abstract parse unit (policy, descr, parsed). ``bool(node)`` tells whether the
  node was matched by the last parse.
- Arg[_T]: positional node consuming exactly one token through its conversion
  Pipeline and storing the converted value.

Introspection & representation
- NodeType metaclass provides stable __repr__/__rich_repr__ and exposes the fields
  declared in __introspectable__ as read-only properties (see utils.mirror).

Metadata (sanitized on construction)
- policy: Policy (required).
- descr: str, trimmed; an empty description hides the node from the help body.
- name/key: non-empty string without whitespace.
- pipeline: Pipeline | Callable | tuple/list of callables (chained).

Quick example:
    >>> from argtrellis.arguments import Arg, Policy
    >>> from argtrellis.converters import integer
    >>> watts = Arg("watts", Policy.MANDATORY, "Power in watts.", integer)
    >>> watts._consume("10"), watts.value
    (True, 10)
"""
import functools
import operator
import re
from collections.abc import Callable
from enum import Enum

from .converters import string
from .faults import *
from .logger import logger
from .pipelines import ConversionError, Pipeline, chain
from .utils import *


class Policy(Enum):
    """
    Requirement policy of a node.
    """
    MANDATORY = "mandatory"
    OPTIONAL = "optional"

    def __repr__(self):
        return "Policy.%s" % self.name


MANDATORY = Policy.MANDATORY
OPTIONAL = Policy.OPTIONAL


class NodeType(type):
    """
    Metaclass that turns node classes into introspectable tree members.

    Responsibilities
    - Expose fields listed in __introspectable__ as read-only properties backed by
      "_<field>" attributes (see utils.mirror).
    - Provide stable, readable __repr__/__rich_repr__ implementations.
    - Derive __typename__ from the class name ("ComplexFlag" -> "complex-flag"), used
      in configuration error messages.

    Conventions
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options,
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - flag(key='--speed', policy=Policy.MANDATORY, descr='Specify the speed.', parsed=False)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers (e.g., rich).
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every node.

    - policy: must be a Policy member.
    - descr: must be a string; surrounding whitespace is trimmed. Empty is allowed
      and means "not listed in the help body".

    Raises
    - TypeError: on wrong types.
    """
    if not isinstance(metadata["policy"], Policy):
        raise TypeError(f"{cls.__typename__} 'policy' must be a Policy")

    if not isinstance(descr := metadata["descr"], str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = descr.strip()


def _sanitize_named_metadata(cls, metadata, field, /):
    """
    Internal: validate the token-facing identity of a node (flag key or arg name).

    Raises
    - TypeError: when the field is not a string.
    - ValueError: when it is empty or contains whitespace.
    """
    if not isinstance(value := metadata[field], str):
        raise TypeError(f"{cls.__typename__} '{field}' must be a string")
    elif not value:
        raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
    elif re.search(r"\s", value):
        raise ValueError(f"{cls.__typename__} '{field}' cannot contain whitespace")


def _sanitize_callback(cls, metadata, /):
    """
    Internal: the optional callback must be callable when provided.
    """
    if metadata["callback"] is not Unset and not callable(metadata["callback"]):
        raise TypeError(f"{cls.__typename__} 'callback' must be callable")


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: normalize the conversion pipeline of a positional argument.

    Accepts a Pipeline, a single callable, or a tuple/list of callables which is
    chained in order. The result is always a Pipeline.
    """
    match pipeline := metadata["pipeline"]:
        case Pipeline():
            pass
        case tuple() | list() if pipeline:
            pipeline = chain(*pipeline)
        case Callable():
            pipeline = chain(pipeline)
        case _:
            raise TypeError(f"{cls.__typename__} 'pipeline' must be a pipeline or a callable")
    metadata["pipeline"] = pipeline


class Node(metaclass=NodeType):
    """
    Abstract parse unit: a requirement policy, a human description, and the
    matched state of the current parse.

    ``parsed`` starts False and is set True at most once per parse; it is never
    reset, so a tree parses a single token stream in its lifetime.
    """

    __introspectable__ = (
        "policy",
        "descr",
        "parsed",
    )

    def __init__(self, policy, descr="", /):
        metadata = {
            "policy": policy,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._parsed = False

    @property
    def optional(self):
        return self._policy is Policy.OPTIONAL

    def __bool__(self):
        return self._parsed


class Arg[_T](Node):
    """
    Positional, value-bearing node.

    Arg[_T] is matched by content rather than by key: it consumes exactly one token
    when its pipeline converts that token successfully.

    Properties
    - name: label used in usage, help, and error messages.
    - pipeline: the Pipeline converting the raw token into _T.
    - value: the converted value once parsed, None otherwise.
    """

    __introspectable__ = (
        "name",
        "policy",
        "descr",
        "pipeline",
        "parsed",
    )

    __displayable__ = (
        "name",
        "policy",
        "descr",
        "parsed",
        "value",
    )

    def __init__(self, name, policy, descr="", pipeline=string, /):
        super().__init__(policy, descr)
        metadata = {
            "name": name,
            "pipeline": pipeline,
        }
        _sanitize_named_metadata(type(self), metadata, "name")
        _sanitize_parametric_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._value = Unset

    @property
    def value(self):
        return coalesce(self._value)

    def _consume(self, token):
        """
        Try to convert ``token``; report whether it was consumed.

        Optional arguments decline tokens they cannot convert, leaving them for the
        next candidate. Mandatory arguments raise ConversionFailureError instead.
        """
        try:
            value = self._pipeline(token)
        except ConversionError as error:
            if self._policy is Policy.OPTIONAL:
                logger.debug("optional argument %r declined %r: %s", self._name, token, error.message)
                return False
            raise ConversionFailureError(
                "Could not parse argument: %s\n%s" % (self._name, error.message),
                title="conversion failure",
                code=FaultCode.CONVERSION_FAILURE,
                argument=self,
                token=token,
                reason=error.message,
                hint="provide a valid value for %s" % self._name,
            ) from error

        self._value = value
        self._parsed = True
        logger.debug("argument %r consumed %r", self._name, token)
        return True


__all__ = (
    "Policy",
    "MANDATORY",
    "OPTIONAL",
    "Node",
    "Arg",
)

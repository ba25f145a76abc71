"""
Argtrellis faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse failure.
  Codes are grouped by domain (flags, positionals) to keep searches predictable.
- ParseException: base type carrying a message plus read-only options, and knowing
  how to render itself (``__rich__``), surface itself (``__trigger__``) and be
  re-parameterized (``__replace__``, used through copy.replace).
- trigger(): central entry point to surface any fault with runtime options.
- HelpRequested: control signal raised when the help flag is matched (not a fault).

Surfacing
- shell=False: the fault is raised for the caller to handle.
- shell=True: the fault is printed to stderr (error line, successfully parsed echo,
  blank line, full usage) and the process exits with status 1.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - flags (2110x)
      • MISSING_MANDATORY_FLAG, REPEATED_FLAG, UNEXPECTED_ARGUMENT, EXCLUSIVE_CONFLICT
    - positionals (2120x)
      • MISSING_MANDATORY_ARGUMENT, CONVERSION_FAILURE
    """
    # --- flag errors (211xx) ---
    MISSING_MANDATORY_FLAG      = 21101
    REPEATED_FLAG               = 21102
    UNEXPECTED_ARGUMENT         = 21103
    EXCLUSIVE_CONFLICT          = 21104

    # --- positional errors (212xx) ---
    MISSING_MANDATORY_ARGUMENT  = 21201
    CONVERSION_FAILURE          = 21202


class ParseException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        colorful = self.options.get("colorful", False)

        styles = defaultdict(str, {
            "error-label": "bold #FF4DA6",  # friendly pinky label
            "error-message": "#C8C8D0",  # soft light gray message
            "echo-label": "bold #00E5FF",  # neon cyan label
            "echo": "#9CE19C",  # gentle green tokens
            "usage": "",
        } | self.options.get("styles", {}))

        def text(fragment, style):
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        renders = [Text.assemble(text("Error: ", "error-label"), text(self, "error-message"))]

        if (echo := self.options.get("echo", Unset)) is not Unset:
            renders.append(Text.assemble(text("Successfully parsed: ", "echo-label"), text(echo, "echo")))
        if (usage := self.options.get("usage", Unset)) is not Unset:
            renders.append(Text(""))
            renders.append(text(usage, "usage"))

        return Group(*renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingMandatoryFlagError(ParseException): ...
class MissingMandatoryArgumentError(ParseException): ...
class RepeatedFlagError(ParseException): ...
class UnexpectedArgumentError(ParseException): ...
class ExclusiveConflictError(ParseException): ...
class ConversionFailureError(ParseException): ...


class HelpRequested(Exception):
    """
    Raised when the help flag is matched; parsing stops without validation.
    """


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseException).
    - options are merged into the fault via __replace__(**options) before triggering.

    typical options
    - shell, colorful, styles, echo, usage, and any context the reporter may want
      to show (e.g., store/token/key/argument).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ParseException",
    "MissingMandatoryFlagError",
    "MissingMandatoryArgumentError",
    "RepeatedFlagError",
    "UnexpectedArgumentError",
    "ExclusiveConflictError",
    "ConversionFailureError",
    "HelpRequested",
    "trigger",
)

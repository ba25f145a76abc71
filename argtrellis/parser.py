"""
Argtrellis root driver.

ArgParser is the root complex flag: configure it with flag(), complex(), argument()
and exclusive(), then call validate() once with the process arguments.

On success validate() returns the parser, whose nodes can be queried (``bool(flag)``,
``arg.value``, ``group.chosen``). On failure the fault is surfaced through
faults.trigger: printed to stderr followed by the full usage text, then the process
exits with status 1 (shell=True, the default), or raised to the caller
(shell=False).
"""
import sys
from collections import deque
from collections.abc import Iterable

from rich.console import Console
from rich.text import Text

from .arguments import *
from .faults import *
from .flags import *
from .logger import logger
from .utils import *

console = Console()


class ArgParser(ComplexFlag):
    """
    Root of an argument tree and the single-use parse driver.

    Options
    - program: name shown in usage and echoes (default: argv[0] at validation).
    - shell: print the fault and exit(1) instead of raising it.
    - colorful: style the fault output; ``styles`` overrides palette entries.
    - help: register an optional ``--help`` flag, listed last, that prints the
      usage text and stops parsing.
    """

    __introspectable__ = (
        "program",
        "shell",
        "colorful",
        "styles",
        "help",
        "parsed",
        "store",
    )

    __displayable__ = (
        "program",
        "shell",
        "colorful",
        "parsed",
        "consumed",
    )

    def __init__(self, *, program=Unset, shell=True, colorful=False, styles=Unset, help=False):
        Node.__init__(self, Policy.MANDATORY)
        if program is not Unset:
            _check(program, str, "program")
        _check(shell, bool, "shell")
        _check(colorful, bool, "colorful")
        _check(help, bool, "help")
        if styles is not Unset and not isinstance(styles, dict):
            raise TypeError("ArgParser() 'styles' must be a dict")

        self._key = Unset
        self._callback = Unset
        self._store = FlagStore()
        self._program = program
        self._shell = shell
        self._colorful = colorful
        self._styles = coalesce(styles, {})
        self._help = help
        self._consumed = Unset

        if help:
            self.flag("--help", Policy.OPTIONAL, "Print this help message.", _requested)
            self._store._pin("--help")

    @property
    def consumed(self):
        """Tokens consumed by the last validation, program name excluded."""
        return coalesce(self._consumed, ())

    def summary(self, program=Unset, /):
        """Return the one-line ``Usage: <program> ...`` summary."""
        name = coalesce(program, coalesce(self._program, ""))
        return "Usage:%s%s" % (" " + name if name else "", summarize(self._store))

    def usage(self, program=Unset, /):
        """
        Return the full usage text: summary, blank line, then the help body.
        """
        return "%s\n\nArguments:\n%s" % (self.summary(program), describe(self._store))

    def validate(self, argv=Unset, /):
        """
        Parse ``argv`` (default: sys.argv) against the tree.

        ``argv[0]`` is the program name and is never parsed. A parser validates
        once; a second call raises RuntimeError.

        Raises
        - ParseException subclasses when shell=False.
        - HelpRequested when the help flag is matched and shell=False.
        - SystemExit when shell=True and parsing fails (1) or help is shown (0).
        """
        if self._consumed is not Unset:
            raise RuntimeError("validate() can only be called once per parser")

        argv = list(_sanitized(sys.argv if argv is Unset else argv))
        if self._program is Unset:
            self._program = argv[0] if argv else ""

        tokens = deque(argv[1:])
        try:
            self._store.parse(tokens)
            if tokens:
                raise self._store._unexpected(tokens[0])
        except HelpRequested:
            self._consumed = tuple(argv[1:len(argv) - len(tokens)])
            logger.debug("help requested after %d token(s)", len(self._consumed))
            if not self._shell:
                raise
            console.print(Text(self.usage()), soft_wrap=True)
            sys.exit(0)
        except ParseException as fault:
            self._consumed = tuple(argv[1:len(argv) - len(tokens)])
            logger.debug("parse failed after %d token(s): %s", len(self._consumed), fault)
            trigger(
                fault,
                shell=self._shell,
                colorful=self._colorful,
                styles=self._styles,
                echo=" ".join((self._program, *self._consumed)),
                usage=self.usage(),
            )
        else:
            self._consumed = tuple(argv[1:])
            self._parsed = True
            logger.debug("parsed %d token(s)", len(self._consumed))
        return self


def _check(value, expected, name, /):
    if not isinstance(value, expected):
        raise TypeError("ArgParser() %r must be a %s" % (name, expected.__name__))


def _requested(key, /):
    raise HelpRequested(key)


def _sanitized(iterable, /):
    """
    Yield the items of an argument vector, validating element types.

    A plain string is rejected: tokens are never split here.
    """
    if isinstance(iterable, str) or not isinstance(iterable, Iterable):
        raise TypeError("validate() argument must be an iterable of strings")
    for item in iterable:
        if not isinstance(item, str):
            raise TypeError("validate() argument must be an iterable of strings")
        yield item


__all__ = (
    "ArgParser",
)

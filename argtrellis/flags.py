r"""
Argtrellis flags, exclusive groups and the flag store.

Tree shape
- ComplexFlag owns one FlagStore: an ordered flag registry plus an ordered list of
  positional arguments. Complex flags may be nested to any depth.
- ExclusiveGroup is a pseudo-flag listed among its store's entries. It references
  its members by key; the members themselves live in the owning store's registry.

Parsing (FlagStore.parse)
- Greedy and single pass over a deque of tokens, one token of lookahead, no
  backtracking. Flag keys are tried first, then unparsed positionals in declared
  order. The loop stops at the first token nothing in the store accepts and leaves
  it for the enclosing level.
- Post-loop checks: mandatory flags first, then mandatory positionals. A shortfall
  is a "missing" fault when tokens are exhausted, an "unexpected" fault otherwise.

Accounting
- Each top-level flag adds one unit to its policy's tally; each positional likewise.
- An exclusive group adds exactly one unit, once it has at least one member.

Text
- summarize(): one-line usage summary of a store.
- describe(): indented help body of a store.
- unparsed(): "still valid" listings used in error messages.
"""
from .arguments import *
from .arguments import _sanitize_callback, _sanitize_named_metadata
from .converters import string
from .faults import *
from .logger import logger
from .utils import *

INDENT = "    "


class Flag(Node):
    """
    Node matched by an exact token, its key.

    A simple flag consumes only its key token. When matched it is marked parsed and
    its callback, if any, is invoked with the key.
    """

    __introspectable__ = (
        "key",
        "policy",
        "descr",
        "callback",
        "parsed",
    )

    __displayable__ = (
        "key",
        "policy",
        "descr",
        "parsed",
    )

    def __init__(self, key, policy, descr="", callback=Unset, /):
        super().__init__(policy, descr)
        metadata = {
            "key": key,
            "callback": callback,
        }
        _sanitize_named_metadata(type(self), metadata, "key")
        _sanitize_callback(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def _match(self, tokens, /):
        # the key token has already been consumed by the owning store
        self._parsed = True
        if self._callback is not Unset:
            self._callback(self._key)


class ComplexFlag(Flag):
    """
    Flag owning a nested FlagStore.

    Matching the key delegates the remaining tokens to the nested store; the flag is
    marked parsed (and its callback invoked) only once that store is satisfied.

    Registration
    - flag(key, policy, descr="", callback=Unset) -> Flag
    - complex(key, policy, descr="", callback=Unset) -> ComplexFlag
    - argument(name, policy, descr="", pipeline=string) -> Arg
    - exclusive(policy) -> ExclusiveGroup
    """

    __introspectable__ = (
        "key",
        "policy",
        "descr",
        "callback",
        "parsed",
        "store",
    )

    def __init__(self, key, policy, descr="", callback=Unset, /):
        super().__init__(key, policy, descr, callback)
        self._store = FlagStore()

    def flag(self, key, policy, /, descr="", callback=Unset):
        return self._store._register(Flag(key, policy, descr, callback))

    def complex(self, key, policy, /, descr="", callback=Unset):
        return self._store._register(ComplexFlag(key, policy, descr, callback))

    def argument(self, name, policy, /, descr="", pipeline=string):
        return self._store._attach(Arg(name, policy, descr, pipeline))

    def exclusive(self, policy, /):
        return self._store._group(ExclusiveGroup(self._store, policy))

    def __getitem__(self, key):
        """Look up a flag registered directly in this flag's store (members included)."""
        return self._store._flags[key]

    def _match(self, tokens, /):
        logger.debug("entering store of %r", self._key)
        self._store.parse(tokens)
        super()._match(tokens)


class ExclusiveGroup(Node):
    """
    Set of sibling flags of which at most one may be matched.

    Members inherit the group's policy and are registered in the owning store; the
    group keeps their keys only. Iterating a group yields the member flags in
    registration order.
    """

    __introspectable__ = (
        "policy",
        "members",
        "chosen",
        "parsed",
    )

    def __init__(self, store, policy, /):
        super().__init__(policy)
        self._store = store
        self._members = []
        self._chosen = None

    def flag(self, key, /, descr="", callback=Unset):
        return self._store._enroll(self, Flag(key, self._policy, descr, callback))

    def complex(self, key, /, descr="", callback=Unset):
        return self._store._enroll(self, ComplexFlag(key, self._policy, descr, callback))

    def __iter__(self):
        return iter([self._store._flags[key] for key in self._members])

    def __len__(self):
        return len(self._members)

    def _choose(self, key, /):
        if self._chosen is not None:
            raise ExclusiveConflictError(
                "Cannot use %s in conjunction with %s.\nThe following flags are exclusive: %s" % (
                    self._chosen, key, "|".join(self._members),
                ),
                title="exclusive conflict",
                code=FaultCode.EXCLUSIVE_CONFLICT,
                store=self._store,
                key=key,
                chosen=self._chosen,
                keys=tuple(self._members),
                hint="use only one of %s" % ", ".join(self._members),
            )
        self._chosen = key
        self._parsed = True


class FlagStore:
    """
    Container of one nesting level: flag registry, positionals and tallies.

    The registry maps every key (exclusive members included) to its flag;
    ``entries`` keeps the top-level flags and groups in registration order, which is
    the order used by usage text and error listings.
    """

    __slots__ = (
        "_flags",
        "_entries",
        "_args",
        "_groups",
        "_pinned",
        "_mandatory_flags",
        "_optional_flags",
        "_mandatory_args",
        "_optional_args",
    )

    flags = mirror("flags")
    entries = mirror("entries")
    args = mirror("args")
    mandatory_flags = mirror("mandatory_flags")
    optional_flags = mirror("optional_flags")
    mandatory_args = mirror("mandatory_args")
    optional_args = mirror("optional_args")

    def __init__(self):
        self._flags = {}
        self._entries = []
        self._args = []
        self._groups = {}
        self._pinned = 0
        self._mandatory_flags = 0
        self._optional_flags = 0
        self._mandatory_args = 0
        self._optional_args = 0

    def __repr__(self):
        return "flag-store(flags=%r, args=%r)" % (
            list(self._flags),
            [arg.name for arg in self._args],
        )

    def _claim(self, flag, /):
        if flag.key in self._flags:
            raise ValueError("flag key %r is already registered at this level" % flag.key)
        self._flags[flag.key] = flag

    def _tally(self, node, /, *, flag):
        match node.policy, flag:
            case Policy.MANDATORY, True:
                self._mandatory_flags += 1
            case Policy.OPTIONAL, True:
                self._optional_flags += 1
            case Policy.MANDATORY, False:
                self._mandatory_args += 1
            case Policy.OPTIONAL, False:
                self._optional_args += 1

    def _register(self, flag, /):
        self._claim(flag)
        self._append(flag)
        self._tally(flag, flag=True)
        return flag

    def _enroll(self, group, flag, /):
        self._claim(flag)
        self._groups[flag.key] = group
        group._members.append(flag.key)
        if len(group._members) == 1:
            self._tally(group, flag=True)
        return flag

    def _attach(self, arg, /):
        self._args.append(arg)
        self._tally(arg, flag=False)
        return arg

    def _group(self, group, /):
        self._append(group)
        return group

    def _append(self, entry, /):
        self._entries.insert(len(self._entries) - self._pinned, entry)

    def _pin(self, key, /):
        """Keep the top-level flag ``key`` after every entry registered later."""
        flag = self._flags[key]
        self._entries.remove(flag)
        self._entries.append(flag)
        self._pinned += 1

    def _try_flag(self, tokens, /):
        match self._flags.get(token := tokens[0]):
            case None:
                return None
            case Flag(parsed=True):
                raise RepeatedFlagError(
                    "Repeated flag: %s" % token,
                    title="repeated flag",
                    code=FaultCode.REPEATED_FLAG,
                    store=self,
                    key=token,
                    hint="remove the duplicate %s" % token,
                )
            case flag:
                if (group := self._groups.get(token)) is not None:
                    group._choose(token)
                tokens.popleft()
                logger.debug("flag %r matched", token)
                flag._match(tokens)
                return flag

    def _try_arg(self, tokens, /):
        for arg in self._args:
            if not arg.parsed and arg._consume(tokens[0]):
                tokens.popleft()
                return arg
        return None

    def _unexpected(self, token, /):
        flags, args = unparsed(self)
        return UnexpectedArgumentError(
            "Unexpected argument: %s\nValid option(s):%s%s" % (token, flags, args),
            title="unexpected argument",
            code=FaultCode.UNEXPECTED_ARGUMENT,
            store=self,
            token=token,
            hint="check the spelling or the position of %s" % token,
        )

    def parse(self, tokens, /):
        """
        Consume a prefix of ``tokens`` (a deque) greedily, then check completeness.

        Raises
        - RepeatedFlagError, ExclusiveConflictError, ConversionFailureError: while
          matching.
        - MissingMandatoryFlagError, MissingMandatoryArgumentError,
          UnexpectedArgumentError: when the store is left incomplete.
        """
        flags = args = 0
        while tokens:
            if (flag := self._try_flag(tokens)) is not None:
                flags += flag.policy is Policy.MANDATORY
            elif (arg := self._try_arg(tokens)) is not None:
                args += arg.policy is Policy.MANDATORY
            else:
                logger.debug("store stopped at %r", tokens[0])
                break

        if flags < self._mandatory_flags:
            if tokens:
                raise self._unexpected(tokens[0])
            raise MissingMandatoryFlagError(
                "Missing mandatory flag(s). Valid option(s) are:%s" % unparsed(self)[0],
                title="missing mandatory flag",
                code=FaultCode.MISSING_MANDATORY_FLAG,
                store=self,
                hint="provide the flags listed above",
            )

        if args < self._mandatory_args:
            if tokens:
                raise self._unexpected(tokens[0])
            raise MissingMandatoryArgumentError(
                "Missing mandatory argument(s). Valid option(s) are:%s" % unparsed(self)[1],
                title="missing mandatory argument",
                code=FaultCode.MISSING_MANDATORY_ARGUMENT,
                store=self,
                hint="provide the arguments listed above",
            )


def _bracket(node, text, /):
    return "[%s]" % text if node.optional else text


def _inline(flag, /):
    match flag:
        case ComplexFlag():
            return flag.key + summarize(flag._store)
        case Flag():
            return flag.key


def summarize(store, /):
    """
    One-line usage summary of ``store``: positionals, then flag entries.

    Every unit is preceded by one space and optional units are bracketed. Complex
    flags carry their own summary after the key; groups join members with "|".
    """
    fragments = [" " + _bracket(arg, arg.name) for arg in store._args]
    for entry in store._entries:
        match entry:
            case ExclusiveGroup() if not len(entry):
                continue
            case ExclusiveGroup():
                fragments.append(" " + _bracket(entry, "|".join(map(_inline, entry))))
            case Flag():
                fragments.append(" " + _bracket(entry, _inline(entry)))
    return "".join(fragments)


def _describe(entries, level, /):
    indent = "\n" + INDENT * level
    for entry in entries:
        match entry:
            case ExclusiveGroup():
                yield from _describe(entry, level)
            case Flag(descr=""):
                continue
            case Flag():
                yield "%s%s%s%s%s" % (
                    indent, _inline(entry), indent, "[optional] " if entry.optional else "", entry.descr,
                )
                if isinstance(entry, ComplexFlag):
                    yield describe(entry._store, level + 1)


def describe(store, level=1, /):
    """
    Help body of ``store``, one block per described node.

    Positionals come first as ``name[ [optional]]: descr``; flags follow as their
    key and summary with the description on the next line, then their own nested
    block one level deeper. Each line starts with a newline and ``level`` indents.
    """
    indent = "\n" + INDENT * level
    fragments = [
        "%s%s%s: %s" % (indent, arg.name, " [optional]" if arg.optional else "", arg.descr)
        for arg in store._args if arg.descr
    ]
    fragments.extend(_describe(store._entries, level))
    return "".join(fragments)


def _pending(entries, /):
    for entry in entries:
        match entry:
            case ExclusiveGroup(chosen=None):
                yield from _pending(entry)
            case ExclusiveGroup():
                continue
            case Flag(parsed=False):
                yield _bracket(entry, entry.key)


def unparsed(store, /):
    """
    Listings of what ``store`` would still accept, as a (flags, args) pair.

    Flags are comma separated, positionals space separated; each listing is empty
    or starts with a space. Members of a group that already chose are omitted.
    """
    flags = ", ".join(_pending(store._entries))
    args = "".join(" " + _bracket(arg, arg.name) for arg in store._args if not arg.parsed)
    return (" " + flags if flags else ""), args


__all__ = (
    "Flag",
    "ComplexFlag",
    "ExclusiveGroup",
    "FlagStore",
    "summarize",
    "describe",
    "unparsed",
)

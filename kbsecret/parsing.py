"""
Parsing — Option and trailing-argument parsing for kbsecret commands

Two passes per invocation:

  1. parse_options()    flags anywhere in argv, per an OptionSet schema
                        (argparse underneath); returns the leftover tokens
  2. parse_arguments()  binds the leftover tokens to named Slots

Option parsing must run first: argument parsing only ever sees what the
option pass left behind.

Every command gets these options on top of its own:
  -V, --verbose        produce more verbose output
  -w, --no-warn        suppress warning messages
  --debug              produce full backtraces on errors
  -h, --help           show this help message (exits 0)
  --introspect-flags   dump recognized flags and subcommands (exits 0)
"""

import argparse
import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import UsageError


_NEGATIVE_NUMBER = re.compile(r'^-\d+$|^-\d*\.\d+$')


class ParsedValues(Mapping):
    """Read-only name -> value mapping with attribute access."""

    def __init__(self, values: Dict[str, Any]):
        self._values = dict(values)

    def __getitem__(self, key):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __getattr__(self, name):
        try:
            return self.__dict__['_values'][name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self):
        return f"{type(self).__name__}({self._values!r})"


class Options(ParsedValues):
    """Result of option parsing."""


class Arguments(ParsedValues):
    """Result of trailing-argument parsing."""


# =============================================================================
# Option schema
# =============================================================================

@dataclass(frozen=True)
class OptionSpec:
    """One declared option."""
    flags: Tuple[str, ...]
    kind: str           # "bool" | "string" | "integer" | "array"
    help: str = ""
    default: Any = None

    @property
    def dest(self) -> str:
        longs = [f for f in self.flags if f.startswith("--")]
        name = longs[0] if longs else self.flags[0]
        return name.lstrip("-").replace("-", "_")


@dataclass(frozen=True)
class Separator:
    """Help section heading."""
    text: str


def _split_flags(args: Sequence[str]) -> Tuple[Tuple[str, ...], str]:
    flags = tuple(a for a in args if a.startswith("-"))
    words = [a for a in args if not a.startswith("-")]
    if not flags:
        raise ValueError(f"option declared without flags: {args!r}")
    return flags, (words[-1] if words else "")


def _csv(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


class OptionSet:
    """
    Schema builder handed to the command's option definition function.

    Example:
        def define(o):
            o.string("-s", "--session", "the session to use", default="default")
            o.bool("-x", "--terse", "output in field<sep>value format")
    """

    def __init__(self):
        self.items: List[Any] = []

    def _add(self, kind, args, default):
        flags, help_text = _split_flags(args)
        spec = OptionSpec(flags=flags, kind=kind, help=help_text, default=default)
        self.items.append(spec)
        return spec

    def bool(self, *args: str):
        return self._add("bool", args, False)

    def string(self, *args: str, default: Optional[str] = None):
        return self._add("string", args, default)

    def integer(self, *args: str, default: Optional[int] = None):
        return self._add("integer", args, default)

    def array(self, *args: str, default: Optional[List[str]] = None):
        return self._add("array", args, list(default) if default else [])

    def separator(self, text: str):
        self.items.append(Separator(text))

    @property
    def options(self) -> List[OptionSpec]:
        return [i for i in self.items if isinstance(i, OptionSpec)]

    @property
    def flags(self) -> List[str]:
        """Every declared flag, flattened, in declaration order."""
        return [f for spec in self.options for f in spec.flags]


# =============================================================================
# argparse plumbing
# =============================================================================

class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing and exiting."""

    def error(self, message):
        raise UsageError(message)


class _ExitAction(argparse.Action):
    """Zero-argument action that prints something and exits 0."""

    def __init__(self, option_strings, dest, render=None, stream=None, default=None, **kwargs):
        self.render = render
        self.stream = stream
        super().__init__(option_strings, dest=argparse.SUPPRESS,
                         default=argparse.SUPPRESS, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        print(self.render(), file=self.stream or sys.stdout)
        raise SystemExit(0)


_KWARGS = {
    "bool": lambda spec: {"action": "store_true", "default": False},
    "string": lambda spec: {"default": spec.default, "metavar": "VALUE"},
    "integer": lambda spec: {"type": int, "default": spec.default, "metavar": "N"},
    "array": lambda spec: {"type": _csv, "default": spec.default, "metavar": "A,B,..."},
}


def _inject_defaults(o: OptionSet):
    o.bool("-V", "--verbose", "produce more verbose output")
    o.bool("-w", "--no-warn", "suppress warning messages")
    o.bool("--debug", "produce full backtraces on errors")


def build_option_set(define: Optional[Callable[[OptionSet], None]]) -> OptionSet:
    """Run a definition function and append the universal options."""
    o = OptionSet()
    o.separator("Options")
    if define is not None:
        define(o)
    o.separator("Common options")
    _inject_defaults(o)
    return o


def parse_options(argv: Sequence[str],
                  define: Optional[Callable[[OptionSet], None]] = None,
                  commands: Iterable[str] = (),
                  errors: bool = True,
                  prog: str = "kbsecret",
                  usage: Optional[str] = None,
                  stdout=None) -> Tuple[Options, List[str]]:
    """
    Parse leading and interspersed flags out of argv.

    Args:
        argv: raw tokens after the command name
        define: function that declares the command's options on an OptionSet
        commands: extra words printed by --introspect-flags (subcommands)
        errors: strict (raise UsageError) or lenient (ignore malformed input)
        prog: program name shown in help
        usage: usage line shown in help
        stdout: stream for --help / --introspect-flags output

    Returns:
        (Options, remaining tokens in their original order)
    """
    commands = list(commands)
    option_set = build_option_set(define)

    parser = _Parser(prog=prog, usage=usage, add_help=False, allow_abbrev=False)
    group = None
    for item in option_set.items:
        if isinstance(item, Separator):
            group = parser.add_argument_group(item.text)
            continue
        group.add_argument(*item.flags, dest=item.dest, help=item.help, **_KWARGS[item.kind](item))

    introspected = option_set.flags + ["-h", "--help", "--introspect-flags"] + commands
    group.add_argument("-h", "--help", action=_ExitAction, stream=stdout,
                       render=lambda: parser.format_help().rstrip("\n"),
                       help="show this help message")
    group.add_argument("--introspect-flags", action=_ExitAction, stream=stdout,
                       render=lambda: "\n".join(introspected),
                       help="dump recognized flags and subcommands")

    defaults = {spec.dest: spec.default for spec in option_set.options}
    try:
        namespace, remaining = parser.parse_known_args(list(argv))
    except UsageError:
        if errors:
            raise
        return Options(defaults), list(argv)

    remaining = _strip_terminator(remaining, strict=errors)
    return Options(vars(namespace)), remaining


def _strip_terminator(tokens: List[str], strict: bool) -> List[str]:
    """Drop the first "--" and, in strict mode, reject unknown flags before it."""
    if "--" in tokens:
        cut = tokens.index("--")
        head, tail = tokens[:cut], tokens[cut + 1:]
    else:
        head, tail = tokens, []

    if strict:
        for token in head:
            if token.startswith("-") and token != "-" and not _NEGATIVE_NUMBER.match(token):
                raise UsageError(f"unknown option `{token}'")
    return head + tail


# =============================================================================
# Trailing arguments
# =============================================================================

@dataclass(frozen=True)
class Slot:
    """A named positional binding."""
    name: str
    kind: str = "string"    # "string" | "integer"
    many: bool = False
    optional: bool = False

    def convert(self, token: str):
        if self.kind == "integer":
            try:
                return int(token)
            except ValueError:
                raise UsageError(f"{self.name} must be an integer, got `{token}'") from None
        return token


def parse_arguments(tokens: Sequence[str], slots: Sequence[Slot], errors: bool = True) -> Arguments:
    """
    Bind tokens to slots, left to right.

    A `many` slot takes as many tokens as it can while leaving one for each
    single slot after it.

    Strict mode raises UsageError on missing required or surplus tokens,
    and on conversion failures. Lenient mode binds what it can: missing
    slots are None (or [] for many), surplus tokens are dropped.
    """
    tokens = list(tokens)
    bound: Dict[str, Any] = {}
    pos = 0

    for index, slot in enumerate(slots):
        if slot.many:
            reserved = sum(1 for s in slots[index + 1:] if not s.many)
            end = max(pos, len(tokens) - reserved)
            taken = tokens[pos:end]
            pos = end
            if not taken and not slot.optional and errors:
                raise UsageError(f"missing argument: {slot.name}")
            bound[slot.name] = _convert_all(slot, taken, errors)
            continue

        if pos < len(tokens):
            bound[slot.name] = _convert(slot, tokens[pos], errors)
            pos += 1
        elif slot.optional or not errors:
            bound[slot.name] = None
        else:
            raise UsageError(f"missing argument: {slot.name}")

    if pos < len(tokens) and errors:
        surplus = " ".join(tokens[pos:])
        raise UsageError(f"unexpected argument(s): {surplus}")

    return Arguments(bound)


def _convert(slot: Slot, token: str, errors: bool):
    try:
        return slot.convert(token)
    except UsageError:
        if errors:
            raise
        return None


def _convert_all(slot: Slot, tokens: List[str], errors: bool) -> list:
    values = [_convert(slot, t, errors) for t in tokens]
    return [v for v in values if v is not None]

"""
CLI — Command helper, execution guard and dispatcher

Every built-in command follows the same shape:

    cli = CLI(argv, context, command="dump-fields", usage=USAGE)

    with cli.guard():
        cli.options(define)              # flags (plus the universal ones)
        cli.arguments([Slot("label")])   # what the flags left behind
        cli.ensure_session()             # label from --session -> Session

    with cli.guard():
        record = cli.session[cli.args.label]
        ...

Anything raised inside a guard is reported once, as

    Fatal: <Message>.

on the error stream, and the process exits with status 1. Guards nest;
only the outermost one reports.
"""

import getpass
import sys
from contextlib import contextmanager
from typing import Callable, Iterable, List, Optional, Sequence

from .config import Environment
from .context import Context
from .errors import UnknownCommandError, UsageError
from .generator import Generator, resolve_generator
from .parsing import Arguments, OptionSet, Options, Slot, parse_arguments, parse_options
from .records import RecordType, resolve_type
from .session import Session, resolve_session


DEFAULT_IFS = ":"

# Where ensure_session / ensure_type / ensure_generator read their value from
OPTION = "option"
ARGUMENT = "argument"


def capitalize(message: str) -> str:
    """Upper-case the first character only; labels keep their case."""
    return message[:1].upper() + message[1:]


class CLI:
    """Options, trailing arguments and resolved references for one command."""

    def __init__(self, argv: Sequence[str], context: Context,
                 command: str = "kbsecret", usage: Optional[str] = None):
        self._argv: List[str] = list(argv)
        self.context = context
        self.command = command
        self.usage = usage

        self.opts: Optional[Options] = None
        self.args: Optional[Arguments] = None
        self.session: Optional[Session] = None
        self.record_type: Optional[RecordType] = None
        self.generator: Optional[Generator] = None

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def options(self, define: Optional[Callable[[OptionSet], None]] = None,
                commands: Iterable[str] = (), errors: bool = True) -> Options:
        """
        Parse options, adding --verbose, --no-warn, --debug, --help and
        --introspect-flags.

        Args:
            define: declares the command's own options on an OptionSet
            commands: extra words for --introspect-flags (subcommands)
            errors: strict (UsageError) or lenient parsing
        """
        if self.opts is not None or self.args is not None:
            raise RuntimeError("options must be parsed once, before arguments")

        prog = "kbsecret" if self.command == "kbsecret" else f"kbsecret {self.command}"
        self.opts, self._argv = parse_options(
            self._argv, define,
            commands=commands,
            errors=errors,
            prog=prog,
            usage=self.usage,
            stdout=self.context.stdout,
        )
        if self.opts.get("debug"):
            self.context.debug = True
        return self.opts

    def arguments(self, slots: Sequence[Slot], errors: bool = True) -> Arguments:
        """Bind the tokens left over from options() to named slots."""
        if self.args is not None:
            raise RuntimeError("arguments already parsed")
        self.args = parse_arguments(self._argv, slots, errors=errors)
        return self.args

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _lookup(self, where: str, field: str):
        if where == OPTION:
            source = self.opts
        elif where == ARGUMENT:
            source = self.args
        else:
            raise ValueError(f"where must be '{OPTION}' or '{ARGUMENT}', not {where!r}")

        if source is None:
            raise RuntimeError(f"{where}s must be parsed before reading `{field}`")
        return source.get(field)

    def ensure_session(self, where: str = OPTION) -> Session:
        """
        Resolve the `session` option or argument to a configured Session.

        Raises:
            SessionUnknownError: the label is not configured
        """
        label = self._lookup(where, "session")
        self.session = resolve_session(self.context.config_manager, label)
        return self.session

    def ensure_type(self, where: str = OPTION) -> RecordType:
        """
        Resolve the `type` option or argument (unique prefixes allowed).

        Raises:
            RecordTypeUnknownError: no such type, or an ambiguous prefix
        """
        self.record_type = resolve_type(self._lookup(where, "type"))
        return self.record_type

    def ensure_generator(self, where: str = OPTION) -> Generator:
        """
        Resolve the `generator` option or argument to a configured profile.

        Raises:
            GeneratorUnknownError: no profile with that exact name
        """
        name = self._lookup(where, "generator")
        self.generator = resolve_generator(self.context.config_manager, name)
        return self.generator

    # -------------------------------------------------------------------------
    # Guard
    # -------------------------------------------------------------------------

    @contextmanager
    def guard(self):
        """
        Report any exception raised in the block as a fatal error.

        Nested guards re-raise; the outermost one prints the optional
        traceback (--debug) and the Fatal line, then exits with status 1.
        """
        context = self.context
        context.guard_depth += 1
        try:
            yield self
        except Exception as e:
            if context.guard_depth > 1:
                raise
            if context.debug:
                context.messages.traceback()
            message = str(e) or type(e).__name__
            self.die(f"{capitalize(message.rstrip('.'))}.")
        finally:
            context.guard_depth -= 1

    # -------------------------------------------------------------------------
    # Messages and input
    # -------------------------------------------------------------------------

    def die(self, message: str):
        """Print a Fatal line and exit 1. Does not return."""
        self.context.messages.fatal(message)
        raise SystemExit(1)

    def info(self, message: str):
        self.context.messages.info(message)

    def verbose(self, message: str):
        """Info line, only with --verbose."""
        if self.opts is not None and self.opts.get("verbose"):
            self.info(message)

    def warn(self, message: str):
        """Warning line, unless --no-warn."""
        if self.opts is not None and self.opts.get("no_warn"):
            return
        self.context.messages.warning(message)

    def bye(self, message: str):
        """Info line, then exit 0. Does not return."""
        self.info(message)
        raise SystemExit(0)

    @property
    def ifs(self) -> str:
        """Default field separator: IFS from the environment, else ':'."""
        return self.context.env.ifs or DEFAULT_IFS

    def prompt(self, question: str, echo: bool = True) -> str:
        """
        Ask the user for a line of input.

        With echo=False and an interactive stdin, input is read without
        echo. Otherwise the question is written and a line read verbatim.
        """
        stdin = self.context.stdin
        if not echo and stdin.isatty():
            return getpass.getpass(f"{question} ")

        print(f"{question} ", end="", file=self.context.stdout, flush=True)
        line = stdin.readline()
        if not line:
            raise UsageError("unexpected end of input")
        return line.rstrip("\r\n")


def dispatch(context: Context, argv: Sequence[str]):
    """
    Resolve and run one kbsecret command.

    1. first token is the command ("help" if none), normalized once
    2. user aliases expand it; configured default arguments are prepended
    3. built-ins run in-process, kbsecret-<command> executables replace
       this process, anything else is fatal
    """
    from . import commands

    argv = list(argv)
    top = CLI([], context)

    with top.guard():
        migration = context.config_manager.migrate_legacy()
        if migration.removed and migration.copied:
            top.info(f"Migrated legacy configuration from {context.env.legacy_config_dir}")
        if migration.conflicts:
            top.warn(
                f"Kept legacy configuration in {context.env.legacy_config_dir}; "
                f"conflicting file(s): {', '.join(map(str, migration.conflicts))}"
            )
        if migration.failed:
            top.warn(f"Could not verify migrated file(s): {', '.join(map(str, migration.failed))}")

        command = commands.normalize(argv[0] if argv else "help")
        expanded = context.config_manager.unalias(command)
        command, rest = expanded[0], expanded[1:] + argv[1:]
        rest = context.config_manager.command_args(command) + rest

        kind = commands.classify(command, context.env.search_path)
        if kind is commands.Classification.INTERNAL:
            return commands.run(command, context, rest)
        if kind is commands.Classification.EXTERNAL:
            return commands.exec_external(command, rest, context.env.search_path)
        raise UnknownCommandError(command)


def main(argv: Optional[Sequence[str]] = None):
    """Entry point for the kbsecret executable."""
    context = Context(Environment.from_environ())

    try:
        dispatch(context, sys.argv[1:] if argv is None else argv)
    except KeyboardInterrupt:
        print("\nAborted by user.", file=context.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()

"""
Tests for CLI — command helper and execution guard

These tests validate:
- The guard reports exactly one Fatal line and exits 1
- Nested guards report once; --debug adds a traceback
- ensure_session / ensure_type / ensure_generator read options or arguments
- Message helpers honour --verbose and --no-warn
"""

from unittest.mock import patch

import pytest

from kbsecret.cli import ARGUMENT, CLI, capitalize
from kbsecret.errors import (
    GeneratorUnknownError, RecordTypeUnknownError, SessionUnknownError, UsageError,
)
from kbsecret.parsing import Slot


def session_option(o):
    o.string("-s", "--session", "the session to use", default="default")


def fatal_lines(context):
    return [l for l in context.stderr.getvalue().splitlines() if l.startswith("Fatal:")]


class TestCapitalize:
    """Message capitalization."""

    def test_first_character_only(self):
        assert capitalize("unknown session: `work`") == "Unknown session: `work`"

    def test_rest_untouched(self):
        assert capitalize("no such record: `Gmail`") == "No such record: `Gmail`"

    def test_empty(self):
        assert capitalize("") == ""


class TestGuard:
    """Execution guard."""

    def test_passes_through_on_success(self, kb_factory):
        context = kb_factory.create_context()
        cli = CLI([], context)
        with cli.guard():
            value = 42
        assert value == 42
        assert context.stderr.getvalue() == ""
        assert context.guard_depth == 0

    def test_reports_once_and_exits_1(self, kb_factory):
        context = kb_factory.create_context()
        cli = CLI([], context)
        with pytest.raises(SystemExit) as exc:
            with cli.guard():
                raise SessionUnknownError("work")
        assert exc.value.code == 1
        assert fatal_lines(context) == ["Fatal: Unknown session: `work`."]

    def test_trailing_period_not_doubled(self, kb_factory):
        context = kb_factory.create_context()
        cli = CLI([], context)
        with pytest.raises(SystemExit):
            with cli.guard():
                raise UsageError("bad input.")
        assert fatal_lines(context) == ["Fatal: Bad input."]

    def test_nested_guards_report_once(self, kb_factory):
        context = kb_factory.create_context()
        cli = CLI([], context)
        with pytest.raises(SystemExit) as exc:
            with cli.guard():
                with cli.guard():
                    raise UsageError("inner failure")
        assert exc.value.code == 1
        assert fatal_lines(context) == ["Fatal: Inner failure."]
        assert context.guard_depth == 0

    def test_separate_clis_share_nesting(self, kb_factory):
        """A command's guard inside the dispatcher's guard reports once."""
        context = kb_factory.create_context()
        outer, inner = CLI([], context), CLI([], context)
        with pytest.raises(SystemExit):
            with outer.guard():
                with inner.guard():
                    raise UsageError("boom")
        assert len(fatal_lines(context)) == 1

    def test_system_exit_passes_through(self, kb_factory):
        """SystemExit (e.g. from --help) is not reported as fatal."""
        context = kb_factory.create_context()
        cli = CLI([], context)
        with pytest.raises(SystemExit) as exc:
            with cli.guard():
                raise SystemExit(0)
        assert exc.value.code == 0
        assert context.stderr.getvalue() == ""

    def test_no_traceback_without_debug(self, kb_factory):
        context = kb_factory.create_context()
        cli = CLI([], context)
        with pytest.raises(SystemExit):
            with cli.guard():
                raise UsageError("boom")
        assert "Traceback" not in context.stderr.getvalue()

    def test_debug_prints_traceback(self, kb_factory):
        context = kb_factory.create_context()
        cli = CLI(["--debug"], context)
        with pytest.raises(SystemExit):
            with cli.guard():
                cli.options()
                raise UsageError("boom")
        err = context.stderr.getvalue()
        assert "Traceback" in err
        assert err.rstrip().endswith("Fatal: Boom.")

    def test_usage_error_from_options_is_fatal(self, kb_factory):
        context = kb_factory.create_context()
        cli = CLI(["--bogus"], context)
        with pytest.raises(SystemExit) as exc:
            with cli.guard():
                cli.options()
        assert exc.value.code == 1
        assert "--bogus" in fatal_lines(context)[0]


class TestParsingOrder:
    """options() before arguments()."""

    def test_arguments_see_leftovers(self, kb_factory):
        cli = CLI(["gmail", "-s", "work"], kb_factory.create_context())
        cli.options(session_option)
        cli.arguments([Slot("label")])
        assert cli.opts.session == "work"
        assert cli.args.label == "gmail"

    def test_options_after_arguments_rejected(self, kb_factory):
        cli = CLI([], kb_factory.create_context())
        cli.arguments([])
        with pytest.raises(RuntimeError):
            cli.options()

    def test_options_twice_rejected(self, kb_factory):
        cli = CLI([], kb_factory.create_context())
        cli.options()
        with pytest.raises(RuntimeError):
            cli.options()

    def test_ensure_before_parsing_rejected(self, kb_factory):
        cli = CLI([], kb_factory.create_context())
        with pytest.raises(RuntimeError):
            cli.ensure_session()

    def test_debug_flag_sets_context(self, kb_factory):
        context = kb_factory.create_context()
        CLI(["--debug"], context).options()
        assert context.debug is True


class TestEnsure:
    """Reference validators."""

    def test_session_from_option(self, kb_factory):
        kb_factory.add_session("work", users=["alice", "bob"])
        cli = CLI(["-s", "work"], kb_factory.create_context())
        cli.options(session_option)
        session = cli.ensure_session()
        assert session.label == "work"
        assert cli.session is session

    def test_session_default(self, kb_factory):
        cli = CLI([], kb_factory.create_context())
        cli.options(session_option)
        assert cli.ensure_session().label == "default"

    def test_session_from_argument(self, kb_factory):
        kb_factory.add_session("work")
        cli = CLI(["rm", "work"], kb_factory.create_context())
        cli.options()
        cli.arguments([Slot("subcommand"), Slot("session")])
        assert cli.ensure_session(ARGUMENT).label == "work"

    def test_unknown_session(self, kb_factory):
        cli = CLI(["-s", "nope"], kb_factory.create_context())
        cli.options(session_option)
        with pytest.raises(SessionUnknownError) as exc:
            cli.ensure_session()
        assert str(exc.value) == "unknown session: `nope`"

    def test_type_prefix(self, kb_factory):
        cli = CLI(["log"], kb_factory.create_context())
        cli.options()
        cli.arguments([Slot("type")])
        assert cli.ensure_type(ARGUMENT).name == "login"

    def test_type_unknown(self, kb_factory):
        cli = CLI(["password"], kb_factory.create_context())
        cli.options()
        cli.arguments([Slot("type")])
        with pytest.raises(RecordTypeUnknownError):
            cli.ensure_type(ARGUMENT)

    def test_generator_exact_name(self, kb_factory):
        cli = CLI(["-g", "default"], kb_factory.create_context())
        cli.options(lambda o: o.string("-g", "--generator", "profile", default="default"))
        assert cli.ensure_generator().format == "hex"

    def test_generator_prefix_not_accepted(self, kb_factory):
        cli = CLI(["-g", "def"], kb_factory.create_context())
        cli.options(lambda o: o.string("-g", "--generator", "profile", default="default"))
        with pytest.raises(GeneratorUnknownError):
            cli.ensure_generator()

    def test_bad_where(self, kb_factory):
        cli = CLI([], kb_factory.create_context())
        cli.options()
        with pytest.raises(ValueError):
            cli.ensure_session("environment")


class TestMessages:
    """Info, verbose, warn and prompt."""

    def test_warn(self, kb_factory):
        context = kb_factory.create_context()
        cli = CLI([], context)
        cli.options()
        cli.warn("careful")
        assert context.stderr.getvalue() == "Warning: careful\n"

    def test_no_warn_suppresses(self, kb_factory):
        context = kb_factory.create_context()
        cli = CLI(["--no-warn"], context)
        cli.options()
        cli.warn("careful")
        assert context.stderr.getvalue() == ""

    def test_verbose_only_when_requested(self, kb_factory):
        context = kb_factory.create_context()
        quiet = CLI([], context)
        quiet.options()
        quiet.verbose("hidden")
        loud = CLI(["-V"], context)
        loud.options()
        loud.verbose("shown")
        assert context.stderr.getvalue() == "Info: shown\n"

    def test_bye_exits_zero(self, kb_factory):
        context = kb_factory.create_context()
        with pytest.raises(SystemExit) as exc:
            CLI([], context).bye("done")
        assert exc.value.code == 0
        assert "Info: done" in context.stderr.getvalue()

    def test_ifs_default(self, kb_factory):
        assert CLI([], kb_factory.create_context()).ifs == ":"

    def test_ifs_from_environment(self, kb_factory):
        kb_factory.with_env(ifs="~")
        assert CLI([], kb_factory.create_context()).ifs == "~"

    def test_prompt_reads_line(self, kb_factory):
        context = kb_factory.create_context(stdin="bob\n")
        assert CLI([], context).prompt("Username?") == "bob"
        assert context.stdout.getvalue() == "Username? "

    def test_prompt_end_of_input(self, kb_factory):
        context = kb_factory.create_context(stdin="")
        with pytest.raises(UsageError):
            CLI([], context).prompt("Username?")

    def test_prompt_without_echo_on_tty(self, kb_factory):
        context = kb_factory.create_context()
        context.stdin.isatty = lambda: True
        with patch("kbsecret.cli.getpass.getpass", return_value="hunter2") as getpass:
            assert CLI([], context).prompt("Password?", echo=False) == "hunter2"
        getpass.assert_called_once_with("Password? ")

    def test_prompt_without_echo_piped(self, kb_factory):
        """Non-interactive stdin is read directly even for secrets."""
        context = kb_factory.create_context(stdin="hunter2\n")
        with patch("kbsecret.cli.getpass.getpass") as getpass:
            assert CLI([], context).prompt("Password?", echo=False) == "hunter2"
        getpass.assert_not_called()

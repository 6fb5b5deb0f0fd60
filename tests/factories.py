"""
Test Data Factory — Isolated kbsecret environments for command tests

Builds everything a command needs without touching the real home
directory, the real KBFS mount or the real keybase service:

- a temporary mount directory standing in for /keybase
- a temporary config directory (config.yml with a `default` session)
- an Environment snapshot pointing at both, with PATH = a temp bin dir
- a FakeKeybase standing in for the keybase executable
- in-memory stdin/stdout/stderr

Usage:
    def test_something(kb_factory):
        kb_factory.add_record("default", "login", "gmail", "bob", "hunter2")
        result = kb_factory.run("dump-fields", "gmail")
        assert result.code == 0
"""

import io
import os
from dataclasses import replace
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence

from kbsecret.cli import dispatch
from kbsecret.config import ConfigManager, Environment, SessionConfig
from kbsecret.context import Context
from kbsecret.records import resolve_type
from kbsecret.session import Session, resolve_session


class FakeKeybase:
    """In-memory stand-in for KeybaseClient."""

    def __init__(self, user: str = "alice", teams: Sequence[str] = ()):
        self.user = user
        self._teams = list(teams)
        self.created: List[str] = []
        self.messages: List[tuple] = []

    def current_user(self) -> str:
        return self.user

    def teams(self) -> List[str]:
        return list(self._teams)

    def create_team(self, team: str):
        self.created.append(team)
        self._teams.append(team)

    def send_message(self, users, message: str):
        self.messages.append((list(users), message))


class RunResult(NamedTuple):
    code: int
    out: str
    err: str


class KBSecretTestFactory:
    """
    Factory for isolated kbsecret environments.

    All state lives under pytest's tmp_path.
    """

    def __init__(self, tmp_path: Path, user: str = "alice"):
        self.tmp_path = tmp_path
        self.mount = tmp_path / "keybase"
        self.home = tmp_path / "home"
        self.bin_dir = tmp_path / "bin"
        for d in (self.mount, self.home, self.bin_dir):
            d.mkdir(parents=True, exist_ok=True)

        self.keybase = FakeKeybase(user=user)
        self.env = Environment(
            ifs=None,
            no_color=True,
            path=str(self.bin_dir),
            config_home=self.home / ".config",
            legacy_config_dir=self.home / ".kbsecret",
        )
        self.config_manager = ConfigManager(self.env, self.keybase)

        config = self.config_manager.load()
        config.mount = str(self.mount)
        self.config_manager.save(config)

    # -------------------------------------------------------------------------
    # Setup helpers
    # -------------------------------------------------------------------------

    def with_env(self, **changes) -> Environment:
        """Replace fields of the environment snapshot (e.g. ifs="~")."""
        self.env = replace(self.env, **changes)
        self.config_manager.env = self.env
        return self.env

    def add_session(self, label: str, users: Optional[List[str]] = None,
                    team: Optional[str] = None, root: Optional[str] = None) -> Session:
        if team:
            config = SessionConfig(root=root or label, team=team)
        else:
            config = SessionConfig(root=root or label, users=users or [self.keybase.user])
        self.config_manager.configure_session(label, config)
        return resolve_session(self.config_manager, label)

    def session(self, label: str = "default") -> Session:
        return resolve_session(self.config_manager, label)

    def add_record(self, session_label: str, type_name: str, label: str, *values: str):
        session = self.session(session_label)
        return session.add_record(resolve_type(type_name), label, list(values))

    def add_external(self, name: str, executable: bool = True) -> Path:
        """Drop a kbsecret-<name> script into the bin directory."""
        path = self.bin_dir / f"kbsecret-{name}"
        path.write_text("#!/bin/sh\necho external\n")
        os.chmod(path, 0o755 if executable else 0o644)
        return path

    # -------------------------------------------------------------------------
    # Running
    # -------------------------------------------------------------------------

    def create_context(self, stdin: str = "") -> Context:
        return Context(
            self.env,
            keybase=self.keybase,
            config_manager=self.config_manager,
            stdin=io.StringIO(stdin),
            stdout=io.StringIO(),
            stderr=io.StringIO(),
        )

    def run(self, *argv: str, stdin: str = "") -> RunResult:
        """Dispatch a full command line; SystemExit becomes the exit code."""
        context = self.create_context(stdin)
        code = 0
        try:
            dispatch(context, list(argv))
        except SystemExit as e:
            code = e.code if isinstance(e.code, int) else (0 if e.code is None else 1)
        return RunResult(code, context.stdout.getvalue(), context.stderr.getvalue())

"""
Keybase — Adapter for the keybase team/user service

Everything goes through the `keybase` executable. Failures of any kind
(missing binary, non-zero exit, unparseable output) become BackendError
carrying the service's own message.
"""

import json
import subprocess
from typing import List, Optional, Sequence

from .errors import BackendError


class KeybaseClient:
    """Runs keybase subcommands and decodes their output."""

    def __init__(self, executable: str = "keybase"):
        self.executable = executable
        self._user: Optional[str] = None

    def _run(self, *args: str) -> str:
        try:
            proc = subprocess.run(
                [self.executable, *args],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise BackendError(f"could not run {self.executable}: {e.strerror or e}") from e

        if proc.returncode != 0:
            message = (proc.stderr or proc.stdout).strip() or f"exit status {proc.returncode}"
            raise BackendError(f"{self.executable} {args[0]} failed: {message}")
        return proc.stdout

    def _run_json(self, *args: str):
        output = self._run(*args)
        try:
            return json.loads(output)
        except ValueError as e:
            raise BackendError(f"{self.executable} {args[0]} returned malformed JSON") from e

    def current_user(self) -> str:
        """Username of the logged-in keybase user."""
        if self._user is None:
            status = self._run_json("status", "--json")
            user = status.get("Username") if isinstance(status, dict) else None
            if not user:
                raise BackendError("keybase is not logged in")
            self._user = user
        return self._user

    def teams(self) -> List[str]:
        """Fully-qualified names of the teams the current user belongs to."""
        memberships = self._run_json("team", "list-memberships", "--json")
        if not isinstance(memberships, dict):
            return []
        teams = memberships.get("teams") or []
        return [t["fq_name"] for t in teams if "fq_name" in t]

    def create_team(self, team: str):
        self._run("team", "create", team)

    def send_message(self, users: Sequence[str], message: str):
        self._run("chat", "send", ",".join(users), message)

"""
Errors — Failure taxonomy for kbsecret

Components raise; they never print or exit.
The execution guard (cli.CLI.guard) is the single point that turns any
of these into a one-line fatal message and a non-zero exit status.

  UsageError                malformed options or trailing arguments
  UnresolvedReferenceError  session / record type / generator does not resolve
  UnknownCommandError       neither a built-in nor a kbsecret-<name> executable
  LaunchError               external command could not be executed
  BackendError              the filesystem or the keybase service failed
"""


class KBSecretError(Exception):
    """Base class for all kbsecret failures."""


class UsageError(KBSecretError):
    """Malformed options or arguments."""


class UnresolvedReferenceError(KBSecretError):
    """A named session, record type or generator does not resolve."""

    kind = "reference"

    def __init__(self, name, detail: str = None):
        self.name = name
        message = f"unknown {self.kind}: `{name}`"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class SessionUnknownError(UnresolvedReferenceError):
    kind = "session"


class RecordTypeUnknownError(UnresolvedReferenceError):
    kind = "record type"


class GeneratorUnknownError(UnresolvedReferenceError):
    kind = "generator"


class UnknownCommandError(KBSecretError):
    """Requested command is neither internal nor external."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Unknown command: `{command}`.")


class LaunchError(KBSecretError):
    """An external command resolved but could not be executed."""


class BackendError(KBSecretError):
    """Failure surfaced from KBFS or the keybase service."""


class RecordError(KBSecretError):
    """Missing record, label collision, malformed record document."""


class ConfigError(KBSecretError):
    """Malformed or invalid configuration."""

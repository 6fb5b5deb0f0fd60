"""
BaseCommand — Shared foundation for all built-in commands

Provides access to the invocation's resources via composition.
Commands receive the Context and reach its resources through properties.
"""

from typing import Sequence, TYPE_CHECKING

from ..cli import CLI
from ..presentation import safe_print

if TYPE_CHECKING:
    from ..context import Context


class BaseCommand:
    """
    Base class for built-in commands.

    Subclasses set COMMAND_NAME and USAGE, and implement run(argv).
    """

    COMMAND_NAME = "kbsecret"
    USAGE = None

    def __init__(self, context: 'Context'):
        self._context = context

    def cli(self, argv: Sequence[str]) -> CLI:
        """Fresh CLI helper for this command's arguments."""
        return CLI(argv, self._context, command=self.COMMAND_NAME, usage=self.USAGE)

    def run(self, argv: Sequence[str]):
        raise NotImplementedError

    def out(self, text: str = ""):
        """Print a line of (possibly user-supplied) text to stdout."""
        safe_print(text, file=self.stdout)

    # -------------------------------------------------------------------------
    # Resources (convenience properties)
    # -------------------------------------------------------------------------

    @property
    def context(self) -> 'Context':
        return self._context

    @property
    def env(self):
        """Environment snapshot taken at startup."""
        return self._context.env

    @property
    def config_manager(self):
        return self._context.config_manager

    @property
    def keybase(self):
        """Keybase team/user service client."""
        return self._context.keybase

    @property
    def stdin(self):
        return self._context.stdin

    @property
    def stdout(self):
        return self._context.stdout

"""
VersionCommand — Print the kbsecret version
"""

from .base import BaseCommand
from .. import __version__


COMMAND_NAME = "version"
SUMMARY = "print the kbsecret version"


class VersionCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret version [options]"

    def run(self, argv):
        cli = self.cli(argv)
        with cli.guard():
            cli.options()
            cli.arguments([])

        self.out(f"kbsecret version {__version__}")


def handle(context, argv):
    """Handle version command dispatch."""
    return VersionCommand(context).run(argv)

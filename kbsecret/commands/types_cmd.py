"""
TypesCommand — List record types
"""

from .base import BaseCommand
from ..records import record_types


COMMAND_NAME = "types"
SUMMARY = "list available record types"


class TypesCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret types [options]"

    def run(self, argv):
        cli = self.cli(argv)
        with cli.guard():
            cli.options()
            cli.arguments([])

        self.out("\n".join(record_types()))


def handle(context, argv):
    """Handle types command dispatch."""
    return TypesCommand(context).run(argv)

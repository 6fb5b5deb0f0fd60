"""
CommandsCommand — List available commands

Built-in commands come from the registry; external commands are the
kbsecret-<name> executables found on PATH.
"""

from . import external_command_names, internal_command_names
from .base import BaseCommand


COMMAND_NAME = "commands"
SUMMARY = "list available commands"


class CommandsCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret commands [options]"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.bool("-e", "--external-only", "list only external commands")
            o.bool("-i", "--internal-only", "list only internal commands")

        with cli.guard():
            cli.options(define)
            cli.arguments([])

        names = self.command_names(cli.opts.external_only, cli.opts.internal_only)
        if names:
            self.out("\n".join(names))

    def command_names(self, external_only: bool = False, internal_only: bool = False):
        if external_only:
            return external_command_names(self.env.search_path)
        if internal_only:
            return internal_command_names()
        return internal_command_names() + external_command_names(self.env.search_path)


def handle(context, argv):
    """Handle commands command dispatch."""
    return CommandsCommand(context).run(argv)

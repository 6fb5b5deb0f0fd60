"""
HelpCommand — General usage, or the help of one command

  kbsecret help              usage and the list of commands
  kbsecret help <command>    that command's --help (built-in or external)
"""

from . import (
    exec_external, external_command_names, is_external, is_internal, run, summaries,
)
from .base import BaseCommand
from ..content import HELP_TEXT, EXTERNAL_SECTION
from ..errors import UnknownCommandError
from ..parsing import Slot


COMMAND_NAME = "help"
SUMMARY = "show usage for kbsecret or one of its commands"


class HelpCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret help [options] [command]"

    def run(self, argv):
        cli = self.cli(argv)
        search_path = self.env.search_path

        with cli.guard():
            names = list(summaries()) + external_command_names(search_path)
            cli.options(commands=names, errors=False)
            cli.arguments([Slot("command", optional=True)], errors=False)

        command = cli.args.command
        with cli.guard():
            if command is None:
                self.out(self.general_help().rstrip("\n"))
            elif is_internal(command):
                run(command, self.context, ["--help"])
            elif is_external(command, search_path):
                exec_external(command, ["--help"], search_path)
            else:
                raise UnknownCommandError(command)

    def general_help(self) -> str:
        described = summaries()
        width = max(len(name) for name in described)
        lines = [f"  {name.ljust(width)}  {summary}" for name, summary in described.items()]
        text = HELP_TEXT.format(commands="\n".join(lines))

        external = external_command_names(self.env.search_path)
        if external:
            text += EXTERNAL_SECTION.format(commands="\n".join(f"  {n}" for n in external))
        return text


def handle(context, argv):
    """Handle help command dispatch."""
    return HelpCommand(context).run(argv)

"""
GeneratorCommand — Create and remove secret generator profiles

  kbsecret generator new [-F format] [-l length] [-f] <generator>
  kbsecret generator rm <generator>
"""

from .base import BaseCommand
from ..cli import ARGUMENT
from ..config import GeneratorConfig
from ..errors import ConfigError, UsageError
from ..parsing import Slot


COMMAND_NAME = "generator"
SUMMARY = "create or remove secret generators"
SUBCOMMANDS = ("new", "rm")


class GeneratorCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret generator [options] <new|rm> <generator>"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.string("-F", "--format", "the format of the secrets generated", default="hex")
            o.integer("-l", "--length", "the length, in characters, of the secrets generated",
                      default=16)
            o.bool("-f", "--force", "force generator creation (ignore overwrite)")

        with cli.guard():
            cli.options(define, commands=SUBCOMMANDS)
            cli.arguments([Slot("subcommand"), Slot("generator")])
            if cli.args.subcommand not in SUBCOMMANDS:
                raise UsageError(f"unknown subcommand: `{cli.args.subcommand}` (expected new or rm)")
            if cli.args.subcommand == "rm":
                cli.ensure_generator(ARGUMENT)

        with cli.guard():
            label = cli.args.generator
            if cli.args.subcommand == "rm":
                self.config_manager.deconfigure_generator(label)
                cli.verbose(f"Removed generator '{label}'.")
                return

            if self.config_manager.has_generator(label) and not cli.opts.force:
                raise ConfigError(f"refusing to overwrite generator `{label}` without --force")
            profile = GeneratorConfig(format=cli.opts.format, length=cli.opts.length)
            self.config_manager.configure_generator(label, profile)
            cli.verbose(f"Configured generator '{label}'.")


def handle(context, argv):
    """Handle generator command dispatch."""
    return GeneratorCommand(context).run(argv)

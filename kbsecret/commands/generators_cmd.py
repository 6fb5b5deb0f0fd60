"""
GeneratorsCommand — List configured secret generators
"""

from .base import BaseCommand


COMMAND_NAME = "generators"
SUMMARY = "list configured secret generators"


class GeneratorsCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret generators [options]"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.bool("-a", "--show-all", "show each generator in depth (i.e. metadata)")

        with cli.guard():
            cli.options(define)
            cli.arguments([])

        with cli.guard():
            for label in self.config_manager.generator_labels():
                self.out(label)
                if cli.opts.show_all:
                    profile = self.config_manager.generator(label)
                    self.out(f"\tFormat: {profile.format}")
                    self.out(f"\tLength: {profile.length}")


def handle(context, argv):
    """Handle generators command dispatch."""
    return GeneratorsCommand(context).run(argv)

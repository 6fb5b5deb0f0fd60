"""
EnvCommand — Print environment records as shell assignments

  $ eval "$(kbsecret env -s work api-key)"
"""

import shlex

from .base import BaseCommand
from ..parsing import Slot


COMMAND_NAME = "env"
SUMMARY = "print environment records as shell assignments"


class EnvCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret env [options] <record [record ...]>"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.string("-s", "--session", "the session to search in", default="default")
            o.bool("-a", "--all", "retrieve all environment records, not just listed ones")
            o.bool("-v", "--value-only", "print only the environment value, not the key")
            o.bool("-n", "--no-export", "print only VAR=val keypairs without `export`")

        with cli.guard():
            cli.options(define)
            cli.arguments([Slot("labels", many=True, optional=True)])
            cli.ensure_session()

        with cli.guard():
            records = cli.session.records("environment")
            if not cli.opts.all:
                wanted = set(cli.args.labels)
                records = [r for r in records if r.label in wanted]

            for record in records:
                variable = record.data.get("variable", "")
                value = record.data.get("value", "")
                if cli.opts.value_only:
                    self.out(value)
                elif cli.opts.no_export:
                    self.out(f"{variable}={shlex.quote(value)}")
                else:
                    self.out(f"export {variable}={shlex.quote(value)}")


def handle(context, argv):
    """Handle env command dispatch."""
    return EnvCommand(context).run(argv)

"""
ListCommand — List the records in a session
"""

from datetime import datetime

from .base import BaseCommand


COMMAND_NAME = "list"
SUMMARY = "list records"


class ListCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret list [options]"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.string("-s", "--session", "the session to list from", default="default")
            o.string("-t", "--type", "the type of secrets to list")
            o.bool("-a", "--show-all", "show everything in each secret (i.e. metadata)")

        with cli.guard():
            cli.options(define)
            cli.arguments([])
            cli.ensure_session()
            if cli.opts.type:
                cli.ensure_type()

        with cli.guard():
            type_name = cli.record_type.name if cli.record_type else None
            for record in cli.session.records(type_name):
                self.out(record.label)
                if not cli.opts.show_all:
                    continue
                changed = datetime.fromtimestamp(record.timestamp).isoformat(sep=" ")
                self.out(f"\tType: {record.type}")
                self.out(f"\tLast changed: {changed}")
                self.out(f"\tRaw data: {dict(record.fields())}")


def handle(context, argv):
    """Handle list command dispatch."""
    return ListCommand(context).run(argv)

"""
RmCommand — Delete records from a session
"""

from .base import BaseCommand
from ..errors import RecordError
from ..parsing import Slot


COMMAND_NAME = "rm"
SUMMARY = "delete records"


class RmCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret rm [options] <record [record ...]>"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.string("-s", "--session", "the session containing the record", default="default")
            o.bool("-i", "--interactive", "ask for confirmation before deleting")

        with cli.guard():
            cli.options(define)
            cli.arguments([Slot("labels", many=True)])
            cli.ensure_session()

        with cli.guard():
            session = cli.session
            labels = [label for label in cli.args.labels if session.has_record(label)]
            if not labels:
                raise RecordError("no such record(s)")

            missing = [label for label in cli.args.labels if label not in labels]
            if missing:
                cli.warn(f"Skipping missing record(s): {', '.join(missing)}")

            if cli.opts.interactive:
                answer = cli.prompt(f"Delete '{', '.join(labels)}'? (y/N)")
                if answer.strip().lower() not in ("y", "yes"):
                    return

            for label in labels:
                session.delete_record(label)
                cli.verbose(f"Deleted '{label}'.")


def handle(context, argv):
    """Handle rm command dispatch."""
    return RmCommand(context).run(argv)

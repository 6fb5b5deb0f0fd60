"""
CpCommand — Copy (or move) records between sessions
"""

from .base import BaseCommand
from ..errors import RecordError, UsageError
from ..parsing import Slot
from ..session import resolve_session


COMMAND_NAME = "cp"
SUMMARY = "copy records between sessions"


class CpCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret cp [options] <source> <destination> <record [record ...]>"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.bool("-f", "--force", "force copying (ignore overwrites, etc.)")
            o.bool("-m", "--move", "delete the record after copying")

        with cli.guard():
            cli.options(define)
            cli.arguments([Slot("source"), Slot("destination"), Slot("labels", many=True)])
            source = resolve_session(self.config_manager, cli.args.source)
            destination = resolve_session(self.config_manager, cli.args.destination)
            if source.path == destination.path:
                raise UsageError("source and destination are the same session")

        with cli.guard():
            records = []
            for label in cli.args.labels:
                record = source.get(label)
                if record is None:
                    raise RecordError(f"no such record `{label}` in session `{source.label}`")
                records.append(record)

            for record in records:
                destination.import_record(record, overwrite=cli.opts.force)
                if cli.opts.move:
                    source.delete_record(record.label)
                cli.verbose(f"{'Moved' if cli.opts.move else 'Copied'} '{record.label}' "
                            f"to '{destination.label}'.")


def handle(context, argv):
    """Handle cp command dispatch."""
    return CpCommand(context).run(argv)

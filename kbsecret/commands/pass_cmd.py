"""
PassCommand — Print the password of a login record
"""

from .base import BaseCommand
from ..errors import RecordError
from ..parsing import Slot


COMMAND_NAME = "pass"
SUMMARY = "print the password of a login record"


class PassCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret pass [options] <record>"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.string("-s", "--session", "the session containing the record", default="default")

        with cli.guard():
            cli.options(define)
            cli.arguments([Slot("label")])
            cli.ensure_session()

        with cli.guard():
            record = cli.session.get(cli.args.label)
            if record is None or record.type != "login":
                raise RecordError(f"no such login record `{cli.args.label}`")
            self.out(record.data.get("password", ""))


def handle(context, argv):
    """Handle pass command dispatch."""
    return PassCommand(context).run(argv)

"""
DumpFieldsCommand — Print every field of a record

  kbsecret dump-fields -s work gmail
  username: bob@gmail.com
  password: pleasedonthackme

  kbsecret dump-fields -xi "~" gmail
  username~bob@gmail.com
  password~pleasedonthackme

Fields are printed in the record type's field order.
"""

from .base import BaseCommand
from ..errors import RecordError
from ..parsing import Slot


COMMAND_NAME = "dump-fields"
SUMMARY = "dump all fields of a record"


class DumpFieldsCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret dump-fields [options] <record>"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.string("-s", "--session", "the session containing the record", default="default")
            o.bool("-x", "--terse", "output in field<sep>value format")
            o.string("-i", "--ifs", "separate terse pairs with this string", default=cli.ifs)

        with cli.guard():
            cli.options(define)
            cli.arguments([Slot("label")])
            cli.ensure_session()

        with cli.guard():
            record = cli.session.get(cli.args.label)
            if record is None:
                raise RecordError(f"no such record `{cli.args.label}`")

            for field, value in record.fields():
                if cli.opts.terse:
                    self.out(f"{field}{cli.opts.ifs}{value}")
                else:
                    self.out(f"{field}: {value}")


def handle(context, argv):
    """Handle dump-fields command dispatch."""
    return DumpFieldsCommand(context).run(argv)

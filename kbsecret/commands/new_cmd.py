"""
NewCommand — Create a record

Field values come from one of three places:
  --args      the trailing arguments, in field order
  --terse     one line on stdin, fields joined by the separator
  (default)   interactive prompts; sensitive fields are read without echo,
              or generated with --generate
"""

from .base import BaseCommand
from ..cli import ARGUMENT
from ..errors import UsageError
from ..parsing import Slot


COMMAND_NAME = "new"
SUMMARY = "create a new record"


class NewCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret new [options] <type> <label> [fields...]"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.string("-s", "--session", "the session to contain the record", default="default")
            o.bool("-f", "--force", "force creation (ignore overwrites, etc.)")
            o.bool("-a", "--args", "use trailing arguments as fields")
            o.bool("-G", "--generate", "generate secret fields")
            o.string("-g", "--generator", "the generator to use for secret fields",
                     default="default")
            o.bool("-x", "--terse", "read fields from input in a terse format")
            o.string("-i", "--ifs", "separate terse fields with this string", default=cli.ifs)

        with cli.guard():
            opts = cli.options(define)
            slots = [Slot("type"), Slot("label")]
            if opts.args:
                slots.append(Slot("fields", many=True))
            cli.arguments(slots)
            cli.ensure_type(ARGUMENT)
            cli.ensure_session()
            if opts.generate:
                cli.ensure_generator()

        with cli.guard():
            fields = self.read_fields(cli)
            if any(not f for f in fields):
                raise UsageError("empty fields are not permitted")
            cli.session.add_record(cli.record_type, cli.args.label, fields,
                                   overwrite=cli.opts.force)
            cli.verbose(f"Created {cli.record_type.name} record '{cli.args.label}'.")

    def read_fields(self, cli):
        record_type = cli.record_type

        if cli.opts.args:
            return list(cli.args.fields)

        if cli.opts.terse:
            line = self.stdin.readline().rstrip("\r\n")
            return line.split(cli.opts.ifs)

        fields = []
        for name in record_type.user_fields:
            sensitive = record_type.is_sensitive(name)
            if sensitive and cli.opts.generate:
                fields.append(cli.generator.secret())
            else:
                fields.append(cli.prompt(f"{name.capitalize()}?", echo=not sensitive))
        return fields


def handle(context, argv):
    """Handle new command dispatch."""
    return NewCommand(context).run(argv)

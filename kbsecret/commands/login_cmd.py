"""
LoginCommand — Show login records
"""

from .base import BaseCommand
from ..parsing import Slot


COMMAND_NAME = "login"
SUMMARY = "show login records"


class LoginCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret login [options] <record [record ...]>"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.string("-s", "--session", "the session to search in", default="default")
            o.bool("-a", "--all", "retrieve all login records, not just listed ones")
            o.bool("-x", "--terse", "output in label<sep>username<sep>password format")
            o.string("-i", "--ifs", "separate terse fields with this string", default=cli.ifs)

        with cli.guard():
            cli.options(define)
            cli.arguments([Slot("labels", many=True, optional=True)])
            cli.ensure_session()

        with cli.guard():
            records = cli.session.records("login")
            if not cli.opts.all:
                wanted = set(cli.args.labels)
                records = [r for r in records if r.label in wanted]

            for record in records:
                username = record.data.get("username", "")
                password = record.data.get("password", "")
                if cli.opts.terse:
                    self.out(cli.opts.ifs.join([record.label, username, password]))
                else:
                    self.out(f"Label: {record.label}")
                    self.out(f"\tUsername: {username}")
                    self.out(f"\tPassword: {password}")


def handle(context, argv):
    """Handle login command dispatch."""
    return LoginCommand(context).run(argv)

"""
SessionsCommand — List configured sessions
"""

from .base import BaseCommand
from ..session import resolve_session


COMMAND_NAME = "sessions"
SUMMARY = "list configured sessions"


class SessionsCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret sessions [options]"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.bool("-a", "--show-all", "show each session in depth (i.e. metadata)")

        with cli.guard():
            cli.options(define)
            cli.arguments([])

        with cli.guard():
            for label in self.config_manager.session_labels():
                self.out(label)
                if not cli.opts.show_all:
                    continue
                session = resolve_session(self.config_manager, label)
                if session.team:
                    self.out(f"\tTeam: {session.team}")
                else:
                    self.out(f"\tUsers: {', '.join(session.users)}")
                self.out(f"\tSecrets root: {session.config.root} ({session.path})")


def handle(context, argv):
    """Handle sessions command dispatch."""
    return SessionsCommand(context).run(argv)

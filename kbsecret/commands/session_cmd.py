"""
SessionCommand — Create and remove sessions

  kbsecret session new [options] <session>
  kbsecret session rm [-d] <session>

A teamless session is a folder shared by a list of users; a team session
lives in a team's folder. Creating a team session for a team the user is
not a member of requires --create-team.
"""

from .base import BaseCommand
from ..cli import ARGUMENT
from ..config import SessionConfig
from ..errors import ConfigError, UsageError
from ..parsing import Slot


COMMAND_NAME = "session"
SUMMARY = "create or remove sessions"
SUBCOMMANDS = ("new", "rm")


class SessionCommand(BaseCommand):

    COMMAND_NAME = COMMAND_NAME
    USAGE = "kbsecret session [options] <new|rm> <session>"

    def run(self, argv):
        cli = self.cli(argv)

        def define(o):
            o.separator("New options")
            o.string("-t", "--team", "the team to create the session under")
            o.array("-u", "--users", "the keybase users")
            o.string("-r", "--root", "the secret root directory")
            o.bool("-c", "--create-team", "create the team if it does not already exist")
            o.bool("-f", "--force", "force creation (ignore overwrites, etc.)")
            o.bool("-n", "--no-notify", "do not send a notification to session members")
            o.separator("Remove options")
            o.bool("-d", "--delete", "unlink the session in addition to deconfiguration")

        with cli.guard():
            cli.options(define, commands=SUBCOMMANDS)
            cli.arguments([Slot("subcommand"), Slot("session")])
            if cli.args.subcommand not in SUBCOMMANDS:
                raise UsageError(f"unknown subcommand: `{cli.args.subcommand}` (expected new or rm)")
            if cli.args.subcommand == "rm":
                cli.ensure_session(ARGUMENT)

        with cli.guard():
            if cli.args.subcommand == "new":
                self.new_session(cli)
            else:
                self.remove_session(cli)

    def new_session(self, cli):
        label = cli.args.session
        opts = cli.opts

        if self.config_manager.has_session(label) and not opts.force:
            raise ConfigError(f"refusing to overwrite session `{label}` without --force")

        if opts.team:
            self._ensure_team(cli, opts.team)
            config = SessionConfig(root=opts.root or label, team=opts.team)
        else:
            config = self._teamless_config(cli, label)

        self.config_manager.configure_session(label, config)
        cli.verbose(f"Configured session '{label}'.")

        if not opts.team and not opts.no_notify:
            others = [u for u in config.users if u != self.keybase.current_user()]
            if others:
                self.keybase.send_message(
                    config.users,
                    f"You've been added to a kbsecret session ('{label}'). "
                    f"Add it with: kbsecret session new -r {config.root} "
                    f"-u {','.join(config.users)} {label}",
                )
                cli.verbose(f"Notified {', '.join(others)}.")

    def _ensure_team(self, cli, team: str):
        if team in self.keybase.teams():
            return
        if not cli.opts.create_team:
            raise ConfigError(f"no such team `{team}` (either nonexistent or non-member), "
                              f"use --create-team to create it")
        self.keybase.create_team(team)
        cli.verbose(f"Created team '{team}'.")

    def _teamless_config(self, cli, label: str) -> SessionConfig:
        if not cli.opts.root:
            raise UsageError("missing `-r', `--root' option")

        me = self.keybase.current_user()
        users = list(cli.opts.users) or [me]
        if me not in users:
            cli.warn("You didn't include yourself in the user list, but I'll add you.")
            users.append(me)
        return SessionConfig(root=cli.opts.root, users=users)

    def remove_session(self, cli):
        session = cli.session
        if cli.opts.delete:
            session.unlink()
            cli.verbose(f"Deleted {session.path}.")
        self.config_manager.deconfigure_session(session.label)
        cli.verbose(f"Removed session '{session.label}'.")


def handle(context, argv):
    """Handle session command dispatch."""
    return SessionCommand(context).run(argv)

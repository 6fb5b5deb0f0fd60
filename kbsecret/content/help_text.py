"""
Help text for the kbsecret CLI.

Kept out of the command modules: text is data, not code.
"""

HELP_TEXT = """\
Usage:
  kbsecret <command> [options] [args...]

Manage secrets (logins, environment variables, snippets, todos, notes)
stored in Keybase's encrypted filesystem, grouped into sessions.

Available commands:
{commands}

Every command accepts:
  -V, --verbose        produce more verbose output
  -w, --no-warn        suppress warning messages
  --debug              produce full backtraces on errors
  -h, --help           show the command's help message

More help:
  kbsecret help <command>
"""

EXTERNAL_SECTION = """
External commands:
{commands}
"""

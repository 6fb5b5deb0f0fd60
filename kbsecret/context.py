"""
Context — Per-invocation state shared by the dispatcher and commands

One Context exists per process run. It owns the environment snapshot,
the configuration manager, the keybase client and the standard streams,
plus the two bits of state the execution guard needs across nesting:
whether --debug was requested, and how many guards are active.
"""

import sys
from typing import Optional

from .config import ConfigManager, Environment
from .keybase import KeybaseClient
from .presentation import MessageWriter


class Context:
    """Resources for one kbsecret invocation."""

    def __init__(self,
                 env: Environment,
                 keybase: Optional[KeybaseClient] = None,
                 config_manager: Optional[ConfigManager] = None,
                 stdin=None,
                 stdout=None,
                 stderr=None):
        self.env = env
        self.keybase = keybase or KeybaseClient()
        self.config_manager = config_manager or ConfigManager(env, self.keybase)
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.messages = MessageWriter(self.stderr, no_color=env.no_color, term=env.term)

        self.debug = False
        self.guard_depth = 0
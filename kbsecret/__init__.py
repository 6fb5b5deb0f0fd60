"""
kbsecret — Secret management on top of Keybase's encrypted filesystem

Records live as JSON documents in KBFS folders, grouped into sessions
(teamless folders shared by a list of users, or team folders).

Usage:
    kbsecret session new -r work -u alice,bob work
    kbsecret new login gmail -s work
    kbsecret list -s work
    kbsecret dump-fields -s work -x gmail
    kbsecret commands
"""

__version__ = "0.1.0"

from .errors import (
    KBSecretError, UsageError, UnresolvedReferenceError, SessionUnknownError,
    RecordTypeUnknownError, GeneratorUnknownError, UnknownCommandError,
    LaunchError, BackendError, RecordError, ConfigError,
)
from .config import Config, ConfigManager, Environment, SessionConfig, GeneratorConfig
from .records import Record, RecordType, RECORD_TYPES, TYPE_ALIASES, record_types, resolve_type
from .generator import Generator, resolve_generator
from .session import Session, resolve_session
from .parsing import OptionSet, Options, Arguments, Slot, parse_options, parse_arguments

__all__ = [
    # Errors
    'KBSecretError', 'UsageError', 'UnresolvedReferenceError', 'SessionUnknownError',
    'RecordTypeUnknownError', 'GeneratorUnknownError', 'UnknownCommandError',
    'LaunchError', 'BackendError', 'RecordError', 'ConfigError',
    # Config
    'Config', 'ConfigManager', 'Environment', 'SessionConfig', 'GeneratorConfig',
    # Records and sessions
    'Record', 'RecordType', 'RECORD_TYPES', 'TYPE_ALIASES', 'record_types', 'resolve_type',
    'Generator', 'resolve_generator',
    'Session', 'resolve_session',
    # Parsing
    'OptionSet', 'Options', 'Arguments', 'Slot', 'parse_options', 'parse_arguments',
]

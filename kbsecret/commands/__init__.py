"""
Commands — Built-in command registry and external command discovery

Each command module:
1. Defines an XxxCommand class (BaseCommand subclass) doing the work
2. Exports COMMAND_NAME and SUMMARY
3. Exports handle(context, argv) to run it

Any executable named kbsecret-<name> on PATH is an external command.
A built-in always wins over a like-named external.
"""

import importlib
import os
import subprocess
from enum import Enum
from typing import Dict, List, Optional, Sequence

from ..errors import LaunchError, UnknownCommandError
from .base import BaseCommand


# Built-in command modules, in help display order
COMMAND_MODULES = [
    # Meta
    'help_cmd',
    'version_cmd',
    'commands_cmd',
    'types_cmd',
    # Sessions and generators
    'sessions_cmd',
    'session_cmd',
    'generators_cmd',
    'generator_cmd',
    # Records
    'new_cmd',
    'list_cmd',
    'rm_cmd',
    'cp_cmd',
    'dump_fields',
    'login_cmd',
    'env_cmd',
    'pass_cmd',
]

EXTERNAL_PREFIX = "kbsecret-"

# Flag spellings of commands, applied before anything else
NORMALIZED = {
    "-h": "help",
    "--help": "help",
    "-v": "version",
    "--version": "version",
}


class Classification(Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    UNKNOWN = "unknown"


# Handler registry: command_name -> module
_modules: Dict[str, object] = {}


def _registry() -> Dict[str, object]:
    """Import every module in COMMAND_MODULES once, keyed by command name."""
    if not _modules:
        for module_name in COMMAND_MODULES:
            module = importlib.import_module(f'.{module_name}', __package__)
            # 'list_cmd' -> 'list', 'dump_fields' -> 'dump-fields'
            default = module_name.replace('_cmd', '').replace('_', '-')
            _modules[getattr(module, 'COMMAND_NAME', default)] = module
    return _modules


def normalize(name: str) -> str:
    """Map flag spellings to command names; anything else passes through."""
    return NORMALIZED.get(name, name)


def internal_command_names() -> List[str]:
    return list(_registry())


def summaries() -> Dict[str, str]:
    """command name -> one-line description."""
    return {name: getattr(m, 'SUMMARY', '') for name, m in _registry().items()}


def is_internal(name: str) -> bool:
    return name in _registry()


def find_external(name: str, search_path: Sequence[str]) -> Optional[str]:
    """Path of the first executable kbsecret-<name> on the search path."""
    for directory in search_path:
        candidate = os.path.join(directory, EXTERNAL_PREFIX + name)
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
    return None


def is_external(name: str, search_path: Sequence[str]) -> bool:
    return not is_internal(name) and find_external(name, search_path) is not None


def external_command_names(search_path: Sequence[str]) -> List[str]:
    """Names of all kbsecret-<name> executables on the search path."""
    names = set()
    for directory in search_path:
        try:
            entries = os.listdir(directory)
        except OSError:
            continue
        for entry in entries:
            if not entry.startswith(EXTERNAL_PREFIX) or entry == EXTERNAL_PREFIX:
                continue
            path = os.path.join(directory, entry)
            if os.path.isfile(path) and os.access(path, os.X_OK):
                names.add(entry[len(EXTERNAL_PREFIX):])
    return sorted(n for n in names if not is_internal(n))


def classify(name: str, search_path: Sequence[str]) -> Classification:
    if is_internal(name):
        return Classification.INTERNAL
    if find_external(name, search_path) is not None:
        return Classification.EXTERNAL
    return Classification.UNKNOWN


def run(name: str, context, argv: Sequence[str]):
    """Run a built-in command in-process."""
    if not is_internal(name):
        raise UnknownCommandError(name)
    return _registry()[name].handle(context, list(argv))


def exec_external(name: str, argv: Sequence[str], search_path: Sequence[str]):
    """
    Replace this process with kbsecret-<name>, passing argv verbatim.

    Where the platform has no exec (Windows), the command runs as a child
    and its exit status becomes ours. Does not return on success.

    Raises:
        LaunchError: the executable is gone or cannot be executed
    """
    path = find_external(name, search_path)
    if path is None:
        raise LaunchError(f"could not find {EXTERNAL_PREFIX}{name} on PATH")

    command = [path, *argv]
    try:
        if os.name == "nt":
            raise SystemExit(subprocess.call(command))
        os.execv(path, command)
    except OSError as e:
        raise LaunchError(f"could not execute {path}: {e.strerror or e}") from e


__all__ = [
    'BaseCommand', 'Classification', 'COMMAND_MODULES', 'NORMALIZED',
    'normalize', 'classify', 'is_internal', 'is_external', 'find_external',
    'internal_command_names', 'external_command_names', 'summaries',
    'run', 'exec_external',
]

"""
Configuration — Centralized settings management

Sources (highest to lowest priority):
  1. User config ($XDG_CONFIG_HOME/kbsecret/config.yml)
  2. Defaults (written to disk on first load)

Environment variables are read exactly once, into an Environment snapshot
taken at process start. Nothing below the dispatcher touches os.environ.

Layout of config.yml:

    mount: /keybase
    sessions:
      default: {users: [alice], root: kbsecret}
      work: {team: acme, root: work}
    generators:
      default: {format: hex, length: 16}
    aliases:
      ls: list --show-all
    commands:
      dump-fields: --terse
"""

import filecmp
import os
import shlex
import shutil
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

from .errors import ConfigError, SessionUnknownError, GeneratorUnknownError


DEFAULT_MOUNT = "/keybase"
DEFAULT_SESSION = "default"
DEFAULT_GENERATOR = "default"
GENERATOR_FORMATS = ("hex", "base64")


@dataclass(frozen=True)
class Environment:
    """
    Snapshot of the process environment, captured once at startup.

    Passed by reference to whatever needs the field separator, the color
    flag, the terminal type, the executable search path or the
    configuration directories. The directories have no defaults; only
    from_environ derives them from HOME.
    """
    config_home: Path
    legacy_config_dir: Path
    ifs: Optional[str] = None
    no_color: bool = False
    path: str = ""
    term: str = ""

    @classmethod
    def from_environ(cls, environ: Optional[Dict[str, str]] = None) -> 'Environment':
        """Capture the relevant variables from environ (default: os.environ)."""
        if environ is None:
            environ = dict(os.environ)

        home = Path(environ["HOME"]) if environ.get("HOME") else Path.home()
        config_home = environ.get("XDG_CONFIG_HOME") or str(home / ".config")
        legacy = environ.get("KBSECRET_LEGACY_CONFIG_DIR") or str(home / ".kbsecret")

        return cls(
            ifs=environ.get("IFS") or None,
            no_color=bool(environ.get("NO_COLOR")),
            path=environ.get("PATH", ""),
            term=environ.get("TERM", ""),
            config_home=Path(config_home),
            legacy_config_dir=Path(legacy),
        )

    @property
    def search_path(self) -> List[str]:
        """Directories of PATH, in order, empty entries dropped."""
        return [d for d in self.path.split(os.pathsep) if d]

    @property
    def config_dir(self) -> Path:
        return self.config_home / "kbsecret"


@dataclass
class SessionConfig:
    """A configured session: teamless (users) or team-based (team)."""
    root: str
    users: List[str] = field(default_factory=list)
    team: Optional[str] = None

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.root:
            return "session root must not be empty"
        if self.team is None and not self.users:
            return "session needs either a team or at least one user"
        return None

    def to_dict(self) -> Dict[str, Any]:
        if self.team:
            return {"team": self.team, "root": self.root}
        return {"users": list(self.users), "root": self.root}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SessionConfig':
        users = data.get("users") or []
        if isinstance(users, str):
            users = [u.strip() for u in users.split(",") if u.strip()]
        return cls(root=str(data.get("root", "")), users=list(users), team=data.get("team"))


@dataclass
class GeneratorConfig:
    """A secret generator profile."""
    format: str = "hex"
    length: int = 16

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.format not in GENERATOR_FORMATS:
            return f"unknown generator format '{self.format}'. Valid: {', '.join(GENERATOR_FORMATS)}"
        if not isinstance(self.length, int) or isinstance(self.length, bool) or self.length <= 0:
            return f"generator length must be a positive integer, got {self.length!r}"
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"format": self.format, "length": self.length}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GeneratorConfig':
        return cls(format=data.get("format", "hex"), length=data.get("length", 16))


@dataclass
class Config:
    """Application configuration."""
    mount: str = DEFAULT_MOUNT
    sessions: Dict[str, SessionConfig] = field(default_factory=dict)
    generators: Dict[str, GeneratorConfig] = field(default_factory=dict)
    aliases: Dict[str, str] = field(default_factory=dict)
    commands: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "mount": self.mount,
            "sessions": {k: v.to_dict() for k, v in self.sessions.items()},
            "generators": {k: v.to_dict() for k, v in self.generators.items()},
            "aliases": dict(self.aliases),
            "commands": dict(self.commands),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        return cls(
            mount=str(data.get("mount") or DEFAULT_MOUNT),
            sessions={
                str(k): SessionConfig.from_dict(v or {})
                for k, v in (data.get("sessions") or {}).items()
            },
            generators={
                str(k): GeneratorConfig.from_dict(v or {})
                for k, v in (data.get("generators") or {}).items()
            },
            aliases={str(k): str(v) for k, v in (data.get("aliases") or {}).items()},
            commands={str(k): str(v) for k, v in (data.get("commands") or {}).items()},
        )


@dataclass
class Migration:
    """Outcome of a legacy configuration migration."""
    copied: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    conflicts: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)
    removed: bool = False


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Loads config.yml once and caches it; every mutation saves immediately.
    """

    CONFIG_FILE = "config.yml"

    def __init__(self, env: Environment, keybase):
        self.env = env
        self.keybase = keybase
        self._config: Optional[Config] = None

    @property
    def config_dir(self) -> Path:
        return self.env.config_dir

    @property
    def config_path(self) -> Path:
        return self.config_dir / self.CONFIG_FILE

    def migrate_legacy(self) -> Migration:
        """
        Move the legacy configuration directory into the active one.

        Files already present in the active directory are never overwritten:
        an identical one counts as migrated, a different one is a conflict.
        Every copied file is compared byte-for-byte with its source. The
        legacy directory is only removed when every legacy file is accounted
        for in the active directory.
        """
        legacy = self.env.legacy_config_dir
        result = Migration()
        if not legacy.is_dir() or legacy.resolve() == self.config_dir.resolve():
            return result

        for source in sorted(p for p in legacy.rglob("*") if p.is_file()):
            target = self.config_dir / source.relative_to(legacy)
            if target.exists():
                if filecmp.cmp(source, target, shallow=False):
                    result.skipped.append(target)
                else:
                    result.conflicts.append(source)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
            if filecmp.cmp(source, target, shallow=False):
                result.copied.append(target)
            else:
                result.failed.append(source)

        if not result.failed and not result.conflicts:
            shutil.rmtree(legacy)
            result.removed = True
            self._config = None
        return result

    def load(self) -> Config:
        """Load configuration, writing defaults on first use."""
        if self._config is not None:
            return self._config

        if not self.config_path.exists():
            self._config = self.defaults()
            self.save(self._config)
            return self._config

        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"malformed configuration file {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"malformed configuration file {self.config_path}")

        config = Config.from_dict(data)
        for kind, entries in (("session", config.sessions), ("generator", config.generators)):
            for label, entry in entries.items():
                error = entry.validate()
                if error:
                    raise ConfigError(f"{self.config_path}: {kind} '{label}': {error}")

        self._config = config
        return self._config

    def defaults(self) -> Config:
        """Default configuration: one private session for the current user."""
        user = self.keybase.current_user()
        return Config(
            sessions={DEFAULT_SESSION: SessionConfig(root="kbsecret", users=[user])},
            generators={DEFAULT_GENERATOR: GeneratorConfig()},
        )

    def save(self, config: Config):
        """Save configuration to the config file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def session_labels(self) -> List[str]:
        return list(self.load().sessions)

    def has_session(self, label) -> bool:
        return label in self.load().sessions

    def session(self, label) -> SessionConfig:
        """Get a session's configuration, or raise SessionUnknownError."""
        sessions = self.load().sessions
        if label not in sessions:
            raise SessionUnknownError(label)
        return sessions[label]

    def configure_session(self, label: str, session: SessionConfig):
        error = session.validate()
        if error:
            raise ConfigError(error)
        config = self.load()
        config.sessions[label] = session
        self.save(config)

    def deconfigure_session(self, label: str):
        config = self.load()
        if config.sessions.pop(label, None) is not None:
            self.save(config)

    # -------------------------------------------------------------------------
    # Generators
    # -------------------------------------------------------------------------

    def generator_labels(self) -> List[str]:
        return list(self.load().generators)

    def has_generator(self, label) -> bool:
        return label in self.load().generators

    def generator(self, label) -> GeneratorConfig:
        """Get a generator profile by exact name, or raise GeneratorUnknownError."""
        generators = self.load().generators
        if label not in generators:
            raise GeneratorUnknownError(label)
        return generators[label]

    def configure_generator(self, label: str, generator: GeneratorConfig):
        error = generator.validate()
        if error:
            raise ConfigError(error)
        config = self.load()
        config.generators[label] = generator
        self.save(config)

    def deconfigure_generator(self, label: str):
        config = self.load()
        if config.generators.pop(label, None) is not None:
            self.save(config)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def unalias(self, command: str) -> List[str]:
        """Expand a user alias into its tokens; identity when not aliased."""
        expansion = self.load().aliases.get(command)
        if not expansion:
            return [command]
        tokens = shlex.split(expansion)
        return tokens or [command]

    def command_args(self, command: str) -> List[str]:
        """Default arguments configured for a command."""
        return shlex.split(self.load().commands.get(command, ""))

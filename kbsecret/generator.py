"""
Generator — Random secret generation from configured profiles
"""

import base64
import secrets

from .config import ConfigManager, GeneratorConfig
from .errors import ConfigError


class Generator:
    """Produces secrets of exactly `length` characters in `format`."""

    def __init__(self, profile: GeneratorConfig):
        error = profile.validate()
        if error:
            raise ConfigError(error)
        self.format = profile.format
        self.length = profile.length

    def secret(self) -> str:
        if self.format == "hex":
            return secrets.token_hex((self.length + 1) // 2)[:self.length]
        if self.format == "base64":
            # 3 random bytes encode to 4 base64 characters
            raw = secrets.token_bytes(self.length * 3 // 4 + 3)
            return base64.urlsafe_b64encode(raw).decode("ascii")[:self.length]
        raise ConfigError(f"unknown generator format '{self.format}'")


def resolve_generator(config_manager: ConfigManager, name) -> Generator:
    """
    Look up a generator profile by exact name.

    Raises:
        GeneratorUnknownError: no profile with that name is configured
    """
    return Generator(config_manager.generator(name))

"""
Tests for Generator — secret generation and generator profiles

These tests validate:
- Secrets have exactly the configured length and alphabet
- Profiles are looked up by exact name
- generator / generators commands manage and list profiles
"""

import string

import pytest

from kbsecret.config import GeneratorConfig
from kbsecret.errors import ConfigError, GeneratorUnknownError
from kbsecret.generator import Generator, resolve_generator


URLSAFE = set(string.ascii_letters + string.digits + "-_")


class TestGenerator:
    """Secret generation."""

    @pytest.mark.parametrize("length", [1, 15, 16, 33])
    def test_hex_length(self, length):
        secret = Generator(GeneratorConfig(format="hex", length=length)).secret()
        assert len(secret) == length
        assert set(secret) <= set(string.hexdigits.lower())

    @pytest.mark.parametrize("length", [1, 5, 16, 43])
    def test_base64_length(self, length):
        secret = Generator(GeneratorConfig(format="base64", length=length)).secret()
        assert len(secret) == length
        assert set(secret) <= URLSAFE

    @pytest.mark.parametrize("profile", [
        GeneratorConfig(format="rot13", length=8),
        GeneratorConfig(format="hex", length="16"),
    ])
    def test_invalid_profile_rejected(self, profile):
        with pytest.raises(ConfigError):
            Generator(profile)

    def test_unknown_format_never_falls_back(self):
        generator = Generator(GeneratorConfig(format="base64", length=8))
        generator.format = "rot13"
        with pytest.raises(ConfigError) as exc:
            generator.secret()
        assert "rot13" in str(exc.value)

    def test_secrets_differ(self):
        generator = Generator(GeneratorConfig(length=32))
        assert generator.secret() != generator.secret()

    def test_resolve_exact(self, kb_factory):
        assert resolve_generator(kb_factory.config_manager, "default").length == 16

    def test_resolve_unknown(self, kb_factory):
        with pytest.raises(GeneratorUnknownError) as exc:
            resolve_generator(kb_factory.config_manager, "defaul")
        assert str(exc.value) == "unknown generator: `defaul`"


class TestGeneratorCommands:
    """generator new / rm and generators."""

    def test_list(self, kb_factory):
        result = kb_factory.run("generators")
        assert result.code == 0
        assert result.out == "default\n"

    def test_list_all(self, kb_factory):
        result = kb_factory.run("generators", "-a")
        assert result.out == "default\n\tFormat: hex\n\tLength: 16\n"

    def test_new(self, kb_factory):
        result = kb_factory.run("generator", "new", "long", "-F", "base64", "-l", "64")
        assert result.code == 0
        profile = kb_factory.config_manager.generator("long")
        assert profile.format == "base64"
        assert profile.length == 64

    def test_new_refuses_overwrite(self, kb_factory):
        result = kb_factory.run("generator", "new", "default", "-l", "8")
        assert result.code == 1
        assert "--force" in result.err
        assert kb_factory.config_manager.generator("default").length == 16

    def test_new_force(self, kb_factory):
        result = kb_factory.run("generator", "new", "default", "-l", "8", "--force")
        assert result.code == 0
        assert kb_factory.config_manager.generator("default").length == 8

    def test_new_bad_format(self, kb_factory):
        result = kb_factory.run("generator", "new", "weird", "-F", "rot13")
        assert result.code == 1
        assert result.err.startswith("Fatal: Unknown generator format 'rot13'")

    def test_rm(self, kb_factory):
        kb_factory.run("generator", "new", "temp")
        result = kb_factory.run("generator", "rm", "temp")
        assert result.code == 0
        assert not kb_factory.config_manager.has_generator("temp")

    def test_rm_unknown(self, kb_factory):
        result = kb_factory.run("generator", "rm", "nope")
        assert result.code == 1
        assert result.err == "Fatal: Unknown generator: `nope`.\n"

    def test_bad_subcommand(self, kb_factory):
        result = kb_factory.run("generator", "frobnicate", "x")
        assert result.code == 1
        assert "Unknown subcommand" in result.err

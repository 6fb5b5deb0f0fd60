"""
Shared pytest fixtures for the kbsecret test suite.

Usage in tests:
    def test_something(kb_factory):
        kb_factory.add_session("work", users=["alice", "bob"])
        result = kb_factory.run("sessions")

    def test_with_data(kb_env):
        # kb_env comes with a gmail login in the default session
        result = kb_env.run("dump-fields", "gmail")
"""

import pytest
from tests.factories import KBSecretTestFactory


@pytest.fixture
def kb_factory(tmp_path):
    """
    Create an empty KBSecretTestFactory.

    Config has the `default` session (user alice) and the `default`
    generator; the mount directory is empty.
    """
    return KBSecretTestFactory(tmp_path)


@pytest.fixture
def kb_env(tmp_path):
    """
    Create a KBSecretTestFactory with sample records.

    default session:
    - gmail     login        bob@gmail.com / pleasedonthackme
    - api-key   environment  API_KEY / s3cr3t value
    - notes     unstructured "remember the milk"
    """
    factory = KBSecretTestFactory(tmp_path)
    factory.add_record("default", "login", "gmail", "bob@gmail.com", "pleasedonthackme")
    factory.add_record("default", "environment", "api-key", "API_KEY", "s3cr3t value")
    factory.add_record("default", "unstructured", "notes", "remember the milk")
    return factory

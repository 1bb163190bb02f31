"""Shared pytest fixtures for BluePrint tests."""

from pathlib import Path

import pytest

from blueprint_notation.core import ir
from blueprint_notation.core.parser import parse

USER_AUTH_SOURCE = """\
// Authentication service
Service UserAuth {
  description: "Handles user registration and login",
  dependencies: [Database, EmailService],
  methods: {
    register(email: string, password: string) -> User,
    login(email: string, password: string) -> Session
  },
  behaviors: [
    "Given a registered user, when valid credentials are submitted, then a session is returned",
    "Passwords are never logged"
  ]
}

DataStructure LinkedList<T> {
  head: Node<T> = null,
  size: 0,
  append(value: T) -> void {
    complexity: "O(1)"
  }
}
"""


@pytest.fixture
def corpora_dir() -> Path:
    """Return path to the corpus directory."""
    return Path(__file__).parent / "corpora" / "blueprint"


@pytest.fixture
def user_auth_source() -> str:
    """Return a small two-block BluePrint document."""
    return USER_AUTH_SOURCE


@pytest.fixture
def user_auth(user_auth_source: str) -> ir.Document:
    """Return the parsed two-block document."""
    return parse(user_auth_source, Path("auth.bp"))

"""
Pytest fixtures for policy-authorization tests.

Provides the users, subjects and policies shared across test modules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generator
from unittest.mock import MagicMock

import pytest

from policy_authorization import Ability, AbilityFactory, Policy
from policy_authorization.policies.registry import PolicyRegistry, reset_global_registry


# ============================================================================
# Fake Domain
# ============================================================================


@dataclass
class User:
    id: int
    name: str
    role: str = "AUTHOR"


@dataclass
class Book:
    id: int
    name: str
    user_id: int


class BookPolicy(Policy):
    """Admins may do anything, guests nothing, authors manage their own books."""

    def before(self, user: User, action: str) -> bool | None:
        if user.role == "ADMIN":
            return True
        if user.role == "GUEST":
            return False
        return None

    def view_any(self, user: User, book: Book | None) -> bool:
        return True

    def view(self, user: User, book: Book | None) -> bool:
        return True

    def create(self, user: User, book: Book | None) -> bool:
        return True

    def update(self, user: User, book: Book | None) -> bool:
        return book is not None and user.id == book.user_id

    def delete(self, user: User, book: Book | None) -> bool:
        return book is not None and user.id == book.user_id


# ============================================================================
# User Fixtures
# ============================================================================


@pytest.fixture
def author() -> User:
    """Create an author who owns book 1."""
    return User(id=1, name="Author", role="AUTHOR")


@pytest.fixture
def admin() -> User:
    """Create an admin user."""
    return User(id=2, name="Admin", role="ADMIN")


@pytest.fixture
def guest() -> User:
    """Create a guest user."""
    return User(id=3, name="Guest", role="GUEST")


# ============================================================================
# Subject Fixtures
# ============================================================================


@pytest.fixture
def own_book(author: User) -> Book:
    """Create a book owned by the author fixture."""
    return Book(id=1, name="Book A", user_id=author.id)


@pytest.fixture
def other_book() -> Book:
    """Create a book owned by someone else."""
    return Book(id=2, name="Book B", user_id=200)


# ============================================================================
# Policy Fixtures
# ============================================================================


@pytest.fixture
def policy_registry() -> PolicyRegistry:
    """Create a fresh policy registry."""
    return PolicyRegistry()


@pytest.fixture
def factory() -> AbilityFactory:
    """Create a factory binding Book to BookPolicy."""
    return AbilityFactory({Book: BookPolicy})


@pytest.fixture
def author_ability(factory: AbilityFactory, author: User) -> Ability:
    """Create an ability for the author fixture."""
    return factory.create(author)


@pytest.fixture
def spy_policy() -> dict[str, Any]:
    """Create a mapping policy whose rules are mocks."""
    return {
        "before": MagicMock(return_value=None),
        "create": MagicMock(return_value=True),
    }


@pytest.fixture(autouse=True)
def clean_global_registry() -> Generator[None, None, None]:
    """Reset the global registry around every test."""
    reset_global_registry()
    yield
    reset_global_registry()

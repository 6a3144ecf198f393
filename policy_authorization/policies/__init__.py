"""
Policy system for policy-authorization.

Policies are plain classes (or mappings) whose public methods are the
rules for the actions of the same name.

Quick Start:
    >>> from policy_authorization.policies import Policy, PolicyRegistry
    >>>
    >>> registry = PolicyRegistry()
    >>>
    >>> @registry.policy("Book")
    ... class BookPolicy(Policy):
    ...     def view(self, user, book):
    ...         return True
    ...
    ...     def update(self, user, book):
    ...         return book is not None and user["id"] == book.user_id
"""

from policy_authorization.policies.base import (
    ActionRule,
    Policy,
    PreCheckRule,
    find_action,
    find_pre_check,
    list_actions,
)
from policy_authorization.policies.registry import (
    PolicyBinding,
    PolicyRegistry,
    get_global_registry,
    reset_global_registry,
)

__all__ = [
    # Base class and rule lookup
    "Policy",
    "ActionRule",
    "PreCheckRule",
    "find_action",
    "find_pre_check",
    "list_actions",
    # Registry
    "PolicyBinding",
    "PolicyRegistry",
    "get_global_registry",
    "reset_global_registry",
]

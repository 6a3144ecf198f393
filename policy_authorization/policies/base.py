"""
Policy base class and policy lookup helpers.

This module implements a Pundit-inspired policy pattern: each subject has
one policy, and each public method of that policy is the rule for the
action of the same name.

    >>> class BookPolicy(Policy):
    ...     def create(self, user, book):
    ...         return True
    ...
    ...     def update(self, user, book):
    ...         return book is not None and user["id"] == book.user_id

Inheriting from Policy is optional. Any object exposing action methods,
or any mapping of action name to callable, is accepted by the engine:

    >>> book_rules = {
    ...     "create": lambda user, book: True,
    ...     "before": lambda user, action: True if user.get("admin") else None,
    ... }
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

from policy_authorization.types import PreCheck

# Rule signatures consumed by the engine
ActionRule = Callable[[Any, Any], bool]
PreCheckRule = Callable[[Any, str], Optional[Union[bool, PreCheck]]]

PRE_CHECK_NAME = "before"


class Policy:
    """
    Base class for object-style policies.

    Subclasses define one public method per action, with the signature
    `(self, user, subject)`. `subject` is the instance being checked, or
    None when the check was made against a subject name or type.

    Override `before` to add a policy-wide gate evaluated ahead of every
    action rule.

    Example:
        >>> class BookPolicy(Policy):
        ...     def before(self, user, action):
        ...         if user["role"] == "ADMIN":
        ...             return True
        ...         return None
        ...
        ...     def update(self, user, book):
        ...         return book is not None and user["id"] == book.user_id
    """

    def before(self, user: Any, action: str) -> bool | PreCheck | None:
        """No opinion by default; every action falls through to its rule."""
        return None

    @classmethod
    def get_available_actions(cls) -> list[str]:
        """
        Get all actions defined by this policy class.

        Returns:
            Sorted list of action names.

        Example:
            >>> class MyPolicy(Policy):
            ...     def view(self, user, subject): return True
            ...     def delete(self, user, subject): return False
            >>> MyPolicy.get_available_actions()
            ['delete', 'view']
        """
        return sorted(
            name for name in dir(cls)
            if _is_method_action_name(name) and callable(getattr(cls, name))
        )


# Public attributes of the base class are API, not actions
_POLICY_API = frozenset(name for name in vars(Policy) if not name.startswith("_"))


def _is_action_name(name: str) -> bool:
    return bool(name) and not name.startswith("_") and name != PRE_CHECK_NAME


def _is_method_action_name(name: str) -> bool:
    return _is_action_name(name) and name not in _POLICY_API


def find_action(policy: Any, action: str) -> ActionRule | None:
    """
    Look up the rule for an action on a policy object or mapping.

    Private names and the pre-check name never resolve to an action. On
    object policies the Policy base-class API is excluded as well; mapping
    policies may use any other key.

    Returns:
        The callable rule, or None if the policy does not define one.
    """
    if isinstance(policy, Mapping):
        if not _is_action_name(action):
            return None
        rule = policy.get(action)
    else:
        if not _is_method_action_name(action):
            return None
        rule = getattr(policy, action, None)

    return rule if callable(rule) else None


def find_pre_check(policy: Any) -> PreCheckRule | None:
    """Look up the `before` pre-check on a policy object or mapping."""
    if isinstance(policy, Mapping):
        rule = policy.get(PRE_CHECK_NAME)
    else:
        rule = getattr(policy, PRE_CHECK_NAME, None)

    return rule if callable(rule) else None


def list_actions(policy: Any) -> list[str]:
    """
    List the actions a policy object or mapping defines.

    Used for error messages and startup verification, not for evaluation.
    """
    if isinstance(policy, Mapping):
        names = [name for name in policy if isinstance(name, str)]
    else:
        names = dir(policy)

    return sorted(name for name in names if find_action(policy, name) is not None)

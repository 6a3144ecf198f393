"""
The Ability evaluation engine.

An Ability binds one user to the policies of every registered subject and
answers "can this user do X to Y" questions against them.

Evaluation of `can(action, subject)`:
    1. Resolve the subject to its name (string, class or instance).
    2. Find the subject's policy, or raise PolicyNotFoundError.
    3. Find the action's rule on that policy, or raise ActionNotFoundError.
    4. Run the policy's `before` pre-check, if any. True/False decide the
       outcome and the action rule is skipped; None falls through.
    5. Call the action rule with (user, instance). Name and class subjects
       pass None as the instance.

Decisions are never cached and exceptions raised by policies propagate
unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from policy_authorization.exceptions import (
    ActionNotFoundError,
    AuthorizationError,
    PolicyNotFoundError,
)
from policy_authorization.policies.base import find_action, find_pre_check, list_actions
from policy_authorization.types import PreCheck, SubjectRef, resolve_subject

logger = logging.getLogger(__name__)

S = TypeVar("S")


class Ability:
    """
    Authorization context for a single user.

    Attributes:
        user: The user all checks are made for.
        policies: Read-only mapping of subject name to policy.

    Example:
        >>> ability = Ability({"id": 1}, {"Book": BookPolicy()})
        >>> ability.can("update", Book(id=1, user_id=1))
        True
        >>> ability.cannot("update", Book(id=2, user_id=200))
        True
    """

    def __init__(self, user: Any, subject_policy_dict: Mapping[str, Any]) -> None:
        """
        Initialize an ability.

        Args:
            user: The user or principal. Passed to policies untouched.
            subject_policy_dict: Mapping of subject name to policy object
                or mapping of action rules. Copied, so later changes to the
                caller's dict do not leak in.
        """
        self._user = user
        self._policies: Mapping[str, Any] = MappingProxyType(dict(subject_policy_dict))

    @property
    def user(self) -> Any:
        return self._user

    @property
    def policies(self) -> Mapping[str, Any]:
        return self._policies

    def can(self, action: str, subject: Any) -> bool:
        """
        Check whether the user may perform an action on a subject.

        Args:
            action: The action name, e.g. "update".
            subject: A subject name ("Book"), a subject class (Book) or a
                subject instance (book).

        Returns:
            True if allowed, False if denied.

        Raises:
            PolicyNotFoundError: If no policy is registered for the subject.
            ActionNotFoundError: If the policy has no rule for the action.
            ConfigurationError: If the subject is an empty string or
                reports an empty or non-string `__subject_name__`.
            TypeError: If the pre-check returns something other than
                True, False, None or a PreCheck member.

        Example:
            >>> ability.can("view", "Book")
            True
        """
        ref = resolve_subject(subject)
        policy = self._lookup_policy(ref.name)

        rule = find_action(policy, action)
        if rule is None:
            raise ActionNotFoundError(action, ref.name, list_actions(policy))

        pre_check = find_pre_check(policy)
        if pre_check is not None:
            outcome = PreCheck.coerce(pre_check(self._user, action))
            if outcome is not PreCheck.NO_OPINION:
                allowed = outcome is PreCheck.ALLOW
                self._log_decision(action, ref, allowed, "pre-check")
                return allowed

        allowed = bool(rule(self._user, ref.instance))
        self._log_decision(action, ref, allowed, "action rule")
        return allowed

    def cannot(self, action: str, subject: Any) -> bool:
        """
        Negation of can().

        Goes through can() itself, so policy rules run exactly once.
        """
        return not self.can(action, subject)

    # Shorter alias kept for call sites written against earlier releases
    cant = cannot

    def authorize(self, action: str, subject: S) -> S:
        """
        Require that the user may perform an action on a subject.

        Returns:
            The subject, unchanged, so the call can be chained.

        Raises:
            AuthorizationError: If the check is denied.
            PolicyNotFoundError: If no policy is registered for the subject.
            ActionNotFoundError: If the policy has no rule for the action.

        Example:
            >>> book = ability.authorize("update", load_book(book_id))
        """
        if self.cannot(action, subject):
            raise AuthorizationError(action, resolve_subject(subject).name, self._user)
        return subject

    def policy_for(self, subject: Any) -> Any:
        """
        Get the policy that decides checks for a subject.

        Raises:
            PolicyNotFoundError: If no policy is registered for the subject.
        """
        return self._lookup_policy(resolve_subject(subject).name)

    def _lookup_policy(self, subject_name: str) -> Any:
        policy = self._policies.get(subject_name)
        if policy is None:
            raise PolicyNotFoundError(subject_name, list(self._policies))
        return policy

    def _log_decision(
        self, action: str, ref: SubjectRef, allowed: bool, decided_by: str
    ) -> None:
        logger.debug(
            f"{'Allowed' if allowed else 'Denied'} '{action}' on "
            f"{ref.kind.value} '{ref.name}' (decided by {decided_by})"
        )

    def __repr__(self) -> str:
        return f"Ability(user={self._user!r}, subjects={sorted(self._policies)})"

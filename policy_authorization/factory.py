"""
AbilityFactory: binds users to freshly built policies.

The factory keeps "how policies are constructed" apart from "how they are
evaluated". Callers declare bindings once (subject -> policy constructor)
and ask for an Ability per request.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Union

from policy_authorization.ability import Ability
from policy_authorization.policies.registry import PolicyCtor, PolicyRegistry

logger = logging.getLogger(__name__)

SubjectPolicyCtorDict = Mapping[Union[str, type], PolicyCtor]


class AbilityFactory:
    """
    Creates Ability objects for users.

    Example:
        >>> factory = AbilityFactory({Book: BookPolicy})
        >>> ability = factory.create({"id": 1, "role": "AUTHOR"})
        >>> ability.can("update", book)
        True

    A PolicyRegistry can be passed instead of a mapping, in which case the
    factory follows later registrations made on it:

        >>> factory = AbilityFactory(get_global_registry())
    """

    def __init__(self, subject_policy_ctors: SubjectPolicyCtorDict | PolicyRegistry) -> None:
        """
        Initialize the factory.

        Args:
            subject_policy_ctors: Mapping of subject name (or subject
                class) to a zero-argument policy constructor, or an
                existing PolicyRegistry.

        Raises:
            ConfigurationError: If a binding in the mapping is invalid.
        """
        if isinstance(subject_policy_ctors, PolicyRegistry):
            self._registry = subject_policy_ctors
        else:
            self._registry = PolicyRegistry()
            for subject, policy_ctor in subject_policy_ctors.items():
                self._registry.register(subject, policy_ctor)

    @property
    def registry(self) -> PolicyRegistry:
        return self._registry

    def create(self, user: Any) -> Ability:
        """
        Create an Ability for a user.

        Every call builds new policy objects (shared instance bindings
        excepted), so no state leaks between users or requests. Errors
        raised by policy constructors propagate unchanged.
        """
        policies = self._registry.build_policies()
        logger.debug(f"Created ability with {len(policies)} policies")
        return Ability(user, policies)

    def create_for_user(self, user: Any) -> Ability:
        """Alias for create()."""
        return self.create(user)

    def verify_actions(self, required: Mapping[str | type, Iterable[str]]) -> None:
        """Startup check; see PolicyRegistry.verify_actions()."""
        self._registry.verify_actions(required)

"""
Policy registry for policy-authorization.

This module provides the PolicyRegistry class, which binds subject names
to policy constructors (or to shared, pre-built policy instances) and
builds the subject -> policy mapping an Ability evaluates against.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Callable

from policy_authorization.exceptions import (
    ActionNotFoundError,
    ConfigurationError,
    PolicyNotFoundError,
)
from policy_authorization.policies.base import find_action, list_actions
from policy_authorization.types import subject_name_of

logger = logging.getLogger(__name__)

PolicyCtor = Callable[[], Any]


@dataclass(frozen=True)
class PolicyBinding:
    """
    One registration: a subject name and how to obtain its policy.

    Exactly one of `policy_ctor` and `instance` is set. Constructor
    bindings produce a fresh policy on every `resolve()`; instance bindings
    always return the same shared object.
    """
    subject_name: str
    policy_ctor: PolicyCtor | None = None
    instance: Any = None

    @property
    def shared(self) -> bool:
        return self.policy_ctor is None

    def resolve(self) -> Any:
        if self.policy_ctor is None:
            return self.instance
        return self.policy_ctor()

    def describe(self) -> str:
        target = self.policy_ctor if self.policy_ctor is not None else type(self.instance)
        return getattr(target, "__name__", repr(target))


def _to_subject_name(subject: str | type) -> str:
    if isinstance(subject, str):
        if not subject:
            raise ConfigurationError(
                config_key="subject",
                expected="a non-empty subject name",
                received=subject,
            )
        return subject
    if isinstance(subject, type):
        return subject_name_of(subject)
    raise ConfigurationError(
        config_key="subject",
        expected="a subject name or a subject class",
        received=subject,
    )


class PolicyRegistry:
    """
    Registry of subject -> policy bindings.

    Features:
        - Decorator-based registration (@registry.policy("Book"))
        - Subjects given by name or by class (Book -> "Book")
        - Shared instances for stateless policies
        - Startup verification of required actions
        - Thread-safe operations

    Registering a subject twice replaces the earlier binding; the
    replacement is logged at WARNING.

    Example:
        >>> registry = PolicyRegistry()
        >>>
        >>> @registry.policy(Book)
        ... class BookPolicy(Policy):
        ...     def update(self, user, book):
        ...         return book is not None and user["id"] == book.user_id
        >>>
        >>> policies = registry.build_policies()
        >>> policies["Book"]
        <BookPolicy object at ...>

    Thread Safety:
        All operations are thread-safe via internal locking. Policy
        constructors run outside the lock.
    """

    def __init__(self) -> None:
        self._bindings: dict[str, PolicyBinding] = {}
        self._lock = threading.RLock()

    def policy(self, subject: str | type) -> Callable[[type], type]:
        """
        Decorator for registering a policy class.

        Args:
            subject: The subject name, or the subject class whose name to use.

        Example:
            >>> @registry.policy("Book")
            ... class BookPolicy(Policy):
            ...     def view(self, user, book):
            ...         return True
        """
        def decorator(policy_class: type) -> type:
            self.register(subject, policy_class)
            return policy_class
        return decorator

    def register(self, subject: str | type, policy_ctor: PolicyCtor) -> None:
        """
        Bind a policy constructor to a subject.

        The constructor is called with no arguments each time policies are
        built, so every Ability gets its own policy objects.

        Args:
            subject: The subject name, or the subject class whose name to use.
            policy_ctor: A policy class or any zero-argument factory.

        Raises:
            ConfigurationError: If the subject or constructor is invalid.

        Example:
            >>> registry.register(Book, BookPolicy)
        """
        if not callable(policy_ctor):
            raise ConfigurationError(
                config_key="policy_ctor",
                expected="a callable returning a policy",
                received=policy_ctor,
            )

        subject_name = _to_subject_name(subject)
        self._bind(PolicyBinding(subject_name, policy_ctor=policy_ctor))

    def register_instance(self, subject: str | type, policy: Any) -> None:
        """
        Bind a shared, already-built policy to a subject.

        The same object is handed to every Ability, possibly from several
        threads at once. Only use this for policies without mutable state.

        Args:
            subject: The subject name, or the subject class whose name to use.
            policy: The policy object or mapping of action rules.

        Example:
            >>> registry.register_instance("Book", {"view": lambda user, book: True})
        """
        if policy is None or isinstance(policy, type):
            raise ConfigurationError(
                config_key="policy",
                expected="a policy instance or mapping (use register() for classes)",
                received=policy,
            )

        subject_name = _to_subject_name(subject)
        self._bind(PolicyBinding(subject_name, instance=policy))

    def _bind(self, binding: PolicyBinding) -> None:
        with self._lock:
            existing = self._bindings.get(binding.subject_name)
            if existing is not None:
                logger.warning(
                    f"Overwriting policy for '{binding.subject_name}': "
                    f"{existing.describe()} -> {binding.describe()}"
                )

            self._bindings[binding.subject_name] = binding

        kind = "shared policy" if binding.shared else "policy"
        logger.debug(
            f"Registered {kind} '{binding.describe()}' for subject '{binding.subject_name}'"
        )

    def get_binding(self, subject_name: str) -> PolicyBinding:
        """
        Get the binding for a subject.

        Raises:
            PolicyNotFoundError: If nothing is registered for the subject.
        """
        with self._lock:
            binding = self._bindings.get(subject_name)
            if binding is None:
                raise PolicyNotFoundError(subject_name, list(self._bindings))
            return binding

    def get_policy(self, subject_name: str) -> Any:
        """
        Get a policy for a subject.

        Returns a fresh instance for constructor bindings and the shared
        object for instance bindings.

        Raises:
            PolicyNotFoundError: If nothing is registered for the subject.
        """
        return self.get_binding(subject_name).resolve()

    def has_policy(self, subject: str | type) -> bool:
        """Check if a policy is registered for a subject name or class."""
        subject_name = _to_subject_name(subject)
        with self._lock:
            return subject_name in self._bindings

    def list_policies(self) -> dict[str, str]:
        """
        List all registered policies.

        Returns:
            Dictionary mapping subject names to policy names.

        Example:
            >>> registry.list_policies()
            {'Book': 'BookPolicy', 'Comment': 'dict'}
        """
        with self._lock:
            return {
                subject_name: binding.describe()
                for subject_name, binding in self._bindings.items()
            }

    def unregister(self, subject: str | type) -> bool:
        """
        Remove the binding for a subject.

        Returns:
            True if a binding was removed, False if none was registered.
        """
        subject_name = _to_subject_name(subject)
        with self._lock:
            if subject_name in self._bindings:
                del self._bindings[subject_name]
                logger.debug(f"Unregistered policy for subject '{subject_name}'")
                return True
            return False

    def clear(self) -> None:
        """Remove all bindings."""
        with self._lock:
            self._bindings.clear()
            logger.debug("Cleared all registered policies")

    def build_policies(self) -> dict[str, Any]:
        """
        Build the subject -> policy mapping for one Ability.

        Constructor bindings are instantiated afresh on every call; shared
        bindings contribute their single instance. Exceptions raised by a
        constructor propagate unchanged.
        """
        with self._lock:
            bindings = list(self._bindings.values())

        return {binding.subject_name: binding.resolve() for binding in bindings}

    def verify_actions(self, required: Mapping[str | type, Iterable[str]]) -> None:
        """
        Check at startup that every required subject and action is defined.

        Raises the same errors an Ability would raise on first use, so a
        missing registration fails the deploy instead of a request.

        Args:
            required: Mapping of subject (name or class) to the actions
                that must be defined for it.

        Raises:
            PolicyNotFoundError: If a subject has no policy.
            ActionNotFoundError: If a policy lacks a required action.

        Example:
            >>> registry.verify_actions({Book: ["view", "update"]})
        """
        for subject, actions in required.items():
            subject_name = _to_subject_name(subject)
            policy = self.get_policy(subject_name)

            for action in actions:
                if find_action(policy, action) is None:
                    raise ActionNotFoundError(action, subject_name, list_actions(policy))

        logger.debug(f"Verified actions for {len(required)} subject(s)")

    def __contains__(self, subject: object) -> bool:
        if not isinstance(subject, (str, type)) or subject == "":
            return False
        return self.has_policy(subject)

    def __len__(self) -> int:
        with self._lock:
            return len(self._bindings)


# Global registry instance for convenience
_global_registry: PolicyRegistry | None = None
_global_registry_lock = threading.Lock()


def get_global_registry() -> PolicyRegistry:
    """
    Get the global policy registry instance.

    Creates one if it doesn't exist. This provides a convenient
    process-wide registry for applications that declare their policies at
    import time.

    Example:
        >>> registry = get_global_registry()
        >>> @registry.policy("Book")
        ... class BookPolicy(Policy):
        ...     pass
    """
    global _global_registry
    if _global_registry is not None:
        return _global_registry
    with _global_registry_lock:
        # Double-check after acquiring lock
        if _global_registry is None:
            _global_registry = PolicyRegistry()
        return _global_registry


def reset_global_registry() -> None:
    """
    Reset the global registry.

    Clears the global registry instance. Primarily useful for testing.
    """
    global _global_registry
    with _global_registry_lock:
        if _global_registry is not None:
            _global_registry.clear()
        _global_registry = None

"""
Custom exceptions for policy-authorization.

This module defines the exception hierarchy for the package. Configuration
problems (a missing policy, an undefined action) and authorization denials
are deliberately separate branches so that host code can never mistake a
setup bug for a legitimate "access denied".
"""

from __future__ import annotations

from typing import Any


class PolicyAuthorizationError(Exception):
    """
    Base exception for all policy-authorization errors.

    Attributes:
        message: Human-readable error description.
        details: Additional context about the error.

    Example:
        >>> try:
        ...     ability.can("update", book)
        ... except PolicyAuthorizationError as e:
        ...     logger.error(f"Authorization setup error: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class PolicyNotFoundError(PolicyAuthorizationError):
    """
    Raised when no policy is registered for a subject.

    This is a configuration error, not a denial: it means a subject was
    checked before anyone bound a policy to it.

    Attributes:
        subject_name: The resolved subject name with no policy.
        available_policies: Registered subject names (for debugging).

    Example:
        >>> raise PolicyNotFoundError("Invoice", available_policies=["Book"])
    """

    def __init__(
        self,
        subject_name: str,
        available_policies: list[str] | None = None,
    ) -> None:
        self.subject_name = subject_name
        self.available_policies = sorted(available_policies or [])

        message = f"No policy found for subject '{subject_name}'"
        if self.available_policies:
            message += f". Available policies: {', '.join(self.available_policies)}"

        details = {
            "subject_name": subject_name,
            "available_policies": self.available_policies,
        }
        super().__init__(message, details)


class ActionNotFoundError(PolicyAuthorizationError):
    """
    Raised when a policy defines no rule for the requested action.

    Attributes:
        action: The action that has no rule.
        subject_name: The subject whose policy was consulted, if known.
        available_actions: Actions the policy does define.

    Example:
        >>> raise ActionNotFoundError(
        ...     "publish",
        ...     subject_name="Book",
        ...     available_actions=["create", "update"],
        ... )
    """

    def __init__(
        self,
        action: str,
        subject_name: str | None = None,
        available_actions: list[str] | None = None,
    ) -> None:
        self.action = action
        self.subject_name = subject_name
        self.available_actions = sorted(available_actions or [])

        message = f"Action '{action}' not found"
        if subject_name:
            message += f" in policy for subject '{subject_name}'"
        if self.available_actions:
            message += f". Available actions: {', '.join(self.available_actions)}"

        details = {
            "action": action,
            "subject_name": subject_name,
            "available_actions": self.available_actions,
        }
        super().__init__(message, details)


class AuthorizationError(PolicyAuthorizationError):
    """
    Raised by Ability.authorize() when a check is denied.

    can() and cannot() never raise this; they return booleans. It exists for
    call sites that prefer to bail out with an exception and translate it
    into a 403 at the edge.

    Attributes:
        action: The action that was denied.
        subject_name: The subject the action was checked against.
        user: The user the ability is bound to.
    """

    def __init__(
        self,
        action: str,
        subject_name: str,
        user: Any = None,
    ) -> None:
        self.action = action
        self.subject_name = subject_name
        self.user = user

        message = f"Not authorized to '{action}' subject '{subject_name}'"
        details = {
            "action": action,
            "subject_name": subject_name,
        }
        super().__init__(message, details)


class ConfigurationError(PolicyAuthorizationError):
    """
    Raised when a policy binding is invalid.

    This catches mistakes at registration time rather than on the first
    request that happens to hit them.

    Attributes:
        config_key: The binding or setting that has an issue.
        expected: What was expected.
        received: What was actually provided.

    Example:
        >>> raise ConfigurationError(
        ...     config_key="policy_ctor",
        ...     expected="a callable returning a policy",
        ...     received=42,
        ... )
    """

    def __init__(
        self,
        config_key: str,
        expected: str | None = None,
        received: Any = None,
    ) -> None:
        self.config_key = config_key
        self.expected = expected
        self.received = received

        message = f"Configuration error for '{config_key}'"
        if expected:
            message += f": expected {expected}"
        if received is not None:
            message += f", got {received!r}"

        details = {
            "config_key": config_key,
            "expected": expected,
            "received": str(received) if received is not None else None,
        }
        super().__init__(message, details)

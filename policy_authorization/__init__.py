"""
policy-authorization: policy-based authorization for Python applications.

Each subject (a model such as Book) gets a policy whose methods are the
rules for each action. An Ability binds one user to those policies and
answers can/cannot questions.

Basic Usage:
    >>> from policy_authorization import AbilityFactory, Policy
    >>>
    >>> class BookPolicy(Policy):
    ...     def before(self, user, action):
    ...         return True if user["role"] == "ADMIN" else None
    ...
    ...     def create(self, user, book):
    ...         return True
    ...
    ...     def update(self, user, book):
    ...         return book is not None and user["id"] == book.user_id
    >>>
    >>> factory = AbilityFactory({Book: BookPolicy})
    >>>
    >>> # Per request
    >>> ability = factory.create(current_user)
    >>> if ability.cannot("update", book):
    ...     return forbidden()
"""

__version__ = "0.1.0"

from policy_authorization.ability import Ability
from policy_authorization.exceptions import (
    ActionNotFoundError,
    AuthorizationError,
    ConfigurationError,
    PolicyAuthorizationError,
    PolicyNotFoundError,
)
from policy_authorization.factory import AbilityFactory
from policy_authorization.policies import (
    Policy,
    PolicyRegistry,
    get_global_registry,
    reset_global_registry,
)
from policy_authorization.types import (
    PreCheck,
    SubjectKind,
    SubjectRef,
    resolve_subject,
    subject_name_of,
)

__all__ = [
    "__version__",
    # Engine
    "Ability",
    "AbilityFactory",
    # Policies
    "Policy",
    "PolicyRegistry",
    "get_global_registry",
    "reset_global_registry",
    # Types
    "PreCheck",
    "SubjectKind",
    "SubjectRef",
    "resolve_subject",
    "subject_name_of",
    # Exceptions
    "PolicyAuthorizationError",
    "PolicyNotFoundError",
    "ActionNotFoundError",
    "AuthorizationError",
    "ConfigurationError",
]

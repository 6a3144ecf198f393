"""
Core type definitions for policy-authorization.

This module defines how the things being authorized are represented
(subject names, subject types and subject instances) and the tri-state
result of a policy's pre-check.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from policy_authorization.exceptions import ConfigurationError


class SubjectKind(Enum):
    """The three forms a subject can take."""

    NAME = "name"
    TYPE = "type"
    INSTANCE = "instance"


@dataclass(frozen=True)
class SubjectRef:
    """
    A resolved subject: its lookup name plus, for instances, the instance.

    Only the INSTANCE variant carries a payload. NAME and TYPE subjects are
    tag-only, so policies receive None for them.

    Attributes:
        kind: Which form the subject was given in.
        name: The subject name used for policy lookup.
        instance: The subject instance, or None for NAME/TYPE subjects.

    Example:
        >>> SubjectRef.of_name("Book")
        SubjectRef(kind=<SubjectKind.NAME: 'name'>, name='Book', instance=None)
        >>> SubjectRef.of_instance(Book(id=1, user_id=1)).name
        'Book'
    """
    kind: SubjectKind
    name: str
    instance: Any = None

    @classmethod
    def of_name(cls, name: str) -> SubjectRef:
        if not name:
            raise ConfigurationError(
                config_key="subject",
                expected="a non-empty subject name",
                received=name,
            )
        return cls(SubjectKind.NAME, name)

    @classmethod
    def of_type(cls, subject_type: type) -> SubjectRef:
        return cls(SubjectKind.TYPE, subject_name_of(subject_type))

    @classmethod
    def of_instance(cls, instance: Any) -> SubjectRef:
        return cls(SubjectKind.INSTANCE, subject_name_of(instance), instance)


def subject_name_of(subject: Any) -> str:
    """
    Get the subject name of a class or of an instance's class.

    A class may report its own name by defining a `__subject_name__`
    string attribute; otherwise its `__name__` is used. Subclasses inherit
    an explicit `__subject_name__`.

    Raises:
        ConfigurationError: If the class reports an empty or non-string name.

    Example:
        >>> class Article:
        ...     __subject_name__ = "Post"
        >>> subject_name_of(Article)
        'Post'
        >>> subject_name_of(Article())
        'Post'
    """
    subject_type = subject if isinstance(subject, type) else type(subject)
    name = getattr(subject_type, "__subject_name__", None)
    if name is None:
        name = subject_type.__name__

    if not isinstance(name, str) or not name:
        raise ConfigurationError(
            config_key="__subject_name__",
            expected="a non-empty string",
            received=name,
        )
    return name


def resolve_subject(subject: Any) -> SubjectRef:
    """
    Resolve any accepted subject form to a SubjectRef.

    Resolution order:
        1. A SubjectRef is returned unchanged.
        2. A string is a subject name.
        3. A class is a subject type marker (never instantiated).
        4. Anything else is a subject instance.

    Example:
        >>> resolve_subject("Book").name == resolve_subject(Book).name == "Book"
        True
    """
    if isinstance(subject, SubjectRef):
        return subject
    if isinstance(subject, str):
        return SubjectRef.of_name(subject)
    if isinstance(subject, type):
        return SubjectRef.of_type(subject)
    return SubjectRef.of_instance(subject)


class PreCheck(Enum):
    """
    Result of a policy's `before` pre-check.

    ALLOW and DENY short-circuit the action rule; NO_OPINION falls through
    to it. Pre-checks may return these members directly or the plain
    Python equivalents True, False and None.
    """

    ALLOW = "allow"
    DENY = "deny"
    NO_OPINION = "no_opinion"

    @classmethod
    def coerce(cls, value: Any) -> PreCheck:
        """
        Convert a pre-check return value to a PreCheck.

        Raises:
            TypeError: If the value is not a bool, None or PreCheck. Truthy
                values such as 1 or "yes" are rejected rather than guessed at.
        """
        if isinstance(value, PreCheck):
            return value
        if value is None:
            return cls.NO_OPINION
        if value is True:
            return cls.ALLOW
        if value is False:
            return cls.DENY
        raise TypeError(
            f"Pre-check must return True, False, None or a PreCheck member, "
            f"got {type(value).__name__}: {value!r}"
        )

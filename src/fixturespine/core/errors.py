"""
Structured error types for fixture-spine.

Provides a small hierarchy of typed errors with metadata for categorisation,
logging and root cause analysis through error chaining.

Manifesto:
    - **Typed Error Hierarchy:** Store, fixture, migration and config failures
      are different things and callers catch them differently
    - **Rich Context:** Errors carry the model, version or task they relate to
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                     FixtureSpineError                            │
        │  (category, retryable, context, cause)                           │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  StoreError          FixtureError         MigrationError         │
        │  (DATABASE)          (VALIDATION)         (ORCHESTRATION)        │
        │     │                    │                     │                  │
        │  StoreReadError      FixtureNotFound      TaskNotFoundError      │
        │  StoreWriteError     InvalidFixture       DuplicateTaskError     │
        │  RecordNotFound                                                  │
        │  UnknownModel        ConfigError                                 │
        │  UnknownRelation     (CONFIG)                                    │
        └─────────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Catch StoreError inside a migration task
    ✅ DO: Let it propagate so the sequencer aborts the run

    ❌ DON'T: Raise for a guard-satisfied no-op
    ✅ DO: Return TaskOutcome.ALREADY_SATISFIED and log a warning

Tags:
    error-handling, exception-hierarchy, error-context, fixture-spine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    DATABASE = "DATABASE"  # Store reads and writes
    VALIDATION = "VALIDATION"  # Fixture documents, lookups
    CONFIG = "CONFIG"  # Missing or invalid settings
    ORCHESTRATION = "ORCHESTRATION"  # Task registry, version registry
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only fields that are set end up in ``to_dict()``; anything not covered by
    a typed field goes into ``metadata``.

    Attributes:
        model: Store model the failure relates to (e.g. ``"Client"``)
        version: Fixture version being applied (e.g. ``"004"``)
        task: Migration task name
        relation: Relation name for pivot/attach failures
        metadata: Additional key-value pairs
    """

    model: str | None = None
    version: str | None = None
    task: str | None = None
    relation: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["model", "version", "task", "relation"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class FixtureSpineError(Exception):
    """
    Base exception for all fixture-spine errors.

    Subclasses set ``default_category`` and ``default_retryable`` to provide
    sensible defaults for their domain.

    Examples:
        >>> error = FixtureSpineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(model="Tag").context.model
        'Tag'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> FixtureSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise StoreWriteError("insert failed").with_context(model="Tag")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# STORE ERRORS
# =============================================================================


class StoreError(FixtureSpineError):
    """Failure reported by the underlying persistent store."""

    default_category = ErrorCategory.DATABASE


class StoreReadError(StoreError):
    """A lookup or scan against the store failed."""

    pass


class StoreWriteError(StoreError):
    """An insert, edit or relation mutation failed."""

    pass


class RecordNotFoundError(StoreError):
    """An edit targeted a record that does not exist."""

    def __init__(self, model: str, criteria: dict[str, Any]):
        super().__init__(
            f"No {model} record matches {criteria!r}",
            context=ErrorContext(model=model, metadata={"criteria": dict(criteria)}),
        )


class UnknownModelError(StoreError):
    """The store has no model with the requested name."""

    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Unknown model: {model}", context=ErrorContext(model=model))


class UnknownRelationError(StoreError):
    """The model has no relation with the requested name."""

    def __init__(self, model: str, relation: str):
        super().__init__(
            f"Model {model} has no relation {relation!r}",
            context=ErrorContext(model=model, relation=relation),
        )


# =============================================================================
# FIXTURE ERRORS
# =============================================================================


class FixtureError(FixtureSpineError):
    """Fixture registry lookup or document error."""

    default_category = ErrorCategory.VALIDATION


class FixtureNotFoundError(FixtureError):
    """No fixture group or entry matches the lookup."""

    pass


class InvalidFixtureError(FixtureError):
    """A fixture document failed validation."""

    pass


# =============================================================================
# MIGRATION ERRORS
# =============================================================================


class MigrationError(FixtureSpineError):
    """Task or version registry error."""

    default_category = ErrorCategory.ORCHESTRATION


class TaskNotFoundError(MigrationError):
    """Raised when a task name is not registered."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        super().__init__(
            f"No task registered as {name!r}. Available tasks: {available or 'none'}",
            context=ErrorContext(task=name),
        )


class DuplicateTaskError(MigrationError):
    """Raised when a task name is registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Task already registered: {name}", context=ErrorContext(task=name))


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(FixtureSpineError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "FixtureSpineError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "RecordNotFoundError",
    "UnknownModelError",
    "UnknownRelationError",
    "FixtureError",
    "FixtureNotFoundError",
    "InvalidFixtureError",
    "MigrationError",
    "TaskNotFoundError",
    "DuplicateTaskError",
    "ConfigError",
]

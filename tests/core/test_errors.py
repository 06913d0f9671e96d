"""Tests for fixturespine.core.errors module."""

import pytest

from fixturespine.core.errors import (
    ConfigError,
    DuplicateTaskError,
    ErrorCategory,
    ErrorContext,
    FixtureError,
    FixtureNotFoundError,
    FixtureSpineError,
    MigrationError,
    RecordNotFoundError,
    StoreError,
    StoreWriteError,
    TaskNotFoundError,
    UnknownRelationError,
)


class TestErrorContext:

    def test_to_dict_includes_only_set_fields(self):
        ctx = ErrorContext(model="Tag", metadata={"slug": "news"})

        assert ctx.to_dict() == {"model": "Tag", "slug": "news"}

    def test_empty_context(self):
        assert ErrorContext().to_dict() == {}


class TestFixtureSpineError:

    def test_defaults(self):
        error = FixtureSpineError("boom")

        assert error.message == "boom"
        assert error.category is ErrorCategory.INTERNAL
        assert error.retryable is False

    def test_with_context_sets_known_fields_and_metadata(self):
        error = FixtureSpineError("boom").with_context(version="004", attempt=2)

        assert error.context.version == "004"
        assert error.context.metadata == {"attempt": 2}

    def test_cause_is_chained(self):
        cause = OSError("disk")
        error = StoreWriteError("insert failed", cause=cause)

        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "disk"

    def test_to_dict(self):
        error = StoreWriteError("insert failed").with_context(model="Client")

        assert error.to_dict() == {
            "error_type": "StoreWriteError",
            "message": "insert failed",
            "category": "DATABASE",
            "retryable": False,
            "context": {"model": "Client"},
        }


class TestHierarchy:

    @pytest.mark.parametrize(
        "error, base, category",
        [
            (StoreWriteError("x"), StoreError, ErrorCategory.DATABASE),
            (RecordNotFoundError("Setting", {"key": "k"}), StoreError, ErrorCategory.DATABASE),
            (UnknownRelationError("Tag", "posts"), StoreError, ErrorCategory.DATABASE),
            (FixtureNotFoundError("x"), FixtureError, ErrorCategory.VALIDATION),
            (TaskNotFoundError("t"), MigrationError, ErrorCategory.ORCHESTRATION),
            (DuplicateTaskError("t"), MigrationError, ErrorCategory.ORCHESTRATION),
            (ConfigError("x"), FixtureSpineError, ErrorCategory.CONFIG),
        ],
    )
    def test_categories(self, error, base, category):
        assert isinstance(error, base)
        assert isinstance(error, FixtureSpineError)
        assert error.category is category

    def test_record_not_found_carries_criteria(self):
        error = RecordNotFoundError("Setting", {"key": "password"})

        assert error.context.model == "Setting"
        assert error.context.metadata["criteria"] == {"key": "password"}
        assert "password" in str(error)

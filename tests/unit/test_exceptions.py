"""Tests for hbpatch.exceptions module."""

import pytest

from hbpatch.exceptions import (
    ChangeListLoadError,
    ConfigError,
    HbpatchError,
    InvalidChangeError,
    ScriptGenerationError,
)
from hbpatch.types import ChangeType


class TestExceptionHierarchy:
    """Tests for exception hierarchy."""

    def test_exception_hierarchy(self):
        """All exceptions inherit from HbpatchError."""
        assert issubclass(ChangeListLoadError, HbpatchError)
        assert issubclass(ScriptGenerationError, HbpatchError)
        assert issubclass(InvalidChangeError, ScriptGenerationError)
        assert issubclass(ConfigError, HbpatchError)
        assert issubclass(HbpatchError, Exception)

    def test_invalid_change_error_fields(self):
        error = InvalidChangeError("users", "bad change", ChangeType.ALTER)
        assert error.table_name == "users"
        assert error.change_type == ChangeType.ALTER
        assert str(error) == "bad change"

    def test_invalid_change_error_caught_as_base(self):
        with pytest.raises(HbpatchError):
            raise InvalidChangeError("t", "boom")

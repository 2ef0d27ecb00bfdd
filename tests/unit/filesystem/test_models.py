"""Unit tests for trashcan domain models."""

from pathlib import Path

import pytest
from pydantic import ValidationError
from trashctl.filesystem.models import OperationResult, TrashDirectory, TrashRequest


class TestTrashRequest:
    """Tests for TrashRequest."""

    def test_defaults_are_off(self) -> None:
        """Every option defaults to False."""
        request = TrashRequest()
        assert not any(request.model_dump().values())

    def test_frozen(self) -> None:
        """Requests cannot be changed after creation."""
        request = TrashRequest()
        with pytest.raises(ValidationError):
            request.force = True  # type: ignore[misc]

    def test_unknown_option_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TrashRequest(dry_run=True)  # type: ignore[call-arg]


class TestOperationResult:
    """Tests for OperationResult."""

    def test_success(self) -> None:
        """A result without errors succeeds with exit status 0."""
        result = OperationResult(count=2)
        assert result.success
        assert result.exit_status == 0

    def test_failure(self) -> None:
        """Any error makes the exit status 1, whatever the count."""
        result = OperationResult(count=5, errors=["x: Permission denied"])
        assert not result.success
        assert result.exit_status == 1


class TestTrashDirectory:
    """Tests for TrashDirectory."""

    def test_str_and_identity(self) -> None:
        """Trash directories print as their path and compare by value."""
        a = TrashDirectory(path=Path("/mnt/.Trash/1000/files"), mount_point=Path("/mnt"))
        b = TrashDirectory(path=Path("/mnt/.Trash/1000/files"), mount_point=Path("/mnt"))

        assert str(a) == "/mnt/.Trash/1000/files"
        assert a == b
        assert len({a, b}) == 1

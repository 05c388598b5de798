"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from rolegate.config import Settings


pytestmark = pytest.mark.unit


class TestSettings:
    """Tests for Settings."""

    def test_identity_header_default(self) -> None:
        """Verify the identity header defaults to X-User-ID."""
        assert Settings().identity_header == "X-User-ID"

    def test_identity_header_stripped(self) -> None:
        """Verify surrounding whitespace is removed from the header name."""
        assert Settings(identity_header="  X-Forwarded-User ").identity_header == (
            "X-Forwarded-User"
        )

    def test_identity_header_blank_rejected(self) -> None:
        """Verify a blank header name is rejected."""
        with pytest.raises(ValidationError):
            Settings(identity_header="   ")

    def test_async_database_url(self) -> None:
        """Verify the asyncpg driver is selected."""
        settings = Settings(database_url="postgresql://u:p@db:5432/rolegate")

        assert settings.async_database_url.startswith("postgresql+asyncpg://")

    def test_log_level_normalized(self) -> None:
        """Verify the log level is upper-cased."""
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_log_level_unknown_rejected(self) -> None:
        """Verify an unknown log level is rejected."""
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

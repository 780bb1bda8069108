"""Unit tests for registration input checks."""

import pytest

from earnhub.services.user.registration_service import RegistrationService


class TestRegistrationInput:
    """Field validation before any database access."""

    @pytest.fixture
    def service(self, mock_session):
        return RegistrationService(mock_session)

    def test_valid_input(self, service):
        assert service.validate_input("Ada", "ada@example.com", "secret1") == (True, None, None)

    @pytest.mark.parametrize(
        ("name", "email", "password", "code"),
        [
            ("", "ada@example.com", "secret1", "INVALID_NAME"),
            ("Ada", "ada.example.com", "secret1", "INVALID_EMAIL"),
            ("Ada", "@example.com", "secret1", "INVALID_EMAIL"),
            ("Ada", "ada@example.com", "123", "WEAK_PASSWORD"),
        ],
    )
    def test_invalid_input(self, service, name, email, password, code):
        is_valid, _, error_code = service.validate_input(name, email, password)

        assert is_valid is False
        assert error_code == code

    @pytest.mark.asyncio
    async def test_invalid_input_touches_nothing(self, service, mock_session):
        result = await service.register_user("Ada", "nope", "secret1")

        assert result.error_code == "INVALID_EMAIL"
        mock_session.execute.assert_not_awaited()
        mock_session.commit.assert_not_awaited()

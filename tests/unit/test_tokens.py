"""Tests for purpose-scoped tokens and one-time codes."""

from datetime import timedelta
from itertools import permutations
from uuid import uuid4

import pytest

from src.scribe.core.config import Settings
from src.scribe.core.exceptions import InvalidToken
from src.scribe.core.security import TokenPurpose, TokenService, hash_token
from src.scribe.models.base import utc_now

pytestmark = pytest.mark.unit

SIGNED_PURPOSES = list(TokenPurpose)


class TestIssueAndVerify:
    @pytest.mark.parametrize("purpose", SIGNED_PURPOSES)
    def test_round_trip_returns_subject(self, token_service: TokenService, purpose: TokenPurpose):
        user_id = uuid4()
        token = token_service.issue(purpose, user_id)
        assert token_service.verify(token, purpose) == str(user_id)

    @pytest.mark.parametrize(("issued", "checked"), list(permutations(SIGNED_PURPOSES, 2)))
    def test_token_never_verifies_for_another_purpose(
        self, token_service: TokenService, issued: TokenPurpose, checked: TokenPurpose
    ):
        token = token_service.issue(issued, uuid4())
        with pytest.raises(InvalidToken):
            token_service.verify(token, checked)

    def test_expired_token_rejected(self, token_service: TokenService):
        token = token_service.issue(TokenPurpose.ACCESS, uuid4(), ttl=timedelta(seconds=-5))
        with pytest.raises(InvalidToken):
            token_service.verify(token, TokenPurpose.ACCESS)

    def test_tampered_token_rejected(self, token_service: TokenService):
        token = token_service.issue(TokenPurpose.ACCESS, uuid4())
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        with pytest.raises(InvalidToken):
            token_service.verify(tampered, TokenPurpose.ACCESS)

    def test_garbage_rejected(self, token_service: TokenService):
        with pytest.raises(InvalidToken):
            token_service.verify("not-a-jwt", TokenPurpose.ACCESS)

    def test_tokens_for_same_subject_are_distinct(self, token_service: TokenService):
        user_id = uuid4()
        first = token_service.issue(TokenPurpose.ACCESS, user_id)
        second = token_service.issue(TokenPurpose.ACCESS, user_id)
        assert first != second

    def test_token_from_other_secret_rejected(self, settings: Settings):
        other = TokenService(
            settings.model_copy(update={"jwt_secret_key": "another-secret-key-that-is-32-chars!"})
        )
        token = other.issue(TokenPurpose.ACCESS, uuid4())
        with pytest.raises(InvalidToken):
            TokenService(settings).verify(token, TokenPurpose.ACCESS)

    def test_pair_contains_access_and_refresh(self, token_service: TokenService):
        user_id = uuid4()
        pair = token_service.issue_pair(user_id)
        assert pair.token_type == "bearer"
        assert token_service.verify(pair.access_token, TokenPurpose.ACCESS) == str(user_id)
        assert token_service.verify(pair.refresh_token, TokenPurpose.REFRESH) == str(user_id)


class TestOneTimeCodes:
    def test_verification_code_is_six_digits_stored_plain(self, token_service: TokenService):
        code = token_service.issue_one_time_code(TokenPurpose.VERIFY)
        assert len(code.value) == 6
        assert code.value.isdigit()
        assert code.value[0] != "0"
        assert code.stored_value == code.value

    @pytest.mark.parametrize("purpose", [TokenPurpose.RESET, TokenPurpose.INVITE])
    def test_link_secrets_are_stored_hashed(
        self, token_service: TokenService, purpose: TokenPurpose
    ):
        code = token_service.issue_one_time_code(purpose)
        assert code.stored_value == hash_token(code.value)
        assert code.value not in code.stored_value
        assert len(code.value) >= 32

    def test_expiry_follows_settings(self, token_service: TokenService, settings: Settings):
        before = utc_now()
        invite = token_service.issue_one_time_code(TokenPurpose.INVITE)
        reset = token_service.issue_one_time_code(TokenPurpose.RESET)

        assert invite.expires_at >= before + timedelta(days=settings.invite_expire_days)
        assert reset.expires_at >= before + timedelta(minutes=settings.password_reset_expire_minutes)
        assert reset.expires_at < before + timedelta(
            minutes=settings.password_reset_expire_minutes + 1
        )

    def test_secrets_are_unique(self, token_service: TokenService):
        values = {token_service.issue_one_time_code(TokenPurpose.RESET).value for _ in range(20)}
        assert len(values) == 20

    @pytest.mark.parametrize("purpose", [TokenPurpose.ACCESS, TokenPurpose.REFRESH])
    def test_session_purposes_have_no_code_form(
        self, token_service: TokenService, purpose: TokenPurpose
    ):
        with pytest.raises(ValueError):
            token_service.issue_one_time_code(purpose)

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from src.core.auth import Identity, resolve_identity
from src.core.exceptions import TokenError
from src.core.services.token import TokenService


class TestTokenService:
    """Signed session token issue/verify"""

    def test_issued_token_verifies_to_subject(self, token_service):
        token, ttl = token_service.issue_token("alice")
        assert token
        assert ttl == 3600
        assert token_service.verify_token(token) == "alice"

    def test_remember_does_not_change_expiry(self, token_service):
        _, ttl = token_service.issue_token("alice", remember=False)
        _, remembered_ttl = token_service.issue_token("alice", remember=True)
        assert ttl == remembered_ttl == 3600

    def test_token_expires_after_sixty_minutes(self, token_service):
        issued_at = datetime.now(timezone.utc) - timedelta(minutes=61)
        token, _ = token_service.issue_token("alice", remember=False, issued_at=issued_at)
        assert token_service.verify_token(token) is None

    def test_token_still_valid_before_expiry(self, token_service):
        issued_at = datetime.now(timezone.utc) - timedelta(minutes=59)
        token, _ = token_service.issue_token("alice", issued_at=issued_at)
        assert token_service.verify_token(token) == "alice"

    def test_token_signed_with_other_key_is_rejected(self, token_service):
        forged, _ = TokenService("another-key").issue_token("alice")
        assert token_service.verify_token(forged) is None

    @pytest.mark.parametrize("token", ["", "abc", "a.b.c", "Bearer xyz"])
    def test_malformed_token_is_rejected(self, token_service, token):
        assert token_service.verify_token(token) is None

    def test_token_without_subject_is_rejected(self, token_service):
        exp = datetime.now(timezone.utc) + timedelta(minutes=5)
        token = jwt.encode({"sub": "", "exp": exp}, "test-secret-key", algorithm="HS256")
        assert token_service.verify_token(token) is None

    def test_missing_signing_key_is_an_error(self):
        with pytest.raises(TokenError):
            TokenService("")

    def test_empty_subject_is_an_error(self, token_service):
        with pytest.raises(TokenError):
            token_service.issue_token("")


class TestResolveIdentity:
    """Token cookie to Identity"""

    def test_no_cookie_is_anonymous(self, token_service):
        assert resolve_identity({}, token_service) == Identity.anonymous()

    def test_empty_cookie_is_anonymous(self, token_service):
        assert not resolve_identity({"Token": ""}, token_service).is_authenticated

    def test_valid_cookie_is_authenticated(self, token_service):
        token, _ = token_service.issue_token("bobby")
        identity = resolve_identity({"Token": token}, token_service)
        assert identity.is_authenticated
        assert identity.screen_name == "bobby"

    def test_garbage_cookie_is_anonymous(self, token_service):
        assert not resolve_identity({"Token": "garbage"}, token_service).is_authenticated

    def test_expired_cookie_is_anonymous(self, token_service):
        issued_at = datetime.now(timezone.utc) - timedelta(hours=2)
        token, _ = token_service.issue_token("bobby", issued_at=issued_at)
        assert not resolve_identity({"Token": token}, token_service).is_authenticated

    def test_other_cookie_names_are_ignored(self, token_service):
        token, _ = token_service.issue_token("bobby")
        assert not resolve_identity({"token": token, "Session": token}, token_service).is_authenticated

import httpx
import pytest

from docrelay.errors import AuthenticationInvalid, AuthenticationRequired, AutomationFailure
from docrelay.schemas.edit_schema import EditDocRequest
from docrelay.services.credential_resolver import AuthMode, CredentialResolver, TokenValidator
from docrelay.services.platform_detector import GOOGLE_DOCS, NOTION
from docrelay.storage.credentials_repo import CredentialsRepo

SESSION_BLOB = {"cookies": [{"name": "SID", "value": "abc", "domain": ".google.com", "path": "/"}], "origins": []}


class StubValidator:
    def __init__(self, info=None, error=None):
        self.info = info or {"email": "user@example.com", "expires_in": 3599}
        self.error = error
        self.calls = []

    async def validate(self, access_token):
        self.calls.append(access_token)
        if self.error is not None:
            raise self.error
        return self.info


@pytest.fixture
def repo(tmp_path):
    return CredentialsRepo(base_dir=tmp_path / "credentials")


def _request(**fields):
    payload = {"targetUrl": "https://docs.google.com/document/d/1/edit", "instruction": "hello"}
    payload.update(fields)
    return EditDocRequest.model_validate(payload)


class TestPrecedence:
    @pytest.mark.asyncio
    async def test_oauth_wins_over_session_blob(self, repo):
        validator = StubValidator()
        resolver = CredentialResolver(repo, validator)
        request = _request(credentials={"access_token": "ya29.token"}, authState=SESSION_BLOB)

        resolved = await resolver.resolve(request, GOOGLE_DOCS)

        assert resolved.mode is AuthMode.OAUTH
        assert resolved.access_token == "ya29.token"
        assert resolved.storage_state is None
        assert validator.calls == ["ya29.token"]

    @pytest.mark.asyncio
    async def test_session_blob_wins_over_lookup_key(self, repo):
        repo.save("u1", "google", {"cookies": [], "origins": [{"origin": "stored"}]})
        resolver = CredentialResolver(repo, StubValidator())

        resolved = await resolver.resolve(_request(authState=SESSION_BLOB, userId="u1"), GOOGLE_DOCS)

        assert resolved.mode is AuthMode.SESSION
        assert resolved.storage_state == SESSION_BLOB

    @pytest.mark.asyncio
    async def test_lookup_key_reads_store(self, repo):
        repo.save("u1", "notion", SESSION_BLOB)
        resolver = CredentialResolver(repo, StubValidator())

        resolved = await resolver.resolve(_request(userId="u1"), NOTION)

        assert resolved.mode is AuthMode.STORED
        assert resolved.storage_state == SESSION_BLOB

    @pytest.mark.asyncio
    async def test_default_user_is_used_without_lookup_key(self, repo):
        repo.save("server", "google", SESSION_BLOB)
        resolver = CredentialResolver(repo, StubValidator(), default_user_id="server")

        resolved = await resolver.resolve(_request(), GOOGLE_DOCS)

        assert resolved.mode is AuthMode.STORED

    @pytest.mark.asyncio
    async def test_empty_access_token_falls_through(self, repo):
        validator = StubValidator()
        resolver = CredentialResolver(repo, validator)

        resolved = await resolver.resolve(_request(credentials={"access_token": ""}, authState=SESSION_BLOB), GOOGLE_DOCS)

        assert resolved.mode is AuthMode.SESSION
        assert validator.calls == []


class TestFailures:
    @pytest.mark.asyncio
    async def test_nothing_supplied_requires_login(self, repo):
        resolver = CredentialResolver(repo, StubValidator())

        with pytest.raises(AuthenticationRequired) as exc_info:
            await resolver.resolve(_request(), GOOGLE_DOCS)

        detail = exc_info.value.to_detail()
        assert exc_info.value.status_code == 401
        assert detail["loginRequired"] is True
        assert detail["platform"] == "Google Docs"
        assert detail["loginUrl"] == GOOGLE_DOCS.login_url

    @pytest.mark.asyncio
    async def test_missing_stored_session_requires_login(self, repo):
        resolver = CredentialResolver(repo, StubValidator())

        with pytest.raises(AuthenticationRequired) as exc_info:
            await resolver.resolve(_request(userId="nobody"), NOTION)

        assert exc_info.value.platform == "Notion"

    @pytest.mark.asyncio
    async def test_unusable_user_id_requires_login(self, repo):
        resolver = CredentialResolver(repo, StubValidator())

        with pytest.raises(AuthenticationRequired):
            await resolver.resolve(_request(userId="../other"), NOTION)

    @pytest.mark.asyncio
    async def test_corrupt_stored_session_is_automation_failure(self, repo):
        (repo.base_dir / "u1").mkdir()
        (repo.base_dir / "u1" / "notion.json").write_text("{not json", encoding="utf-8")
        resolver = CredentialResolver(repo, StubValidator())

        with pytest.raises(AutomationFailure) as exc_info:
            await resolver.resolve(_request(userId="u1"), NOTION)

        assert exc_info.value.status_code == 500
        assert "could not be read" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_invalid_token_is_authentication_invalid(self, repo):
        resolver = CredentialResolver(repo, StubValidator(error=AuthenticationInvalid("Token validation failed: invalid_token")))

        with pytest.raises(AuthenticationInvalid):
            await resolver.resolve(_request(credentials={"access_token": "bad"}, authState=SESSION_BLOB), GOOGLE_DOCS)


class TestTokenValidator:
    @pytest.mark.asyncio
    async def test_valid_token(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["access_token"] == "good"
            return httpx.Response(200, json={"email": "a@b.com", "expires_in": 100})

        validator = TokenValidator("https://oauth.test/tokeninfo", transport=httpx.MockTransport(handler))
        info = await validator.validate("good")
        assert info["email"] == "a@b.com"

    @pytest.mark.asyncio
    async def test_rejected_token(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_token", "error_description": "Invalid Value"})

        validator = TokenValidator("https://oauth.test/tokeninfo", transport=httpx.MockTransport(handler))
        with pytest.raises(AuthenticationInvalid) as exc_info:
            await validator.validate("bad")
        assert "Invalid Value" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        validator = TokenValidator("https://oauth.test/tokeninfo", transport=httpx.MockTransport(handler))
        with pytest.raises(AuthenticationInvalid):
            await validator.validate("any")

"""Token storage and expiry policy tests."""

import json
import os
import platform

import pytest

from exceptions import MalformedCredentialError
from oauth.expiry import is_valid
from oauth.models import Credential
from conftest import NOW_MS
from utils.storage import TokenStorage


def test_save_tokens_computes_expiry_from_issue_time(storage):
    credential = storage.save_tokens("access-1", "refresh-1", 3600)

    assert credential.expiry_timestamp_ms == NOW_MS + 3_600_000
    assert storage.load() == credential


def test_document_holds_three_string_entries(storage):
    storage.save_tokens("access-1", "refresh-1", 60)

    data = json.loads(storage.token_file.read_text())
    assert data == {
        "access_token": "access-1",
        "refresh_token": "refresh-1",
        "token_expiry": str(NOW_MS + 60_000),
    }


def test_save_without_refresh_token_does_not_keep_previous_one(storage):
    storage.save_tokens("access-1", "refresh-1", 3600)
    storage.save_tokens("access-2", None, 3600)

    credential = storage.load()
    assert credential.access_token == "access-2"
    assert credential.refresh_token is None


@pytest.mark.parametrize(
    "access_token, expires_in",
    [(None, 3600), ("", 3600), ("access-2", None), ("access-2", ""), ("access-2", "soon")],
)
def test_malformed_save_leaves_store_unchanged(storage, access_token, expires_in):
    original = storage.save_tokens("access-1", "refresh-1", 3600)

    with pytest.raises(MalformedCredentialError):
        storage.save_tokens(access_token, "refresh-2", expires_in)

    assert storage.load() == original


def test_malformed_save_on_empty_store_persists_nothing(storage):
    with pytest.raises(MalformedCredentialError):
        storage.save(Credential(access_token="a", refresh_token=None, expiry_timestamp_ms=None))

    assert storage.load() is None
    assert not storage.token_file.exists()


def test_clear_removes_every_entry(storage):
    storage.save_tokens("access-1", "refresh-1", 3600)
    storage.clear()

    assert storage.load() is None
    assert not storage.token_file.exists()
    # Clearing an empty store is fine
    storage.clear()


def test_corrupt_file_loads_as_absent(storage):
    storage.token_file.write_text("{not json")
    assert storage.load() is None


def test_incomplete_document_loads_as_absent(storage):
    storage.token_file.write_text(json.dumps({"access_token": "a"}))
    assert storage.load() is None


def test_no_temp_files_left_behind(storage):
    storage.save_tokens("access-1", "refresh-1", 3600)
    storage.save_tokens("access-2", "refresh-2", 3600)

    assert os.listdir(storage.token_file.parent) == ["tokens.json"]


@pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
def test_token_file_is_private(storage):
    storage.save_tokens("access-1", None, 3600)
    assert storage.token_file.stat().st_mode & 0o777 == 0o600


def test_status_does_not_expose_tokens(storage, clock):
    assert storage.get_status()["has_tokens"] is False

    storage.save_tokens("secret-access", "secret-refresh", 7200)
    status = storage.get_status()

    assert status["has_tokens"] is True
    assert status["is_expired"] is False
    assert status["has_refresh_token"] is True
    assert status["time_until_expiry"] == "2h 0m"
    assert "secret" not in json.dumps(status)
    assert set(status) == {"has_tokens", "is_expired", "has_refresh_token", "expires_at", "time_until_expiry"}

    clock.advance(7200 * 1000)
    assert storage.get_status()["is_expired"] is True


def test_credential_repr_hides_tokens():
    credential = Credential("secret-access", "secret-refresh", 1)
    assert "secret" not in repr(credential)


class TestExpiryPolicy:
    EXPIRY = NOW_MS + 3_600_000

    def credential(self):
        return Credential("a", None, self.EXPIRY)

    def test_expired_credential_is_invalid(self):
        assert not is_valid(self.credential(), self.EXPIRY)
        assert not is_valid(self.credential(), self.EXPIRY + 1)

    def test_credential_well_before_expiry_is_valid(self):
        assert is_valid(self.credential(), self.EXPIRY - 60_001)
        assert is_valid(self.credential(), NOW_MS)

    def test_last_minute_before_expiry_is_invalid(self):
        assert not is_valid(self.credential(), self.EXPIRY - 60_000)
        assert not is_valid(self.credential(), self.EXPIRY - 1)

    def test_custom_skew(self):
        assert is_valid(self.credential(), self.EXPIRY - 1, skew_ms=0)

    def test_missing_credential_or_expiry_is_invalid(self):
        assert not is_valid(None, NOW_MS)
        assert not is_valid(Credential("a", None, None), NOW_MS)


def test_default_token_file_comes_from_settings(monkeypatch, tmp_path):
    monkeypatch.setattr("utils.storage.TOKEN_FILE", str(tmp_path / "d" / "tokens.json"))
    assert TokenStorage().token_file == tmp_path / "d" / "tokens.json"

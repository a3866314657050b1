"""
Test the thin SDK wrappers and request validators
"""

from unittest.mock import MagicMock, patch

import pytest
from firebase_admin import auth

from lexi_simplify.exceptions import UnauthorizedError
from lexi_simplify.services.identity_service import IdentityService
from lexi_simplify.services.storage_service import StorageService
from lexi_simplify.utils.validators import is_blank, parse_bearer_token, sanitize_filename


def make_blob(name: str, fail_delete: bool = False):
    blob = MagicMock()
    blob.name = name
    if fail_delete:
        blob.delete.side_effect = ConnectionError("permission denied")
    return blob


class TestStorageService:
    """Test StorageService against a mocked storage client."""

    def make_service(self, blobs=None):
        client = MagicMock()
        bucket = MagicMock()
        client.bucket.return_value = bucket
        client.list_blobs.return_value = blobs or []
        bucket.blob.side_effect = lambda name: next((b for b in blobs or [] if b.name == name), make_blob(name))
        return StorageService(client, "lexi-bucket"), client, bucket

    def test_uri(self):
        service, _, _ = self.make_service()
        assert service.uri("a/b.pdf") == "gs://lexi-bucket/a/b.pdf"

    async def test_upload_sets_content_type(self):
        service, _, bucket = self.make_service()
        blob = make_blob("key.pdf")
        bucket.blob.side_effect = None
        bucket.blob.return_value = blob

        await service.upload("key.pdf", b"%PDF-1.4", "application/pdf")

        blob.upload_from_string.assert_called_once_with(b"%PDF-1.4", content_type="application/pdf")

    async def test_list_names_uses_prefix(self):
        blobs = [make_blob("ocr-output/1/a.json"), make_blob("ocr-output/1/b.json")]
        service, client, _ = self.make_service(blobs)

        names = await service.list_names("ocr-output/1/")

        assert names == ["ocr-output/1/a.json", "ocr-output/1/b.json"]
        client.list_blobs.assert_called_once_with("lexi-bucket", prefix="ocr-output/1/")

    async def test_delete_prefix_continues_past_failures(self):
        blobs = [
            make_blob("out/1.json"),
            make_blob("out/2.json", fail_delete=True),
            make_blob("out/3.json"),
        ]
        service, _, _ = self.make_service(blobs)

        deleted = await service.delete_prefix("out/")

        assert deleted == 2
        for blob in blobs:
            blob.delete.assert_called_once()


class TestIdentityService:
    """Test IdentityService token handling."""

    async def test_valid_token(self):
        with patch.object(auth, "verify_id_token", return_value={"uid": "alice"}) as verify:
            uid = await IdentityService().verify("good-token")

        assert uid == "alice"
        verify.assert_called_once_with("good-token", app=None)

    @pytest.mark.parametrize("error", [
        auth.InvalidIdTokenError("bad signature"),
        auth.ExpiredIdTokenError("expired", cause=None),
        ValueError("Illegal ID token provided"),
    ])
    async def test_rejected_token(self, error):
        with patch.object(auth, "verify_id_token", side_effect=error):
            with pytest.raises(UnauthorizedError):
                await IdentityService().verify("bad-token")

    async def test_token_without_uid(self):
        with patch.object(auth, "verify_id_token", return_value={}):
            with pytest.raises(UnauthorizedError):
                await IdentityService().verify("odd-token")


class TestValidators:
    """Test request validation helpers."""

    def test_parse_bearer_token(self):
        assert parse_bearer_token("Bearer abc.def") == "abc.def"
        assert parse_bearer_token(None) is None
        assert parse_bearer_token("") is None
        assert parse_bearer_token("bearer abc") is None
        assert parse_bearer_token("Bearer    ") is None

    def test_sanitize_filename(self):
        assert sanitize_filename("contract.pdf") == "contract.pdf"
        assert "/" not in sanitize_filename("../../etc/passwd")
        assert sanitize_filename(None).startswith("unnamed_")

        long_name = "a" * 300 + ".pdf"
        sanitized = sanitize_filename(long_name)
        assert len(sanitized) == 200
        assert sanitized.endswith(".pdf")

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("  \n")
        assert not is_blank("x")

"""Tests for file-backed object storage."""

import pytest

from soundmap.core.objects import LocalObjectStore, ObjectStoreError, get_object_file_path


class TestGetObjectFilePath:
    """Tests for get_object_file_path function."""

    def test_nested_key(self, tmp_path):
        path = get_object_file_path(str(tmp_path), "audio/1-abcd1234.webm")
        assert path == tmp_path.resolve() / "audio" / "1-abcd1234.webm"

    @pytest.mark.parametrize("key", ["../outside.webm", "audio/../../outside.webm", "", "."])
    def test_escaping_keys_rejected(self, tmp_path, key):
        """Test that keys resolving outside the base directory are refused."""
        with pytest.raises(ObjectStoreError):
            get_object_file_path(str(tmp_path), key)


class TestLocalObjectStore:
    """Tests for LocalObjectStore."""

    @pytest.mark.asyncio
    async def test_round_trip_keeps_content_type(self, tmp_path):
        store = LocalObjectStore(str(tmp_path))

        await store.put("audio/1-abcd1234.ogg", b"OggS", "audio/ogg")
        stored = await store.get("audio/1-abcd1234.ogg")

        assert stored.content == b"OggS"
        assert stored.content_type == "audio/ogg"

    @pytest.mark.asyncio
    async def test_missing_object(self, tmp_path):
        assert await LocalObjectStore(str(tmp_path)).get("audio/missing.webm") is None

    @pytest.mark.asyncio
    async def test_escaping_key_on_put(self, tmp_path):
        with pytest.raises(ObjectStoreError):
            await LocalObjectStore(str(tmp_path / "base")).put("../x.webm", b"x", "audio/webm")

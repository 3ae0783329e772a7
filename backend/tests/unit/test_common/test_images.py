"""
Image Decoding Unit Tests
"""

import base64

import pytest

from datagate.common.images import decoder_base64, parse_data_uri

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
PNG_URI = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


class TestParseDataUri:
    """Data URI Parsing Test"""

    def test_png(self):
        assert parse_data_uri(PNG_URI) == ("png", PNG_BYTES)

    def test_jpeg(self):
        uri = "data:image/jpeg;base64," + base64.b64encode(b"jpeg").decode()
        assert parse_data_uri(uri) == ("jpeg", b"jpeg")

    @pytest.mark.parametrize("img_str", [
        "data:image/png;base64" + base64.b64encode(PNG_BYTES).decode(),
        "data:image/png;base64,aGVsbG8=,aGVsbG8=",
        "data:image/gif;base64,R0lGODlh",
        "data:image/jpg;base64,aGVsbG8=",
        "data:image/png;base64,abc",
        "image/png,aGVsbG8=",
        "",
    ])
    def test_rejected(self, img_str):
        """Test payloads that are not a single allowed base64 data URI"""
        assert parse_data_uri(img_str) is None


class TestDecoderBase64:
    """Image Storing Test"""

    @pytest.mark.asyncio
    async def test_store_png(self, upload_disk):
        """Test the decoded file is written below the path on the disk"""
        path = await decoder_base64(PNG_URI, "logos", suffix="_7", disk=upload_disk)

        assert path.startswith("upload/logos/")
        assert path.endswith("_7.png")

        key = path[len("upload/"):]
        assert await upload_disk.get(key) == PNG_BYTES

    @pytest.mark.asyncio
    async def test_store_without_suffix(self, upload_disk):
        path = await decoder_base64(PNG_URI, "avatars", disk=upload_disk)

        file_name = path.rsplit("/", 1)[-1]
        assert file_name.endswith(".png")
        assert len(file_name) == len("0123456789abc.png")

    @pytest.mark.asyncio
    async def test_rejected_payload_writes_nothing(self, upload_disk, tmp_path):
        path = await decoder_base64("data:image/gif;base64,R0lGODlh", "logos", disk=upload_disk)

        assert path is None
        assert not (tmp_path / "upload").exists()

"""Tests for AvatarImageStore."""

import pytest

from src.live_auctioneer.errors import InvalidInput, ValidationError
from src.live_auctioneer.services.uploads import ALLOWED_IMAGE_TYPES, AvatarImageStore

MAX_BYTES = 10 * 1024 * 1024


@pytest.fixture
def store(mock_settings):
    return AvatarImageStore(mock_settings)


class TestAvatarImageStoreInit:
    def test_creates_avatars_directory(self, store, mock_settings):
        assert store.directory.exists()
        assert store.directory.name == "avatars"
        assert str(store.directory).startswith(mock_settings.public_dir)

    def test_url_prefix(self, store):
        assert store.url_prefix == "/avatars/"


class TestIngest:
    @pytest.mark.parametrize("content_type", sorted(ALLOWED_IMAGE_TYPES))
    def test_accepts_allowed_types(self, store, sample_png_bytes, content_type):
        stored = store.ingest(sample_png_bytes, content_type, original_filename="me.png")
        assert stored.url.startswith("/avatars/")
        assert stored.url == f"/avatars/{stored.filename}"
        assert stored.path.read_bytes() == sample_png_bytes

    @pytest.mark.parametrize(
        "content_type", ["image/gif", "image/svg+xml", "application/pdf", "text/plain", "", None]
    )
    def test_rejects_other_types(self, store, sample_png_bytes, content_type):
        with pytest.raises(InvalidInput, match="Invalid file type"):
            store.ingest(sample_png_bytes, content_type)
        assert list(store.directory.iterdir()) == []

    def test_type_check_is_case_insensitive(self, store, sample_png_bytes):
        assert store.ingest(sample_png_bytes, "IMAGE/PNG").size == len(sample_png_bytes)

    def test_accepts_exact_ceiling(self, store):
        stored = store.ingest(b"\x00" * MAX_BYTES, "image/jpeg", original_filename="big.jpg")
        assert stored.size == MAX_BYTES

    def test_rejects_one_byte_over_ceiling(self, store):
        with pytest.raises(InvalidInput, match="File too large"):
            store.ingest(b"\x00" * (MAX_BYTES + 1), "image/jpeg")

    def test_declared_size_is_honoured(self, store, sample_png_bytes):
        with pytest.raises(InvalidInput):
            store.ingest(sample_png_bytes, "image/png", declared_size=MAX_BYTES + 1)

    def test_invalid_input_is_a_validation_error(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.ingest(b"", "image/gif")
        assert exc_info.value.status_code == 400

    def test_filename_keeps_extension(self, store, sample_png_bytes):
        stored = store.ingest(sample_png_bytes, "image/png", original_filename="Portrait.PNG")
        assert stored.filename.startswith("avatar-")
        assert stored.filename.endswith(".png")

    def test_filenames_are_unique(self, store, sample_png_bytes):
        names = {
            store.ingest(sample_png_bytes, "image/png", original_filename="a.png").filename
            for _ in range(20)
        }
        assert len(names) == 20
        assert len(list(store.directory.iterdir())) == 20

    def test_content_is_not_sniffed(self, store):
        stored = store.ingest(b"definitely not an image", "image/webp", original_filename="x.webp")
        assert stored.path.exists()

"""Upload validation, downscaling and storage of plant photos."""

import io
import re

import pytest
from PIL import Image

from app.shared.core.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    MissingImageError,
)
from app.shared.infrastructure.storage.file_manager import FileManager

from .conftest import make_image_bytes


@pytest.fixture
def file_manager(tmp_path) -> FileManager:
    return FileManager(upload_dir=str(tmp_path / "uploads"), max_size_bytes=1024 * 1024)


def test_missing_image_rejected(file_manager) -> None:
    with pytest.raises(MissingImageError) as exc_info:
        file_manager.validate_upload(b"", "leaf.jpg", "image/jpeg")

    assert exc_info.value.status_code == 400


def test_non_image_content_type_rejected(file_manager) -> None:
    with pytest.raises(InvalidFileTypeError) as exc_info:
        file_manager.validate_upload(b"%PDF-1.7", "notes.pdf", "application/pdf")

    assert exc_info.value.error_code == "INVALID_FILE_TYPE"
    assert exc_info.value.details["actual_type"] == "application/pdf"


def test_jpg_alias_accepted(file_manager) -> None:
    file_manager.validate_upload(b"\xff\xd8", "leaf.jpg", "image/jpg")


def test_oversized_upload_rejected(file_manager) -> None:
    with pytest.raises(FileTooLargeError) as exc_info:
        file_manager.validate_upload(b"x" * (1024 * 1024 + 1), "big.png", "image/png")

    assert exc_info.value.status_code == 413


@pytest.mark.asyncio
async def test_large_image_downscaled_to_bounded_jpeg(file_manager, png_bytes) -> None:
    processed = await file_manager.process_image(png_bytes, "image/png")

    assert processed["mime_type"] == "image/jpeg"
    assert (processed["width"], processed["height"]) == (800, 600)
    assert processed["original_size_bytes"] == len(png_bytes)
    with Image.open(io.BytesIO(processed["data"])) as img:
        assert img.format == "JPEG"
        assert img.size == (800, 600)


@pytest.mark.asyncio
async def test_small_image_not_enlarged(file_manager) -> None:
    small = make_image_bytes(size=(300, 200), fmt="JPEG")

    processed = await file_manager.process_image(small, "image/jpeg")

    assert (processed["width"], processed["height"]) == (300, 200)


@pytest.mark.asyncio
async def test_transparent_png_flattened_to_rgb(file_manager) -> None:
    buffer = io.BytesIO()
    Image.new("RGBA", (50, 50), (0, 128, 0, 100)).save(buffer, format="PNG")

    processed = await file_manager.process_image(buffer.getvalue(), "image/png")

    with Image.open(io.BytesIO(processed["data"])) as img:
        assert img.mode == "RGB"


@pytest.mark.asyncio
async def test_undecodable_bytes_rejected(file_manager) -> None:
    with pytest.raises(InvalidFileTypeError):
        await file_manager.process_image(b"definitely not an image", "image/jpeg")


@pytest.mark.asyncio
async def test_decompression_bomb_rejected(file_manager, png_bytes, monkeypatch) -> None:
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

    with pytest.raises(InvalidFileTypeError) as exc_info:
        await file_manager.process_image(png_bytes, "image/png")

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_store_image_writes_timestamped_file(file_manager, tmp_path) -> None:
    reference = await file_manager.store_image(b"jpeg-bytes")

    stored = tmp_path / "uploads" / reference.rsplit("/", 1)[-1]
    assert stored.read_bytes() == b"jpeg-bytes"
    assert re.fullmatch(r"\d{13}-[0-9a-f]{16}\.jpg", stored.name)

import pytest

from src.input_handler.handler import InputHandler
from src.utils.exceptions import (
    CorruptedFileError,
    FileNotFoundError,
    InputError,
    UnsupportedFileTypeError,
)


@pytest.fixture
def handler():
    return InputHandler()


def test_validate_supported_file(handler, tmp_path):
    bill = tmp_path / "bill.PNG"
    bill.write_bytes(b"not really a png")

    assert handler.validate_file(bill) == bill


def test_missing_file(handler, tmp_path):
    with pytest.raises(FileNotFoundError):
        handler.validate_file(tmp_path / "missing.png")


def test_directory_is_not_a_file(handler, tmp_path):
    with pytest.raises(InputError):
        handler.validate_file(tmp_path)


def test_unsupported_extension(handler, tmp_path):
    doc = tmp_path / "bill.pdf"
    doc.write_bytes(b"%PDF")

    with pytest.raises(UnsupportedFileTypeError) as exc_info:
        handler.validate_file(doc)
    assert exc_info.value.details["file_type"] == ".pdf"


def test_empty_file(handler, tmp_path):
    empty = tmp_path / "bill.jpg"
    empty.touch()

    with pytest.raises(CorruptedFileError):
        handler.validate_file(empty)


def test_collect_files_skips_processed_images(handler, tmp_path):
    for name in ("b.png", "a.jpg", "processed-a.jpg", "notes.txt"):
        (tmp_path / name).write_bytes(b"x")

    files = handler.collect_files(tmp_path)

    assert [f.name for f in files] == ["a.jpg", "b.png"]


def test_read_text(handler, tmp_path):
    text_file = tmp_path / "bill.txt"
    text_file.write_text("TOTAL ₹ 120.00", encoding="utf-8")

    assert handler.read_text(text_file) == "TOTAL ₹ 120.00"
    with pytest.raises(FileNotFoundError):
        handler.read_text(tmp_path / "nope.txt")

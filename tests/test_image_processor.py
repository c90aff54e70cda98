import pytest
from PIL import Image, ImageDraw

from src.input_handler.image_processor import ImageProcessor
from src.utils.exceptions import CorruptedFileError


@pytest.fixture
def bill_image(tmp_path):
    image = Image.new("RGB", (100, 200), "white")
    draw = ImageDraw.Draw(image)
    draw.rectangle((10, 120, 90, 140), fill="black")
    path = tmp_path / "bill.png"
    image.save(path)
    return path


def test_preprocess_writes_processed_copy(bill_image):
    processed_path = ImageProcessor().preprocess_for_ocr(bill_image)

    assert processed_path == bill_image.with_name("processed-bill.png")
    assert bill_image.exists()
    with Image.open(processed_path) as processed:
        assert processed.mode == "L"
        # Top 15% cropped (200 -> 170), then upscaled by 1.5
        assert processed.size == (150, 255)


def test_preprocess_binarizes_before_upscaling():
    processor = ImageProcessor()
    processor.upscale_factor = 1

    image = Image.new("RGB", (40, 40), (200, 200, 200))
    ImageDraw.Draw(image).rectangle((5, 20, 35, 30), fill=(60, 60, 60))

    processed = processor.preprocess(image)

    assert set(processed.getdata()) <= {0, 255}


def test_unreadable_image(tmp_path):
    broken = tmp_path / "broken.jpg"
    broken.write_bytes(b"this is not an image")

    with pytest.raises(CorruptedFileError):
        ImageProcessor().preprocess_for_ocr(broken)

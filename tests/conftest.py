import pytest
import sys
from io import BytesIO
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import social_canvas
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from social_canvas.core.models import ProcessingOptions, SourceImage  # noqa: E402


def encode_png(image: Image.Image) -> bytes:
    """Encode an image to PNG bytes (lossless, for exact fixtures)."""
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def make_source(name: str = "photo.png", size=(800, 600), color="red") -> SourceImage:
    """Solid-colour PNG source."""
    return SourceImage(data=encode_png(Image.new("RGB", size, color=color)), name=name, media_type="image/png")


def make_gradient(size=(80, 60)) -> Image.Image:
    """Image with distinct pixel values so resampling/blur changes are visible."""
    width, height = size
    image = Image.new("RGB", size)
    image.putdata([
        ((x * 255) // max(width - 1, 1), (y * 255) // max(height - 1, 1), ((x + y) * 7) % 256)
        for y in range(height)
        for x in range(width)
    ])
    return image


# Common test fixtures
@pytest.fixture
def plain_options():
    """Options with blur and overlay switched off, small canvas."""
    return ProcessingOptions(
        canvas_width=120,
        canvas_height=150,
        blur_radius=0,
        overlay_opacity=0,
        quality=0.9,
    )


@pytest.fixture
def gradient_image():
    return make_gradient()


@pytest.fixture
def sample_source():
    """800x600 red PNG source."""
    return make_source()


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image on disk."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path

"""
Unit Tests for SourceImage, BatchRun and source_stem.
"""

import pytest

from social_canvas.core.models import BatchRun, ProcessingOptions, SourceImage, source_stem


@pytest.mark.parametrize(
    "name,expected",
    [
        ("photo.jpg", "photo"),
        ("photo.final.png", "photo.final"),
        ("holiday/IMG_0042.JPG", "IMG_0042"),
        ("C:\\pics\\beach.webp", "beach"),
        ("README", "README"),
        (".hidden", ".hidden"),
    ],
)
def test_source_stem(name, expected):
    assert source_stem(name) == expected


def test_source_image_from_path(sample_image):
    source = SourceImage.from_path(sample_image)
    assert source.name == "sample.png"
    assert source.media_type == "image/png"
    assert source.stem == "sample"
    assert source.data == sample_image.read_bytes()


def test_batch_run_progress():
    sources = tuple(SourceImage(data=b"x", name=f"{i}.png") for i in range(4))
    run = BatchRun(sources=sources, options=ProcessingOptions(), pattern="{idx}")
    assert run.total == 4
    assert run.progress == 0.0
    run.completed = 3
    assert run.progress == 0.75
    assert not run.is_finished
    run.completed = 4
    assert run.progress == 1.0
    assert run.is_finished


def test_batch_run_empty_is_complete():
    run = BatchRun(sources=(), options=ProcessingOptions(), pattern="{idx}")
    assert run.progress == 1.0

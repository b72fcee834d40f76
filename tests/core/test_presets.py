"""
Unit Tests for canvas presets.
"""

import pytest

from social_canvas.core.presets import DEFAULT_PRESET, PRESETS, get_preset


def test_default_is_instagram_portrait():
    assert (DEFAULT_PRESET.width, DEFAULT_PRESET.height) == (1080, 1350)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Instagram Story 9:16", "instagram-story-9-16"),
        ("YouTube Thumbnail", "youtube-thumbnail"),
        ("LinkedIn Personal Cover", "linkedin-personal-cover"),
    ],
)
def test_slug(name, expected):
    preset = next(p for p in PRESETS if p.name == name)
    assert preset.slug == expected


def test_slugs_are_unique():
    slugs = [p.slug for p in PRESETS]
    assert len(slugs) == len(set(slugs))


@pytest.mark.parametrize("key", ["twitter-header", "Twitter Header", "  TWITTER HEADER "])
def test_get_preset_by_name_or_slug(key):
    assert get_preset(key).width == 1500


def test_get_preset_unknown():
    with pytest.raises(KeyError, match="Unknown preset"):
        get_preset("myspace-banner")

import math

import pytest

from animations.gnome_stripes import (
    GNOME_DARK_STRIPES_PATTERN,
    GnomeStripesAnimation,
    gnome_dark_stripes,
    pattern_index,
)
from services.movie_service import bake_frames


def test_pattern_has_32_integer_colors():
    assert len(GNOME_DARK_STRIPES_PATTERN) == 32
    for color in GNOME_DARK_STRIPES_PATTERN:
        assert all(isinstance(c, int) and 0 <= c <= 255 for c in (color.r, color.g, color.b))


def test_pattern_runs_from_purple_to_orange():
    first, last = GNOME_DARK_STRIPES_PATTERN[0], GNOME_DARK_STRIPES_PATTERN[-1]
    assert first.b > first.r
    assert last.r > last.b


def test_pattern_index_mirrors_every_other_repetition():
    assert [pattern_index(i, 4) for i in range(12)] == [0, 1, 2, 3, 3, 2, 1, 0, 0, 1, 2, 3]


def test_stripes_tile_without_seam():
    frame = gnome_dark_stripes(64)
    assert frame[32:] == list(reversed(frame[:32]))


def test_offset_shifts_the_strip():
    assert gnome_dark_stripes(10, offset=3)[0] == gnome_dark_stripes(13)[3]


def test_render_on_whole_offsets_matches_plain_pattern():
    animation = GnomeStripesAnimation(offset_per_second=2.0)
    frame = animation.render(0.5, 20)
    expected = gnome_dark_stripes(20, 1)
    assert [c.to_rgb() for c in frame] == [c.to_rgb() for c in expected]


def test_render_between_offsets_crossfades():
    animation = GnomeStripesAnimation(offset_per_second=1.0)
    frame = animation.render(0.5, 40)
    a = gnome_dark_stripes(40, 0)
    b = gnome_dark_stripes(40, 1)
    for mixed, x, y in zip(frame, a, b):
        assert mixed.r == pytest.approx((x.r + y.r) / 2)


def test_duration_is_192_seconds_at_default_speed():
    assert GnomeStripesAnimation().duration_s() == 192


def test_baked_loop_length():
    animation = GnomeStripesAnimation(offset_per_second=0.5)
    frames = bake_frames(animation, fps=2, number_of_leds=5)
    assert len(frames) == math.ceil(animation.duration_s() * 2)
    assert all(len(f) == 5 for f in frames)


def test_pattern_ends_on_lifted_orange():
    assert GNOME_DARK_STRIPES_PATTERN[-1].to_rgb() == (255, 38, 0)

import pytest

import anacrusis.intervals
import anacrusis.pitch
import anacrusis.rendering


# 60 beats per minute at 100 Hz: one beat is exactly 100 samples.
LOW_RATE = 100


@pytest.fixture
def low_rate_config () -> anacrusis.rendering.RenderConfig:

	"""A tiny render config so tests synthesize only a few hundred samples."""

	return anacrusis.rendering.RenderConfig(sample_rate=LOW_RATE, bpm=60.0, normalize="none", edit_fade=0.0)


@pytest.fixture
def fast_config () -> anacrusis.rendering.RenderConfig:

	"""A config with a sample rate high enough for audible pitches, but short renders."""

	return anacrusis.rendering.RenderConfig(sample_rate=8000, bpm=240.0)


@pytest.fixture
def c_major () -> anacrusis.intervals.Scale:

	"""C major rooted on middle C."""

	return anacrusis.intervals.Scale(anacrusis.pitch.C4, "major")

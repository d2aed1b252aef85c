import numpy
import pytest

import anacrusis.exceptions
import anacrusis.line
import anacrusis.note
import anacrusis.piece
import anacrusis.pitch
import anacrusis.rendering


C4 = anacrusis.pitch.C4
E4 = anacrusis.pitch.Pitch.from_name("E4")
G4 = anacrusis.pitch.Pitch.from_name("G4")


def _music () -> anacrusis.piece.Piece:

	"""
	Two lines of different lengths, one with a pickup.
	"""

	melody = anacrusis.note.piano(anacrusis.note.half(C4) + (-anacrusis.note.eighth(E4) + anacrusis.note.quarter(G4)))
	bassline = anacrusis.note.bass(anacrusis.note.whole(C4.octave(-2)))

	return melody * bassline


@pytest.mark.parametrize("chunk_size", [1, 333, 1000, 100000])
def test_stream_matches_render (chunk_size: int) -> None:

	"""Concatenated chunks equal the eagerly rendered buffer."""

	config = anacrusis.rendering.RenderConfig(sample_rate=8000, normalize="clip")
	rendered = anacrusis.rendering.render(_music(), config)
	chunks = list(anacrusis.rendering.stream(_music(), config, chunk_size))

	assert numpy.array_equal(numpy.concatenate(chunks), rendered.samples)
	assert all(len(chunk) == chunk_size for chunk in chunks[:-1])


def test_stream_is_restartable () -> None:

	"""Iterating a stream twice yields the same chunks."""

	config = anacrusis.rendering.RenderConfig(sample_rate=8000, normalize="none")
	samples = anacrusis.rendering.stream(_music(), config, 2048)

	first = numpy.concatenate(list(samples))
	second = numpy.concatenate(list(samples))

	assert numpy.array_equal(first, second)
	assert len(list(samples)) == len(samples)


def test_stream_chunks_are_read_only () -> None:

	"""Chunks handed to a consumer cannot be modified."""

	config = anacrusis.rendering.RenderConfig(sample_rate=8000, normalize="clip")
	chunk = next(iter(anacrusis.rendering.stream(_music(), config, 512)))

	with pytest.raises(ValueError):
		chunk[0] = 1.0


def test_stream_rejects_peak_policy () -> None:

	"""Peak normalization needs the whole buffer, so streaming refuses it."""

	with pytest.raises(anacrusis.exceptions.InvalidRenderConfig):
		anacrusis.rendering.stream(_music(), anacrusis.rendering.RenderConfig(normalize="peak"))


def test_stream_rejects_bad_chunk_size () -> None:

	"""Chunks must hold at least one sample."""

	with pytest.raises(anacrusis.exceptions.InvalidRenderConfig):
		anacrusis.rendering.stream(_music(), anacrusis.rendering.RenderConfig(normalize="clip"), 0)


def test_stream_default_config_clips () -> None:

	"""Without a config the stream uses the clip policy."""

	samples = anacrusis.rendering.stream(anacrusis.note.quarter(C4))

	assert samples.config.normalize == "clip"
	assert samples.total_samples == samples.config.sample_index(1)


def test_empty_stream () -> None:

	"""An empty line streams nothing."""

	assert list(anacrusis.rendering.stream(anacrusis.line.Line())) == []

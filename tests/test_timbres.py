import numpy
import pytest

import anacrusis.exceptions
import anacrusis.timbres


SAMPLE_RATE = 8000


# ── Envelope ─────────────────────────────────────────────────────────

def test_envelope_length_matches_request () -> None:

	"""The envelope always has exactly the requested length."""

	envelope = anacrusis.timbres.Envelope(attack=0.01, decay=0.05, sustain=0.5, release=0.02)

	for num_samples in (4, 5, 17, 100, 4001):
		assert len(envelope.shape(num_samples, SAMPLE_RATE)) == num_samples


def test_envelope_starts_and_ends_silent () -> None:

	"""Segments begin and end at zero so note edges are click-free."""

	envelope = anacrusis.timbres.Envelope(attack=0.01, decay=None, sustain=0.0, release=0.01)
	shape = envelope.shape(2000, SAMPLE_RATE)

	assert shape[0] == 0.0
	assert shape[-1] == 0.0
	assert shape.max() <= 1.0


def test_envelope_scales_to_short_notes () -> None:

	"""Attack and release never take more than a quarter of the segment each."""

	envelope = anacrusis.timbres.Envelope(attack=1.0, decay=0.0, sustain=1.0, release=1.0)
	shape = envelope.shape(100, SAMPLE_RATE)

	assert numpy.all(shape[25:75] == 1.0)


def test_tiny_envelope_is_silent () -> None:

	"""Fewer than four samples cannot hold an envelope."""

	assert numpy.all(anacrusis.timbres.Envelope().shape(3, SAMPLE_RATE) == 0.0)


# ── Timbres ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("name", ["sine", "piano", "bass", "electric_guitar", "drums"])
def test_builtin_timbres_stay_in_range (name: str) -> None:

	"""Every built-in timbre produces bounded, finite output with silent edges."""

	timbre = anacrusis.timbres.DEFAULT_TIMBRES[name]

	for frequency in (65.4, 261.6, 1046.5):
		samples = timbre.synthesize(frequency, 1600, SAMPLE_RATE)

		assert len(samples) == 1600
		assert numpy.all(numpy.isfinite(samples))
		assert numpy.max(numpy.abs(samples)) <= 1.0
		assert samples[-1] == pytest.approx(0.0, abs=1e-12)


def test_synthesis_is_deterministic () -> None:

	"""The same request gives identical samples, drums included."""

	for timbre in anacrusis.timbres.DEFAULT_TIMBRES.values():
		first = timbre.synthesize(220.0, 800, SAMPLE_RATE)
		second = timbre.synthesize(220.0, 800, SAMPLE_RATE)

		assert numpy.array_equal(first, second)


def test_harmonics_above_nyquist_are_skipped () -> None:

	"""A tone entirely above Nyquist is silent rather than aliased."""

	samples = anacrusis.timbres.SINE.synthesize(5000.0, 400, SAMPLE_RATE)

	assert numpy.all(samples == 0.0)


def test_rolloff_softens_high_notes () -> None:

	"""Loudness falls off above the rolloff frequency."""

	assert anacrusis.timbres.SINE.loudness(100.0) == 1.0
	assert anacrusis.timbres.SINE.loudness(264.0) == pytest.approx(0.5)


def test_drum_pieces () -> None:

	"""Pitch picks the kit piece around middle C."""

	assert anacrusis.timbres.drum_piece(65.4) == "kick"
	assert anacrusis.timbres.drum_piece(261.6) == "snare"
	assert anacrusis.timbres.drum_piece(523.3) == "hi_hat"
	assert anacrusis.timbres.drum_piece(2093.0) == "crash"


def test_decibels_to_amplitude () -> None:

	"""0 dB is unity, -20 dB is a tenth."""

	assert anacrusis.timbres.decibels_to_amplitude(0.0) == 1.0
	assert anacrusis.timbres.decibels_to_amplitude(-20.0) == pytest.approx(0.1)


# ── Edit fades ───────────────────────────────────────────────────────

def test_apply_fades () -> None:

	"""Edited edges ramp to silence; untouched edges are left alone."""

	segment = numpy.ones(100)

	faded = anacrusis.timbres.apply_fades(segment, fade_in=False, fade_out=True, fade_samples=10)

	assert faded[0] == 1.0
	assert faded[-1] == 0.0
	assert numpy.all(segment == 1.0)

	assert anacrusis.timbres.apply_fades(segment, fade_in=False, fade_out=False, fade_samples=10) is segment


# ── Registry ─────────────────────────────────────────────────────────

def test_registry_lookup () -> None:

	"""Known names resolve; unknown names are a render config error."""

	assert anacrusis.timbres.DEFAULT_TIMBRES.lookup("piano") is anacrusis.timbres.PIANO

	with pytest.raises(anacrusis.exceptions.InvalidRenderConfig):
		anacrusis.timbres.DEFAULT_TIMBRES.lookup("theremin")


def test_registry_extended_returns_new_registry () -> None:

	"""extended() leaves the original untouched."""

	organ = anacrusis.timbres.Timbre(name="organ", harmonics=((1, 1.0), (2, 0.5), (4, 0.25)))
	registry = anacrusis.timbres.DEFAULT_TIMBRES.extended(organ)

	assert "organ" in registry
	assert "organ" not in anacrusis.timbres.DEFAULT_TIMBRES
	assert len(registry) == len(anacrusis.timbres.DEFAULT_TIMBRES) + 1


def test_registry_is_immutable () -> None:

	"""The registry cannot be modified in place."""

	with pytest.raises(TypeError):
		anacrusis.timbres.DEFAULT_TIMBRES["organ"] = anacrusis.timbres.SINE

"""Timbre synthesis.

A timbre turns a frequency and a sample count into one note's samples. The
built-in instruments are additive: each is a small harmonic series of sine
partials shaped by an ADSR envelope that is scaled to the note's length, so
every segment starts and ends at silence. Drums are the exception. They pick a
kit piece from the pitch and build it from seeded noise and pitch sweeps, so
they are as reproducible as the rest.

Timbres are looked up by name in a ``TimbreRegistry``. ``DEFAULT_TIMBRES`` is
built once at import time. Registries are immutable, and ``extended()`` returns
a new one that includes extra timbres.
"""

import collections.abc
import dataclasses
import math
import types
import typing

import numpy

import anacrusis.exceptions


FloatArray = numpy.ndarray

# Concert-pitch C4, used to map drum pitches onto kit pieces.
_C4_FREQUENCY = 440.0 * 2.0 ** (-9 / 12)


def decibels_to_amplitude (decibels: float) -> float:

	return 10.0 ** (decibels / 20.0)


@dataclasses.dataclass(frozen=True)
class Envelope:

	"""
	Attack/decay/sustain/release shape, in seconds.

	``decay=None`` decays across the whole body of the note (a struck or
	plucked sound), reaching ``sustain`` just before the release. The attack and
	release are each capped at a quarter of the segment, so short notes keep
	their shape instead of being swallowed by the envelope.
	"""

	attack: float = 0.005
	decay: typing.Optional[float] = 0.0
	sustain: float = 1.0
	release: float = 0.02

	def shape (self, num_samples: int, sample_rate: int) -> FloatArray:

		if num_samples < 4:
			return numpy.zeros(num_samples)

		quarter = num_samples // 4
		attack = min(int(round(self.attack * sample_rate)), quarter)
		release = min(int(round(self.release * sample_rate)), quarter)
		body = num_samples - attack - release
		decay = body if self.decay is None else min(int(round(self.decay * sample_rate)), body)
		hold = body - decay

		return numpy.concatenate((
			numpy.linspace(0.0, 1.0, attack, endpoint=False),
			numpy.linspace(1.0, self.sustain, decay, endpoint=False),
			numpy.full(hold, self.sustain),
			numpy.linspace(self.sustain, 0.0, release),
		))


def apply_fades (segment: FloatArray, fade_in: bool, fade_out: bool, fade_samples: int) -> FloatArray:

	"""
	Apply a short linear fade to the edited edges of a segment.
	"""

	fade_samples = min(fade_samples, len(segment) // 2)

	if fade_samples <= 0 or not (fade_in or fade_out):
		return segment

	segment = segment.copy()
	ramp = numpy.linspace(0.0, 1.0, fade_samples)

	if fade_in:
		segment[:fade_samples] *= ramp

	if fade_out:
		segment[-fade_samples:] *= ramp[::-1]

	return segment


@dataclasses.dataclass(frozen=True)
class Timbre:

	"""
	An additive instrument voice.

	Parameters:
		name: Registry name, as used by ``Note.timbre``.
		harmonics: ``(multiple, amplitude)`` pairs; the sum is normalised by
			the total amplitude so the partials never exceed full scale.
		envelope: Amplitude envelope applied over the whole segment.
		level: Overall gain.
		rolloff: Frequency above which loudness falls off as ``rolloff / f``,
			keeping high notes from dominating. ``None`` disables it.
	"""

	name: str
	harmonics: typing.Tuple[typing.Tuple[float, float], ...] = ((1.0, 1.0),)
	envelope: Envelope = Envelope()
	level: float = 1.0
	rolloff: typing.Optional[float] = None

	def loudness (self, frequency: float) -> float:

		if self.rolloff is None:
			return self.level

		return self.level * min(max(self.rolloff / frequency, 0.0), 1.0)

	def tone (self, frequency: float, num_samples: int, sample_rate: int) -> FloatArray:

		"""
		Return the un-enveloped waveform, normalised to at most full scale.
		"""

		t = numpy.arange(num_samples) / sample_rate
		signal = numpy.zeros(num_samples)
		total = 0.0

		for multiple, amplitude in self.harmonics:

			if frequency * multiple >= sample_rate / 2:
				continue

			signal += amplitude * numpy.sin(2.0 * math.pi * frequency * multiple * t)
			total += abs(amplitude)

		if total > 0:
			signal /= total

		return signal

	def synthesize (self, frequency: float, num_samples: int, sample_rate: int) -> FloatArray:

		"""
		Return ``num_samples`` samples of this timbre playing ``frequency``.
		"""

		if num_samples <= 0:
			return numpy.zeros(0)

		tone = self.tone(frequency, num_samples, sample_rate)

		return tone * self.loudness(frequency) * self.envelope.shape(num_samples, sample_rate)


_DRUM_SEEDS: typing.Dict[str, int] = {
	"kick": 1,
	"snare": 2,
	"hi_hat": 3,
	"crash": 4,
}


def drum_piece (frequency: float) -> str:

	"""
	Map a pitch onto a kit piece: kick below F#3, snare up to F#4, hi-hat up to F#5, crash above.
	"""

	semitones = 12.0 * math.log2(frequency / _C4_FREQUENCY)

	if semitones > 18:
		return "crash"

	if semitones > 6:
		return "hi_hat"

	if semitones < -6:
		return "kick"

	return "snare"


@dataclasses.dataclass(frozen=True)
class DrumTimbre (Timbre):

	"""
	A synthesized drum kit. The pitch selects the kit piece, not the tuning.
	"""

	def tone (self, frequency: float, num_samples: int, sample_rate: int) -> FloatArray:

		piece = drum_piece(frequency)
		t = numpy.arange(num_samples) / sample_rate
		noise = numpy.random.default_rng(_DRUM_SEEDS[piece]).standard_normal(num_samples)

		if piece == "kick":
			sweep = 45.0 + 105.0 * numpy.exp(-t * 30.0)
			phase = 2.0 * math.pi * numpy.cumsum(sweep) / sample_rate
			return numpy.sin(phase) * numpy.exp(-t * 12.0)

		if piece == "snare":
			body = numpy.sin(2.0 * math.pi * 185.0 * t) * numpy.exp(-t * 25.0)
			return 0.4 * body + 0.6 * numpy.clip(noise / 3.0, -1.0, 1.0) * numpy.exp(-t * 20.0)

		# First difference of white noise: a crude high-pass for cymbals.
		bright = numpy.clip(numpy.diff(noise, prepend=0.0) / 6.0, -1.0, 1.0)

		if piece == "hi_hat":
			return bright * numpy.exp(-t * 60.0)

		return bright * numpy.exp(-t * 4.0)


class TimbreRegistry (collections.abc.Mapping):

	"""
	An immutable name -> ``Timbre`` table.
	"""

	def __init__ (self, timbres: typing.Iterable[Timbre] = ()) -> None:

		self._timbres: typing.Mapping[str, Timbre] = types.MappingProxyType({timbre.name: timbre for timbre in timbres})

	def __getitem__ (self, name: str) -> Timbre:

		return self._timbres[name]

	def __iter__ (self) -> typing.Iterator[str]:

		return iter(self._timbres)

	def __len__ (self) -> int:

		return len(self._timbres)

	def __hash__ (self) -> int:

		return hash(tuple(self._timbres.items()))

	def lookup (self, name: str) -> Timbre:

		"""
		Return the timbre called ``name``, raising ``InvalidRenderConfig`` if it is unknown.
		"""

		if name not in self._timbres:
			raise anacrusis.exceptions.InvalidRenderConfig(f"Unknown timbre '{name}'. Available: {sorted(self._timbres)}")

		return self._timbres[name]

	def extended (self, *timbres: Timbre) -> "TimbreRegistry":

		"""
		Return a new registry with ``timbres`` added (replacing any with the same name).
		"""

		return TimbreRegistry(list(self._timbres.values()) + list(timbres))


SINE = Timbre(
	name = "sine",
	envelope = Envelope(attack=0.04, decay=0.0, sustain=1.0, release=0.04),
	rolloff = 132.0,
)

PIANO = Timbre(
	name = "piano",
	harmonics = ((1, 1.0), (2, 1 / 4), (3, 1 / 6), (4, 1 / 10), (5, 1 / 12), (6, 1 / 12), (7, 1 / 36), (8, 1 / 72)),
	envelope = Envelope(attack=0.005, decay=None, sustain=0.0, release=0.01),
	rolloff = 528.0,
)

BASS = Timbre(
	name = "bass",
	harmonics = ((1, 1.0), (2, 1 / 10), (3, 2.0), (4, 1 / 5), (5, 1.0), (6, 1.0), (7, 1 / 3), (8, 1 / 10)),
	envelope = Envelope(attack=0.005, decay=None, sustain=0.0, release=0.01),
	rolloff = 132.0,
)

ELECTRIC_GUITAR = Timbre(
	name = "electric_guitar",
	harmonics = tuple(
		(multiple, decibels_to_amplitude(decibels))
		for multiple, decibels in ((1, 0.0), (2, 0.0), (3, 8.0), (4, 3.0), (5, -7.0), (6, -12.0), (7, -8.0), (8, -10.0))
	),
	envelope = Envelope(attack=0.005, decay=None, sustain=0.0, release=0.01),
	rolloff = 132.0,
)

DRUMS = DrumTimbre(
	name = "drums",
	envelope = Envelope(attack=0.001, decay=0.0, sustain=1.0, release=0.01),
	level = 0.8,
)

DEFAULT_TIMBRES = TimbreRegistry((SINE, PIANO, BASS, ELECTRIC_GUITAR, DRUMS))

"""Chords: groups of pitches struck together.

A ``Chord`` has no duration of its own. Giving it one (``half(chord)``) produces
a ``Piece`` with one single-note line per pitch, which then composes like any
other piece.

Module-level constants:
- ``CHORD_INTERVALS``: Maps chord quality names to semitone offsets from the root.
"""

from __future__ import annotations

import dataclasses
import functools
import typing

import anacrusis.algebra
import anacrusis.exceptions
import anacrusis.note
import anacrusis.piece
import anacrusis.pitch

if typing.TYPE_CHECKING:
	import anacrusis.intervals


CHORD_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"major": [0, 4, 7],
	"minor": [0, 3, 7],
	"diminished": [0, 3, 6],
	"augmented": [0, 4, 8],
	"dominant_7th": [0, 4, 7, 10],
	"major_7th": [0, 4, 7, 11],
	"minor_7th": [0, 3, 7, 10],
	"half_diminished_7th": [0, 3, 6, 10],
	"sus2": [0, 2, 7],
	"sus4": [0, 5, 7],
	"power_chord": [0, 7],
}


@dataclasses.dataclass(frozen=True)
class Chord:

	"""
	An unordered-in-time group of pitches, kept in the order given.
	"""

	pitches: typing.Tuple[anacrusis.pitch.Pitch, ...] = ()

	def __post_init__ (self) -> None:

		pitches = tuple(self.pitches)

		for pitch in pitches:
			if not isinstance(pitch, anacrusis.pitch.Pitch):
				raise TypeError(f"A chord holds pitches, got {pitch!r}")

		object.__setattr__(self, "pitches", pitches)

	@classmethod
	def from_degrees (cls, scale: anacrusis.intervals.Scale, degrees: typing.Iterable[int]) -> "Chord":

		"""
		Build a chord from 1-indexed scale degrees, e.g. ``[1, 3, 5]`` for a triad.
		"""

		return cls(tuple(scale.degree(degree) for degree in degrees))

	@classmethod
	def from_quality (cls, root: anacrusis.pitch.Pitch, quality: str) -> "Chord":

		"""
		Build a chord on ``root`` from a quality name in ``CHORD_INTERVALS``.
		"""

		if quality not in CHORD_INTERVALS:
			raise ValueError(f"Unknown chord quality: {quality}")

		return cls(tuple(root.semitone(offset) for offset in CHORD_INTERVALS[quality]))

	@classmethod
	def from_shape (cls, root: anacrusis.pitch.Pitch, offsets: typing.Iterable[int]) -> "Chord":

		"""
		Build a chord from semitone offsets above ``root``. The root is always included.
		"""

		return cls((root,) + tuple(root.semitone(offset) for offset in offsets))

	@property
	def lowest (self) -> typing.Optional[anacrusis.pitch.Pitch]:

		return min(self.pitches, key=lambda pitch: pitch.semitones, default=None)

	def semitone (self, change: int) -> "Chord":

		return Chord(tuple(pitch.semitone(change) for pitch in self.pitches))

	def octave (self, change: int) -> "Chord":

		return Chord(tuple(pitch.octave(change) for pitch in self.pitches))

	def transpose_to (self, target: anacrusis.pitch.Pitch) -> "Chord":

		"""
		Shift the chord so its lowest pitch lands on ``target``. An empty chord is unchanged.
		"""

		lowest = self.lowest

		if lowest is None:
			return self

		return self.semitone(target.semitones - lowest.semitones)

	def with_length (self, duration: anacrusis.note.Duration) -> anacrusis.piece.Piece:

		"""
		Return a piece with one line per pitch, each a single note of ``duration`` beats.
		"""

		return anacrusis.algebra.stack(*(anacrusis.note.Note(pitch, duration) for pitch in self.pitches))

	def strike (self, striker: typing.Callable[[anacrusis.pitch.Pitch], typing.Any]) -> anacrusis.piece.Piece:

		"""
		Stack ``striker(pitch)`` for every pitch, e.g. ``chord.strike(lambda p: piano(quarter(p)) * 4)``.
		"""

		return anacrusis.algebra.stack(*(striker(pitch) for pitch in self.pitches))

	def voice (self, value: typing.Any) -> anacrusis.piece.Piece:

		"""
		Play the chord's shape on every note of a ``Note`` or ``Line``.

		Each pitched note is replaced by this chord transposed so its lowest
		pitch is the note's pitch, keeping the note's duration, timbre and
		volume. Rests stay rests.
		"""

		if isinstance(value, anacrusis.note.Note):

			if not isinstance(value.kind, anacrusis.note.Pitched):
				return anacrusis.algebra.as_piece(value)

			kind = value.kind

			return anacrusis.algebra.stack(*(
				dataclasses.replace(value, kind=dataclasses.replace(kind, pitch=pitch))
				for pitch in self.transpose_to(kind.pitch).pitches
			))

		line = anacrusis.algebra.as_line(value)

		return functools.reduce(
			anacrusis.algebra.concat_pieces,
			(self.voice(note) for note in line.notes),
			anacrusis.piece.Piece()
		)

	def __add__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.add(self, other)

	def __radd__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.add(other, self)

	def __mul__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.multiply(self, other)

	def __rmul__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.multiply(other, self)

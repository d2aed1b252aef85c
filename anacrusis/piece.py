from __future__ import annotations

import dataclasses
import fractions
import typing

import anacrusis.algebra
import anacrusis.display
import anacrusis.exceptions
import anacrusis.line
import anacrusis.note
import anacrusis.timeline


@dataclasses.dataclass(frozen=True)
class Piece:

	"""
	A set of lines played simultaneously, each timed independently from beat 0.

	Lines may have different lengths; the piece lasts as long as its longest
	line and shorter lines are silent after they end.

	Example:
		```python
		melody = piano(quarter(C4) + quarter(E4) + half(G4))
		bassline = bass(whole(C4.octave(-2)))
		piece = melody * bassline
		piece + piece    # both lines continue together
		piece * 2        # the same, as repetition
		```
	"""

	lines: typing.Tuple[anacrusis.line.Line, ...] = ()

	def __post_init__ (self) -> None:

		lines = []

		for line in self.lines:

			if isinstance(line, anacrusis.note.Note):
				line = anacrusis.line.Line((line,))

			if not isinstance(line, anacrusis.line.Line):
				raise anacrusis.exceptions.InvalidOperation(f"A piece holds lines, got {line!r}")

			lines.append(line)

		object.__setattr__(self, "lines", tuple(lines))

	@property
	def duration (self) -> fractions.Fraction:

		"""
		Length of the longest line in beats.
		"""

		return max((line.duration for line in self.lines), default=fractions.Fraction(0))

	def timeline (self) -> anacrusis.timeline.Timeline:

		return anacrusis.timeline.resolve(self)

	def notes_at (self, beat: fractions.Fraction) -> typing.Tuple[anacrusis.note.Note, ...]:

		"""
		Notes and rests starting exactly at ``beat``, one per line at most, in line order.
		"""

		return self.timeline().notes_at(beat)

	def notes_during (self, beat: fractions.Fraction) -> typing.Tuple[anacrusis.note.Note, ...]:

		"""
		Notes and rests sounding at ``beat`` (start inclusive, end exclusive).
		"""

		return self.timeline().notes_during(beat)

	def piano_roll (self, steps_per_beat: int = 4) -> str:

		"""
		Draw the piece as a text piano roll. See ``anacrusis.display.piano_roll``.
		"""

		return anacrusis.display.piano_roll(self, steps_per_beat)

	def repeat (self, count: int) -> "Piece":

		return anacrusis.algebra.repeat_piece(self, count)

	def with_timbre (self, timbre: str) -> "Piece":

		return Piece(tuple(line.with_timbre(timbre) for line in self.lines))

	def with_volume (self, volume: float) -> "Piece":

		return Piece(tuple(line.with_volume(volume) for line in self.lines))

	def __add__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.add(self, other)

	def __radd__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.add(other, self)

	def __mul__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.multiply(self, other)

	def __rmul__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.multiply(other, self)

	def __str__ (self) -> str:

		return f"Piece[{len(self.lines)} lines, {self.duration} beats]"

"""Lines: sequential melodic voices.

A ``Line`` is an ordered body of notes plus an optional pickup (anacrusis).
Concatenating lines does not copy notes into one flat list straight away.
Instead, a right-hand line that carries a pickup (or a held pickup) is kept as
a nested item in the body. The timeline resolver later overwrites the tail of
whatever precedes it, so the pickup borrows time rather than adding it.

```python
a = quarter(C4) + quarter(D4)
b = -quarter(E4) + quarter(F4)   # pickup E4, main note F4
(a + b).notes                    # C4, E4, F4 - three beats, not four
```
"""

from __future__ import annotations

import dataclasses
import fractions
import functools
import typing

import anacrusis.algebra
import anacrusis.exceptions
import anacrusis.note
import anacrusis.timeline


LineItem = typing.Union["anacrusis.note.Note", "Line"]


@dataclasses.dataclass(frozen=True)
class Line:

	"""
	A sequence of notes with an optional pickup.

	Parameters:
		body: Notes (and nested lines) played in order from the line's start.
		pickup: Lead-in notes that, when this line is concatenated after
			another, overwrite the end of the preceding material.
		held: Duration (in beats) by which the first main note starts early
			when concatenated; set by the hold operator (``~line``).
	"""

	body: typing.Tuple[LineItem, ...] = ()
	pickup: typing.Tuple[anacrusis.note.Note, ...] = ()
	held: fractions.Fraction = fractions.Fraction(0)

	def __post_init__ (self) -> None:

		body = tuple(self.body)
		pickup = tuple(self.pickup)
		held = fractions.Fraction(self.held)

		for item in body:
			if not isinstance(item, (anacrusis.note.Note, Line)):
				raise anacrusis.exceptions.InvalidOperation(f"A line body holds notes and lines, got {item!r}")

		for item in pickup:
			if not isinstance(item, anacrusis.note.Note):
				raise anacrusis.exceptions.InvalidOperation(f"A pickup holds notes, got {item!r}")

		if held < 0:
			raise anacrusis.exceptions.InvalidDuration(f"Held duration cannot be negative, got {held}")

		if held and pickup:
			raise anacrusis.exceptions.InvalidOperation("A line cannot both carry a pickup and hold one")

		object.__setattr__(self, "body", body)
		object.__setattr__(self, "pickup", pickup)
		object.__setattr__(self, "held", held)

	@classmethod
	def of (cls, *notes: anacrusis.note.Note) -> "Line":

		"""
		Build a plain line from notes.
		"""

		return cls(notes)

	@functools.cached_property
	def duration (self) -> fractions.Fraction:

		"""
		Length of the main body in beats. Pickups and holds never add time.
		"""

		return sum((item.duration for item in self.body), fractions.Fraction(0))

	@property
	def pickup_duration (self) -> fractions.Fraction:

		return sum((note.duration for note in self.pickup), fractions.Fraction(0))

	@property
	def is_empty (self) -> bool:

		"""
		True when the main body has no duration (a pickup-only line is empty).
		"""

		return self.duration == 0

	@property
	def is_plain (self) -> bool:

		"""
		True for a flat list of notes with no pickup and no hold.
		"""

		return not self.pickup and not self.held and all(isinstance(item, anacrusis.note.Note) for item in self.body)

	def events (self) -> typing.Tuple[anacrusis.timeline.Event, ...]:

		"""
		Resolve the main body into timed events, starting at beat 0.
		"""

		events, _ = anacrusis.timeline.resolve_line(self)

		return events

	@property
	def notes (self) -> typing.Tuple[anacrusis.note.Note, ...]:

		"""
		The main body as a flat tuple of notes, after pickups have been applied.
		"""

		return tuple(event.to_note() for event in self.events())

	def notes_at (self, beat: fractions.Fraction) -> typing.Tuple[anacrusis.note.Note, ...]:

		"""
		The note starting exactly at ``beat``, as a one-item tuple, or ``()``.
		"""

		return anacrusis.timeline.Timeline((self.events(),)).notes_at(beat)

	def notes_during (self, beat: fractions.Fraction) -> typing.Tuple[anacrusis.note.Note, ...]:

		return anacrusis.timeline.Timeline((self.events(),)).notes_during(beat)

	def hold (self) -> "Line":

		"""
		Hold the pickup into the first main note (``~line``).
		"""

		return anacrusis.algebra.hold_pickup(self)

	def to_pickup (self) -> "Line":

		"""
		Turn this line into a pickup-only line (``-line``).
		"""

		return anacrusis.algebra.to_pickup(self)

	def repeat (self, count: int) -> "Line":

		return anacrusis.algebra.repeat_line(self, count)

	def extend (self, beats: anacrusis.note.Duration) -> "Line":

		"""
		Append a rest of ``beats`` beats.
		"""

		return anacrusis.algebra.concat_lines(self, Line((anacrusis.note.rest(beats),)))

	def _map_notes (self, fn: typing.Callable[[anacrusis.note.Note], anacrusis.note.Note]) -> "Line":

		body = tuple(fn(item) if isinstance(item, anacrusis.note.Note) else item._map_notes(fn) for item in self.body)

		return Line(body, tuple(fn(note) for note in self.pickup), self.held)

	def with_timbre (self, timbre: str) -> "Line":

		return self._map_notes(lambda note: note.with_timbre(timbre))

	def with_volume (self, volume: float) -> "Line":

		return self._map_notes(lambda note: note.with_volume(volume))

	def __neg__ (self) -> "Line":
		return self.to_pickup()

	def __invert__ (self) -> "Line":
		return self.hold()

	def __add__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.add(self, other)

	def __radd__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.add(other, self)

	def __mul__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.multiply(self, other)

	def __rmul__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.multiply(other, self)

	def __str__ (self) -> str:

		text = f"Line[{len(self.notes)} notes, {self.duration} beats"

		if self.pickup:
			text += f", {len(self.pickup)} pickup"

		if self.held:
			text += f", holding {self.held}"

		return text + "]"

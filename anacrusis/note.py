"""Notes, note kinds, and the fluent helpers that build them.

A ``Note`` is a ``NoteKind`` (``Pitched`` or ``Rest``) held for a rational
number of beats and voiced by a named timbre. Notes are usually built with the
length helpers rather than the constructor:

```python
piano(quarter(C4)) + piano(half(E4))
dotted(quarter)(Pitched(G4))
```

The length helpers accept a bare ``Pitch`` for convenience. The compound
modifiers ``dotted()`` and ``tie()`` do not: they only accept a ``NoteKind`` or
an existing ``Note``, so a pitch has to be wrapped with ``Pitched(...)`` (or
``to_note_kind(...)``) first.
"""

from __future__ import annotations

import dataclasses
import fractions
import numbers
import typing

import anacrusis.algebra
import anacrusis.chords
import anacrusis.exceptions
import anacrusis.pitch


DEFAULT_TIMBRE: str = "sine"

Duration = typing.Union[int, float, fractions.Fraction, str]


def as_duration (value: Duration) -> fractions.Fraction:

	"""
	Convert a beat count to an exact ``Fraction``, rejecting zero and negatives.
	"""

	if isinstance(value, bool):
		raise TypeError(f"Duration must be a number of beats, got {value!r}")

	if isinstance(value, float):
		duration = fractions.Fraction(value).limit_denominator(1 << 16)

	elif isinstance(value, (numbers.Rational, str)):
		duration = fractions.Fraction(value)

	else:
		raise TypeError(f"Duration must be a number of beats, got {value!r}")

	if duration <= 0:
		raise anacrusis.exceptions.InvalidDuration(f"Durations must be positive, got {duration}")

	return duration


class NoteKind:

	"""
	What sounds during a note: a pitch (``Pitched``) or silence (``Rest``).
	"""


@dataclasses.dataclass(frozen=True)
class Pitched (NoteKind):

	pitch: anacrusis.pitch.Pitch
	volume: float = 1.0

	def __post_init__ (self) -> None:

		if not isinstance(self.pitch, anacrusis.pitch.Pitch):
			raise TypeError(f"Pitched() expects a Pitch, got {self.pitch!r}")

		if self.volume < 0:
			raise ValueError(f"Volume cannot be negative, got {self.volume}")


@dataclasses.dataclass(frozen=True)
class Rest (NoteKind):

	pass


REST = Rest()


def to_note_kind (value: typing.Union[anacrusis.pitch.Pitch, NoteKind]) -> NoteKind:

	"""
	Convert a ``Pitch`` to a full-volume ``Pitched`` kind; pass a ``NoteKind`` through.
	"""

	if isinstance(value, NoteKind):
		return value

	if isinstance(value, anacrusis.pitch.Pitch):
		return Pitched(value)

	raise anacrusis.exceptions.InvalidOperation(f"Cannot convert {value!r} to a NoteKind")


@dataclasses.dataclass(frozen=True)
class Note:

	"""
	A single pitched note or rest.

	``duration`` is measured in beats, where a quarter note is one beat.
	``timbre`` names an entry in the timbre registry used at render time.
	A bare ``Pitch`` is accepted as ``kind`` and converted with ``to_note_kind``.
	"""

	kind: NoteKind
	duration: fractions.Fraction = fractions.Fraction(1)
	timbre: str = DEFAULT_TIMBRE

	def __post_init__ (self) -> None:

		object.__setattr__(self, "kind", to_note_kind(self.kind))
		object.__setattr__(self, "duration", as_duration(self.duration))

		if not isinstance(self.timbre, str) or not self.timbre:
			raise ValueError(f"Timbre must be a non-empty name, got {self.timbre!r}")

	@property
	def is_rest (self) -> bool:

		return isinstance(self.kind, Rest)

	def with_duration (self, duration: Duration) -> "Note":

		return dataclasses.replace(self, duration=duration)

	def with_timbre (self, timbre: str) -> "Note":

		return dataclasses.replace(self, timbre=timbre)

	def with_volume (self, volume: float) -> "Note":

		"""
		Set (not scale) the volume of a pitched note; rests are returned unchanged.
		"""

		if isinstance(self.kind, Pitched):
			return dataclasses.replace(self, kind=dataclasses.replace(self.kind, volume=volume))

		return self

	def __neg__ (self) -> typing.Any:
		return anacrusis.algebra.to_pickup(anacrusis.algebra.as_line(self))

	def __add__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.add(self, other)

	def __radd__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.add(other, self)

	def __mul__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.multiply(self, other)

	def __rmul__ (self, other: typing.Any) -> typing.Any:
		return anacrusis.algebra.multiply(other, self)


def rest (duration: Duration, timbre: str = DEFAULT_TIMBRE) -> Note:

	"""
	Return a rest lasting ``duration`` beats.
	"""

	return Note(REST, duration, timbre)


# ---------------------------------------------------------------------------
# Note lengths
# ---------------------------------------------------------------------------

def with_length (value: typing.Any, duration: Duration) -> typing.Any:

	"""
	Give ``value`` a duration in beats.

	A ``Pitch`` or ``NoteKind`` becomes a ``Note``; a ``Note`` keeps its kind and
	timbre; a ``Chord`` becomes a ``Piece`` with one single-note line per pitch.
	"""

	if isinstance(value, Note):
		return value.with_duration(duration)

	if isinstance(value, (NoteKind, anacrusis.pitch.Pitch)):
		return Note(to_note_kind(value), duration)

	if isinstance(value, anacrusis.chords.Chord):
		return value.with_length(duration)

	raise anacrusis.exceptions.InvalidOperation(f"Cannot give a length to {value!r}")


def sixteenth (value: typing.Any) -> typing.Any:
	return with_length(value, fractions.Fraction(1, 4))

def eighth (value: typing.Any) -> typing.Any:
	return with_length(value, fractions.Fraction(1, 2))

def quarter (value: typing.Any) -> typing.Any:
	return with_length(value, 1)

def half (value: typing.Any) -> typing.Any:
	return with_length(value, 2)

def whole (value: typing.Any) -> typing.Any:
	return with_length(value, 4)

def double_whole (value: typing.Any) -> typing.Any:
	return with_length(value, 8)


LengthFunction = typing.Callable[[typing.Any], typing.Any]


def _require_note_kind (value: typing.Any, modifier: str) -> typing.Union[NoteKind, Note]:

	if isinstance(value, (NoteKind, Note)):
		return value

	if isinstance(value, anacrusis.pitch.Pitch):
		raise anacrusis.exceptions.InvalidOperation(
			f"{modifier}() accepts a NoteKind, not a bare Pitch - wrap it as Pitched({value!r})"
		)

	raise anacrusis.exceptions.InvalidOperation(f"{modifier}() accepts a NoteKind or Note, got {value!r}")


def _length_of (length_fn: LengthFunction) -> fractions.Fraction:

	return length_fn(REST).duration


def dotted (length_fn: LengthFunction) -> typing.Callable[[typing.Union[NoteKind, Note]], Note]:

	"""
	Return a length function 1.5 times as long as ``length_fn``.

	Example:
		```python
		dotted(quarter)(Pitched(C4)).duration  # -> Fraction(3, 2)
		dotted(quarter)(C4)                    # InvalidOperation
		```
	"""

	duration = _length_of(length_fn) * fractions.Fraction(3, 2)

	def apply (value: typing.Union[NoteKind, Note]) -> Note:
		return with_length(_require_note_kind(value, "dotted"), duration)

	return apply


def tie (first: LengthFunction, second: LengthFunction) -> typing.Callable[[typing.Union[NoteKind, Note]], Note]:

	"""
	Return a length function lasting ``first`` plus ``second``.
	"""

	duration = _length_of(first) + _length_of(second)

	def apply (value: typing.Union[NoteKind, Note]) -> Note:
		return with_length(_require_note_kind(value, "tie"), duration)

	return apply


# ---------------------------------------------------------------------------
# Timbres
# ---------------------------------------------------------------------------

def with_timbre (value: typing.Any, timbre: str) -> typing.Any:

	"""
	Voice every note in a ``Note``, ``Line`` or ``Piece`` with ``timbre``.
	"""

	if hasattr(value, "with_timbre"):
		return value.with_timbre(timbre)

	raise anacrusis.exceptions.InvalidOperation(f"Cannot apply a timbre to {value!r}")


def sine (value: typing.Any) -> typing.Any:
	return with_timbre(value, "sine")

def piano (value: typing.Any) -> typing.Any:
	return with_timbre(value, "piano")

def bass (value: typing.Any) -> typing.Any:
	return with_timbre(value, "bass")

def electric_guitar (value: typing.Any) -> typing.Any:
	return with_timbre(value, "electric_guitar")

def drums (value: typing.Any) -> typing.Any:
	return with_timbre(value, "drums")

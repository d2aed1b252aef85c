"""Equal-tempered pitches.

A ``Pitch`` is an integer number of semitones away from the reference pitch A4.
Its frequency is ``reference * 2 ** (semitones / 12)``; the reference defaults
to 440 Hz and is supplied by the renderer, so the same composition can be
played back at a different concert pitch.

Module-level constants:
- ``A4_FREQUENCY``: the default reference frequency in Hz.
- ``MAX_SEMITONES``: the safe offset range (in either direction).
- ``NOTE_NAME_TO_PC`` / ``PC_TO_NOTE_NAME``: note name <-> pitch class maps.
- ``A4``, ``C4``: the two pitches most compositions start from.
"""

import dataclasses
import re
import typing

import anacrusis.exceptions


A4_FREQUENCY: float = 440.0

# Ten octaves either side of A4 keeps every frequency finite and above 0.
MAX_SEMITONES: int = 120

NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

PC_TO_NOTE_NAME: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]

# Semitone offset of A within its octave, and the octave number of A4.
_A_PC = 9
_A4_OCTAVE = 4

_NAME_PATTERN = re.compile(r"^([A-G][#b]?)(-?\d+)$")


def _check_range (semitones: int) -> None:

	if not -MAX_SEMITONES <= semitones <= MAX_SEMITONES:
		raise anacrusis.exceptions.InvalidPitch(
			f"Pitch offset {semitones} is outside the safe range of +/-{MAX_SEMITONES} semitones"
		)


@dataclasses.dataclass(frozen=True)
class Pitch:

	"""
	An immutable semitone offset from A4.

	Example:
		```python
		c5 = C4.octave(1)
		e4, g4 = C4.semitones_from(4, 7)
		C4.to_frequency()  # -> 261.6255...
		```
	"""

	semitones: int

	def __post_init__ (self) -> None:

		if isinstance(self.semitones, bool) or not isinstance(self.semitones, int):
			raise TypeError(f"Pitch semitones must be an int, got {self.semitones!r}")

		_check_range(self.semitones)

	@classmethod
	def from_name (cls, name: str) -> "Pitch":

		"""
		Parse a scientific pitch name such as ``"C4"``, ``"F#3"`` or ``"Bb-1"``.
		"""

		match = _NAME_PATTERN.match(name.strip())

		if match is None or match.group(1) not in NOTE_NAME_TO_PC:
			raise ValueError(f"Unknown pitch name: {name!r}. Expected e.g. 'C4', 'F#3', 'Bb2'.")

		pc = NOTE_NAME_TO_PC[match.group(1)]
		octave = int(match.group(2))

		return cls((octave - _A4_OCTAVE) * 12 + pc - _A_PC)

	def to_frequency (self, reference: float = A4_FREQUENCY) -> float:

		"""
		Return the frequency in Hz, relative to ``reference`` (the frequency of A4).
		"""

		_check_range(self.semitones)

		return reference * 2.0 ** (self.semitones / 12.0)

	def semitone (self, change: int) -> "Pitch":

		"""
		Transpose by ``change`` semitones.
		"""

		return Pitch(self.semitones + change)

	def octave (self, change: int) -> "Pitch":

		"""
		Transpose by ``change`` octaves.
		"""

		return Pitch(self.semitones + 12 * change)

	def semitones_from (self, *changes: int) -> typing.List["Pitch"]:

		"""
		Return several transpositions of this pitch at once.
		"""

		return [self.semitone(change) for change in changes]

	@property
	def pitch_class (self) -> int:

		return (self.semitones + _A_PC) % 12

	@property
	def name (self) -> str:

		"""
		Scientific pitch name, using sharps (``"C#4"``, never ``"Db4"``).
		"""

		octave = _A4_OCTAVE + (self.semitones + _A_PC) // 12

		return f"{PC_TO_NOTE_NAME[self.pitch_class]}{octave}"

	def __str__ (self) -> str:

		return self.name


A4 = Pitch(0)
C4 = Pitch(-9)

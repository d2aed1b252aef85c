import dataclasses
import types
import typing

import anacrusis.exceptions
import anacrusis.pitch


# Whole (2) and half (1) steps between consecutive degrees, tonic to octave.
_SCALE_STEP_DEFINITIONS: typing.Dict[str, typing.Tuple[int, ...]] = {
	"major": (2, 2, 1, 2, 2, 2, 1),
	"minor": (2, 1, 2, 2, 1, 2, 2),
	"dorian": (2, 1, 2, 2, 2, 1, 2),
	"phrygian": (1, 2, 2, 2, 1, 2, 2),
	"lydian": (2, 2, 2, 1, 2, 2, 1),
	"mixolydian": (2, 2, 1, 2, 2, 1, 2),
	"locrian": (1, 2, 2, 1, 2, 2, 2),
}

_SCALE_STEP_DEFINITIONS["ionian"] = _SCALE_STEP_DEFINITIONS["major"]
_SCALE_STEP_DEFINITIONS["aeolian"] = _SCALE_STEP_DEFINITIONS["minor"]

SCALE_STEPS: typing.Mapping[str, typing.Tuple[int, ...]] = types.MappingProxyType(_SCALE_STEP_DEFINITIONS)


def get_steps (kind: str) -> typing.Tuple[int, ...]:

	"""
	Return the step pattern for a named scale kind.
	"""

	if kind not in SCALE_STEPS:
		raise ValueError(f"Unknown scale kind '{kind}'. Available: {sorted(SCALE_STEPS)}")

	return SCALE_STEPS[kind]


def degree_offset (degree: int, steps: typing.Sequence[int]) -> int:

	"""
	Return the semitone offset of a 1-indexed scale degree above the tonic.

	Degrees past the end of the pattern wrap into higher octaves, so with a
	seven-note pattern degree 8 is the tonic an octave up and degree 10 is the
	third an octave up.

	Raises:
		InvalidDegree: If ``degree`` is zero or negative.
	"""

	if degree <= 0:
		raise anacrusis.exceptions.InvalidDegree(f"Scale degrees start at 1, got {degree}")

	octave, index = divmod(degree - 1, len(steps))

	return octave * sum(steps) + sum(steps[:index])


@dataclasses.dataclass(frozen=True)
class Scale:

	"""
	A scale rooted on a pitch.

	Example:
		```python
		c_major = Scale(C4)
		c4, d4, e4, g4 = c_major.degrees(1, 2, 3, 5)
		c_major.degree(8)  # -> C5
		```
	"""

	root: anacrusis.pitch.Pitch
	kind: str = "major"

	def __post_init__ (self) -> None:

		get_steps(self.kind)

	def degree (self, n: int) -> anacrusis.pitch.Pitch:

		"""
		Return the pitch of the ``n``-th degree (1 = tonic).
		"""

		return self.root.semitone(degree_offset(n, get_steps(self.kind)))

	def degrees (self, *ns: int) -> typing.List[anacrusis.pitch.Pitch]:

		"""
		Return the pitches of several degrees at once.
		"""

		return [self.degree(n) for n in ns]


def scale_pitch_classes (root: anacrusis.pitch.Pitch, kind: str = "major") -> typing.List[int]:

	"""
	Return the pitch classes (0-11, C = 0) that belong to a scale.

	Example:
		```python
		scale_pitch_classes(C4, "major")  # -> [0, 2, 4, 5, 7, 9, 11]
		```
	"""

	steps = get_steps(kind)

	return [(root.pitch_class + degree_offset(n, steps)) % 12 for n in range(1, len(steps) + 1)]

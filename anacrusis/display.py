"""Text piano roll for notes, lines and pieces.

The roll is drawn in groups of four bars. Each group lists one row per
semitone, from two above the highest pitch sounding in the group down to two
below the lowest, followed by one row per drum kit piece:

	══════════════════════════╗
	 D4 ║█║░░░░|░░░░|░░░░|░░░░║
	 C#4║ ║    |    |    |    ║
	 C4 ║█║■≡░░|░░░░|░░░░|░░░░║
	 ...
	══════════════════════════╣
	crash ║    |    |    |    ║
	hi_hat║    |    |    |    ║
	snare ║    |    |    |    ║
	kick  ║    |    |    |    ║
	══════════════════════════╝

``■`` marks a step where a note starts and ``≡`` a step where it is still
sounding. Blank white-key rows are shaded with ``░`` so the keyboard is easy
to follow. Drums only appear in the kit rows, mapped from pitch the same way
the drum timbre maps them.

```python
print(piece.piano_roll())
print(anacrusis.display.piano_roll(melody, steps_per_beat=2))
```
"""

from __future__ import annotations

import fractions
import math
import typing

import anacrusis.note
import anacrusis.pitch
import anacrusis.timbres
import anacrusis.timeline


NOTE_START = "■"
NOTE_HELD = "≡"

BEATS_PER_BAR = 4
BARS_PER_GROUP = 4

# Most to least piercing, as drawn from the top.
DRUM_ROWS = ("crash", "hi_hat", "snare", "kick")

_BLACK_KEYS = {1, 3, 6, 8, 10}

# " C4 ║█║" and "kick  ║" are both seven characters wide.
_PREFIX_WIDTH = 7
_MARGIN = 2


def _is_keyboard_note (note: anacrusis.note.Note) -> bool:

	return isinstance(note.kind, anacrusis.note.Pitched) and note.timbre != anacrusis.timbres.DRUMS.name


def _is_drum_note (note: anacrusis.note.Note) -> bool:

	return isinstance(note.kind, anacrusis.note.Pitched) and note.timbre == anacrusis.timbres.DRUMS.name


def _cells (
	starting: typing.Sequence[typing.Tuple[anacrusis.note.Note, ...]],
	sounding: typing.Sequence[typing.Tuple[anacrusis.note.Note, ...]],
	matches: typing.Callable[[anacrusis.note.Note], bool],
	blank: str,
	bar_steps: int,
) -> str:

	"""
	One row of step cells, with a barline between bars and a closing border.
	"""

	cells = []

	for step, (started, held) in enumerate(zip(starting, sounding)):

		if step and step % bar_steps == 0:
			cells.append("|")

		if any(matches(note) for note in started):
			cells.append(NOTE_START)

		elif any(matches(note) for note in held):
			cells.append(NOTE_HELD)

		else:
			cells.append(blank)

	return "".join(cells) + "║"


def _keyboard_rows (
	starting: typing.Sequence[typing.Tuple[anacrusis.note.Note, ...]],
	sounding: typing.Sequence[typing.Tuple[anacrusis.note.Note, ...]],
	bar_steps: int,
) -> typing.List[str]:

	semitones = {note.kind.pitch.semitones for notes in sounding for note in notes if _is_keyboard_note(note)}

	if not semitones:
		return []

	highest = min(max(semitones) + _MARGIN, anacrusis.pitch.MAX_SEMITONES)
	lowest = max(min(semitones) - _MARGIN, -anacrusis.pitch.MAX_SEMITONES)

	rows = []

	for semitone in range(highest, lowest - 1, -1):

		pitch = anacrusis.pitch.Pitch(semitone)
		black = pitch.pitch_class in _BLACK_KEYS
		key = "║ ║" if black else "║█║"

		def matches (note: anacrusis.note.Note, semitone: int = semitone) -> bool:
			return _is_keyboard_note(note) and note.kind.pitch.semitones == semitone

		rows.append(" " + pitch.name.ljust(3) + key + _cells(starting, sounding, matches, " " if black else "░", bar_steps))

	return rows


def _drum_rows (
	starting: typing.Sequence[typing.Tuple[anacrusis.note.Note, ...]],
	sounding: typing.Sequence[typing.Tuple[anacrusis.note.Note, ...]],
	bar_steps: int,
) -> typing.List[str]:

	rows = []

	for kit_piece in DRUM_ROWS:

		def matches (note: anacrusis.note.Note, kit_piece: str = kit_piece) -> bool:
			return _is_drum_note(note) and anacrusis.timbres.drum_piece(note.kind.pitch.to_frequency()) == kit_piece

		rows.append(kit_piece.ljust(_PREFIX_WIDTH - 1) + "║" + _cells(starting, sounding, matches, " ", bar_steps))

	return rows


def piano_roll (music: typing.Any, steps_per_beat: int = 4) -> str:

	"""
	Draw a ``Note``, ``Line`` or ``Piece`` as a text piano roll.

	Parameters:
		music: What to draw. Pickups are resolved first, so the roll shows
			what will actually be heard.
		steps_per_beat: Grid resolution. The default of 4 gives one
			column per sixteenth note and 64 columns per group.

	Returns:
		The roll as a string, one group of four bars after another separated
		by a blank line. Empty music gives an empty string.
	"""

	if isinstance(steps_per_beat, bool) or not isinstance(steps_per_beat, int) or steps_per_beat < 1:
		raise ValueError(f"steps_per_beat must be a positive int, got {steps_per_beat!r}")

	timeline = anacrusis.timeline.resolve(music)

	bar_steps = BEATS_PER_BAR * steps_per_beat
	group_steps = BARS_PER_GROUP * bar_steps
	total_steps = math.ceil(timeline.duration * steps_per_beat)
	border = "═" * (_PREFIX_WIDTH + group_steps + BARS_PER_GROUP - 1)

	groups = []

	for group_start in range(0, total_steps, group_steps):

		times = [fractions.Fraction(step, steps_per_beat) for step in range(group_start, group_start + group_steps)]
		starting = [timeline.notes_at(time) for time in times]
		sounding = [timeline.notes_during(time) for time in times]

		rows = [border + "╗"]
		rows.extend(_keyboard_rows(starting, sounding, bar_steps))
		rows.append(border + "╣")
		rows.extend(_drum_rows(starting, sounding, bar_steps))
		rows.append(border + "╝")

		groups.append("\n".join(rows))

	return "\n\n".join(groups)

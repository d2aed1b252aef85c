import fractions

import pytest

import anacrusis.algebra
import anacrusis.chords
import anacrusis.exceptions
import anacrusis.line
import anacrusis.note
import anacrusis.piece
import anacrusis.pitch


C4 = anacrusis.pitch.C4
D4 = anacrusis.pitch.Pitch.from_name("D4")
E4 = anacrusis.pitch.Pitch.from_name("E4")
F4 = anacrusis.pitch.Pitch.from_name("F4")
G4 = anacrusis.pitch.Pitch.from_name("G4")

quarter = anacrusis.note.quarter
half = anacrusis.note.half


def _spans (line: anacrusis.line.Line) -> list:

	"""
	Return ``(start, end, pitch name)`` for every event of a line.
	"""

	return [
		(event.start, event.end, None if event.is_rest else event.kind.pitch.name)
		for event in line.events()
	]


# ── Result types ─────────────────────────────────────────────────────

def test_note_plus_note_is_line () -> None:

	"""Adding notes concatenates them."""

	line = quarter(C4) + quarter(D4)

	assert isinstance(line, anacrusis.line.Line)
	assert line.duration == 2


def test_note_times_note_is_piece () -> None:

	"""Multiplying notes stacks them."""

	piece = quarter(C4) * half(E4)

	assert isinstance(piece, anacrusis.piece.Piece)
	assert len(piece.lines) == 2
	assert piece.duration == 2


def test_note_times_int_is_line () -> None:

	"""Multiplying by an int repeats, from either side."""

	assert isinstance(quarter(C4) * 3, anacrusis.line.Line)
	assert (quarter(C4) * 3).duration == 3
	assert (3 * quarter(C4)) == (quarter(C4) * 3)


def test_piece_times_int_is_piece () -> None:

	"""Pieces repeat line by line; each line runs straight into its own repeat."""

	piece = (quarter(C4) * half(E4)) * 2

	assert isinstance(piece, anacrusis.piece.Piece)
	assert piece.duration == 4
	assert [line.duration for line in piece.lines] == [2, 4]

	starts = [event.start for event in piece.timeline().lines[0] if not event.is_rest]

	assert starts == [0, 1]


def test_piece_plus_line_wraps_the_line () -> None:

	"""A note or line added to a piece is treated as a one-line piece."""

	piece = quarter(C4) * half(E4)
	longer = piece + quarter(G4)

	assert isinstance(longer, anacrusis.piece.Piece)
	assert longer.duration == 3

	earlier = quarter(G4) + piece

	assert isinstance(earlier, anacrusis.piece.Piece)
	assert earlier.duration == 3


# ── Laws ─────────────────────────────────────────────────────────────

def test_concatenation_is_associative_in_duration () -> None:

	"""(A+B)+C and A+(B+C) last equally long."""

	a = quarter(C4) + half(D4)
	b = anacrusis.note.eighth(E4) * 3
	c = half(F4) + quarter(G4)

	assert ((a + b) + c).duration == (a + (b + c)).duration == a.duration + b.duration + c.duration
	assert _spans((a + b) + c) == _spans(a + (b + c))


def test_repetition_law () -> None:

	"""line * n lasts n times as long and repeats the events at offsets."""

	line = quarter(C4) + half(E4)
	repeated = line * 3
	base = _spans(line)

	assert repeated.duration == 3 * line.duration

	expected = [
		(start + i * line.duration, end + i * line.duration, name)
		for i in range(3)
		for start, end, name in base
	]

	assert _spans(repeated) == expected


def test_note_times_four () -> None:

	"""A one-beat note repeated four times gives four back-to-back events."""

	line = quarter(C4) * 4

	assert line.duration == 4
	assert _spans(line) == [
		(0, 1, "C4"),
		(1, 2, "C4"),
		(2, 3, "C4"),
		(3, 4, "C4"),
	]


def test_repeat_zero_is_empty () -> None:

	"""Zero repetitions produce an empty line."""

	assert (quarter(C4) * 0).is_empty


def test_negative_repetition_raises () -> None:

	"""Negative counts raise InvalidRepetition."""

	with pytest.raises(anacrusis.exceptions.InvalidRepetition):
		quarter(C4) * -1

	with pytest.raises(anacrusis.exceptions.InvalidRepetition):
		(quarter(C4) * quarter(E4)) * -2


# ── Invalid combinations ─────────────────────────────────────────────

def test_int_plus_note_is_invalid () -> None:

	"""Adding an int to music is not defined."""

	with pytest.raises(anacrusis.exceptions.InvalidOperation):
		quarter(C4) + 1

	with pytest.raises(anacrusis.exceptions.InvalidOperation):
		2 + quarter(C4)


def test_chord_needs_a_length () -> None:

	"""A chord must be given a duration before it can be combined."""

	chord = anacrusis.chords.Chord.from_quality(C4, "major")

	with pytest.raises(anacrusis.exceptions.InvalidOperation):
		chord + quarter(C4)

	with pytest.raises(anacrusis.exceptions.InvalidOperation):
		chord * 2


def test_foreign_types_fall_back_to_python () -> None:

	"""Unknown operand types get Python's own TypeError."""

	with pytest.raises(TypeError):
		quarter(C4) + "C4"

	with pytest.raises(TypeError):
		quarter(C4) * 1.5


def test_dispatch_tables_cover_music_pairs () -> None:

	"""Every note/line/piece pair can be stacked."""

	kinds = ("note", "line", "piece")

	for left in kinds:
		for right in kinds:
			assert (left, right) in anacrusis.algebra.MULTIPLY_RULES


# ── Stacking and pieces ──────────────────────────────────────────────

def test_stacking_keeps_lines_independent () -> None:

	"""Stacked lines each start at zero."""

	short = quarter(C4)
	long = half(E4) + half(G4)
	piece = short * long
	timeline = piece.timeline()

	assert timeline.line_duration(0) == 1
	assert timeline.line_duration(1) == 4
	assert timeline.lines[0][0].start == 0
	assert timeline.lines[1][0].start == 0


def test_piece_concatenation_joins_lines_pairwise () -> None:

	"""Each left line runs straight into its partner, with no padding to the left piece's length."""

	left = quarter(C4) * half(E4)
	right = quarter(G4) * quarter(D4)
	piece = left + right
	timeline = piece.timeline()

	spans = [[(event.start, event.end, event.kind.pitch.name) for event in events] for events in timeline.lines]

	assert spans == [
		[(0, 1, "C4"), (1, 2, "G4")],
		[(0, 2, "E4"), (2, 3, "D4")],
	]
	assert [line.duration for line in piece.lines] == [2, 3]
	assert piece.duration == 3


def test_piece_concatenation_pickup_overwrites_its_own_partner () -> None:

	"""A right-hand pickup borrows from the left line it is paired with."""

	left = quarter(C4) * half(E4)
	right = (-quarter(F4) + quarter(G4)) * quarter(D4)
	timeline = (left + right).timeline()

	assert [event.kind.pitch.name for event in timeline.lines[0]] == ["F4", "G4"]
	assert [event.kind.pitch.name for event in timeline.lines[1]] == ["E4", "D4"]
	assert timeline.overflows != ()


def test_piece_concatenation_fills_missing_lines () -> None:

	"""A piece with fewer lines gets silent partners."""

	left = quarter(C4) * quarter(E4) * quarter(G4)
	right = half(D4)
	piece = left + right

	assert len(piece.lines) == 3
	assert [line.duration for line in piece.lines] == [3, 3, 3]


def test_stack_helper () -> None:

	"""stack() flattens pieces and wraps notes and lines."""

	piece = anacrusis.algebra.stack(quarter(C4), quarter(D4) + quarter(E4), quarter(F4) * quarter(G4))

	assert len(piece.lines) == 4
	assert piece.duration == 2


def test_durations_are_exact () -> None:

	"""Triplet-like durations add without float error."""

	third = anacrusis.note.Note(C4, fractions.Fraction(1, 3))

	assert (third * 3).duration == 1

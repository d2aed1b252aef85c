"""Operator dispatch for the composition algebra.

``+`` and ``*`` are defined pairwise over a small closed set of operand kinds:
``note``, ``line``, ``piece``, ``chord`` and ``int``. Each pair that the algebra
understands has an entry in ``ADD_RULES`` or ``MULTIPLY_RULES``. A pair of known
kinds with no entry raises ``InvalidOperation``. An operand of any other type
makes the operator return ``NotImplemented``, so Python raises its usual
``TypeError``.

Summary:

| left  | right | ``+``                    | ``*``               |
|-------|-------|--------------------------|---------------------|
| note  | note  | Line (concatenation)     | Piece (stacking)    |
| note  | line  | Line                     | Piece               |
| line  | line  | Line                     | Piece               |
| any   | piece | Piece (pairwise lines)   | Piece               |
| note  | int   | -                        | Line (repetition)   |
| line  | int   | -                        | Line (repetition)   |
| piece | int   | -                        | Piece (repetition)  |
"""

from __future__ import annotations

import functools
import itertools
import typing

import anacrusis.chords
import anacrusis.exceptions
import anacrusis.line
import anacrusis.note
import anacrusis.piece


def kind_of (value: typing.Any) -> typing.Optional[str]:

	"""
	Return the operand kind of ``value``, or ``None`` for foreign types.
	"""

	if isinstance(value, anacrusis.note.Note):
		return "note"

	if isinstance(value, anacrusis.line.Line):
		return "line"

	if isinstance(value, anacrusis.piece.Piece):
		return "piece"

	if isinstance(value, anacrusis.chords.Chord):
		return "chord"

	if isinstance(value, int) and not isinstance(value, bool):
		return "int"

	return None


def as_line (value: typing.Any) -> anacrusis.line.Line:

	"""
	Wrap a ``Note`` into a one-note ``Line``; pass a ``Line`` through.
	"""

	if isinstance(value, anacrusis.line.Line):
		return value

	if isinstance(value, anacrusis.note.Note):
		return anacrusis.line.Line((value,))

	raise anacrusis.exceptions.InvalidOperation(f"Cannot use {value!r} as a line")


def as_piece (value: typing.Any) -> anacrusis.piece.Piece:

	"""
	Wrap a ``Note`` or ``Line`` into a one-line ``Piece``; pass a ``Piece`` through.
	"""

	if isinstance(value, anacrusis.piece.Piece):
		return value

	if isinstance(value, (anacrusis.note.Note, anacrusis.line.Line)):
		return anacrusis.piece.Piece((as_line(value),))

	raise anacrusis.exceptions.InvalidOperation(f"Cannot use {value!r} as a piece")


def silent_line (duration: typing.Any) -> anacrusis.line.Line:

	"""
	Return a line holding a single rest, or an empty line for a zero duration.
	"""

	if duration <= 0:
		return anacrusis.line.Line()

	return anacrusis.line.Line((anacrusis.note.rest(duration),))


# ---------------------------------------------------------------------------
# Line operations
# ---------------------------------------------------------------------------

def concat_lines (left: anacrusis.line.Line, right: anacrusis.line.Line) -> anacrusis.line.Line:

	"""
	Concatenate two lines.

	The result keeps the left line's pickup (it still precedes everything). The
	right line's pickup or hold is consumed here: if the left line is empty
	there is nothing to borrow from and it is discarded, otherwise the right
	line is kept as a nested item so the resolver can overwrite the left
	line's tail with it.
	"""

	if left.is_empty:
		return anacrusis.line.Line(right.body, left.pickup)

	if right.is_plain:
		tail = right.body

	else:
		tail = (right,)

	return anacrusis.line.Line(left.body + tail, left.pickup, left.held)


def repeat_line (line: anacrusis.line.Line, count: int) -> anacrusis.line.Line:

	"""
	Concatenate ``line`` with itself ``count`` times. Zero gives an empty line.
	"""

	if count < 0:
		raise anacrusis.exceptions.InvalidRepetition(f"Cannot repeat {count} times")

	if count == 0:
		return anacrusis.line.Line()

	return functools.reduce(concat_lines, itertools.repeat(line, count - 1), line)


def to_pickup (line: anacrusis.line.Line) -> anacrusis.line.Line:

	"""
	Turn a line into a pickup-only line: its resolved notes become the pickup.
	"""

	return anacrusis.line.Line((), line.notes)


def hold_pickup (line: anacrusis.line.Line) -> anacrusis.line.Line:

	"""
	Hold a line's pickup into its first note.

	The pickup notes disappear and the first main note starts early by the
	pickup's duration instead. A line without a pickup is returned unchanged.
	"""

	if not line.pickup:
		return line

	if line.is_empty:
		raise anacrusis.exceptions.InvalidOperation("Cannot hold a pickup into a line with no main notes")

	return anacrusis.line.Line(line.body, (), line.pickup_duration)


# ---------------------------------------------------------------------------
# Piece operations
# ---------------------------------------------------------------------------

def stack (*values: typing.Any) -> anacrusis.piece.Piece:

	"""
	Play notes, lines and pieces simultaneously, all starting at time 0.
	"""

	lines: typing.List[anacrusis.line.Line] = []

	for value in values:
		lines.extend(as_piece(value).lines)

	return anacrusis.piece.Piece(tuple(lines))


def concat_pieces (left: anacrusis.piece.Piece, right: anacrusis.piece.Piece) -> anacrusis.piece.Piece:

	"""
	Concatenate two pieces line by line.

	Paired lines are joined directly, so a left line shorter than its piece
	runs straight into its partner without a gap. When the pieces have
	different line counts the missing partners are silent lines as long as
	their piece.
	"""

	left_duration = left.duration
	right_duration = right.duration

	lines = []

	for first, second in itertools.zip_longest(left.lines, right.lines):

		if first is None:
			first = silent_line(left_duration)

		if second is None:
			second = silent_line(right_duration)

		lines.append(concat_lines(first, second))

	return anacrusis.piece.Piece(tuple(lines))


def repeat_piece (piece: anacrusis.piece.Piece, count: int) -> anacrusis.piece.Piece:

	"""
	Concatenate ``piece`` with itself ``count`` times. Zero gives an empty piece.
	"""

	if count < 0:
		raise anacrusis.exceptions.InvalidRepetition(f"Cannot repeat {count} times")

	if count == 0:
		return anacrusis.piece.Piece()

	return functools.reduce(concat_pieces, itertools.repeat(piece, count - 1), piece)


# ---------------------------------------------------------------------------
# Dispatch tables
# ---------------------------------------------------------------------------

def _add_lines (left: typing.Any, right: typing.Any) -> anacrusis.line.Line:
	return concat_lines(as_line(left), as_line(right))

def _add_pieces (left: typing.Any, right: typing.Any) -> anacrusis.piece.Piece:
	return concat_pieces(as_piece(left), as_piece(right))

def _repeat (value: typing.Any, count: int) -> anacrusis.line.Line:
	return repeat_line(as_line(value), count)

def _repeat_swapped (count: int, value: typing.Any) -> anacrusis.line.Line:
	return repeat_line(as_line(value), count)

def _repeat_piece_swapped (count: int, piece: anacrusis.piece.Piece) -> anacrusis.piece.Piece:
	return repeat_piece(piece, count)

def _stack (left: typing.Any, right: typing.Any) -> anacrusis.piece.Piece:
	return stack(left, right)


Rule = typing.Callable[[typing.Any, typing.Any], typing.Any]

_MUSIC_KINDS = ("note", "line", "piece")

ADD_RULES: typing.Dict[typing.Tuple[str, str], Rule] = {
	("note", "note"): _add_lines,
	("note", "line"): _add_lines,
	("line", "note"): _add_lines,
	("line", "line"): _add_lines,
	("piece", "piece"): _add_pieces,
	("piece", "line"): _add_pieces,
	("piece", "note"): _add_pieces,
	("line", "piece"): _add_pieces,
	("note", "piece"): _add_pieces,
}

MULTIPLY_RULES: typing.Dict[typing.Tuple[str, str], Rule] = {
	("note", "int"): _repeat,
	("line", "int"): _repeat,
	("int", "note"): _repeat_swapped,
	("int", "line"): _repeat_swapped,
	("piece", "int"): repeat_piece,
	("int", "piece"): _repeat_piece_swapped,
}

MULTIPLY_RULES.update({(left, right): _stack for left in _MUSIC_KINDS for right in _MUSIC_KINDS})


def _dispatch (rules: typing.Dict[typing.Tuple[str, str], Rule], symbol: str, left: typing.Any, right: typing.Any) -> typing.Any:

	key = (kind_of(left), kind_of(right))

	if key[0] is None or key[1] is None:
		return NotImplemented

	rule = rules.get(key)

	if rule is None:
		raise anacrusis.exceptions.InvalidOperation(f"'{key[0]} {symbol} {key[1]}' is not defined")

	return rule(left, right)


def add (left: typing.Any, right: typing.Any) -> typing.Any:

	"""
	Apply ``left + right`` using ``ADD_RULES``.
	"""

	return _dispatch(ADD_RULES, "+", left, right)


def multiply (left: typing.Any, right: typing.Any) -> typing.Any:

	"""
	Apply ``left * right`` using ``MULTIPLY_RULES``.
	"""

	return _dispatch(MULTIPLY_RULES, "*", left, right)

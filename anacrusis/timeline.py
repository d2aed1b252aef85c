"""Timeline resolution: from the composition tree to timed events.

Each line of a piece is resolved on its own, starting at beat 0. A cursor
advances through the line's body. When the cursor reaches a nested line that
carries a pickup (or a held pickup), the pickup is applied in two passes:

1. ``truncate_tail`` cuts the already-placed events back to the point where the
   pickup begins. Events that straddle that point are shortened and marked
   ``fade_out``. Events that start after it are dropped.
2. The pickup notes are placed from that point, and the nested line's own
   notes follow from the unchanged cursor. A held pickup moves the first
   main note's start back instead.

A pickup therefore borrows time from what came before and never lengthens
the line. When nothing came before (cursor at 0) it is discarded. When it is
as long as (or longer than) everything before it, the earlier material
collapses entirely. That case is reported as a ``RenderOverflow`` warning
rather than an error.

A nested line is resolved in its own frame before it is shifted into place,
so a pickup inside it can only borrow from material inside that same nested
line. ``(a + b) + c`` and ``a + (b + c)`` therefore differ when ``c`` has a
pickup: in the first the pickup overwrites the end of ``a + b``, in the
second it can only overwrite ``b`` and is clipped at the start of ``b + c``.

Times are exact ``Fraction`` beat counts, so resolution is fully deterministic.
"""

from __future__ import annotations

import dataclasses
import fractions
import heapq
import logging
import typing

import anacrusis.algebra
import anacrusis.exceptions
import anacrusis.note

if typing.TYPE_CHECKING:
	import anacrusis.line


logger = logging.getLogger(__name__)

_ZERO = fractions.Fraction(0)


@dataclasses.dataclass(frozen=True)
class Event:

	"""
	A note or rest placed on a line's timeline.

	``start`` and ``end`` are absolute beat positions. ``fade_in`` and
	``fade_out`` mark edges created by editing (pickup overwrite or clipping)
	rather than by the note itself. The synthesizer gives those edges a short
	fade so the cut is inaudible.
	"""

	start: fractions.Fraction
	end: fractions.Fraction
	kind: anacrusis.note.NoteKind
	timbre: str
	fade_in: bool = False
	fade_out: bool = False

	@property
	def duration (self) -> fractions.Fraction:

		return self.end - self.start

	@property
	def is_rest (self) -> bool:

		return isinstance(self.kind, anacrusis.note.Rest)

	def shifted (self, offset: fractions.Fraction) -> "Event":

		return dataclasses.replace(self, start=self.start + offset, end=self.end + offset)

	def to_note (self) -> anacrusis.note.Note:

		return anacrusis.note.Note(self.kind, self.duration, self.timbre)


def place_notes (notes: typing.Iterable[anacrusis.note.Note], start: fractions.Fraction) -> typing.List[Event]:

	"""
	Lay notes end to end from ``start``.
	"""

	events = []
	cursor = start

	for note in notes:
		events.append(Event(cursor, cursor + note.duration, note.kind, note.timbre))
		cursor += note.duration

	return events


def truncate_tail (events: typing.Sequence[Event], at: fractions.Fraction) -> typing.List[Event]:

	"""
	Remove everything from ``at`` onwards.

	Events ending at or before ``at`` are kept as they are. An event spanning
	``at`` is shortened to end there and marked ``fade_out``. Events starting at
	or after ``at`` are dropped, since they would be zero length or negative.
	"""

	kept = []

	for event in events:

		if event.end <= at:
			kept.append(event)

		elif event.start < at:
			kept.append(dataclasses.replace(event, end=at, fade_out=True))

	return kept


def clip_head (events: typing.Sequence[Event], at: fractions.Fraction) -> typing.List[Event]:

	"""
	Remove everything before ``at``, marking a shortened first event ``fade_in``.
	"""

	kept = []

	for event in events:

		if event.start >= at:
			kept.append(event)

		elif event.end > at:
			kept.append(dataclasses.replace(event, start=at, fade_in=True))

	return kept


class _LineResolver:

	"""
	Resolves one line of a piece and collects the overflows found on the way.
	"""

	def __init__ (self, line_index: int) -> None:

		self.line_index = line_index
		self.overflows: typing.List[anacrusis.exceptions.RenderOverflow] = []

	def resolve (self, line: anacrusis.line.Line) -> typing.List[Event]:

		events: typing.List[Event] = []
		cursor = _ZERO

		for item in line.body:

			if isinstance(item, anacrusis.note.Note):
				events.append(Event(cursor, cursor + item.duration, item.kind, item.timbre))
				cursor += item.duration
				continue

			placed = [event.shifted(cursor) for event in self.resolve(item)]
			borrowed = item.pickup_duration + item.held

			if borrowed and cursor > 0:

				lead_start = cursor - borrowed

				if lead_start <= 0:
					self.overflows.append(anacrusis.exceptions.RenderOverflow(self.line_index, cursor, borrowed, cursor))

				events = truncate_tail(events, lead_start)

				if item.pickup:
					events.extend(clip_head(place_notes(item.pickup, lead_start), _ZERO))

				elif placed:
					first = placed[0]
					placed[0] = dataclasses.replace(
						first,
						start = max(lead_start, _ZERO),
						fade_in = first.fade_in or lead_start < 0
					)

			events.extend(placed)
			cursor += item.duration

		return events


def resolve_line (line: anacrusis.line.Line, line_index: int = 0) -> typing.Tuple[typing.Tuple[Event, ...], typing.Tuple[anacrusis.exceptions.RenderOverflow, ...]]:

	"""
	Resolve a single line from beat 0, returning its events and any overflows.

	The line's own top-level pickup is not played, since nothing precedes it.
	"""

	resolver = _LineResolver(line_index)
	events = resolver.resolve(line)

	return tuple(events), tuple(resolver.overflows)


@dataclasses.dataclass(frozen=True)
class Timeline:

	"""
	The resolved events of every line in a piece.
	"""

	lines: typing.Tuple[typing.Tuple[Event, ...], ...] = ()
	overflows: typing.Tuple[anacrusis.exceptions.RenderOverflow, ...] = ()

	@property
	def duration (self) -> fractions.Fraction:

		return max((events[-1].end for events in self.lines if events), default=_ZERO)

	def line_duration (self, index: int) -> fractions.Fraction:

		events = self.lines[index]

		return events[-1].end if events else _ZERO

	def events (self) -> typing.Iterator[typing.Tuple[int, Event]]:

		"""
		Lazily yield ``(line_index, event)`` for every line, ordered by start time.

		Ties are broken by line index. Each call starts a fresh iteration.
		"""

		streams = [_keyed(index, events) for index, events in enumerate(self.lines)]

		for _, index, event in heapq.merge(*streams, key=lambda item: (item[0], item[1])):
			yield index, event

	def notes_at (self, beat: fractions.Fraction) -> typing.Tuple[anacrusis.note.Note, ...]:

		"""
		The notes (rests included) that start exactly at ``beat``, in line order.

		Lines with nothing starting there contribute nothing.
		"""

		beat = fractions.Fraction(beat)

		return tuple(
			event.to_note()
			for events in self.lines
			for event in events
			if event.start == beat
		)

	def notes_during (self, beat: fractions.Fraction) -> typing.Tuple[anacrusis.note.Note, ...]:

		"""
		The notes (rests included) sounding at ``beat``, one per line at most.

		An event sounds from its start up to, but not including, its end.
		"""

		beat = fractions.Fraction(beat)

		return tuple(
			event.to_note()
			for events in self.lines
			for event in events
			if event.start <= beat < event.end
		)


def _keyed (index: int, events: typing.Iterable[Event]) -> typing.Iterator[typing.Tuple[fractions.Fraction, int, Event]]:

	for event in events:
		yield event.start, index, event


def resolve (music: typing.Any) -> Timeline:

	"""
	Resolve a ``Note``, ``Line`` or ``Piece`` into a ``Timeline``.

	Overflows are logged as warnings and kept on the timeline.
	"""

	piece = anacrusis.algebra.as_piece(music)

	lines = []
	overflows: typing.List[anacrusis.exceptions.RenderOverflow] = []

	for index, line in enumerate(piece.lines):
		events, line_overflows = resolve_line(line, index)
		lines.append(events)
		overflows.extend(line_overflows)

	for overflow in overflows:
		logger.warning(f"Pickup overflow: {overflow}")

	return Timeline(tuple(lines), tuple(overflows))

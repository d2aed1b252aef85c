"""Error taxonomy for composition and rendering.

Every construction error is raised by the combinator that detects it, so a
composition that builds successfully always renders. ``RenderOverflow`` is the
exception to the rule: it is a warning value collected on the timeline, never
raised.
"""

import fractions
import typing


class AnacrusisError (Exception):

	"""
	Base class for every error raised by this package.
	"""


class InvalidPitch (AnacrusisError, ValueError):

	"""
	A pitch lies outside the safe semitone range.
	"""


class InvalidDegree (AnacrusisError, ValueError):

	"""
	A scale degree is zero or negative (degrees are 1-indexed).
	"""


class InvalidRepetition (AnacrusisError, ValueError):

	"""
	A repetition count is negative.
	"""


class InvalidDuration (AnacrusisError, ValueError):

	"""
	A note duration is zero or negative.
	"""


class InvalidOperation (AnacrusisError, TypeError):

	"""
	Two composition values were combined in a way the algebra does not define.
	"""


class InvalidRenderConfig (AnacrusisError, ValueError):

	"""
	The render configuration (sample rate, tempo, timbre table, ...) is unusable.
	"""


class RenderOverflow (UserWarning):

	"""
	A pickup or hold consumed all of the material it borrowed time from.

	This is not fatal - dropping zero-length notes is valid - so instances are
	collected on the resolved timeline and logged instead of being raised.
	"""

	def __init__ (self, line_index: int, at: fractions.Fraction, borrowed: fractions.Fraction, available: fractions.Fraction) -> None:

		self.line_index = line_index
		self.at = at
		self.borrowed = borrowed
		self.available = available

		super().__init__(
			f"line {line_index}: pickup of {borrowed} beats at beat {at} "
			f"consumed all {available} beats before it"
		)

	def __eq__ (self, other: typing.Any) -> bool:

		if not isinstance(other, RenderOverflow):
			return NotImplemented

		return (self.line_index, self.at, self.borrowed, self.available) == (other.line_index, other.at, other.borrowed, other.available)

	def __hash__ (self) -> int:

		return hash((self.line_index, self.at, self.borrowed, self.available))

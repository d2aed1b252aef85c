import unittest

import pytest

import anacrusis.exceptions
import anacrusis.pitch


class PitchTests (unittest.TestCase):

	"""
	Tests for semitone pitches and their frequencies.
	"""

	def test_a4_is_reference (self) -> None:

		"""
		A4 should sound at exactly the reference frequency.
		"""

		self.assertEqual(anacrusis.pitch.A4.to_frequency(), 440.0)
		self.assertEqual(anacrusis.pitch.A4.to_frequency(reference=432.0), 432.0)


	def test_octave_doubles_frequency (self) -> None:

		"""
		One octave up should double the frequency.
		"""

		self.assertAlmostEqual(anacrusis.pitch.A4.octave(1).to_frequency(), 880.0)
		self.assertAlmostEqual(anacrusis.pitch.A4.octave(-1).to_frequency(), 220.0)


	def test_c4_frequency (self) -> None:

		"""
		Middle C should be about 261.63 Hz.
		"""

		self.assertAlmostEqual(anacrusis.pitch.C4.to_frequency(), 261.6255653, places=5)


	def test_from_name (self) -> None:

		"""
		Scientific pitch names should parse to semitone offsets from A4.
		"""

		self.assertEqual(anacrusis.pitch.Pitch.from_name("A4"), anacrusis.pitch.A4)
		self.assertEqual(anacrusis.pitch.Pitch.from_name("C4"), anacrusis.pitch.C4)
		self.assertEqual(anacrusis.pitch.Pitch.from_name("C#4").semitones, -8)
		self.assertEqual(anacrusis.pitch.Pitch.from_name("Db4").semitones, -8)
		self.assertEqual(anacrusis.pitch.Pitch.from_name("C5").semitones, 3)


	def test_name_round_trip (self) -> None:

		"""
		Names should be rendered with sharps.
		"""

		self.assertEqual(anacrusis.pitch.C4.name, "C4")
		self.assertEqual(anacrusis.pitch.Pitch.from_name("Bb3").name, "A#3")
		self.assertEqual(str(anacrusis.pitch.A4.semitone(3)), "C5")


	def test_semitones_from (self) -> None:

		"""
		Several transpositions should come back in order.
		"""

		e4, g4 = anacrusis.pitch.C4.semitones_from(4, 7)

		self.assertEqual(e4.name, "E4")
		self.assertEqual(g4.name, "G4")


	def test_pitch_class (self) -> None:

		"""
		Pitch classes count from C.
		"""

		self.assertEqual(anacrusis.pitch.C4.pitch_class, 0)
		self.assertEqual(anacrusis.pitch.A4.pitch_class, 9)
		self.assertEqual(anacrusis.pitch.C4.octave(-3).pitch_class, 0)


def test_out_of_range_pitch_is_rejected () -> None:

	"""Offsets beyond the safe range raise InvalidPitch eagerly."""

	with pytest.raises(anacrusis.exceptions.InvalidPitch):
		anacrusis.pitch.Pitch(anacrusis.pitch.MAX_SEMITONES + 1)

	with pytest.raises(anacrusis.exceptions.InvalidPitch):
		anacrusis.pitch.A4.octave(11)


def test_invalid_pitch_is_a_value_error () -> None:

	"""InvalidPitch is also catchable as ValueError."""

	with pytest.raises(ValueError):
		anacrusis.pitch.Pitch(-500)


def test_non_integer_semitones_rejected () -> None:

	"""Semitone offsets must be ints."""

	with pytest.raises(TypeError):
		anacrusis.pitch.Pitch(1.5)

	with pytest.raises(TypeError):
		anacrusis.pitch.Pitch(True)


def test_unknown_name_rejected () -> None:

	"""Garbage names raise ValueError."""

	with pytest.raises(ValueError):
		anacrusis.pitch.Pitch.from_name("H2")

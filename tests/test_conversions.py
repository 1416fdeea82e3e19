import math
import unittest

import numpy as np
from parameterized import parameterized

from pitch import frequency_to_midi, midi_to_frequency


class TestFrequencyMidiConversion(unittest.TestCase):

    def test_frequency_to_midi_valid(self):
        """Known reference frequencies land on (or near) their MIDI notes, unrounded."""
        self.assertEqual(frequency_to_midi(440.0), 69.0, "A4 (440 Hz) should be MIDI 69")
        self.assertAlmostEqual(frequency_to_midi(261.63), 60.0, delta=0.01)
        self.assertAlmostEqual(frequency_to_midi(4186.01), 108.0, delta=0.01)
        self.assertAlmostEqual(frequency_to_midi(27.5), 21.0, places=9)
        self.assertAlmostEqual(frequency_to_midi(450), 69.389, delta=0.001, msg="450 Hz stays fractional")
        self.assertEqual(frequency_to_midi(880), 81.0, "Integer frequency 880 should work")
        self.assertIsInstance(frequency_to_midi(440), float)

    def test_frequency_to_midi_zero_is_negative_infinity(self):
        midi = frequency_to_midi(0)
        self.assertTrue(math.isinf(midi), "Zero frequency should give an infinite MIDI note")
        self.assertLess(midi, 0)

    def test_frequency_to_midi_negative_is_nan(self):
        self.assertTrue(math.isnan(frequency_to_midi(-100)), "Negative frequency should give nan")

    def test_frequency_to_midi_non_positive_logs_instead_of_raising(self):
        with self.assertLogs(level='DEBUG') as cm:
            frequency_to_midi(0.0)
        self.assertIn("has no MIDI note", cm.output[0])

    def test_frequency_to_midi_wrong_type_raises(self):
        with self.assertRaises(ValueError):
            frequency_to_midi("abc")
        with self.assertRaises(TypeError):
            frequency_to_midi(None)

    def test_midi_to_frequency_valid(self):
        self.assertEqual(midi_to_frequency(69), 440.0)
        self.assertAlmostEqual(midi_to_frequency(60), 261.63, delta=0.01)
        self.assertAlmostEqual(midi_to_frequency(108), 4186.01, delta=0.01)
        self.assertAlmostEqual(midi_to_frequency(21), 27.5, delta=0.01)
        self.assertAlmostEqual(midi_to_frequency(0), 8.18, delta=0.01)
        self.assertAlmostEqual(midi_to_frequency(127), 12543.85, delta=0.01)
        self.assertAlmostEqual(midi_to_frequency(69.5), 452.89, delta=0.01, msg="Quarter tone above A4")
        self.assertIsInstance(midi_to_frequency(69), float)

    @parameterized.expand([
        ("int", 69),
        ("float", 69.0),
        ("numpy_int", np.int64(69)),
        ("numpy_float", np.float32(69.0)),
    ])
    def test_midi_to_frequency_accepts_numeric_types(self, _name, midi):
        self.assertEqual(midi_to_frequency(midi), 440.0)

    def test_midi_to_frequency_overflow_is_infinite(self):
        self.assertEqual(midi_to_frequency(20000), math.inf, "Notes past float range give inf Hz")
        self.assertEqual(midi_to_frequency(-20000), 0.0)
        self.assertEqual(midi_to_frequency(10 ** 400), math.inf)
        self.assertEqual(midi_to_frequency(-(10 ** 400)), 0.0)

    def test_octaves_double_the_frequency(self):
        for midi in range(0, 116, 7):
            self.assertAlmostEqual(midi_to_frequency(midi + 12) / midi_to_frequency(midi), 2.0, places=9)


if __name__ == '__main__':
    unittest.main()

import argparse
import logging
import math
import sys
from dataclasses import dataclass

import numpy as np

# --- MIDI & Pitch ---
MIDI_REF_FREQ = 440.0
MIDI_REF_NOTE = 69
SEMITONES_PER_OCTAVE = 12

# --- Note names ---
SHARP_SYMBOL = "\u266f"  # ♯
FLAT_SYMBOL = "\u266d"   # ♭
NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
PITCH_CLASS_LETTERS = {'c': 0, 'd': 2, 'e': 4, 'f': 5, 'g': 7, 'a': 9, 'b': 11}
VALID_PITCH_CLASS_CHARS = "abcdefg#b" + SHARP_SYMBOL + FLAT_SYMBOL
OCTAVE_DIGITS = "0123456789"


def get_sharp_symbol():
    """Returns the unicode sharp symbol."""
    return SHARP_SYMBOL


def get_flat_symbol():
    """Returns the unicode flat symbol."""
    return FLAT_SYMBOL


def get_valid_pitch_class_letters():
    return VALID_PITCH_CLASS_CHARS


def midi_to_frequency(midi):
    """
    Convert a (possibly fractional) MIDI note number to frequency (Hz).

    Notes too high for a float give inf Hz and notes far below give 0 Hz.
    """
    try:
        midi = float(midi)
    except OverflowError:
        midi = math.inf if midi > 0 else -math.inf
    with np.errstate(over='ignore'):
        hz = MIDI_REF_FREQ * np.exp2((midi - MIDI_REF_NOTE) / SEMITONES_PER_OCTAVE)
    return float(hz)


def frequency_to_midi(hz):
    """
    Convert frequency (Hz) to a fractional MIDI note number.

    0 Hz gives -inf and a negative frequency gives nan; both are returned
    rather than raised so callers can keep going with the sentinel pitch.
    """
    hz = float(hz)
    with np.errstate(divide='ignore', invalid='ignore'):
        midi = MIDI_REF_NOTE + SEMITONES_PER_OCTAVE * np.log2(hz / MIDI_REF_FREQ)
    if hz <= 0:
        logging.debug(f"Frequency {hz} Hz has no MIDI note, returning {midi}")
    return float(midi)


def get_note_name(pitch_class):
    """Converts a pitch class number in the range 0-11 to a letter, '' otherwise."""
    if 0 <= pitch_class < len(NOTE_NAMES):
        return NOTE_NAMES[pitch_class]
    return ""


def get_pitch_class(pitch_class_name):
    """
    Returns the pitch class number for an already filtered pitch class string
    such as 'a#' or 'db', or -1 if the first letter isn't a note letter.
    Accidentals use a truncating remainder, so 'cb' is -1 (the B below)
    and 'b#' wraps to 0.

    The first character is always the letter and only the second one is read
    as an accidental, which is how 'b' can mean both B and flat. Anything
    after the second character is ignored.
    """
    if not pitch_class_name:
        return -1

    pitch_class = PITCH_CLASS_LETTERS.get(pitch_class_name[0].lower(), -1)
    if pitch_class < 0:
        return -1

    if len(pitch_class_name) > 1:
        sharp_or_flat = pitch_class_name[1]
        if sharp_or_flat in ('#', SHARP_SYMBOL):
            pitch_class += 1
        elif sharp_or_flat in ('b', FLAT_SYMBOL):
            pitch_class -= 1
        pitch_class = int(math.fmod(pitch_class, SEMITONES_PER_OCTAVE))

    return pitch_class


def parse_note_name(note_name):
    """
    Parse a note name like 'A#3', 'Db5' or 'D♭5' into a MIDI note number
    (octave * 12 + pitch class). Returns None if there is no valid note letter.

    Digits anywhere in the string make up the octave (none means octave 0).
    'Cb4' is the B just below C4 (47) while 'B#4' wraps back to C4 (48).
    """
    octave_name = "".join(c for c in note_name if c in OCTAVE_DIGITS)
    pitch_class_name = "".join(c for c in note_name.lower() if c in VALID_PITCH_CLASS_CHARS)

    # Validity is decided by the letter alone, before any accidental is applied
    if PITCH_CLASS_LETTERS.get(pitch_class_name[:1]) is None:
        logging.debug(f"Could not parse note name {note_name!r}")
        return None

    try:
        octave = int(octave_name) if octave_name else 0
    except ValueError as e:
        logging.debug(f"Could not parse octave of note name {note_name[:20]!r}...: {e}")
        return None

    return octave * SEMITONES_PER_OCTAVE + get_pitch_class(pitch_class_name)


@dataclass(frozen=True)
class Pitch:
    """
    A single pitch, stored as a frequency in Hertz.

    A frequency of 0 Hz is the "no pitch" value: it is what the default
    constructor gives and what from_note_name returns for text it can't parse.
    """
    frequency: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'frequency', float(self.frequency))

    @classmethod
    def from_frequency(cls, frequency_hz):
        """Creates a Pitch from a frequency in Hertz e.g. 440."""
        return cls(float(frequency_hz))

    @classmethod
    def from_midi_note(cls, midi_note):
        """Creates a Pitch from a midi note number e.g. 69."""
        return cls(midi_to_frequency(midi_note))

    @classmethod
    def from_note_name(cls, note_name):
        """
        Creates a Pitch from a note name e.g. A#3.

        The pitch class can contain sharps and flats as either '#' and 'b' or
        the unicode glyphs. If the name can't be parsed this returns a Pitch
        of 0 Hz; use try_from_note_name to tell the two apart.
        """
        pitch = cls.try_from_note_name(note_name)
        return pitch if pitch is not None else cls(0.0)

    @classmethod
    def try_from_note_name(cls, note_name):
        """Like from_note_name, but returns None when the name can't be parsed."""
        midi_note = parse_note_name(note_name)
        if midi_note is None:
            return None
        return cls.from_midi_note(midi_note)

    def get_frequency_hz(self):
        return self.frequency

    def get_midi_note(self):
        """Returns the midi note of the pitch e.g. 440 = 69. -inf for 0 Hz, nan below it."""
        return frequency_to_midi(self.frequency)

    def get_midi_note_name(self):
        """
        Returns the note name of the pitch e.g. 440 = A4.

        The midi note is truncated, not rounded, so 445 Hz is still A4 and
        439 Hz is G#4. Only a note within 1e-9 below a semitone is rounded up
        to it, so 60.9999999999 names as C#4. Returns '' for pitches of 0 Hz
        or less and for pitches too high to have a finite midi note.
        """
        midi_float = self.get_midi_note()
        if not np.isfinite(midi_float):
            logging.warning(f"Pitch of {self.frequency} Hz has no note name")
            return ""

        # 60 can come back as 59.999999999; snap that before truncating
        midi_note = int(round(midi_float, 9))
        pitch_class = midi_note % SEMITONES_PER_OCTAVE
        octave = midi_note // SEMITONES_PER_OCTAVE - 1
        return f"{get_note_name(pitch_class)}{octave}"

    def __str__(self):
        return self.get_midi_note_name()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Convert between note names, frequencies and MIDI notes.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('note', nargs='?', default=None, help="Note name, e.g. A#3, Db5 or D♭5.")
    source.add_argument('--hz', type=float, default=None, help="Frequency in Hertz.")
    source.add_argument('--midi', type=float, default=None, help="MIDI note number (may be fractional).")
    parser.add_argument('--log-level', default='WARNING', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Set logging level.')
    args = parser.parse_args(argv)

    log_level_from_args = getattr(logging, args.log_level.upper(), logging.INFO)
    logging.basicConfig(level=log_level_from_args, format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')

    if args.hz is not None:
        pitch = Pitch.from_frequency(args.hz)
    elif args.midi is not None:
        pitch = Pitch.from_midi_note(args.midi)
    else:
        pitch = Pitch.try_from_note_name(args.note)
        if pitch is None:
            print(f"Error: could not parse note name {args.note!r}", file=sys.stderr)
            return 1

    logging.info(f"Converted input to {pitch!r}")
    print(f"Frequency: {pitch.get_frequency_hz():.2f} Hz")
    print(f"MIDI note: {pitch.get_midi_note():.2f}")
    print(f"Note name: {pitch.get_midi_note_name() or '-'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

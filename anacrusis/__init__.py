"""
Anacrusis - compose music with operators and render it to samples.

Music is built from three values. A ``Note`` is a pitch or rest held for a
number of beats. A ``Line`` is notes in sequence. A ``Piece`` is lines played
together. Two operators combine them:

- ``+`` concatenates: ``quarter(C4) + quarter(E4)`` is a two-note line.
- ``*`` stacks lines (``melody * bassline``) or repeats (``phrase * 4``).

Lines may carry a pickup (anacrusis). ``-line`` turns a line into lead-in
notes, and ``a + (-pickup + b)`` plays the pickup over the end of ``a``
instead of after it, so the total length is unchanged. ``~line`` holds the
pickup into the first note rather than sounding it separately.

Everything is immutable and rendering is deterministic: the same value always
renders to the same samples.

Minimal example:

    ```python
    import anacrusis
    from anacrusis.note import quarter, half, piano, bass, Pitched

    C4 = anacrusis.Pitch.from_name("C4")
    E4 = anacrusis.Pitch.from_name("E4")
    G4 = anacrusis.Pitch.from_name("G4")

    melody = piano(quarter(C4) + quarter(E4) + half(G4))
    bassline = bass(half(C4.octave(-2)) * 2)

    audio = anacrusis.render(melody * bassline)
    data = audio.to_bytes(bit_depth=16)
    ```

Package-level exports: ``Pitch``, ``Scale``, ``Chord``, ``Note``, ``Line``,
``Piece``, ``RenderConfig``, ``render``, ``stream``.
"""

import anacrusis.algebra
import anacrusis.chords
import anacrusis.intervals
import anacrusis.line
import anacrusis.note
import anacrusis.piece
import anacrusis.pitch
import anacrusis.rendering


Pitch = anacrusis.pitch.Pitch
Scale = anacrusis.intervals.Scale
Chord = anacrusis.chords.Chord
Note = anacrusis.note.Note
Line = anacrusis.line.Line
Piece = anacrusis.piece.Piece
RenderConfig = anacrusis.rendering.RenderConfig
render = anacrusis.rendering.render
stream = anacrusis.rendering.stream

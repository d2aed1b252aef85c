import logging
import wave

import anacrusis
import anacrusis.chords
import anacrusis.config
import anacrusis.intervals
import anacrusis.pitch

from anacrusis.note import bass, drums, eighth, half, piano, quarter, rest, whole

logging.basicConfig(level=logging.DEBUG)

C_MAJOR = anacrusis.intervals.Scale(anacrusis.pitch.C4, "major")

C4, D4, E4, F4, G4 = C_MAJOR.degrees(1, 2, 3, 4, 5)

# Each phrase opens with a two-eighth pickup that overwrites the end of the
# phrase before it, so the verse keeps a steady four-bar length.
first = quarter(E4) + quarter(D4) + quarter(C4) + quarter(D4) + quarter(E4) * 3 + rest(1)
second = -(eighth(G4) + eighth(F4)) + quarter(D4) * 3 + rest(1) + quarter(E4) + quarter(G4) * 2 + rest(1)
third = -(eighth(F4) + eighth(E4)) + quarter(E4) + quarter(D4) + quarter(C4) + quarter(D4) + quarter(E4) * 4
fourth = ~(-eighth(E4) + quarter(D4) * 2 + quarter(E4) + quarter(D4) + whole(C4))

melody = piano(first + second + third + fourth)

chords = [
	anacrusis.chords.Chord.from_quality(C4.octave(-1), "major"),
	anacrusis.chords.Chord.from_quality(G4.octave(-2), "major"),
	anacrusis.chords.Chord.from_quality(C4.octave(-1), "major"),
	anacrusis.chords.Chord.from_quality(G4.octave(-2), "dominant_7th"),
]

comping = piano(half(chords[0]) * 4 + half(chords[1]) * 2 + half(chords[2]) * 2 + half(chords[0]) * 4 + half(chords[3]) * 2 + half(chords[0]) * 2)
bassline = bass(whole(C4.octave(-2)) * 2 + whole(G4.octave(-3)) + whole(C4.octave(-2)) * 2 + whole(G4.octave(-3)) + whole(C4.octave(-2)) * 2)

kick = C4.octave(-2)
snare = C4
hat = C4.octave(1)

beat = drums(quarter(kick) + quarter(snare) + quarter(kick) + quarter(snare)) * (drums(eighth(hat)) * 8)

song = melody * comping.with_volume(0.4) * bassline.with_volume(0.7) * (beat * 8)

if __name__ == "__main__":

	config = anacrusis.config.load_render_config("anacrusis.yaml")
	audio = anacrusis.render(song, config)

	with wave.open("mary_had_a_little_lamb.wav", "wb") as f:
		f.setnchannels(1)
		f.setsampwidth(2)
		f.setframerate(audio.sample_rate)
		f.writeframes(audio.to_bytes(bit_depth=16))

	logging.getLogger(__name__).info(f"Wrote {audio.duration_seconds:.1f}s, peak {audio.peak:.2f}")

"""Rendering: timeline to samples.

Each line of the resolved timeline is synthesized into its own buffer. Every
event occupies the samples between its start and end, computed from absolute
beat positions, so rounding never accumulates across a long line. The line
buffers are then mixed:

- ``"peak"`` (default): if the summed signal exceeds full scale it is scaled
  down so its peak is exactly 1.0. Quiet mixes are never boosted.
- ``"clip"``: samples are hard-clipped to [-1, 1].
- ``"none"``: the sum is returned untouched and may exceed full scale.

Rendered buffers are read-only numpy arrays, so any number of consumers can
share one ``RenderedAudio`` safely. ``stream()`` produces the same samples
lazily in fixed-size chunks for long pieces.
"""

import dataclasses
import fractions
import logging
import typing

import numpy

import anacrusis.exceptions
import anacrusis.note
import anacrusis.timbres
import anacrusis.timeline


logger = logging.getLogger(__name__)

NORMALIZE_POLICIES: typing.Tuple[str, ...] = ("peak", "clip", "none")

PCM_BIT_DEPTHS: typing.Tuple[int, ...] = (8, 16, 24, 32)


@dataclasses.dataclass(frozen=True)
class RenderConfig:

	"""
	Sample-level settings for rendering.

	Parameters:
		sample_rate: Samples per second.
		bpm: Tempo in beats (quarter notes) per minute.
		gain: Linear gain applied to the mix before normalization.
		normalize: ``"peak"``, ``"clip"`` or ``"none"`` (see module docstring).
		reference: Frequency of A4 in Hz.
		edit_fade: Length in seconds of the fade applied where a pickup cuts a note.
		timbres: Registry used to look up each note's timbre by name.
	"""

	sample_rate: int = 44100
	bpm: float = 120.0
	gain: float = 1.0
	normalize: str = "peak"
	reference: float = 440.0
	edit_fade: float = 0.005
	timbres: anacrusis.timbres.TimbreRegistry = anacrusis.timbres.DEFAULT_TIMBRES

	def __post_init__ (self) -> None:

		if isinstance(self.sample_rate, bool) or not isinstance(self.sample_rate, int) or self.sample_rate <= 0:
			raise anacrusis.exceptions.InvalidRenderConfig(f"sample_rate must be a positive integer, got {self.sample_rate!r}")

		if not self.bpm > 0:
			raise anacrusis.exceptions.InvalidRenderConfig(f"bpm must be positive, got {self.bpm!r}")

		if self.gain < 0:
			raise anacrusis.exceptions.InvalidRenderConfig(f"gain cannot be negative, got {self.gain!r}")

		if self.normalize not in NORMALIZE_POLICIES:
			raise anacrusis.exceptions.InvalidRenderConfig(f"normalize must be one of {NORMALIZE_POLICIES}, got {self.normalize!r}")

		if not self.reference > 0:
			raise anacrusis.exceptions.InvalidRenderConfig(f"reference must be positive, got {self.reference!r}")

		if self.edit_fade < 0:
			raise anacrusis.exceptions.InvalidRenderConfig(f"edit_fade cannot be negative, got {self.edit_fade!r}")

		if not isinstance(self.timbres, anacrusis.timbres.TimbreRegistry):
			raise anacrusis.exceptions.InvalidRenderConfig(f"timbres must be a TimbreRegistry, got {self.timbres!r}")

	def sample_index (self, beats: fractions.Fraction) -> int:

		"""
		Convert an absolute beat position to a sample index.
		"""

		seconds = fractions.Fraction(beats) * 60 / fractions.Fraction(self.bpm)

		return round(seconds * self.sample_rate)

	@property
	def edit_fade_samples (self) -> int:

		return int(round(self.edit_fade * self.sample_rate))


def render_segment (event: anacrusis.timeline.Event, num_samples: int, config: RenderConfig) -> numpy.ndarray:

	"""
	Synthesize one event into exactly ``num_samples`` samples.
	"""

	timbre = config.timbres.lookup(event.timbre)

	if num_samples <= 0:
		return numpy.zeros(0)

	if not isinstance(event.kind, anacrusis.note.Pitched):
		return numpy.zeros(num_samples)

	frequency = event.kind.pitch.to_frequency(config.reference)
	segment = timbre.synthesize(frequency, num_samples, config.sample_rate) * event.kind.volume

	return anacrusis.timbres.apply_fades(segment, event.fade_in, event.fade_out, config.edit_fade_samples)


def _line_segments (events: typing.Iterable[anacrusis.timeline.Event], config: RenderConfig) -> typing.Iterator[numpy.ndarray]:

	"""
	Yield a line's samples in order as segments, filling any gaps with silence.
	"""

	cursor = 0

	for event in events:

		start = config.sample_index(event.start)
		end = config.sample_index(event.end)

		if start > cursor:
			yield numpy.zeros(start - cursor)

		yield render_segment(event, end - start, config)
		cursor = max(cursor, end)


def render_line (events: typing.Sequence[anacrusis.timeline.Event], config: RenderConfig) -> numpy.ndarray:

	"""
	Synthesize one resolved line into a buffer starting at sample 0.
	"""

	segments = list(_line_segments(events, config))

	if not segments:
		return numpy.zeros(0)

	return numpy.concatenate(segments)


def mix (buffers: typing.Sequence[numpy.ndarray], gain: float = 1.0, normalize: str = "peak") -> numpy.ndarray:

	"""
	Sum line buffers (zero-padding shorter ones), apply gain, then the normalization policy.
	"""

	if normalize not in NORMALIZE_POLICIES:
		raise anacrusis.exceptions.InvalidRenderConfig(f"normalize must be one of {NORMALIZE_POLICIES}, got {normalize!r}")

	length = max((len(buffer) for buffer in buffers), default=0)
	total = numpy.zeros(length)

	for buffer in buffers:
		total[:len(buffer)] += buffer

	total *= gain

	if normalize == "clip":
		numpy.clip(total, -1.0, 1.0, out=total)

	elif normalize == "peak" and length:

		peak = float(numpy.max(numpy.abs(total)))

		if peak > 1.0:
			logger.debug(f"Normalizing mix peak {peak:.3f} down to 1.0")
			total /= peak

	return total


def _read_only (array: numpy.ndarray) -> numpy.ndarray:

	array.setflags(write=False)

	return array


def to_pcm (samples: numpy.ndarray, bit_depth: int = 16, channels: int = 1, interleaved: bool = True) -> numpy.ndarray:

	"""
	Quantize float samples to integer PCM.

	Samples are clipped to [-1, 1] first. 8-bit output is unsigned (silence is
	128), as in WAV files. 24-bit samples are held in an ``int32`` array.
	Mono is duplicated into ``channels`` channels, shaped ``(frames, channels)``
	when interleaved and ``(channels, frames)`` otherwise.
	"""

	if bit_depth not in PCM_BIT_DEPTHS:
		raise anacrusis.exceptions.InvalidRenderConfig(f"bit_depth must be one of {PCM_BIT_DEPTHS}, got {bit_depth!r}")

	if isinstance(channels, bool) or not isinstance(channels, int) or channels < 1:
		raise anacrusis.exceptions.InvalidRenderConfig(f"channels must be a positive integer, got {channels!r}")

	clipped = numpy.clip(samples, -1.0, 1.0)

	if bit_depth == 8:
		pcm = (numpy.round(clipped * 127.0) + 128).astype(numpy.uint8)

	else:
		full_scale = 2 ** (bit_depth - 1) - 1
		dtype = numpy.int16 if bit_depth == 16 else numpy.int32
		pcm = numpy.round(clipped * full_scale).astype(numpy.int64).astype(dtype)

	if interleaved:
		pcm = numpy.repeat(pcm[:, numpy.newaxis], channels, axis=1)

	else:
		pcm = numpy.repeat(pcm[numpy.newaxis, :], channels, axis=0)

	return _read_only(numpy.ascontiguousarray(pcm))


def to_bytes (samples: numpy.ndarray, bit_depth: int = 16, channels: int = 1) -> bytes:

	"""
	Return little-endian interleaved PCM bytes, ready for a WAV data chunk.
	"""

	pcm = to_pcm(samples, bit_depth, channels, interleaved=True)

	if bit_depth == 8:
		return pcm.tobytes()

	little = pcm.astype(pcm.dtype.newbyteorder("<"))

	if bit_depth == 24:
		return little.view(numpy.uint8).reshape(-1, 4)[:, :3].tobytes()

	return little.tobytes()


@dataclasses.dataclass(frozen=True, eq=False)
class RenderedAudio:

	"""
	A finished, immutable render.
	"""

	samples: numpy.ndarray
	sample_rate: int
	timeline: anacrusis.timeline.Timeline
	line_buffers: typing.Tuple[numpy.ndarray, ...] = ()

	@property
	def duration_seconds (self) -> float:

		return len(self.samples) / self.sample_rate

	@property
	def peak (self) -> float:

		if not len(self.samples):
			return 0.0

		return float(numpy.max(numpy.abs(self.samples)))

	def to_pcm (self, bit_depth: int = 16, channels: int = 1, interleaved: bool = True) -> numpy.ndarray:

		return to_pcm(self.samples, bit_depth, channels, interleaved)

	def to_bytes (self, bit_depth: int = 16, channels: int = 1) -> bytes:

		return to_bytes(self.samples, bit_depth, channels)


def render (music: typing.Any, config: typing.Optional[RenderConfig] = None) -> RenderedAudio:

	"""
	Render a ``Note``, ``Line`` or ``Piece`` to a mono float buffer.

	Example:
		```python
		audio = render(piano(quarter(C4) + quarter(E4)) * bass(half(C4.octave(-2))))
		data = audio.to_bytes(bit_depth=16)
		```
	"""

	if config is None:
		config = RenderConfig()

	timeline = anacrusis.timeline.resolve(music)
	line_buffers = tuple(_read_only(render_line(events, config)) for events in timeline.lines)
	samples = mix(line_buffers, config.gain, config.normalize)

	logger.debug(f"Rendered {len(timeline.lines)} lines, {timeline.duration} beats -> {len(samples)} samples at {config.sample_rate} Hz")

	return RenderedAudio(_read_only(samples), config.sample_rate, timeline, line_buffers)


def _rechunk (segments: typing.Iterator[numpy.ndarray], chunk_size: int, total: int) -> typing.Iterator[numpy.ndarray]:

	"""
	Regroup a stream of segments into ``chunk_size`` chunks, zero-padded to ``total`` samples.
	"""

	buffer = numpy.zeros(0)
	emitted = 0

	for segment in segments:

		buffer = numpy.concatenate((buffer, segment))
		offset = 0

		while len(buffer) - offset >= chunk_size:
			yield buffer[offset:offset + chunk_size]
			offset += chunk_size

		emitted += offset
		buffer = buffer[offset:]

	tail = numpy.concatenate((buffer, numpy.zeros(max(total - emitted - len(buffer), 0))))

	for offset in range(0, len(tail), chunk_size):
		yield tail[offset:offset + chunk_size]


class SampleStream:

	"""
	A restartable, lazily synthesized sequence of sample chunks.

	Each iteration resolves nothing new (the timeline is fixed) but synthesizes
	afresh, so iterating twice yields identical chunks. Only the ``"clip"`` and
	``"none"`` policies are allowed, since they work sample by sample. The
	chunks concatenate to exactly the buffer ``render()`` would produce.
	"""

	def __init__ (self, music: typing.Any, config: typing.Optional[RenderConfig] = None, chunk_size: int = 4096) -> None:

		if config is None:
			config = RenderConfig(normalize="clip")

		if config.normalize == "peak":
			raise anacrusis.exceptions.InvalidRenderConfig("Streaming cannot use the 'peak' policy; use 'clip' or 'none'")

		if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
			raise anacrusis.exceptions.InvalidRenderConfig(f"chunk_size must be a positive integer, got {chunk_size!r}")

		self.config = config
		self.chunk_size = chunk_size
		self.timeline = anacrusis.timeline.resolve(music)
		self.total_samples = max((config.sample_index(self.timeline.line_duration(i)) for i in range(len(self.timeline.lines))), default=0)

	def __iter__ (self) -> typing.Iterator[numpy.ndarray]:

		lines = [
			_rechunk(_line_segments(events, self.config), self.chunk_size, self.total_samples)
			for events in self.timeline.lines
		]

		for chunks in zip(*lines):
			yield _read_only(mix(chunks, self.config.gain, self.config.normalize))

	def __len__ (self) -> int:

		"""
		Number of chunks one iteration yields.
		"""

		return -(-self.total_samples // self.chunk_size)


def stream (music: typing.Any, config: typing.Optional[RenderConfig] = None, chunk_size: int = 4096) -> SampleStream:

	return SampleStream(music, config, chunk_size)

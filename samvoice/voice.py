"""Speech voice: queues rendered speech and plays it back through realtime effects."""

from __future__ import annotations

import random
import threading
from collections.abc import Callable

from samvoice.effects import EffectChain
from samvoice.pcm import decode_pcm8, resample
from samvoice.presets import Parameters, RealtimeControls

SAM_SAMPLE_RATE = 22050.0
MIN_SAMPLE_RATE = 8000.0
_GAP_SECONDS = 0.04

Renderer = Callable[[str, Parameters], bytes]
"""Turns text into unsigned 8-bit PCM at 22050 Hz, raising RenderError on failure."""


class RenderError(Exception):
    """Speech could not be rendered or queued."""


def _clamp(value, low, high):
    return max(low, min(high, value))


def mutate_text(text: str, amount: float, rng: random.Random) -> str:
    """Randomly repeat, drop and double characters; line breaks are kept."""
    amount = _clamp(amount, 0.0, 1.0)
    if amount < 0.01:
        return text

    out: list[str] = []
    for ch in text:
        if ch in "\n\r":
            out.append(ch)
            continue

        r = rng.random()
        if r < 0.08 * amount and out:
            out.append(out[-1])
            continue
        if r < 0.14 * amount:
            continue

        out.append(ch)
        if rng.random() < 0.12 * amount:
            out.append(ch)

    result = "".join(out)
    return text if not result.strip() else result


class Voice:
    """Renders text through a speech renderer and plays the result with effects."""

    def __init__(
        self,
        renderer: Renderer,
        sample_rate: float = 44100.0,
        seed: int | None = None,
    ):
        self._renderer = renderer
        self._rng = random.Random(seed)
        self._sample_rate = max(MIN_SAMPLE_RATE, float(sample_rate))
        self._effects = EffectChain(self._sample_rate, self._rng)

        self._audio_lock = threading.Lock()
        self._status_lock = threading.Lock()

        self._queue: list[float] = []
        self._loop_source: list[float] = []
        self._playhead = 0.0
        self._loop_at_end = False
        self._controls = RealtimeControls()

        self._jitter_counter = 0
        self._jitter_ratio = 1.0

        self._status = "Idle"

    def set_sample_rate(self, sample_rate: float) -> None:
        """Set the output rate; rates below 8000 Hz are raised to 8000 Hz."""
        self._sample_rate = max(MIN_SAMPLE_RATE, float(sample_rate))
        self._effects.sample_rate = self._sample_rate

    def queue_text(self, text: str, params: Parameters | None = None) -> int:
        """Render text and append it to the playback queue.

        Returns the number of speech samples queued (0 for blank text).
        Raises RenderError when rendering fails; the status holds the reason.
        """
        params = params if params is not None else Parameters()
        text = text.strip()
        if not text:
            self._set_status("Idle")
            return 0

        self._set_status("Rendering SAM...")
        text = mutate_text(text, self.realtime_controls().mutation, self._rng)

        try:
            pcm = self._renderer(text, params)
        except RenderError as exc:
            self._set_status(str(exc) or "SAM render failed")
            raise

        samples = decode_pcm8(pcm)
        if not samples:
            self._set_status("SAM render failed")
            raise RenderError("SAM render failed")

        resampled = resample(samples, SAM_SAMPLE_RATE, self._sample_rate)
        if not resampled:
            self._set_status("Resample failed")
            raise RenderError("Resample failed")

        gap = [0.0] * max(0, int(_GAP_SECONDS * self._sample_rate))
        with self._audio_lock:
            self._queue.extend(resampled)
            self._queue.extend(gap)
            self._loop_source = resampled + gap
            self._set_status(f"Queued {len(resampled)} samples")
        return len(resampled)

    def render(self, num_samples: int) -> list[float]:
        """Produce the next block of mono output samples."""
        with self._audio_lock:
            controls = self._controls
            speed = _clamp(controls.playback_speed, 0.25, 4.0)
            pitch_ratio = 2.0 ** (controls.repitch_semitones / 12.0)

            out = []
            for _ in range(num_samples):
                jitter = self._next_jitter_ratio(controls.repitch_jitter)
                step = _clamp(speed * pitch_ratio * jitter, 0.05, 8.0)
                value = 0.0
                sample = self._sample_at_playhead()
                if sample is not None:
                    value = sample
                    self._playhead += step
                out.append(self._effects.process(value, controls))

            if self._playhead >= len(self._queue):
                if self._loop_at_end and self._loop_source:
                    self._queue = list(self._loop_source)
                    self._playhead = 0.0
                    self._set_status("Looping")
                else:
                    had_audio = bool(self._queue)
                    self._queue = []
                    self._playhead = 0.0
                    if had_audio:
                        self._set_status("Idle")
            return out

    def set_realtime_controls(self, controls: RealtimeControls) -> None:
        """Replace the realtime controls, limited to their valid ranges."""
        self._controls = controls.clamped()

    def realtime_controls(self) -> RealtimeControls:
        """The realtime controls in effect."""
        return self._controls

    def set_loop_at_end(self, should_loop: bool) -> None:
        """Choose whether the last phrase repeats when playback runs out."""
        self._loop_at_end = bool(should_loop)

    def loop_at_end(self) -> bool:
        """Whether the last phrase repeats when playback runs out."""
        return self._loop_at_end

    def status(self) -> str:
        """A short human-readable description of what the voice is doing."""
        with self._status_lock:
            return self._status

    def _set_status(self, text: str) -> None:
        with self._status_lock:
            self._status = text

    def _next_jitter_ratio(self, amount: float) -> float:
        amount = _clamp(amount, 0.0, 1.0)
        if amount <= 0.001:
            return 1.0

        self._jitter_counter -= 1
        if self._jitter_counter <= 0:
            span = 0.35 * amount
            self._jitter_ratio = 1.0 + self._rng.random() * (2.0 * span) - span
            self._jitter_counter = max(
                1, int(self._sample_rate * (0.008 + 0.08 * (1.0 - amount)))
            )
        return self._jitter_ratio

    def _sample_at_playhead(self) -> float | None:
        if self._playhead >= len(self._queue):
            return None
        i0 = int(self._playhead)
        i1 = min(i0 + 1, len(self._queue) - 1)
        frac = self._playhead - i0
        a = self._queue[i0]
        b = self._queue[i1]
        return a + (b - a) * frac
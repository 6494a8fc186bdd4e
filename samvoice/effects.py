"""Per-sample realtime effects applied to the voice output."""

from __future__ import annotations

import math
import random

from samvoice.presets import RealtimeControls

_HISTORY_SIZE = 4096
_OFF = 0.001


def _clamp(value, low, high):
    return max(low, min(high, value))


class EffectChain:
    """Stateful chain of glitch and colour effects, one sample at a time."""

    def __init__(self, sample_rate: float = 44100.0, rng: random.Random | None = None):
        self.sample_rate = sample_rate
        self._rng = rng if rng is not None else random.Random()

        self._gate_counter = 1
        self._gate_open = True

        self._crush_hold_counter = 1
        self._crush_held_sample = 0.0

        self._ring_phase = 0.0
        self._shift_phase = 0.0

        self._formant1 = 0.0
        self._formant2 = 0.0
        self._formant_band1 = 0.0
        self._formant_band2 = 0.0
        self._tilt_lp = 0.0

        self._history = [0.0] * _HISTORY_SIZE
        self._history_write = 0
        self._loop_active = False
        self._loop_start = 0
        self._loop_pos = 0
        self._loop_length = 64
        self._loop_remain = 0
        self._loop_trigger_counter = 1

    def process(self, sample: float, controls: RealtimeControls) -> float:
        """Run one sample through every effect and limit it to [-1, 1]."""
        out = self.micro_loop(sample, controls.micro_loop)
        out = self.formant_warp(out, controls.formant_warp)
        out = self.spectral_tilt(out, controls.spectral_tilt)
        out = self.glitch_gate(out, controls.glitch_gate)
        out = self.bit_crush(out, controls.bit_crush)
        out = self.ring_mod(out, controls.ring_mod)
        out = self.frequency_shift(out, controls.freq_shift)
        return _clamp(out, -1.0, 1.0)

    def micro_loop(self, x: float, amount: float) -> float:
        """Occasionally repeat a short slice of recent audio."""
        amount = _clamp(amount, 0.0, 1.0)
        self._history[self._history_write] = x
        self._history_write = (self._history_write + 1) % _HISTORY_SIZE

        if amount <= _OFF:
            self._loop_active = False
            return x

        if self._loop_active:
            idx = (self._loop_start + self._loop_pos) % _HISTORY_SIZE
            y = self._history[idx]
            self._loop_pos = (self._loop_pos + 1) % max(1, self._loop_length)
            self._loop_remain -= 1
            if self._loop_remain <= 0:
                self._loop_active = False
            return y

        self._loop_trigger_counter -= 1
        if self._loop_trigger_counter <= 0:
            self._loop_trigger_counter = max(
                1, int(self.sample_rate * (0.03 + 0.22 * (1.0 - amount)))
            )
            if self._rng.random() < 0.18 + 0.72 * amount:
                self._loop_length = _clamp(
                    24 + int(amount * 1500.0), 24, _HISTORY_SIZE // 2
                )
                self._loop_remain = max(
                    self._loop_length, int(self._loop_length * (1.0 + amount * 4.0))
                )
                self._loop_start = (
                    self._history_write + _HISTORY_SIZE - self._loop_length
                ) % _HISTORY_SIZE
                self._loop_pos = 0
                self._loop_active = True

        return x

    def formant_warp(self, x: float, amount: float) -> float:
        """Add two shifted band resonances to the signal."""
        amount = _clamp(amount, 0.0, 1.0)
        if amount <= _OFF:
            return x

        warp = 0.75 + 1.5 * amount
        f1 = _clamp((900.0 * warp) / self.sample_rate, 0.002, 0.25)
        f2 = _clamp((2200.0 * warp) / self.sample_rate, 0.002, 0.25)

        self._formant1 += f1 * (x - self._formant1)
        hp1 = x - self._formant1
        self._formant_band1 += f1 * (hp1 - self._formant_band1)

        self._formant2 += f2 * (x - self._formant2)
        hp2 = x - self._formant2
        self._formant_band2 += f2 * (hp2 - self._formant_band2)

        return x + amount * 0.75 * (self._formant_band1 * 0.7 + self._formant_band2 * 0.45)

    def spectral_tilt(self, x: float, amount: float) -> float:
        """Tilt the spectrum: below 0.5 brightens, above 0.5 darkens."""
        amount = _clamp(amount, 0.0, 1.0)
        if amount <= _OFF:
            return x

        tilt = amount * 2.0 - 1.0
        self._tilt_lp += 0.03 * (x - self._tilt_lp)
        hp = x - self._tilt_lp
        return x + tilt * (self._tilt_lp * 0.8 - hp * 0.55)

    def glitch_gate(self, x: float, amount: float) -> float:
        """Randomly mute short stretches of audio."""
        amount = _clamp(amount, 0.0, 1.0)
        if amount <= _OFF:
            return x

        self._gate_counter -= 1
        if self._gate_counter <= 0:
            self._gate_counter = max(
                1, int(self.sample_rate * (0.005 + 0.08 * (1.0 - amount)))
            )
            self._gate_open = self._rng.random() > 0.25 + 0.6 * amount
        return x if self._gate_open else 0.0

    def bit_crush(self, x: float, amount: float) -> float:
        """Reduce sample rate and bit depth."""
        amount = _clamp(amount, 0.0, 1.0)
        if amount <= _OFF:
            return x

        self._crush_hold_counter -= 1
        if self._crush_hold_counter <= 0:
            self._crush_hold_counter = 1 + int(amount * amount * 42.0)
            self._crush_held_sample = x

        bits = _clamp(16 - int(amount * 13.0), 3, 16)
        levels = float(1 << bits)
        return math.floor((self._crush_held_sample * 0.5 + 0.5) * levels) / levels * 2.0 - 1.0

    def ring_mod(self, x: float, amount: float) -> float:
        """Blend the signal with itself multiplied by a sine carrier."""
        amount = _clamp(amount, 0.0, 1.0)
        if amount <= _OFF:
            return x

        freq = 18.0 + 740.0 * amount
        self._ring_phase += math.tau * (freq / self.sample_rate)
        if self._ring_phase > math.tau:
            self._ring_phase -= math.tau
        mod = math.sin(self._ring_phase)
        return x * ((1.0 - amount) + amount * mod)

    def frequency_shift(self, x: float, amount: float) -> float:
        """Mix in a cosine-modulated copy of the signal."""
        amount = _clamp(amount, 0.0, 1.0)
        if amount <= _OFF:
            return x

        freq = 35.0 + 1200.0 * amount
        self._shift_phase += math.tau * (freq / self.sample_rate)
        if self._shift_phase > math.tau:
            self._shift_phase -= math.tau

        carrier = math.cos(self._shift_phase)
        shifted = x * carrier * 1.8
        return _clamp(x * (1.0 - amount * 0.65) + shifted * amount, -1.0, 1.0)
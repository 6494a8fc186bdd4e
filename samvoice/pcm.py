"""Decoding of unsigned 8-bit PCM and linear resampling."""

from __future__ import annotations

import math
from collections.abc import Sequence


def decode_pcm8(data: bytes) -> list[float]:
    """Convert unsigned 8-bit samples to floats centred on zero."""
    return [(byte - 128.0) / 256.0 for byte in data]


def resample(samples: Sequence[float], source_rate: float, target_rate: float) -> list[float]:
    """Resample by linear interpolation; empty on empty input or bad rates."""
    if not samples or source_rate <= 0.0 or target_rate <= 0.0:
        return []

    if abs(source_rate - target_rate) < 1.0:
        return list(samples)

    ratio = source_rate / target_rate
    out_count = int(max(1.0, math.floor(len(samples) * (target_rate / source_rate))))
    last = len(samples) - 1

    out = []
    pos = 0.0
    for _ in range(out_count):
        idx = math.floor(pos)
        frac = pos - idx
        a = samples[min(idx, last)]
        b = samples[min(idx + 1, last)]
        out.append(a + (b - a) * frac)
        pos += ratio
    return out
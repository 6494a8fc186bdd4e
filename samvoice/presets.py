"""Voice parameters, realtime effect controls and the factory presets."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Backend(Enum):
    """Which speech engine renders the text."""

    CLASSIC_SAM = 0
    BETTER_SAM = 1


@dataclass(frozen=True)
class Parameters:
    """Settings handed to the speech engine when text is rendered."""

    speed: int = 72
    pitch: int = 64
    mouth: int = 128
    throat: int = 128
    sing_mode: bool = False
    phonetic_input: bool = False
    backend: Backend = Backend.CLASSIC_SAM


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class RealtimeControls:
    """Playback and effect settings applied while audio is rendered."""

    playback_speed: float = 1.0
    repitch_semitones: float = 0.0
    formant_warp: float = 0.0
    glitch_gate: float = 0.0
    bit_crush: float = 0.0
    micro_loop: float = 0.0
    spectral_tilt: float = 0.0
    ring_mod: float = 0.0
    freq_shift: float = 0.0
    repitch_jitter: float = 0.0
    mutation: float = 0.0

    def clamped(self) -> RealtimeControls:
        """Return a copy with every control limited to its valid range."""
        return RealtimeControls(
            playback_speed=_clamp(self.playback_speed, 0.25, 4.0),
            repitch_semitones=_clamp(self.repitch_semitones, -24.0, 24.0),
            formant_warp=_clamp(self.formant_warp, 0.0, 1.0),
            glitch_gate=_clamp(self.glitch_gate, 0.0, 1.0),
            bit_crush=_clamp(self.bit_crush, 0.0, 1.0),
            micro_loop=_clamp(self.micro_loop, 0.0, 1.0),
            spectral_tilt=_clamp(self.spectral_tilt, 0.0, 1.0),
            ring_mod=_clamp(self.ring_mod, 0.0, 1.0),
            freq_shift=_clamp(self.freq_shift, 0.0, 1.0),
            repitch_jitter=_clamp(self.repitch_jitter, 0.0, 1.0),
            mutation=_clamp(self.mutation, 0.0, 1.0),
        )


_PRESETS: tuple[tuple[str, Parameters, RealtimeControls], ...] = (
    (
        "Classic SAM",
        Parameters(speed=72, pitch=64, mouth=128, throat=128),
        RealtimeControls(),
    ),
    (
        "Soft Tutor",
        Parameters(speed=82, pitch=58, mouth=110, throat=140),
        RealtimeControls(spectral_tilt=0.40),
    ),
    (
        "Toy Robot",
        Parameters(speed=68, pitch=80, mouth=170, throat=100),
        RealtimeControls(formant_warp=0.48, ring_mod=0.18),
    ),
    (
        "Singy Crystal",
        Parameters(speed=74, pitch=92, mouth=160, throat=150, sing_mode=True),
        RealtimeControls(playback_speed=1.08, repitch_semitones=2.0, spectral_tilt=0.62),
    ),
    (
        "Radio Glitch",
        Parameters(speed=78, pitch=70, mouth=140, throat=128),
        RealtimeControls(glitch_gate=0.52, bit_crush=0.42, micro_loop=0.34),
    ),
    (
        "Monster Pipe",
        Parameters(speed=60, pitch=36, mouth=90, throat=60),
        RealtimeControls(repitch_semitones=-7.0, formant_warp=0.72, freq_shift=0.20),
    ),
    (
        "Chipmunk Pop",
        Parameters(speed=96, pitch=122, mouth=190, throat=180),
        RealtimeControls(repitch_semitones=7.0, repitch_jitter=0.10),
    ),
    (
        "Haunted PA",
        Parameters(speed=66, pitch=54, mouth=100, throat=90),
        RealtimeControls(micro_loop=0.24, ring_mod=0.32, spectral_tilt=0.18),
    ),
    (
        "Broken Console",
        Parameters(speed=84, pitch=62, mouth=130, throat=120),
        RealtimeControls(bit_crush=0.68, glitch_gate=0.28, repitch_jitter=0.32, mutation=0.36),
    ),
    (
        "Cyber Oracle",
        Parameters(speed=70, pitch=76, mouth=150, throat=132),
        RealtimeControls(formant_warp=0.35, freq_shift=0.46, spectral_tilt=0.64, mutation=0.22),
    ),
)


def factory_preset_count() -> int:
    """Number of built-in presets."""
    return len(_PRESETS)


def factory_preset_name(index: int) -> str:
    """Name of a preset, or "Preset" for an index out of range."""
    if 0 <= index < len(_PRESETS):
        return _PRESETS[index][0]
    return "Preset"


def factory_preset(index: int) -> tuple[Parameters, RealtimeControls]:
    """Parameters and controls of a preset; the index is clamped into range."""
    index = int(_clamp(index, 0, len(_PRESETS) - 1))
    _, params, controls = _PRESETS[index]
    return replace(params), replace(controls)
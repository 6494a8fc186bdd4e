"""Host-facing voice processor: programs, state, UDP text and block rendering."""

from __future__ import annotations

import threading
import xml.etree.ElementTree as ET
from dataclasses import fields

from samvoice.presets import (
    Backend,
    Parameters,
    RealtimeControls,
    factory_preset,
    factory_preset_count,
    factory_preset_name,
)
from samvoice.udp import UdpFeed
from samvoice.voice import RenderError, Voice

DEFAULT_TRIGGER_TEXT = "Hello! This is a SAM-style voice synthesizer."
STATE_TAG = "SAMPluginState"

_PARAM_KEYS = {
    "speed": "speed",
    "pitch": "pitch",
    "mouth": "mouth",
    "throat": "throat",
}

_CONTROL_KEYS = {
    "playback_speed": "rtSpeed",
    "repitch_semitones": "rtPitchSemitones",
    "formant_warp": "rtFormant",
    "glitch_gate": "rtGate",
    "bit_crush": "rtCrush",
    "micro_loop": "rtLoop",
    "spectral_tilt": "rtTilt",
    "ring_mod": "rtRing",
    "freq_shift": "rtShift",
    "repitch_jitter": "rtJitter",
    "mutation": "rtMutation",
}


def _clamp(value, low, high):
    return max(low, min(high, value))


def _parse_bool(text: str) -> bool:
    text = text.strip().lower()
    if text in ("true", "yes"):
        return True
    try:
        return int(float(text)) != 0
    except ValueError:
        return False


def _parse_int(text: str) -> int:
    return int(float(text.strip()))


class VoiceProcessor:
    """Owns a voice together with its program, parameters and incoming UDP text."""

    def __init__(self, voice: Voice):
        self._voice = voice
        self._lock = threading.Lock()
        self._trigger_text = DEFAULT_TRIGGER_TEXT
        self._parameters = Parameters()
        self._controls = RealtimeControls()
        self._loop_at_end = False
        self._current_program = 0

        self._udp_status_lock = threading.Lock()
        self._udp_status = "UDP: starting..."
        self._udp_feed = UdpFeed()

        self.set_current_program(0)

    # Programs

    def program_count(self) -> int:
        """Number of programs, one per factory preset."""
        return factory_preset_count()

    def current_program(self) -> int:
        """Index of the selected program."""
        with self._lock:
            return self._current_program

    def set_current_program(self, index: int) -> None:
        """Select a program and load its preset; the index is clamped into range."""
        index = int(_clamp(index, 0, self.program_count() - 1))
        params, controls = factory_preset(index)
        with self._lock:
            self._current_program = index
            self._parameters = params
            self._controls = controls

    def program_name(self, index: int) -> str:
        """Name of a program."""
        return factory_preset_name(index)

    # Settings

    def parameters(self) -> Parameters:
        """Parameters used when text is rendered."""
        with self._lock:
            return self._parameters

    def set_parameters(self, params: Parameters) -> None:
        """Replace the render parameters."""
        with self._lock:
            self._parameters = params

    def realtime_controls(self) -> RealtimeControls:
        """Realtime controls applied on every block."""
        with self._lock:
            return self._controls

    def set_realtime_controls(self, controls: RealtimeControls) -> None:
        """Replace the realtime controls."""
        with self._lock:
            self._controls = controls

    def loop_at_end(self) -> bool:
        """Whether the last phrase repeats when playback runs out."""
        with self._lock:
            return self._loop_at_end

    def set_loop_at_end(self, should_loop: bool) -> None:
        """Choose whether the last phrase repeats, and tell the voice at once."""
        with self._lock:
            self._loop_at_end = bool(should_loop)
        self._voice.set_loop_at_end(bool(should_loop))

    # Text input

    def enqueue_text(self, text: str) -> int:
        """Remember text as the note trigger and queue it for speech.

        Returns the number of samples queued; raises RenderError on failure.
        """
        self._trigger_text = text
        return self._voice.queue_text(text, self.parameters())

    def receive_udp_text(self, text: str) -> None:
        """Log text that arrived over UDP and speak it.

        Render failures are reported through the voice status only.
        """
        self._udp_feed.append(text)
        try:
            self.enqueue_text(text)
        except RenderError:
            pass

    def set_udp_status(self, status: str) -> None:
        """Record the UDP receiver's latest status line."""
        with self._udp_status_lock:
            self._udp_status = status

    def udp_status(self) -> str:
        """The UDP receiver's latest status line."""
        with self._udp_status_lock:
            return self._udp_status

    def udp_feed(self) -> str:
        """Log of text received over UDP."""
        return self._udp_feed.text()

    def voice_status(self) -> str:
        """What the voice is doing."""
        return self._voice.status()

    # Audio

    def process_block(self, num_samples: int, note_ons: int = 0) -> list[float]:
        """Render one block; each note-on speaks the last entered text again."""
        text = self._trigger_text.strip()
        if text:
            for _ in range(note_ons):
                try:
                    self._voice.queue_text(text, self.parameters())
                except RenderError:
                    pass

        self._voice.set_realtime_controls(self.realtime_controls())
        self._voice.set_loop_at_end(self.loop_at_end())
        return self._voice.render(num_samples)

    # State

    def save_state(self) -> bytes:
        """Serialise parameters, controls, loop flag and program as XML."""
        params = self.parameters()
        controls = self.realtime_controls()
        attrs = {key: str(getattr(params, name)) for name, key in _PARAM_KEYS.items()}
        attrs["singMode"] = "1" if params.sing_mode else "0"
        attrs["phoneticInput"] = "1" if params.phonetic_input else "0"
        attrs["backend"] = str(params.backend.value)
        for name, key in _CONTROL_KEYS.items():
            attrs[key] = repr(float(getattr(controls, name)))
        attrs["loopAtEnd"] = "1" if self.loop_at_end() else "0"
        attrs["currentProgram"] = str(self.current_program())
        return ET.tostring(ET.Element(STATE_TAG, attrs), encoding="utf-8")

    def load_state(self, data: bytes) -> None:
        """Restore state written by save_state; missing values take defaults.

        Raises ValueError if the data is not a valid state document.
        """
        try:
            root = ET.fromstring(data)
        except ET.ParseError as exc:
            raise ValueError(f"invalid state data: {exc}") from exc
        attrs = root.attrib

        defaults = Parameters()
        param_values = {
            name: _parse_int(attrs[key]) if key in attrs else getattr(defaults, name)
            for name, key in _PARAM_KEYS.items()
        }
        sing_mode = _parse_bool(attrs["singMode"]) if "singMode" in attrs else defaults.sing_mode
        phonetic = (
            _parse_bool(attrs["phoneticInput"])
            if "phoneticInput" in attrs
            else defaults.phonetic_input
        )
        backend = (
            Backend(_parse_int(attrs["backend"])) if "backend" in attrs else defaults.backend
        )
        self.set_parameters(
            Parameters(
                sing_mode=sing_mode,
                phonetic_input=phonetic,
                backend=backend,
                **param_values,
            )
        )

        control_defaults = RealtimeControls()
        control_values = {
            f.name: (
                float(attrs[_CONTROL_KEYS[f.name]])
                if _CONTROL_KEYS[f.name] in attrs
                else getattr(control_defaults, f.name)
            )
            for f in fields(RealtimeControls)
        }
        self.set_realtime_controls(RealtimeControls(**control_values))

        self.set_loop_at_end(_parse_bool(attrs.get("loopAtEnd", "0")))

        if "currentProgram" in attrs:
            index = _parse_int(attrs["currentProgram"])
            with self._lock:
                self._current_program = int(_clamp(index, 0, self.program_count() - 1))
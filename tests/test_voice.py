import random

import pytest

from samvoice.pcm import decode_pcm8
from samvoice.presets import Backend, Parameters, RealtimeControls
from samvoice.voice import RenderError, Voice, mutate_text

PCM = bytes(range(128, 138))


class FakeRenderer:
    def __init__(self, pcm=PCM):
        self.pcm = pcm
        self.calls = []

    def __call__(self, text, params):
        self.calls.append((text, params))
        return self.pcm


def failing_renderer(text, params):
    raise RenderError("SAM render timeout")


def test_mutate_text_zero_amount_is_identity():
    assert mutate_text("hello world", 0.0, random.Random(1)) == "hello world"


def test_mutate_text_is_deterministic_for_seed():
    a = mutate_text("the quick brown fox", 1.0, random.Random(5))
    b = mutate_text("the quick brown fox", 1.0, random.Random(5))
    assert a == b


def test_mutate_text_uses_only_input_characters_and_keeps_newlines():
    text = "abc def\nghi jkl\nmno"
    out = mutate_text(text, 1.0, random.Random(3))
    assert set(out) <= set(text)
    assert out.count("\n") == 2


def test_mutate_text_blank_result_falls_back_to_input():
    assert mutate_text("   ", 1.0, random.Random(0)) == "   "


def test_initial_status_is_idle():
    assert Voice(FakeRenderer()).status() == "Idle"


def test_blank_text_does_not_render():
    renderer = FakeRenderer()
    voice = Voice(renderer, sample_rate=22050)
    assert voice.queue_text("   ") == 0
    assert renderer.calls == []
    assert voice.status() == "Idle"


def test_queue_passes_trimmed_text_and_params():
    renderer = FakeRenderer()
    voice = Voice(renderer, sample_rate=22050)
    params = Parameters(speed=90, backend=Backend.BETTER_SAM)
    voice.queue_text("  hi there  ", params)
    assert renderer.calls == [("hi there", params)]


def test_queue_reports_sample_count():
    voice = Voice(FakeRenderer(), sample_rate=22050)
    assert voice.queue_text("hello") == len(PCM)
    assert voice.status() == f"Queued {len(PCM)} samples"


def test_queue_resamples_to_output_rate():
    voice = Voice(FakeRenderer(), sample_rate=44100)
    assert voice.queue_text("hello") == 2 * len(PCM)


def test_render_plays_queued_samples_then_goes_idle():
    voice = Voice(FakeRenderer(), sample_rate=22050)
    voice.queue_text("hello")
    out = voice.render(1000)
    assert out[: len(PCM)] == pytest.approx(decode_pcm8(PCM))
    assert all(v == 0.0 for v in out[len(PCM):])
    assert voice.status() == "Idle"


def test_render_empty_queue_is_silent():
    voice = Voice(FakeRenderer(), sample_rate=22050)
    assert voice.render(16) == [0.0] * 16
    assert voice.status() == "Idle"


def test_playback_speed_skips_samples():
    voice = Voice(FakeRenderer(), sample_rate=22050)
    voice.set_realtime_controls(RealtimeControls(playback_speed=2.0))
    voice.queue_text("hello")
    decoded = decode_pcm8(PCM)
    assert voice.render(5) == pytest.approx(decoded[0:10:2])


def test_loop_at_end_restarts_phrase():
    voice = Voice(FakeRenderer(), sample_rate=22050)
    voice.set_loop_at_end(True)
    assert voice.loop_at_end() is True
    voice.queue_text("hello")
    voice.render(1000)
    assert voice.status() == "Looping"
    assert voice.render(len(PCM)) == pytest.approx(decode_pcm8(PCM))


def test_renderer_error_sets_status_and_raises():
    voice = Voice(failing_renderer, sample_rate=22050)
    with pytest.raises(RenderError):
        voice.queue_text("hello")
    assert voice.status() == "SAM render timeout"


def test_empty_render_output_is_an_error():
    voice = Voice(FakeRenderer(pcm=b""), sample_rate=22050)
    with pytest.raises(RenderError):
        voice.queue_text("hello")
    assert voice.status() == "SAM render failed"


def test_realtime_controls_are_clamped():
    voice = Voice(FakeRenderer())
    voice.set_realtime_controls(RealtimeControls(playback_speed=10.0, bit_crush=-1.0))
    controls = voice.realtime_controls()
    assert controls.playback_speed == 4.0
    assert controls.bit_crush == 0.0


def test_low_sample_rate_is_raised_to_minimum():
    low = Voice(FakeRenderer(), sample_rate=22050, seed=1)
    low.set_sample_rate(1000)
    reference = Voice(FakeRenderer(), sample_rate=8000, seed=1)
    assert low.queue_text("hi") == reference.queue_text("hi")
    assert low.render(400) == reference.render(400)
    assert low.status() == reference.status()


def test_effects_keep_output_in_range_and_are_seeded():
    controls = RealtimeControls(
        repitch_jitter=1.0, bit_crush=0.7, glitch_gate=0.5,
        micro_loop=0.4, ring_mod=0.3, freq_shift=0.6, formant_warp=0.5,
    )
    outputs = []
    for _ in range(2):
        voice = Voice(FakeRenderer(bytes(range(0, 256))), sample_rate=22050, seed=9)
        voice.set_realtime_controls(controls)
        voice.queue_text("hello")
        outputs.append(voice.render(600))
    assert outputs[0] == outputs[1]
    assert all(-1.0 <= v <= 1.0 for v in outputs[0])
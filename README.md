# samvoice

A SAM-style speaking voice engine in pure Python with no third-party
dependencies. It takes text, passes it to a speech renderer that you supply,
decodes the unsigned 8-bit PCM that comes back, resamples it from 22050 Hz to
your output rate, and queues it for playback. Playback runs through a chain of
realtime effects: micro loop, formant warp, spectral tilt, glitch gate,
bit crush, ring modulation and frequency shift, plus playback speed, repitch
with jitter and random phoneme mutation of the text.

## Installing

```
pip install .
```

Running the tests needs the `test` extra:

```
pip install .[test]
pytest
```

## Modules

### `samvoice.presets`

- `Backend` – `CLASSIC_SAM` or `BETTER_SAM`.
- `Parameters` – frozen dataclass handed to the renderer: `speed` (72),
  `pitch` (64), `mouth` (128), `throat` (128), `sing_mode`, `phonetic_input`,
  `backend`.
- `RealtimeControls` – frozen dataclass of playback and effect settings:
  `playback_speed` (1.0), `repitch_semitones`, `formant_warp`, `glitch_gate`,
  `bit_crush`, `micro_loop`, `spectral_tilt`, `ring_mod`, `freq_shift`,
  `repitch_jitter`, `mutation`. `clamped()` returns a copy with playback speed
  limited to 0.25–4, repitch to ±24 semitones and everything else to 0–1.
- `factory_preset_count()` – 10.
- `factory_preset_name(index)` – "Classic SAM", "Soft Tutor", "Toy Robot",
  "Singy Crystal", "Radio Glitch", "Monster Pipe", "Chipmunk Pop",
  "Haunted PA", "Broken Console", "Cyber Oracle"; "Preset" for an index out
  of range.
- `factory_preset(index)` – a `(Parameters, RealtimeControls)` pair; the index
  is clamped into range.

### `samvoice.pcm`

- `decode_pcm8(data)` – unsigned 8-bit bytes to floats, `(b - 128) / 256`.
- `resample(samples, source_rate, target_rate)` – linear interpolation.
  Returns an empty list for empty input or a non-positive rate, and a plain
  copy when the rates differ by less than 1 Hz.

### `samvoice.effects`

`EffectChain(sample_rate=44100.0, rng=None)` is the stateful per-sample chain.
`process(sample, controls)` runs micro loop, formant warp, spectral tilt,
glitch gate, bit crush, ring mod and frequency shift in that order and limits
the result to [-1, 1]. Each effect is also callable on its own
(`micro_loop`, `formant_warp`, `spectral_tilt`, `glitch_gate`, `bit_crush`,
`ring_mod`, `frequency_shift`, each taking `(x, amount)`); an amount of
0.001 or less leaves the signal untouched.

### `samvoice.voice`

- `Voice(renderer, sample_rate=44100.0, seed=None)` – the renderer is a
  callable `(text, params) -> bytes` returning unsigned 8-bit PCM at 22050 Hz,
  and raising `RenderError` when it cannot. Sample rates below 8000 Hz are
  raised to 8000 Hz.
  - `queue_text(text, params=None)` strips the text, applies phoneme mutation,
    renders, resamples and appends the speech plus a 40 ms gap to the queue.
    It returns the number of speech samples queued (0 for blank text) and
    raises `RenderError` if rendering yields nothing.
  - `render(num_samples)` returns a list of mono floats in [-1, 1].
  - `set_realtime_controls(controls)` stores a clamped copy;
    `realtime_controls()` returns it.
  - `set_loop_at_end(should_loop)` / `loop_at_end()` – when set, the last
    queued phrase repeats once playback runs out.
  - `set_sample_rate(sample_rate)`.
  - `status()` – "Idle", "Rendering SAM...", "Queued N samples", "Looping",
    "SAM render failed", "Resample failed", or the message of the
    `RenderError` the renderer raised.
- `mutate_text(text, amount, rng)` – randomly repeats, drops and doubles
  characters; line breaks are kept and an all-blank result falls back to the
  original text.
- `RenderError`.

### `samvoice.udp`

- `UdpTextReceiver(on_text, on_status)` – `start(port)` binds on all
  interfaces, reports "UDP: listening on port N" through `on_status`, and
  returns the bound port (pass 0 for any free port). A background thread hands
  the stripped UTF-8 text of every non-empty datagram to `on_text`. If binding
  fails it reports "UDP: bind failed on port N" and re-raises the `OSError`.
  `stop()` releases the socket; the receiver is also a context manager.
- `UdpFeed(max_chars=12000)` – a thread-safe log. It starts as
  "[waiting for UDP on port 7001]"; `append(text)` drops that notice, adds
  the line and keeps only the newest `max_chars` characters; `text()` returns
  the whole log.

### `samvoice.processor`

`VoiceProcessor(voice)` holds the current program, parameters, controls and
loop flag around a `Voice`:

- `program_count()`, `current_program()`, `set_current_program(index)`
  (clamped; loads that preset), `program_name(index)`.
- `parameters()` / `set_parameters(params)`,
  `realtime_controls()` / `set_realtime_controls(controls)`,
  `loop_at_end()` / `set_loop_at_end(should_loop)`.
- `enqueue_text(text)` remembers the text as the note trigger and queues it;
  it returns the sample count and lets `RenderError` through.
- `receive_udp_text(text)` appends to the UDP feed and speaks the text;
  render failures show only in `voice_status()`.
- `set_udp_status(status)`, `udp_status()`, `udp_feed()`, `voice_status()`.
- `process_block(num_samples, note_ons=0)` – each note-on queues the trigger
  text again (it starts as "Hello! This is a SAM-style voice synthesizer."),
  then the current controls and loop flag are passed to the voice and a block
  is rendered.
- `save_state()` returns an XML `SAMPluginState` element as bytes;
  `load_state(data)` restores it, taking defaults for missing values and
  raising `ValueError` on data that is not valid XML.

## Example

```python
from samvoice.presets import factory_preset
from samvoice.voice import Voice

def renderer(text, params):
    # Return unsigned 8-bit PCM at 22050 Hz for the given text.
    return bytes([128, 160, 200, 160, 128, 96, 56, 96]) * 500

voice = Voice(renderer, sample_rate=44100, seed=1)
params, controls = factory_preset(4)   # "Radio Glitch"
voice.set_realtime_controls(controls)
voice.queue_text("Hello there", params)

block = voice.render(512)   # list of floats in [-1, 1]
print(voice.status())
```

A `VoiceProcessor` wraps a `Voice` for host-style use:

```python
from samvoice.processor import VoiceProcessor

processor = VoiceProcessor(voice)
processor.set_current_program(2)          # "Toy Robot"
processor.enqueue_text("Beep boop")
samples = processor.process_block(256, note_ons=0)
state = processor.save_state()
processor.load_state(state)
```

Text arriving over UDP can be fed in with `UdpTextReceiver`, passing
`processor.receive_udp_text` and `processor.set_udp_status` as its callbacks:

```python
from samvoice.udp import UdpTextReceiver

with UdpTextReceiver(processor.receive_udp_text, processor.set_udp_status) as receiver:
    receiver.start(7001)
    ...
```

## What it does not do

- It contains no speech engine of its own: turning text into PCM is left to
  the renderer you pass to `Voice`.
- It does not open an audio device; `render` and `process_block` return
  sample lists for you to play or write out.
- There is no graphical interface and no command-line program.
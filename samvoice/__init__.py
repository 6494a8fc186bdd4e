"""SAM-style speech voice engine: presets, PCM handling, realtime effects, playback, UDP text inbox and a host-style processor."""

__version__ = "0.1.0"
__all__ = ["presets", "pcm", "effects", "voice", "udp", "processor"]
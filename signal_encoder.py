"""
Signal encoder module.
Turns a symbol string ('.', '-', '|', ' ') into a single PCM buffer using
fixed per-symbol timing derived from the keying speed.
"""

from typing import Iterator

import numpy as np

import config
from errors import InvalidSymbol
from waveform import WaveformSynthesizer


class SignalEncoder:
    def __init__(self, synthesizer: WaveformSynthesizer = None, speed: float = config.SPEED):
        if speed <= 0:
            raise ValueError(f"speed must be positive, got {speed}")
        self.synth = synthesizer if synthesizer is not None else WaveformSynthesizer()
        self.speed = speed
        self.dot_duration_ms = 1200.0 / speed

    @property
    def sample_rate(self) -> int:
        return self.synth.sample_rate

    def capacity_hint(self, morse: str) -> int:
        """Approximate buffer size; only used for pre-allocation."""
        return int(4 * self.dot_duration_ms * len(morse) * self.sample_rate / 1000)

    def segments(self, morse: str) -> Iterator[np.ndarray]:
        """Yield the sample arrays for each token in order."""
        dot = self.dot_duration_ms
        for symbol in morse:
            if symbol == '.':
                yield self.synth.tone(dot)
                yield self.synth.silence(config.SYMBOL_GAP_UNITS * dot)
            elif symbol == '-':
                yield self.synth.tone(config.DASH_UNITS * dot)
                yield self.synth.silence(config.SYMBOL_GAP_UNITS * dot)
            elif symbol == config.SHORT_GAP:
                # +1 unit already came from the previous dot or dash
                yield self.synth.silence(config.LETTER_GAP_UNITS * dot)
            elif symbol == config.WORD_GAP:
                yield self.synth.silence(config.WORD_GAP_UNITS * dot)
            else:
                raise InvalidSymbol(symbol)

    def render(self, morse: str) -> np.ndarray:
        buf = np.empty(self.capacity_hint(morse), dtype=self.synth.dtype)
        size = 0
        for seg in self.segments(morse):
            end = size + len(seg)
            if end > len(buf):
                grown = np.empty(max(end, 2 * len(buf)), dtype=buf.dtype)
                grown[:size] = buf[:size]
                buf = grown
            buf[size:end] = seg
            size = end
        return buf[:size].copy()

    def duration_seconds(self, samples: np.ndarray) -> float:
        return len(samples) / self.sample_rate

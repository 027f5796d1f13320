"""
Waveform synthesis for keyed CW.
Tones are cut to a whole number of periods so that a tone followed by
silence does not click at the boundary.
"""

import math

import numpy as np

import config


class WaveformSynthesizer:
    def __init__(self, sample_rate: int = config.SAMPLE_RATE, frequency: int = config.FREQ,
                 amplitude: float = config.AMPLITUDE, dtype: str = config.PLAYBACK_DTYPE):
        if frequency <= 0 or frequency > sample_rate // 2:
            raise ValueError(f"frequency must be in (0, {sample_rate // 2}] Hz, got {frequency}")
        if not 0.0 <= amplitude <= 1.0:
            raise ValueError(f"amplitude must be within [0, 1], got {amplitude}")
        self.sample_rate = sample_rate
        self.frequency = frequency
        self.amplitude = amplitude
        self.dtype = np.dtype(dtype)
        self.full_scale = np.iinfo(self.dtype).max
        # samples per aligned period (integer, 27 @ 22050Hz/800Hz)
        self.period = sample_rate // frequency
        self.delta = 2 * np.pi * frequency / sample_rate

    def num_samples(self, duration_ms: float) -> int:
        # round half up
        return int(math.floor(self.sample_rate * duration_ms / 1000.0 + 0.5))

    def tone(self, duration_ms: float) -> np.ndarray:
        n = self.num_samples(duration_ms)
        n -= n % self.period
        phase = self.delta * np.arange(n)
        sig = self.amplitude * self.full_scale * np.sin(phase)
        # truncate toward zero, never exceeds full scale
        return np.trunc(sig).astype(self.dtype)

    def silence(self, duration_ms: float) -> np.ndarray:
        return np.zeros(self.num_samples(duration_ms), dtype=self.dtype)

"""
Audio device adapters.

SoundDevicePlayback / SoundDeviceCapture wrap sounddevice (PortAudio) streams;
WavFileCapture replays a WAV file through the same capture interface.
sounddevice is imported when a device is created, so encoding and WAV output
keep working on hosts without PortAudio.
"""

import logging
import sys
from typing import Callable, List

import numpy as np
import scipy.io.wavfile

import config
from errors import IOFailure, ResourceUnavailable

logger = logging.getLogger(__name__)


def _import_sounddevice():
    try:
        import sounddevice
    except OSError as exc:
        # raised when the PortAudio shared library is missing
        raise ResourceUnavailable(f"Audio backend unavailable: {exc}") from exc
    return sounddevice


def sample_dtype(dtype: str, big_endian: bool = False) -> np.dtype:
    """numpy dtype with an explicit byte order for 16-bit samples."""
    dt = np.dtype(dtype)
    if dt.itemsize == 1:
        return dt
    return dt.newbyteorder('>' if big_endian else '<')


class SoundDevicePlayback:
    """
    Plays one pre-rendered buffer, similar to a clip:
    open(samples) -> add_listener(fn) -> start() ... listeners fire once when
    the last sample has been played.
    """

    def __init__(self, sample_rate: int = config.SAMPLE_RATE, channels: int = config.PLAYBACK_CHANNELS,
                 dtype: str = config.PLAYBACK_DTYPE):
        self._sd = _import_sounddevice()
        self.sample_rate = sample_rate
        self.channels = channels
        self.dtype = np.dtype(dtype)
        self._stream = None
        self._data = None
        self._pos = 0
        self._listeners: List[Callable[[], None]] = []

    def open(self, samples: np.ndarray):
        data = np.asarray(samples, dtype=self.dtype).reshape(-1, 1)
        if self.channels > 1:
            data = np.repeat(data, self.channels, axis=1)
        self._data = data
        self._pos = 0
        try:
            self._stream = self._sd.OutputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype=self.dtype.name,
                callback=self._callback,
                finished_callback=self._finished,
            )
        except self._sd.PortAudioError as exc:
            raise ResourceUnavailable(f"Can't open playback device: {exc}") from exc

    def add_listener(self, listener: Callable[[], None]):
        self._listeners.append(listener)

    def _callback(self, outdata, frames, time, status):
        if status:
            logger.warning("Playback status: %s", status)
        chunk = self._data[self._pos:self._pos + frames]
        outdata[:len(chunk)] = chunk
        outdata[len(chunk):] = 0
        self._pos += len(chunk)
        if self._pos >= len(self._data):
            raise self._sd.CallbackStop

    def _finished(self):
        for listener in list(self._listeners):
            listener()

    def start(self):
        try:
            self._stream.start()
        except self._sd.PortAudioError as exc:
            raise IOFailure(f"Can't start playback: {exc}") from exc

    def stop(self):
        if self._stream is not None:
            self._stream.stop()

    def close(self):
        if self._stream is not None:
            stream, self._stream = self._stream, None
            stream.close()
        self._listeners.clear()


class SoundDeviceCapture:
    def __init__(self, sample_rate: int = config.SAMPLE_RATE, channels: int = config.CAPTURE_CHANNELS,
                 dtype: str = config.CAPTURE_DTYPE, big_endian: bool = config.CAPTURE_BIG_ENDIAN,
                 buffer_frames: int = config.CAPTURE_BUFFER_FRAMES):
        sd = _import_sounddevice()
        self._sd = sd
        self.sample_rate = sample_rate
        self.channels = channels
        self.dtype = sample_dtype(dtype, big_endian)
        self.frame_size = channels * self.dtype.itemsize
        self.buffer_size = buffer_frames * self.frame_size
        # PortAudio delivers native byte order
        self._swap = self.dtype.itemsize > 1 and big_endian != (sys.byteorder == 'big')
        try:
            self._stream = sd.RawInputStream(
                samplerate=sample_rate,
                channels=channels,
                dtype=np.dtype(dtype).name,
            )
        except sd.PortAudioError as exc:
            raise ResourceUnavailable(f"Can't open capture device: {exc}") from exc

    def start(self):
        try:
            self._stream.start()
        except self._sd.PortAudioError as exc:
            raise IOFailure(f"Can't start capture: {exc}") from exc

    def read(self, nbytes: int) -> bytes:
        frames = nbytes // self.frame_size
        try:
            data, overflowed = self._stream.read(frames)
        except self._sd.PortAudioError as exc:
            raise IOFailure(f"Capture read failed: {exc}") from exc
        if overflowed:
            logger.warning("Capture overflow, samples were dropped")
        block = bytes(data)
        if self._swap:
            block = np.frombuffer(block, dtype=self.dtype.newbyteorder()).astype(self.dtype).tobytes()
        return block

    def close(self):
        if self._stream is not None:
            stream, self._stream = self._stream, None
            stream.close()


class WavFileCapture:
    """Capture device backed by a WAV file; the last read is short."""

    def __init__(self, path: str, big_endian: bool = config.CAPTURE_BIG_ENDIAN,
                 buffer_frames: int = config.CAPTURE_BUFFER_FRAMES):
        try:
            sample_rate, data = scipy.io.wavfile.read(path)
        except FileNotFoundError as exc:
            raise ResourceUnavailable(f"WAV file not found: {path}") from exc
        except ValueError as exc:
            raise IOFailure(f"Can't read {path}: {exc}") from exc

        if sample_rate != config.SAMPLE_RATE:
            logger.warning("%s is %d Hz, expected %d Hz", path, sample_rate, config.SAMPLE_RATE)

        if data.dtype == np.uint8:
            # 8-bit WAV is unsigned
            data = (data.astype(np.int16) - 128).astype(np.int8)
        elif data.dtype.kind == 'f':
            data = (np.clip(data, -1.0, 1.0) * 32767).astype(np.int16)
        elif data.dtype != np.int16 and data.dtype != np.int8:
            raise IOFailure(f"Unsupported WAV sample format: {data.dtype}")

        self.sample_rate = sample_rate
        self.channels = 1 if data.ndim == 1 else data.shape[1]
        self.dtype = sample_dtype(data.dtype.name, big_endian)
        self.frame_size = self.channels * self.dtype.itemsize
        self.buffer_size = buffer_frames * self.frame_size
        self._bytes = data.astype(self.dtype).tobytes()
        self._pos = 0
        self._closed = False

    def start(self):
        pass

    def read(self, nbytes: int) -> bytes:
        if self._closed:
            raise IOFailure("read on closed capture device")
        chunk = self._bytes[self._pos:self._pos + nbytes]
        self._pos += len(chunk)
        return chunk

    def close(self):
        self._closed = True


def write_wav(path: str, samples: np.ndarray, sample_rate: int = config.SAMPLE_RATE):
    """Save a rendered int8 buffer as an 8-bit (unsigned) PCM WAV file."""
    samples = np.asarray(samples)
    if samples.dtype == np.int8:
        samples = (samples.astype(np.int16) + 128).astype(np.uint8)
    try:
        scipy.io.wavfile.write(path, sample_rate, samples)
    except OSError as exc:
        raise IOFailure(f"Can't write {path}: {exc}") from exc

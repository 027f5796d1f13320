"""
Transmitter module.
Plays an encoded PCM buffer on the audio device and blocks the caller until
playback has finished.
"""

import logging
import threading
from typing import Callable, Optional

import numpy as np

from audio_io import SoundDevicePlayback
from errors import InterruptedWait, MorseError
from signal_encoder import SignalEncoder

logger = logging.getLogger(__name__)


class Transmitter:
    """
    Owns at most one playback device at a time.

    device_factory: callable returning an unopened playback device with
        open(samples), add_listener(fn), start(), stop() and close().
        It is only called for non-empty buffers.
    """

    def __init__(self, encoder: SignalEncoder = None,
                 device_factory: Callable[[], object] = SoundDevicePlayback):
        self.encoder = encoder if encoder is not None else SignalEncoder()
        self.device_factory = device_factory
        self._device = None
        self._done: Optional[threading.Event] = None
        self._aborted = False
        self._lock = threading.Lock()
        self._state_lock = threading.Lock()

    def transmit_morse(self, morse: str, timeout: float = None):
        """Render a symbol string and play it."""
        self.transmit(self.encoder.render(morse), timeout=timeout)

    def transmit(self, samples: np.ndarray, timeout: float = None):
        """
        Play samples and wait for the device to report that playback stopped.

        Raises ResourceUnavailable / IOFailure if the device can't be used and
        InterruptedWait if abort() was called or the timeout expired. The
        device is released in every case.
        """
        if samples is None or len(samples) == 0:
            return

        with self._lock:
            self._release()

            done = threading.Event()
            with self._state_lock:
                self._done = done
                self._aborted = False
            try:
                device = self.device_factory()
                self._device = device
                device.open(samples)
                # listener goes in before start() so a short clip can't finish unobserved
                device.add_listener(lambda: self._on_stopped(done))
                logger.info("Start data transmitting (%.2fs)...",
                            self.encoder.duration_seconds(samples))
                device.start()

                if not done.wait(timeout):
                    raise InterruptedWait(f"Playback did not finish within {timeout}s")
                with self._state_lock:
                    if self._aborted:
                        raise InterruptedWait("Playback aborted")
                logger.info("Data has been transmitted.")
            except MorseError:
                logger.error("Can't play sound", exc_info=True)
                raise
            finally:
                with self._state_lock:
                    self._done = None
                self._release()

    def _on_stopped(self, done: threading.Event):
        # called from the audio thread; set() is idempotent
        done.set()

    def abort(self):
        """Wake a thread blocked in transmit(); it raises InterruptedWait."""
        with self._state_lock:
            if self._done is not None and not self._done.is_set():
                self._aborted = True
                self._done.set()

    def _release(self):
        device, self._device = self._device, None
        if device is not None:
            try:
                device.stop()
            finally:
                device.close()

    def close(self):
        with self._lock:
            self._release()

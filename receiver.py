"""
Receiver module.
A capture thread reads raw blocks from the input device into a BlockQueue;
a consumer thread drains the queue and reports the signal power per block.
The power is only reported, nothing is decoded from it.
"""

import collections
import logging
import threading
from typing import Callable, Optional

import numpy as np

import config
from audio_io import SoundDeviceCapture
from errors import MorseError

logger = logging.getLogger(__name__)


def decode_block(block: bytes, dtype: np.dtype) -> np.ndarray:
    """Interpret raw bytes as signed samples (channels stay interleaved)."""
    usable = len(block) - len(block) % dtype.itemsize
    return np.frombuffer(block[:usable], dtype=dtype)


def signal_power(samples: np.ndarray) -> float:
    """Population variance: mean(x^2) - mean(x)^2. Zero for silence and DC."""
    if len(samples) == 0:
        return 0.0
    x = samples.astype(np.int64)
    mean = x.sum() / len(x)
    return float((x * x).sum() / len(x) - mean * mean)


class BlockQueue:
    """
    Unbounded FIFO between one producer and one consumer.

    get() blocks until a block is available, the producer called finish()
    (the remaining blocks are still drained), or cancel() was called (get
    returns None immediately).
    """

    def __init__(self):
        self._blocks = collections.deque()
        self._cond = threading.Condition()
        self._finished = False
        self._cancelled = False

    def put(self, block: bytes):
        with self._cond:
            self._blocks.append(block)
            self._cond.notify()

    def finish(self):
        with self._cond:
            self._finished = True
            self._cond.notify_all()

    def cancel(self):
        with self._cond:
            self._cancelled = True
            self._cond.notify_all()

    def get(self) -> Optional[bytes]:
        with self._cond:
            while True:
                if self._cancelled:
                    return None
                if self._blocks:
                    return self._blocks.popleft()
                if self._finished:
                    return None
                self._cond.wait()

    def __len__(self):
        with self._cond:
            return len(self._blocks)


class Receiver:
    """
    device_factory: callable returning an opened capture device with
        buffer_size, frame_size, dtype, start(), read(nbytes) and close().
    on_power: called with each block's power; defaults to logging it.
    """

    def __init__(self, device_factory: Callable[[], object] = SoundDeviceCapture,
                 on_power: Callable[[float], None] = None,
                 block_divisor: int = config.CAPTURE_BLOCK_DIVISOR):
        self.device_factory = device_factory
        self.on_power = on_power if on_power is not None else self._log_power
        self.block_divisor = block_divisor
        self._device = None
        self._queue: Optional[BlockQueue] = None
        self._stop = threading.Event()
        self._capture_thread: Optional[threading.Thread] = None
        self._consumer_thread: Optional[threading.Thread] = None
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()

    @staticmethod
    def _log_power(power: float):
        logger.info("%d", power)

    @property
    def is_running(self) -> bool:
        return any(t is not None and t.is_alive()
                   for t in (self._capture_thread, self._consumer_thread))

    def start(self):
        if self.is_running:
            raise RuntimeError("Receiver already started")
        # stream ended on its own and nobody called wait() or stop()
        self._release_device()
        with self._lock:
            self._stop.clear()
            self._error = None
            self._queue = BlockQueue()
            # ResourceUnavailable propagates to the caller here
            self._device = self.device_factory()
            self._capture_thread = threading.Thread(target=self._capture_loop, name="capture", daemon=True)
            self._consumer_thread = threading.Thread(target=self._consumer_loop, name="consumer", daemon=True)
            self._capture_thread.start()
            self._consumer_thread.start()
        logger.info("Receiver started")

    def _capture_loop(self):
        device, queue = self._device, self._queue
        try:
            device.start()
            # whole frames only, a partial frame would read back short
            nbytes = device.buffer_size // self.block_divisor
            nbytes = max(device.frame_size, nbytes - nbytes % device.frame_size)
            while not self._stop.is_set():
                block = device.read(nbytes)
                if block:
                    queue.put(block)
                if len(block) < nbytes:
                    logger.debug("Short read (%d/%d bytes), end of stream", len(block), nbytes)
                    break
        except MorseError as exc:
            logger.error("Capture failed: %s", exc)
            self._error = exc
        finally:
            queue.finish()

    def _consumer_loop(self):
        device, queue = self._device, self._queue
        while not self._stop.is_set():
            block = queue.get()
            if block is None:
                break
            try:
                self.on_power(signal_power(decode_block(block, device.dtype)))
            except Exception as exc:
                logger.error("Power reporting failed: %s", exc)
                self._error = exc
                self._stop.set()
                queue.cancel()
                break

    def wait(self, timeout: float = None) -> bool:
        """
        Wait for the capture to reach end of stream, then release the device.
        Returns False if the threads are still running after timeout.
        """
        for t in (self._capture_thread, self._consumer_thread):
            if t is not None:
                t.join(timeout)
        if self.is_running:
            return False
        self._close_device()
        return True

    def stop(self):
        """Signal both loops to exit, join them, then close the device."""
        self._stop.set()
        if self._queue is not None:
            self._queue.cancel()
        for t in (self._capture_thread, self._consumer_thread):
            if t is not None:
                t.join()
        self._close_device()

    def _close_device(self):
        self._release_device()
        if self._error is not None:
            error, self._error = self._error, None
            raise error

    def _release_device(self):
        with self._lock:
            device, self._device = self._device, None
            self._capture_thread = None
            self._consumer_thread = None
        if device is not None:
            device.close()
            logger.info("Receiver stopped")

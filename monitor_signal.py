import argparse
import logging
import sys
import time

import config
from audio_io import SoundDeviceCapture, WavFileCapture
from errors import MorseError
from receiver import Receiver

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Print the signal power of captured audio blocks")
    parser.add_argument("--wav", type=str, help="Read from a .wav file instead of the microphone")
    parser.add_argument("--duration", type=float, default=10.0, help="Seconds to listen to the microphone")
    parser.add_argument("--channels", type=int, default=config.CAPTURE_CHANNELS, choices=[1, 2])
    parser.add_argument("--bits", type=int, default=8, choices=[8, 16], help="Capture sample width")
    parser.add_argument("--big-endian", action="store_true", help="Byte order for 16-bit samples")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.wav:
        def factory():
            return WavFileCapture(args.wav, big_endian=args.big_endian)
    else:
        dtype = 'int16' if args.bits == 16 else 'int8'

        def factory():
            return SoundDeviceCapture(channels=args.channels, dtype=dtype, big_endian=args.big_endian)

    receiver = Receiver(factory, on_power=lambda p: print(f"{p:.0f}"))
    try:
        receiver.start()
        if args.wav:
            receiver.wait()
        else:
            deadline = time.monotonic() + args.duration
            try:
                while receiver.is_running and time.monotonic() < deadline:
                    time.sleep(0.1)
            finally:
                receiver.stop()
    except MorseError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

import argparse
import logging
import sys

import config
from audio_io import write_wav
from errors import MorseError
from morse_codec import MorseCodec
from signal_encoder import SignalEncoder
from transmitter import Transmitter
from waveform import WaveformSynthesizer

logger = logging.getLogger(__name__)

USAGE = 'Usage: add a text line to send, use "your text" to send the line with spaces'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send text as Morse code through the speaker")
    parser.add_argument("words", nargs="*", help="Text to send; words are joined with a single space")
    parser.add_argument("--wpm", type=float, default=config.SPEED, help="Keying speed in words per minute")
    parser.add_argument("--freq", type=int, default=config.FREQ, help="Tone frequency in Hz")
    parser.add_argument("--table", type=str, default=config.SYMBOL_TABLE_PATH, help="Path to the symbol table")
    parser.add_argument("--wav", type=str, help="Write the signal to a .wav file instead of playing it")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if not args.words:
        print(USAGE)
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        codec = MorseCodec.from_file(args.table)
        morse = codec.encode(" ".join(args.words))
        print(f"Morse code: {morse}")

        encoder = SignalEncoder(WaveformSynthesizer(frequency=args.freq), speed=args.wpm)
        if args.wav:
            samples = encoder.render(morse)
            write_wav(args.wav, samples, encoder.sample_rate)
            logger.info("Audio saved to %s (%.2fs)", args.wav, encoder.duration_seconds(samples))
        else:
            Transmitter(encoder).transmit_morse(morse)
    except (MorseError, ValueError) as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

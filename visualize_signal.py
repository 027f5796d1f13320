import argparse
import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

import config
from morse_codec import MorseCodec
from signal_encoder import SignalEncoder


def token_spans(encoder: SignalEncoder, morse: str):
    """(start_sample, end_sample, symbol) for every token of the symbol string."""
    spans = []
    pos = 0
    for symbol in morse:
        n = sum(len(seg) for seg in encoder.segments(symbol))
        spans.append((pos, pos + n, symbol))
        pos += n
    return spans


def plot_signal(text: str, output: str, wpm: float = config.SPEED, zoom_ms: float = 200.0):
    codec = MorseCodec.from_file()
    encoder = SignalEncoder(speed=wpm)
    morse = codec.encode(text)
    samples = encoder.render(morse)
    t_ms = np.arange(len(samples)) * 1000.0 / encoder.sample_rate

    fig, axes = plt.subplots(2, 1, figsize=(15, 8))

    ax = axes[0]
    ax.plot(t_ms, samples, linewidth=0.5)
    for start, end, symbol in token_spans(encoder, morse):
        color = {'.': 'tab:green', '-': 'tab:blue'}.get(symbol, 'tab:gray')
        ax.axvspan(start * 1000.0 / encoder.sample_rate, end * 1000.0 / encoder.sample_rate,
                   color=color, alpha=0.1)
    ax.set_title(f"'{text}' -> {morse} ({wpm} WPM, {encoder.duration_seconds(samples):.2f}s)")
    ax.set_xlabel("Time (ms)")
    ax.set_ylabel("Amplitude")
    ax.grid(True, alpha=0.3)

    # End of the first tone: should land on a zero crossing
    ax = axes[1]
    n_zoom = min(len(samples), encoder.synth.num_samples(zoom_ms))
    ax.plot(t_ms[:n_zoom], samples[:n_zoom], marker='.', markersize=2, linewidth=0.5)
    ax.set_title(f"First {zoom_ms:.0f}ms (period = {encoder.synth.period} samples)")
    ax.set_xlabel("Time (ms)")
    ax.set_ylabel("Amplitude")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output)
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description="Visualize the rendered Morse signal")
    parser.add_argument("text", nargs="?", default="SOS", help="Text to render")
    parser.add_argument("--wpm", type=float, default=config.SPEED)
    parser.add_argument("--output", type=str, default="diagnostics/signal.png", help="Output path for the plot")
    args = parser.parse_args()

    out_dir = os.path.dirname(args.output)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    plot_signal(args.text, args.output, wpm=args.wpm)
    print(f"Saved visualization to {args.output}")


if __name__ == "__main__":
    main()

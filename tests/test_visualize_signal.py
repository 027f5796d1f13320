from signal_encoder import SignalEncoder
from visualize_signal import plot_signal, token_spans


def test_token_spans_cover_signal():
    enc = SignalEncoder()
    morse = "...|---|..."
    spans = token_spans(enc, morse)
    assert [s for _, _, s in spans] == list(morse)
    assert spans[0][0] == 0
    assert spans[-1][1] == len(enc.render(morse))
    for (_, end, _), (start, _, _) in zip(spans, spans[1:]):
        assert end == start


def test_plot_signal(tmp_path):
    path = tmp_path / "signal.png"
    plot_signal("SOS", str(path))
    assert path.exists()
    assert path.stat().st_size > 0

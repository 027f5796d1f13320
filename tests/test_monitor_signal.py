import monitor_signal
from audio_io import write_wav
from signal_encoder import SignalEncoder


def test_monitor_wav_prints_power_per_block(tmp_path, capsys):
    path = str(tmp_path / "sos.wav")
    write_wav(path, SignalEncoder().render("...|---|..."))

    assert monitor_signal.main(["--wav", path]) == 0
    lines = capsys.readouterr().out.split()
    assert lines
    assert all(line.lstrip('-').isdigit() for line in lines)
    assert int(lines[0]) > 1000


def test_monitor_missing_wav(tmp_path, capsys):
    assert monitor_signal.main(["--wav", str(tmp_path / "missing.wav")]) == 1
    assert "not found" in capsys.readouterr().err

import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config


def _read_pairs(file_path):
    if not os.path.exists(file_path):
        raise AssertionError(f"File not found: {file_path}")

    pairs = []
    with open(file_path, 'r') as f:
        for line in f:
            line = line.strip()
            if line:
                pairs.append((line[0].upper(), line[1:]))
    return pairs


def test_check_morse_table_key_dups():
    seen = set()
    dups = []
    for key, _ in _read_pairs(config.SYMBOL_TABLE_PATH):
        if key in seen:
            dups.append(key)
        seen.add(key)

    assert not dups, f"Duplicate keys found in {config.SYMBOL_TABLE_PATH}: {dups}"


def test_check_morse_table_signal_dups():
    signal_to_chars = {}
    for key, code in _read_pairs(config.SYMBOL_TABLE_PATH):
        signal_to_chars.setdefault(code, []).append(key)

    dups = [(signal, chars) for signal, chars in signal_to_chars.items() if len(chars) > 1]
    assert not dups, f"Characters sharing a code: {dups}"

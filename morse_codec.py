"""
Morse codec module.
Loads the symbol table resource and transcodes free-form text into the
pipe-delimited symbol string consumed by the SignalEncoder.
"""

import logging
import os
from types import MappingProxyType
from typing import List, Mapping

import config
from errors import MissingResource

logger = logging.getLogger(__name__)

MORSE_SYMBOLS = frozenset('.-')


def load_symbol_table(path: str = config.SYMBOL_TABLE_PATH) -> Mapping[str, str]:
    """
    Parse the symbol table resource.

    Each line holds one character immediately followed by its code, e.g.
        A.-
        B-...
    Keys are upper-cased; the returned mapping is read-only.
    """
    if not os.path.exists(path):
        raise MissingResource(f"Symbol table not found: {path}")

    table = {}
    with open(path, 'r', encoding='utf-8') as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line:
                continue
            key, code = line[0].upper(), line[1:]
            if not code or not set(code) <= MORSE_SYMBOLS:
                raise ValueError(f"{path}:{lineno}: invalid code for {key!r}: {code!r}")
            table[key] = code

    logger.debug("Loaded %d symbols from %s", len(table), path)
    return MappingProxyType(table)


class MorseCodec:
    def __init__(self, codes: Mapping[str, str]):
        self.codes = MappingProxyType(dict(codes))

    @classmethod
    def from_file(cls, path: str = config.SYMBOL_TABLE_PATH) -> "MorseCodec":
        return cls(load_symbol_table(path))

    def tokens(self, text: str) -> List[str]:
        """One token per input character: a letter code or a word gap."""
        tokens = []
        for c in text.upper():
            if c == ' ':
                tokens.append(config.WORD_GAP)
                continue
            # unknown characters are sent as silence
            tokens.append(self.codes.get(c, config.WORD_GAP))
        return tokens

    def encode(self, text: str) -> str:
        """
        Convert text to a symbol string, for example "SOS" -> "...|---|...".

        Runs of gaps collapse to a single word gap, and the result never
        starts or ends with a gap. Adjacent letters are joined by '|'; a
        word gap is emitted on its own without '|' around it.
        """
        tokens = self.tokens(text)
        n = len(tokens)

        kept = []
        for i in range(n):
            is_gap = tokens[i] == config.WORD_GAP
            interior = 0 < i < n - 1
            if not is_gap or (interior and tokens[i + 1] != config.WORD_GAP):
                kept.append(tokens[i])

        # "  A" keeps the second space under the rule above
        if kept and kept[0] == config.WORD_GAP:
            kept.pop(0)

        out = []
        prev = None
        for token in kept:
            if prev is not None and prev != config.WORD_GAP and token != config.WORD_GAP:
                out.append(config.SHORT_GAP)
            out.append(token)
            prev = token
        return "".join(out)

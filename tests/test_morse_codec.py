import pytest
import config
from errors import MissingResource
from morse_codec import MorseCodec, load_symbol_table

MINIMAL = {'A': '.-', 'B': '-...', 'S': '...', 'O': '---'}


@pytest.fixture(scope="module")
def codec():
    return MorseCodec.from_file()


def test_table_entries_are_valid(codec):
    assert len(codec.codes) == 36
    for key, code in codec.codes.items():
        assert len(key) == 1
        assert key.isdigit() or (key.isalpha() and key.isupper())
        assert code
        assert set(code) <= {'.', '-'}


def test_encode_every_key(codec):
    for key, code in codec.codes.items():
        assert codec.encode(key) == code
        assert codec.encode(key.lower()) == code


def test_encode_sos(codec):
    assert codec.encode("SOS") == "...|---|..."
    assert codec.encode("sos") == "...|---|..."


def test_encode_empty_and_only_spaces(codec):
    assert codec.encode("") == ""
    assert codec.encode(" ") == ""
    assert codec.encode("  ") == ""
    assert codec.encode("     ") == ""


def test_encode_words(codec):
    morse = codec.encode("HI THERE")
    assert morse == "....|.. -|....|.|.-.|."
    assert morse.count(config.WORD_GAP) == 1
    # no pipe next to a word gap, no doubled gaps
    for bad in ("||", "  ", "| ", " |"):
        assert bad not in morse


def test_repeated_spaces_collapse(codec):
    assert codec.encode("HI   THERE") == codec.encode("HI THERE")


def test_no_leading_or_trailing_gap(codec):
    assert codec.encode(" SOS ") == "...|---|..."
    assert codec.encode("  SOS") == "...|---|..."
    assert codec.encode("SOS  ") == "...|---|..."


def test_unknown_character_is_single_gap():
    codec = MorseCodec(MINIMAL)
    # '1' is not in the minimal table
    assert codec.tokens("A1") == ['.-', ' ']
    assert codec.encode("A1B") == ".- -..."
    # unknown followed by a space still gives one gap
    assert codec.encode("A1 B") == ".- -..."
    assert codec.encode("A 1 B") == ".- -..."
    assert codec.encode("A1") == ".-"
    assert codec.encode("1A") == ".-"
    assert codec.encode("?!") == ""


def test_tokens_before_collapsing():
    codec = MorseCodec(MINIMAL)
    assert codec.tokens("ab s") == ['.-', '-...', ' ', '...']
    assert codec.tokens("") == []


def test_codes_are_read_only():
    source = dict(MINIMAL)
    codec = MorseCodec(source)
    with pytest.raises(TypeError):
        codec.codes['A'] = '-'
    # later changes to the source dict are not visible
    source['E'] = '.'
    assert 'E' not in codec.codes


def test_load_symbol_table_case_insensitive(tmp_path):
    path = tmp_path / "codes"
    path.write_text("a.-\n\nb-...\n  \ne.\n")
    table = load_symbol_table(str(path))
    assert dict(table) == {'A': '.-', 'B': '-...', 'E': '.'}


def test_load_symbol_table_rejects_bad_code(tmp_path):
    path = tmp_path / "codes"
    path.write_text("A.-\nB-x.\n")
    with pytest.raises(ValueError, match=":2:"):
        load_symbol_table(str(path))


def test_load_symbol_table_missing(tmp_path):
    with pytest.raises(MissingResource):
        load_symbol_table(str(tmp_path / "missing"))
    # also a FileNotFoundError for callers that only know the builtin
    with pytest.raises(FileNotFoundError):
        MorseCodec.from_file(str(tmp_path / "missing"))

import pytest

from shortlink import codegen
from shortlink.codegen import ALPHABET, DEFAULT_CODE_LENGTH, generate_code


def test_alphabet_is_base62():
    assert len(ALPHABET) == 62
    assert len(set(ALPHABET)) == 62
    assert ALPHABET.isalnum()


def test_default_length():
    assert len(generate_code()) == DEFAULT_CODE_LENGTH == 6


@pytest.mark.parametrize("length", [0, -3, None])
def test_non_positive_length_falls_back_to_default(length):
    assert len(generate_code(length)) == DEFAULT_CODE_LENGTH


@pytest.mark.parametrize("length", [1, 8, 32])
def test_requested_length_and_charset(length):
    for _ in range(50):
        code = generate_code(length)
        assert len(code) == length
        assert set(code) <= set(ALPHABET)


def test_random_source_failure_propagates(monkeypatch):
    def broken(seq):
        raise OSError("entropy source unavailable")

    monkeypatch.setattr(codegen.secrets, "choice", broken)
    with pytest.raises(OSError):
        generate_code()

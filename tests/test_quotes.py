from dataclasses import dataclass

import pytest

from minipysh.quotes import UnclosedQuoteError, clean_quotes, remove_quotes


@dataclass
class FakeToken:
    text: str
    is_word: bool = True


@pytest.mark.parametrize("plain", ["echo", "a-b_c", "/usr/bin/ls", ""])
def test_plain_text_unchanged(plain):
    assert clean_quotes(plain) == plain


def test_single_quotes_removed():
    assert clean_quotes("'abc'") == "abc"


def test_double_quotes_keep_spaces():
    assert clean_quotes('"a b"') == "a b"


def test_double_quote_inside_single_is_literal():
    assert clean_quotes("'say \"hi\"'") == 'say "hi"'


def test_single_quote_inside_double_is_literal():
    assert clean_quotes("\"it's\"") == "it's"


def test_adjacent_quoted_parts_join():
    assert clean_quotes("'ab'\"cd\"ef") == "abcdef"


def test_backslash_outside_quotes_dropped():
    assert clean_quotes("\\$HOME") == "$HOME"


def test_backslash_kept_inside_single_quotes():
    assert clean_quotes("'a\\b'") == "a\\b"


def test_backslash_in_double_quotes_before_dollar_dropped():
    assert clean_quotes('"\\$x"') == "$x"


def test_backslash_in_double_quotes_before_other_kept():
    assert clean_quotes('"\\n"') == "\\n"


@pytest.mark.parametrize("bad", ["'abc", '"abc', "a'b", "'a\"b"])
def test_unclosed_quote_raises(bad):
    with pytest.raises(UnclosedQuoteError):
        clean_quotes(bad)


def test_unclosed_error_is_value_error():
    with pytest.raises(ValueError):
        clean_quotes('"')


def test_remove_quotes_only_touches_words():
    word = FakeToken("'x y'")
    op = FakeToken("'|'", is_word=False)
    remove_quotes([word, op])
    assert word.text == "x y"
    assert op.text == "'|'"


def test_remove_quotes_unclosed_becomes_empty():
    item = FakeToken("'open")
    remove_quotes([item])
    assert item.text == ""
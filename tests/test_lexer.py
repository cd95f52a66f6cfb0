import pytest

from minipysh.lexer import (
    Token,
    TokenType,
    check_syntax,
    classify_tokens,
    is_delimiter,
    is_operator_char,
    is_space,
    merge_adjacent_words,
    tokenize,
)
from minipysh.quotes import UnclosedQuoteError


def _prepared(line):
    tokens = tokenize(line)
    classify_tokens(tokens)
    merge_adjacent_words(tokens)
    return tokens


@pytest.mark.parametrize("char", [" ", "\t", "\n", "\v", "\f", "\r"])
def test_is_space_true(char):
    assert is_space(char) is True


@pytest.mark.parametrize("char", ["a", "|", "", "'"])
def test_is_space_false(char):
    assert is_space(char) is False


def test_is_operator_char():
    assert [is_operator_char(c) for c in "|<>a$"] == [True, True, True, False, False]
    assert is_operator_char("") is False


def test_is_delimiter():
    assert all(is_delimiter(c) for c in " |<>'\"")
    assert not any(is_delimiter(c) for c in "a$_\\")
    assert is_delimiter("") is False


def test_tokenize_simple_words():
    tokens = tokenize("echo hello")
    assert [t.text for t in tokens] == ["echo", "hello"]
    assert tokens[1].has_space is True


def test_tokenize_ignores_surrounding_space():
    assert [t.text for t in tokenize("   ls   -l   ")] == ["ls", "-l"]
    assert tokenize("   ") == []
    assert tokenize("") == []


def test_tokenize_keeps_quotes():
    tokens = tokenize('echo "a b" \'c | d\'')
    assert [t.text for t in tokens] == ["echo", '"a b"', "'c | d'"]


def test_tokenize_operators():
    tokens = tokenize("cat<<EOF>>out|wc<in>o")
    assert [t.text for t in tokens] == [
        "cat", "<<", "EOF", ">>", "out", "|", "wc", "<", "in", ">", "o",
    ]
    assert not any(t.has_space for t in tokens)


def test_tokenize_triple_operator_splits():
    assert [t.text for t in tokenize(">>>")] == [">>", ">"]


def test_tokenize_unclosed_quote():
    with pytest.raises(UnclosedQuoteError):
        tokenize('echo "abc')
    with pytest.raises(UnclosedQuoteError):
        tokenize("echo 'abc")


def test_tokenize_adjacent_words_not_spaced():
    tokens = tokenize("a\"b\"'c' d")
    assert [t.text for t in tokens] == ["a", '"b"', "'c'", "d"]
    assert [t.has_space for t in tokens[1:]] == [False, False, True]


def test_tokens_rejoin_to_line_without_spaces():
    line = "ls -la|grep \"x y\">>out"
    tokens = tokenize(line)
    assert "".join(t.text for t in tokens) == line.replace(" ", "").replace(
        '"xy"', '"x y"'
    )


def test_classify_tokens():
    tokens = tokenize("a | b < c > d >> e << f")
    classify_tokens(tokens)
    assert [t.type for t in tokens] == [
        TokenType.WORD, TokenType.PIPE, TokenType.WORD,
        TokenType.REDIR_IN, TokenType.WORD, TokenType.REDIR_OUT,
        TokenType.WORD, TokenType.APPEND, TokenType.WORD,
        TokenType.HEREDOC, TokenType.WORD,
    ]


def test_quoted_operator_is_word():
    tokens = tokenize('echo "|"')
    classify_tokens(tokens)
    assert tokens[1].is_word


def test_merge_adjacent_words():
    tokens = _prepared("echo \"hello\"'world' x")
    assert [t.text for t in tokens] == ["echo", "\"hello\"'world'", "x"]


def test_merge_keeps_operators_apart():
    tokens = _prepared("a>b")
    assert [t.text for t in tokens] == ["a", ">", "b"]


def test_merge_empty_list():
    tokens = []
    merge_adjacent_words(tokens)
    assert tokens == []


def test_merge_many():
    tokens = [Token("a"), Token("b"), Token("c"), Token("d", has_space=True)]
    merge_adjacent_words(tokens)
    assert [t.text for t in tokens] == ["abc", "d"]


def test_check_syntax_valid():
    assert check_syntax([]) is True
    assert check_syntax(_prepared("ls -l | wc > out")) is True
    assert check_syntax(_prepared("cat << EOF")) is True


@pytest.mark.parametrize(
    "line",
    ["| ls", "ls |", "ls > ", "ls | | wc", "cat < > f", "echo >> | x"],
)
def test_check_syntax_invalid(line):
    assert check_syntax(_prepared(line)) is False


def test_token_is_word_property():
    token = Token("|", TokenType.PIPE)
    assert token.is_word is False
    assert Token("x").is_word is True
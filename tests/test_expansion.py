from dataclasses import dataclass

import pytest

from minipysh.environment import Environment
from minipysh.expansion import expand_tokens, expand_variables, get_var_name


@dataclass
class FakeToken:
    text: str
    is_word: bool = True


@pytest.fixture
def env():
    return Environment({"USER": "alice", "HOME": "/home/alice", "_X1": "val"})


def test_get_var_name_stops_at_non_identifier():
    assert get_var_name("USER/rest") == "USER"


def test_get_var_name_empty_when_no_identifier():
    assert get_var_name("-abc") == ""


def test_get_var_name_underscore_and_digits():
    assert get_var_name("_X1.tail") == "_X1"


def test_plain_text_unchanged(env):
    assert expand_variables("hello world", env, 0) == "hello world"


def test_simple_variable(env):
    assert expand_variables("$USER", env, 0) == env.get("USER")


def test_variable_with_prefix(env):
    assert expand_variables("hi-$USER", env, 0) == "hi-" + env.get("USER")


def test_variable_followed_by_slash_copies_slash(env):
    assert expand_variables("$HOME/docs", env, 0) == env.get("HOME") + "/docs"


def test_unset_variable_is_empty(env):
    assert expand_variables("$NOPE", env, 0) == ""


def test_exit_status(env):
    assert expand_variables("$?", env, 42) == "42"


def test_lone_dollar(env):
    assert expand_variables("$", env, 0) == "$"


def test_dollar_before_digit_is_literal(env):
    assert expand_variables("$1", env, 0) == "$1"


def test_single_quotes_block_expansion(env):
    assert expand_variables("'$USER'", env, 0) == "'$USER'"


def test_double_quotes_allow_expansion(env):
    result = expand_variables('"$USER"', env, 0)
    assert result == '"' + env.get("USER") + '"'


def test_backslash_blocks_expansion(env):
    assert expand_variables("\\$USER", env, 0) == "\\$USER"


def test_char_after_expansion_is_not_examined(env):
    # The '$' right after an expansion is copied verbatim.
    assert expand_variables("$USER$USER", env, 0) == env.get("USER") + "$USER"


def test_expand_tokens_only_words(env):
    word = FakeToken("$USER")
    op = FakeToken("$USER", is_word=False)
    expand_tokens([word, op], env, 0)
    assert word.text == env.get("USER")
    assert op.text == "$USER"


def test_expand_tokens_status(env):
    item = FakeToken("$?")
    expand_tokens([item], env, 7)
    assert item.text == "7"
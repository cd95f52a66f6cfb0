# minipysh

A small interactive shell. It reads a line, splits it into words and
operators, expands variables, strips quotes and runs the result, either as
a built-in command or as an external program found on `PATH`.

## Features

- Pipelines: `ls | grep py | wc -l`
- Redirections: `<`, `>`, `>>`
- Heredocs: `<<`, with variable expansion unless the delimiter is quoted
- Single and double quotes; quoted and unquoted pieces that touch join
  into one word
- Variables: `$NAME` and `$?` (the last exit status); nothing expands
  inside single quotes or after a backslash, and unset variables expand
  to nothing
- Built-ins: `echo` (with `-n` and escape sequences such as `\n`, `\t`),
  `cd`, `pwd`, `export`, `unset`, `env`, `exit`

A line that starts with a pipe, ends with an operator or has two operators
in a row is rejected with a syntax error and status 2. A command that is
not found gives status 127; one that is found but not executable gives 126.

`cd`, `export`, `unset` and `exit` only take effect when they are the whole
line. Inside a pipeline they do nothing, and every built-in stage counts as
succeeding.

## Installing

```
pip install .
```

## Running

Start an interactive session:

```
minipysh
```

The prompt is `minishell> ` and heredoc lines are read after `> `. End the
session with `exit` or Ctrl-D. Ctrl-C drops the current line and sets the
exit status to 130. Started with any command-line argument, `minipysh`
exits at once with status 0.

Example session:

```
minishell> export GREETING=hello
minishell> echo "$GREETING world" | tr a-z A-Z
HELLO WORLD
minishell> cat << EOF
> value: $GREETING
> EOF
value: hello
minishell> echo $?
0
```

`env` lists variables with the most recently created one first.

## Using it from Python

```python
from minipysh.shell import Shell

shell = Shell()
status = shell.run_line("echo hi > out.txt")
```

`Shell.run_line` runs one line and returns its exit status; `exit` raises
`minipysh.builtins.ShellExit`, whose `status` attribute holds the code.
`Shell.run` starts the loop and returns the final status. A `Shell` takes
an optional `Environment`, a `read_line` function (given a prompt, it
returns a line or `None` at end of input), and `stdout`/`stderr` streams.

The stages can also be used separately:

- `minipysh.lexer`: `tokenize`, `classify_tokens`, `merge_adjacent_words`,
  `check_syntax`
- `minipysh.expansion`: `expand_variables`, `expand_tokens`
- `minipysh.quotes`: `clean_quotes`, `remove_quotes`
- `minipysh.parser`: `parse_commands`, `read_heredoc`, `Command`
- `minipysh.executor`: `execute`, `find_command_path`, `exit_code`
- `minipysh.environment`: `Environment`

## What it does not do

There are no `;`, `&&` or `||` lists, no subshells, no wildcard expansion,
no job control and no background processes. Line editing and history come
only from Python's `readline` module where it is available.

## Running the tests

```
pip install .[test]
pytest
```
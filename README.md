# burcl

`burcl` is the front end of a compiler for a small B-like language. It splits
source text into tokens and lowers function bodies into a flat, stack-based
intermediate representation (IR).

## Installation

```
pip install .
```

To run the tests, install the `test` extra and run `pytest`:

```
pip install ".[test]"
pytest
```

## Command line

```
burcl program.b
```

The source path is optional and defaults to `bruh.b`. The command:

1. reads the file (a file that cannot be read is treated as empty),
2. prints the value of every token, one per line, ending with `end of file`,
3. if IR generation reported errors, prints them and exits with status 1,
4. otherwise prints the IR of the `main` function and exits with status 0.
   Each entry is printed as `op: <number>` for an operation (the number is
   the `IRType` value) or as `str: <operand>` for an operand.

Error lines have the form:

```
[ERROR]: <function>: <source path>:<line>: <message>
```

## Library use

```python
from burcl.lexer import tokenize
from burcl.ir import IRGenerator

tokens = tokenize("main() { x = 1 + 2 * 3 }")
generator = IRGenerator("example.b")
info = generator.generate(tokens)

if generator.has_errors():
    print(generator.error_text())
else:
    print(info.labels["main"])
```

### `burcl.lexer`

- `TokenType` – the kinds of token.
- `Token` – a frozen dataclass with `type`, `value` and `line`.
- `tokenize(source)` – returns the tokens of a string; the list always ends
  with an `END_OF_FILE` token. Spaces, `\r` and `\n` separate tokens; any
  other character that is not part of a number, identifier, quoted literal or
  one of `+ - * / { } ( ) , = &` becomes an `INVALID` token. An unterminated
  quote gives an `INVALID` token. `return`, `auto` and `extrn` are lexed as
  keywords.
- `tokenize_file(path)` – tokenizes the contents of a file.
- `read_everything(path)` – returns a file's text, or `""` if it cannot be
  read.

### `burcl.ir`

- `IRType` – the IR operations: `LOAD_NUMBER`, `LOAD_STACK`, `DEREF`,
  `ASSIGN`, `ADD`, `SUB`, `MUL`, `DIV`.
- `IRInfo` – the result of generation: `labels` (IR per function name),
  `strings` (unescaped string literals), `string_ptr` (running size of the
  string table) and `referencing`.
- `IRGenerator(source_name="")` – `generate(tokens)` returns an `IRInfo`;
  errors are collected rather than raised and can be read with
  `has_errors()`, `error_text()` or written to stdout with `print_errors()`.
  Each call to `generate` starts afresh.
- `unescape_string(text)` – replaces backslash escapes (`\n`, `\t`, `\r`,
  `\0`, `\\`, `\'`, `\"`, `\b`, `\f`, `\v`, `\a`, `\xHH`, `\uHHHH`, the last
  two reduced to one byte) and raises `ValueError` on a bad escape.

## Language supported

- Function definitions: `name(a, b) { ... }`. Parameters are addressed with
  positive stack offsets.
- Assignments: `x = expr`. The first assignment to a name declares it as a
  local in the current block (negative stack offsets); later assignments to
  the same name emit `ASSIGN` to that local.
- Expressions made of `+`, `-`, `*`, `/` (usual precedence, left to right),
  numbers, identifiers, string literals and character literals.

## What it does not do

`burcl` stops at the IR. It does not produce assembly or any other output
code, and it does not run programs. Function calls, `return`, `auto`,
`extrn`, unary `&` and `*`, and statements other than assignments are not
compiled; `DEREF` exists as an IR operation but is never emitted, and
`IRInfo.referencing` is always empty.
import pytest

from burcl.ir import IRGenerator, IRType, unescape_string
from burcl.lexer import Token, TokenType, tokenize


def generate(source, name="test.b"):
    generator = IRGenerator(name)
    info = generator.generate(tokenize(source))
    return generator, info


def test_arithmetic_precedence():
    generator, info = generate("main() { x = 1 + 2 * 3 }")
    assert not generator.has_errors()
    assert info.labels["main"] == [
        IRType.LOAD_NUMBER, "1",
        IRType.LOAD_NUMBER, "2",
        IRType.LOAD_NUMBER, "3",
        IRType.MUL,
        IRType.ADD,
    ]


def test_left_associative_subtraction_and_division():
    _, info = generate("main() { x = 8 - 4 / 2 - 1 }")
    assert info.labels["main"] == [
        IRType.LOAD_NUMBER, "8",
        IRType.LOAD_NUMBER, "4",
        IRType.LOAD_NUMBER, "2",
        IRType.DIV,
        IRType.SUB,
        IRType.LOAD_NUMBER, "1",
        IRType.SUB,
    ]


def test_reassignment_emits_assign():
    generator, info = generate("main() { x = 1 x = 2 }")
    assert not generator.has_errors()
    assert info.labels["main"] == [
        IRType.LOAD_NUMBER, "1",
        IRType.LOAD_NUMBER, "2",
        IRType.ASSIGN, "0",
    ]


def test_locals_get_distinct_non_positive_offsets():
    _, info = generate("main() { x = 1 y = 2 x = 3 y = 4 }")
    code = info.labels["main"]
    targets = [int(code[i + 1]) for i, v in enumerate(code) if v is IRType.ASSIGN]
    assert len(targets) == 2
    assert targets[0] != targets[1]
    assert all(t <= 0 for t in targets)


def test_parameters_are_numbered_from_the_last():
    generator, info = generate("f(a, b) { c = a - b }")
    assert not generator.has_errors()
    code = info.labels["f"]
    assert code[0] is IRType.LOAD_STACK
    assert code[2] is IRType.LOAD_STACK
    assert code[4] is IRType.SUB
    first, second = int(code[1]), int(code[3])
    assert first > second > 0
    assert {first, second} == set(range(1, 3))


def test_strings_are_unescaped_and_offsets_use_raw_length():
    generator, info = generate('main() { s = "ab" t = "a\\nb" }')
    assert not generator.has_errors()
    assert info.strings == ["ab", "a\nb"]
    assert info.string_ptr == len("ab") + len("a\\nb")
    assert info.labels["main"] == [
        IRType.LOAD_NUMBER, str(0),
        IRType.LOAD_NUMBER, str(len("ab")),
    ]


def test_char_literals_become_codes():
    _, info = generate("main() { c = 'a' d = '\\t' }")
    assert info.labels["main"] == [
        IRType.LOAD_NUMBER, str(ord("a")),
        IRType.LOAD_NUMBER, str(ord("\t")),
    ]


def test_bad_escape_in_string_is_reported():
    generator, info = generate('main() { s = "\\q" }')
    assert generator.has_errors()
    assert "unknown escape sequence: \\q" in generator.error_text()
    assert info.strings == ["\0"]


def test_unknown_local_error_format():
    generator, _ = generate("main() {\n x = y\n}")
    assert generator.error_text() == (
        "[ERROR]: main: test.b:2: local 'y' does not exist\n"
    )


def test_top_level_expression_is_discarded():
    generator, info = generate("1 + 2")
    assert info.labels == {}
    assert generator.error_text().count("[ERROR]") == 1
    assert "expected declaration" in generator.error_text()


def test_several_functions():
    generator, info = generate("main() { x = 1 } f(a) { y = a }")
    assert not generator.has_errors()
    assert set(info.labels) == {"main", "f"}
    assert info.labels["f"][0] is IRType.LOAD_STACK


def test_missing_comma_between_parameters():
    generator, info = generate("f(a b) { }")
    assert "expected ',' beside paremeter #1, got 'b'" in generator.error_text()
    assert info.labels["f"] == []


def test_missing_close_paren():
    generator, _ = generate("f(a")
    assert "expected ')' when closing parameters" in generator.error_text()


def test_unexpected_symbol():
    generator, _ = generate("main() { x = ) }")
    assert "unexpected symbol ')'" in generator.error_text()


def test_print_errors_outputs_text(capsys):
    generator, _ = generate("main() { x = y }")
    assert generator.print_errors() is True
    assert capsys.readouterr().out == generator.error_text()


def test_print_errors_silent_without_errors(capsys):
    generator, _ = generate("main() { x = 1 }")
    assert generator.print_errors() is False
    assert capsys.readouterr().out == ""


def test_generate_resets_state():
    generator = IRGenerator("test.b")
    generator.generate(tokenize("main() { x = y }"))
    assert generator.has_errors()
    info = generator.generate(tokenize("main() { x = 1 }"))
    assert not generator.has_errors()
    assert info.labels["main"] == [IRType.LOAD_NUMBER, "1"]


def test_tokens_without_eof_are_accepted():
    generator = IRGenerator("test.b")
    info = generator.generate([Token(TokenType.NUMBER, "5", 1)])
    assert info.labels == {}
    assert "expected declaration" in generator.error_text()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a\\nb", "a\nb"),
        ("\\x41", "A"),
        ("\\u0041", "A"),
        ("\\\\", "\\"),
        ("\\'", "'"),
        ('\\"', '"'),
        ("\\0", "\0"),
        ("plain", "plain"),
    ],
)
def test_unescape_string(raw, expected):
    assert unescape_string(raw) == expected


@pytest.mark.parametrize("raw", ["\\", "\\x4", "\\u004", "\\q", "\\xzz"])
def test_unescape_string_errors(raw):
    with pytest.raises(ValueError):
        unescape_string(raw)
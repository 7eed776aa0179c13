import pytest

from parser import JsSyntaxError, parse_js


def test_parse_modern_syntax():
    result = parse_js(
        "class A { #x = 1; static { } has(o) { return #x in o; } }\n"
        "const v = a?.b ?? 1_000n;\n",
        source_name="modern.js",
    )
    assert result.has_tree
    assert result.errors == []
    assert result.root.type == "program"
    assert result.source_name == "modern.js"


def test_parse_accepts_bytes():
    result = parse_js(b"const a = 2 ** 3;")
    assert result.errors == []
    assert result.root.type == "program"


def test_parse_error_raises_with_location():
    with pytest.raises(JsSyntaxError) as excinfo:
        parse_js("const a = 1;\nconst = ;\n", source_name="broken.js")
    error = excinfo.value
    assert error.source_name == "broken.js"
    assert error.line == 2
    assert "broken.js" in str(error)
    assert "line 2" in str(error)


def test_tolerant_parse_collects_errors():
    result = parse_js("function broken( {\n  return 1;\n", tolerant=True)
    assert result.has_tree
    assert result.errors
    assert all(error.line is not None for error in result.errors)


def test_jsx_is_rejected():
    with pytest.raises(JsSyntaxError, match="JSX"):
        parse_js("const el = <div className=\"a\" />;")


def test_parse_deeply_nested_expression():
    source = "var s = " + " + ".join(['"a"'] * 3000) + ";"
    result = parse_js(source)
    assert result.errors == []


def test_hashbang_line_is_accepted():
    result = parse_js("#!/usr/bin/env node\nmain();\n")
    assert result.errors == []

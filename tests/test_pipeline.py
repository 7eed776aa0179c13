from pathlib import Path

import pytest

from features import EsFeature, EsVersion
from frontend import (
    NoFeaturesDetected,
    detect,
    get_ecma_features,
    get_min_ecma_version,
    minimum_edition,
    run_frontend,
)
from parser import JsSyntaxError, parse_js

CASES_DIR = Path(__file__).parent / "cases"


@pytest.mark.parametrize(
    "source, expected",
    [
        ("const a = 2 ** 3;", EsVersion.ES7),
        ("async function f() {}", EsVersion.ES8),
        ("const { a, ...rest } = o;", EsVersion.ES9),
        ("try { f(); } catch { g(); }", EsVersion.ES10),
        ("const v = a?.b ?? c;", EsVersion.ES11),
        ("const n = 1_000;", EsVersion.ES12),
        ("class A { static { } }", EsVersion.ES13),
        ("#!/usr/bin/env node\nrun();\n", EsVersion.ES14),
        ("Object.groupBy(xs, f);", EsVersion.ES15),
        ("Promise.try(f);", EsVersion.ES16),
    ],
)
def test_minimum_edition_matches_latest_feature(source, expected):
    assert get_min_ecma_version(source) is expected


def test_minimum_edition_is_monotonic():
    base = "const v = a ?? b;"
    before = get_min_ecma_version(base)
    after = get_min_ecma_version(base + "\nclass A { #x = 1; }")
    assert before is EsVersion.ES11
    assert after is EsVersion.ES13
    assert after >= before


def test_adding_older_feature_keeps_minimum():
    base = "Promise.withResolvers();"
    assert get_min_ecma_version(base + "\nconst a = 2 ** 3;") is EsVersion.ES15


def test_empty_feature_set_raises():
    tree = parse_js("1+1;").tree
    assert detect(tree) == frozenset()
    with pytest.raises(NoFeaturesDetected):
        minimum_edition(tree)


def test_empty_feature_set_uses_default():
    tree = parse_js("1+1;").tree
    assert minimum_edition(tree, default=EsVersion.ES7) is EsVersion.ES7
    assert get_min_ecma_version("var a = 1;", default=EsVersion.ES7) is EsVersion.ES7


def test_no_features_error_names_source():
    with pytest.raises(NoFeaturesDetected, match="legacy.js"):
        get_min_ecma_version("var a = 1;", source_name="legacy.js")


def test_get_ecma_features_returns_set():
    found = get_ecma_features("async function f() {}\nx?.y;")
    assert found == {EsFeature.ASYNC_FUNCTIONS, EsFeature.OPTIONAL_CHAINING}


def test_syntax_errors_propagate():
    with pytest.raises(JsSyntaxError):
        get_ecma_features("function (")
    with pytest.raises(JsSyntaxError):
        get_min_ecma_version("let = ;")


def test_run_frontend_on_modern_file():
    source_path = CASES_DIR / "modern.js"
    result = run_frontend(source_path.read_text(encoding="utf-8"), source_name=str(source_path))

    assert result.has_tree
    assert result.diagnostics == []
    assert {
        EsFeature.GLOBAL_THIS,
        EsFeature.NULLISH_COALESCING_OPERATOR,
        EsFeature.OPTIONAL_CHAINING,
        EsFeature.CLASS_FIELDS,
        EsFeature.CLASS_STATIC_BLOCK,
        EsFeature.ASYNC_FUNCTIONS,
    } <= result.features
    assert EsFeature.TOP_LEVEL_AWAIT not in result.features
    assert result.minimum_edition is EsVersion.ES13


def test_run_frontend_on_legacy_file():
    source_path = CASES_DIR / "legacy.js"
    result = run_frontend(source_path.read_bytes(), source_name=str(source_path))
    assert result.features == frozenset()
    assert result.minimum_edition is None


def test_run_frontend_tolerant_keeps_diagnostics():
    source_path = CASES_DIR / "broken.js"
    source = source_path.read_text(encoding="utf-8")
    with pytest.raises(JsSyntaxError):
        run_frontend(source, source_name=str(source_path))

    result = run_frontend(source, source_name=str(source_path), tolerant=True)
    assert result.has_tree
    assert result.diagnostics

import pytest

from features import EsFeature, EsVersion, edition_of, latest_feature, latest_version


def test_editions_are_totally_ordered():
    versions = list(EsVersion)
    assert versions == sorted(versions)
    assert EsVersion.ES7 < EsVersion.ES8 < EsVersion.ES16 < EsVersion.ESNEXT
    assert EsVersion.ES11 >= EsVersion.ES11
    assert max(EsVersion.ES9, EsVersion.ES13, EsVersion.ES10) is EsVersion.ES13


def test_future_edition_sorts_after_every_named_edition():
    named = [version for version in EsVersion if version is not EsVersion.ESNEXT]
    assert all(version < EsVersion.ESNEXT for version in named)
    assert latest_version(named + [EsVersion.ESNEXT]) is EsVersion.ESNEXT
    assert EsVersion.ESNEXT.year is None
    assert EsVersion.ESNEXT.label == "ESNext"


def test_edition_labels_and_years():
    assert EsVersion.ES7.label == "ES7"
    assert EsVersion.ES7.year == 2016
    assert EsVersion.ES16.year == 2025
    assert str(EsVersion.ES11) == "ES11 (2020)"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("ES7", EsVersion.ES7),
        ("es2016", EsVersion.ES7),
        ("2020", EsVersion.ES11),
        ("ES13", EsVersion.ES13),
        (" esnext ", EsVersion.ESNEXT),
    ],
)
def test_edition_parse(text, expected):
    assert EsVersion.parse(text) is expected


@pytest.mark.parametrize("text", ["ES6", "ES2015", "latest", ""])
def test_edition_parse_rejects_unknown(text):
    with pytest.raises(ValueError):
        EsVersion.parse(text)


def test_every_feature_has_an_edition():
    for feature in EsFeature:
        assert isinstance(edition_of(feature), EsVersion)
        assert feature.title


def test_features_with_the_same_edition_stay_distinct():
    first = EsFeature.OBJECT_VALUES_ENTRIES
    second = EsFeature.ASYNC_FUNCTIONS
    assert edition_of(first) is edition_of(second)
    assert first != second
    assert len({first, second, first}) == 2


def test_features_with_different_editions_are_not_equal():
    assert EsFeature.EXPONENTIATION_OPERATOR != EsFeature.TOP_LEVEL_AWAIT
    assert EsFeature.TOP_LEVEL_AWAIT == EsFeature.TOP_LEVEL_AWAIT


def test_latest_feature_picks_most_recent_edition():
    found = {
        EsFeature.EXPONENTIATION_OPERATOR,
        EsFeature.CLASS_FIELDS,
        EsFeature.OPTIONAL_CHAINING,
    }
    assert latest_feature(found) is EsFeature.CLASS_FIELDS


def test_latest_feature_breaks_ties_by_catalog_order():
    found = [EsFeature.CLASS_STATIC_BLOCK, EsFeature.CLASS_FIELDS]
    assert latest_feature(found) is EsFeature.CLASS_FIELDS
    assert latest_feature(reversed(found)) is EsFeature.CLASS_FIELDS

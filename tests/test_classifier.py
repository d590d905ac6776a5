import pytest

from credion.reports.classifier import classify


@pytest.mark.parametrize(
    "raw_type, category, subtype",
    [
        ("asic-current", "ASIC", "Current"),
        ("ASIC Historical", "ASIC", "Historical"),
        ("asic-company", "ASIC", "Company"),
        ("asic-personal", "ASIC", "Personal"),
        ("asic-document-search", "ASIC", "Document Search"),
        ("asic", "ASIC", "Current"),
        ("court", "COURT", None),
        ("ato", "ATO", None),
        ("land-title", "LAND TITLE", None),
        ("ppsr", "PPSR", None),
        ("property", "PROPERTY", None),
        ("director-ppsr", "DIRECTOR PPSR", None),
        ("director-bankruptcy", "DIRECTOR BANKRUPTCY", None),
        ("director-property", "DIRECTOR PROPERTY", None),
        ("director-related", "DIRECTOR RELATED", None),
    ],
)
def test_known_types(raw_type, category, subtype):
    result = classify(raw_type)
    assert result.category == category
    assert result.subtype == subtype
    assert result.recognised


def test_director_checked_before_plain_ppsr_and_property():
    # Both strings also contain "ppsr"/"property"
    assert classify("director-ppsr").category == "DIRECTOR PPSR"
    assert classify("director-property").category == "DIRECTOR PROPERTY"


@pytest.mark.parametrize(
    "raw_type, category",
    [
        ("director court", "COURT"),
        ("director-ato", "ATO"),
        ("director land title", "LAND TITLE"),
    ],
)
def test_court_ato_and_land_checked_before_director(raw_type, category):
    result = classify(raw_type)
    assert result.category == category
    assert result.recognised


def test_historical_wins_over_current():
    assert classify("asic-current-historical").subtype == "Historical"


def test_director_without_qualifier_is_unsupported():
    result = classify("director")
    assert result.category is None
    assert not result.recognised


def test_unknown_type_falls_back_to_uppercase(caplog):
    result = classify("weird-thing")
    assert result.category == "WEIRD-THING"
    assert result.subtype is None
    assert not result.recognised
    assert "Unrecognised report type" in caplog.text


def test_same_string_classifies_the_same_way():
    assert classify("Asic-Current") == classify("Asic-Current")


def test_none_is_handled():
    result = classify(None)
    assert result.category == ""
    assert not result.recognised

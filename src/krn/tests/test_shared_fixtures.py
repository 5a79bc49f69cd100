"""
Cross-implementation conformance against the shared KRN testcases.

Every KRN implementation runs the same testcases file, so valid/invalid
classification, error codes and canonical strings must agree exactly.

Run against another copy:
    KRN_FIXTURES=../krn-fixtures/testcases.json pytest -m conformance
"""
import pytest

from krn.errors import KRNError, KRNErrorCode
from krn.name import KRN
from krn.tests.shared_fixtures import case_id, cases
from krn.validation import (
    is_valid_resource_id,
    is_valid_service,
    is_valid_version,
    safe_resource_id,
)

pytestmark = pytest.mark.conformance

_WIRE_CODES = {code.value for code in KRNErrorCode}


def _expect_error(call, expected_code: str) -> None:
    with pytest.raises(KRNError) as exc_info:
        call()
    assert exc_info.value.code.value == expected_code, (
        f"expected {expected_code}, got {exc_info.value.code.value}: {exc_info.value}"
    )


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("case", cases("parse", "valid"), ids=case_id)
def test_parse_valid(case):
    k = KRN.parse(case["input"])
    expected = case["expected"]

    scalar_checks = {
        "service": lambda: k.service,
        "version": lambda: k.version,
        "depth": k.depth,
        "basename": k.basename,
        "basenameCollection": k.basename_collection,
        "fullDomain": k.full_domain,
        "path": k.path,
    }
    for key, getter in scalar_checks.items():
        if key in expected:
            assert getter() == expected[key], f"{key} mismatch for {case['input']}"

    if "segments" in expected:
        actual = [(s.collection, s.resource_id) for s in k.segments()]
        wanted = [(s["collection"], s["resourceId"]) for s in expected["segments"]]
        assert actual == wanted


@pytest.mark.parametrize("case", cases("parse", "invalid"), ids=case_id)
def test_parse_invalid(case):
    _expect_error(lambda: KRN.parse(case["input"]), case["expectedError"])


@pytest.mark.parametrize("text", cases("roundTrip"))
def test_round_trip(text):
    assert str(KRN.parse(text)) == text


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("resource_id", cases("validation", "resourceId", "valid"))
def test_resource_id_valid(resource_id):
    assert is_valid_resource_id(resource_id)


@pytest.mark.parametrize("resource_id", cases("validation", "resourceId", "invalid"))
def test_resource_id_invalid(resource_id):
    assert not is_valid_resource_id(resource_id)


def test_resource_id_max_length(testcases):
    max_length = testcases["validation"]["resourceId"]["maxLength"]
    assert is_valid_resource_id("a" * max_length)
    assert not is_valid_resource_id("a" * (max_length + 1))


@pytest.mark.parametrize("version", cases("validation", "version", "valid"))
def test_version_valid(version):
    assert is_valid_version(version)


@pytest.mark.parametrize("version", cases("validation", "version", "invalid"))
def test_version_invalid(version):
    assert not is_valid_version(version)


@pytest.mark.parametrize("service", cases("validation", "service", "valid"))
def test_service_valid(service):
    assert is_valid_service(service)


@pytest.mark.parametrize("service", cases("validation", "service", "invalid"))
def test_service_invalid(service):
    assert not is_valid_service(service)


@pytest.mark.parametrize("case", cases("safeResourceId"), ids=case_id)
def test_safe_resource_id(case):
    assert safe_resource_id(case["input"]) == case["expected"]


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("case", cases("operations", "parent"), ids=case_id)
def test_parent(case):
    parent = KRN.parse(case["input"]).parent()
    if case["expected"] is None:
        assert parent is None
    else:
        assert parent is not None
        assert str(parent) == case["expected"]


@pytest.mark.parametrize("case", cases("operations", "withVersion"), ids=case_id)
def test_with_version(case):
    k = KRN.parse(case["input"])
    assert str(k.with_version(case["version"])) == case["expected"]


@pytest.mark.parametrize("case", cases("operations", "withoutVersion"), ids=case_id)
def test_without_version(case):
    assert str(KRN.parse(case["input"]).without_version()) == case["expected"]


@pytest.mark.parametrize("case", cases("operations", "withService"), ids=case_id)
def test_with_service(case):
    k = KRN.parse(case["input"])
    assert str(k.with_service(case["service"])) == case["expected"]


@pytest.mark.parametrize("case", cases("operations", "withoutService"), ids=case_id)
def test_without_service(case):
    assert str(KRN.parse(case["input"]).without_service()) == case["expected"]


@pytest.mark.parametrize("case", cases("operations", "child"), ids=case_id)
def test_child(case):
    k = KRN.parse(case["input"])
    assert str(k.child(case["collection"], case["resourceId"])) == case["expected"]


@pytest.mark.parametrize("case", cases("operations", "resourceId"), ids=case_id)
def test_resource_id_lookup(case):
    k = KRN.parse(case["input"])
    if case.get("expectedError"):
        _expect_error(lambda: k.resource_id(case["collection"]), case["expectedError"])
    else:
        assert k.resource_id(case["collection"]) == case["expected"]


# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


def test_error_codes_are_listed(testcases):
    """Every code this implementation can raise appears in the shared list."""
    listed = set(testcases.get("errorCodes") or [])
    missing = _WIRE_CODES - listed
    assert not missing, f"codes missing from errorCodes: {sorted(missing)}"


def test_expected_errors_are_known_codes(testcases):
    """Invalid-parse fixtures only expect codes this implementation raises."""
    expected = {c["expectedError"] for c in cases("parse", "invalid")}
    unknown = expected - _WIRE_CODES
    assert not unknown, f"unknown error codes in fixtures: {sorted(unknown)}"

from __future__ import annotations

import logging
from datetime import date

import pytest

from core.rules import Severity
from wizard.services import audit as audit_module
from wizard.services.audit import DataQualityIssue, audit_record, summarize_issues


def test_clean_profile_has_no_issues(complete_profile: dict[str, object], today: date) -> None:
    assert audit_record(complete_profile, today=today) == []


def test_percentage_gpa_above_100_is_an_error(complete_profile: dict[str, object], today: date) -> None:
    record = {**complete_profile, "highestGpa": "120%"}
    issues = audit_record(record, today=today)
    assert len(issues) == 1
    issue = issues[0]
    assert issue.severity is Severity.ERROR
    assert issue.field == "highestGpa"
    assert issue.issue == "Percentage cannot exceed 100%"
    assert issue.to_dict()["severity"] == "error"
    assert issue.to_dict()["observed_value"] == "120%"


def test_suspicious_values_are_flagged(today: date) -> None:
    record = {
        "dateOfBirth": "2030-01-01",
        "passportNumber": "AB1",
        "address": "12345678901",
        "interestedCourse": "101",
        "budgetRange": "under-10000",
        "estimatedBudget": "over-100000",
    }
    issues = audit_record(record, today=today)
    assert [issue.field for issue in issues] == [
        "dateOfBirth",
        "passportNumber",
        "address",
        "interestedCourse",
        "estimatedBudget",
    ]
    assert summarize_issues(issues) == {"error": 1, "warning": 4}


def test_short_address_is_a_warning(today: date) -> None:
    issues = audit_record({"address": "Kathmandu"}, today=today)
    assert [(issue.field, issue.severity) for issue in issues] == [("address", Severity.WARNING)]


def test_non_mapping_records_yield_nothing() -> None:
    assert audit_record(None) == []
    assert summarize_issues([]) == {"error": 0, "warning": 0}


def test_failing_check_is_logged_and_skipped(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, today: date
) -> None:
    def _broken(record, reference):
        raise ValueError("bad data")

    def _always(record, reference):
        yield DataQualityIssue(Severity.WARNING, "city", "Odd city", record.get("city"), "Check it")

    monkeypatch.setattr(audit_module, "AUDIT_CHECKS", (_broken, _always))
    with caplog.at_level(logging.WARNING, logger="wizard.services.audit"):
        issues = audit_record({"city": "X"}, today=today)
    assert [issue.issue for issue in issues] == ["Odd city"]
    assert "bad data" in caplog.text

from pathlib import Path
import sys
from dataclasses import dataclass
from datetime import date

import streamlit as st

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@dataclass
class _SessionDict(dict[str, object]):
    """Lightweight replacement for ``st.session_state`` during tests."""

    def clear(self) -> None:  # type: ignore[override]
        super().clear()


@pytest.fixture(autouse=True)
def _stub_streamlit_session_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace Streamlit's runtime-bound session state with a plain dictionary."""

    session_state = _SessionDict()
    monkeypatch.setattr(st, "session_state", session_state, raising=False)
    yield


@pytest.fixture
def today() -> date:
    """Fixed reference date so year-relative rules are deterministic."""

    return date(2024, 6, 15)


@pytest.fixture
def complete_profile() -> dict[str, object]:
    """A student profile that passes every section of the wizard."""

    return {
        "firstName": "Asha",
        "lastName": "O'Neil",
        "dateOfBirth": "2000-03-04",
        "gender": "Female",
        "email": "asha@studyabroad.org",
        "nationality": "Nepali",
        "phoneNumber": "+9779812345678",
        "passportNumber": "PA123456",
        "address": "12 Lakeside Road, Pokhara",
        "highestQualification": "Bachelor's Degree",
        "highestInstitution": "Tribhuvan University",
        "highestGpa": "3.6",
        "graduationYear": 2022,
        "currentAcademicGap": 2,
        "interestedCourse": "Data Science",
        "fieldOfStudy": "Technology",
        "preferredIntake": "Fall 2025",
        "budgetRange": "25000-50000",
        "interestedServices": ["Visa support"],
        "fundingSource": "Self-funded",
        "estimatedBudget": "25000-50000",
        "preferredCountries": ["Australia", "Canada"],
        "currentEmploymentStatus": "Employed",
        "jobTitle": "Analyst",
        "organizationName": "Himal Data",
        "fieldOfWork": "Analytics",
        "englishProficiencyTests": [
            {"testType": "IELTS", "overallScore": 7.5, "testDate": "2024-01-10"},
        ],
    }

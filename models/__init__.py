"""Pydantic models for student profiles and scholarship listings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from core.schema_registry import EntityKind

from .scholarship import ScholarshipListing
from .student_profile import EnglishTestScore, StandardizedTestScore, StudentProfile

logger = logging.getLogger(__name__)

RECORD_MODELS: dict[str, type[StudentProfile] | type[ScholarshipListing]] = {
    EntityKind.STUDENT_PROFILE: StudentProfile,
    EntityKind.SCHOLARSHIP: ScholarshipListing,
}


def normalize_record(kind: str, data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return ``data`` with known fields coerced through the record model.

    Records that fail model validation are returned unchanged so stored
    values stay editable and visible to the data-quality audit.
    """

    raw = dict(data or {})
    model = RECORD_MODELS.get(str(kind))
    if model is None:
        return raw
    try:
        parsed = model.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Stored %s record does not match its model (%d error(s))", kind, exc.error_count())
        return raw
    return {**raw, **parsed.to_record()}


__all__ = [
    "EnglishTestScore",
    "RECORD_MODELS",
    "ScholarshipListing",
    "StandardizedTestScore",
    "StudentProfile",
    "normalize_record",
]

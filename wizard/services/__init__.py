"""Service layer for shared wizard logic."""

from .audit import DataQualityIssue, audit_record, summarize_issues
from .validation import SectionValidationResult, validate_record, validate_section

__all__ = [
    "DataQualityIssue",
    "SectionValidationResult",
    "audit_record",
    "summarize_issues",
    "validate_record",
    "validate_section",
]

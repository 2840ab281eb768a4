"""Engine module - checks data and documents against profiles.

Contains:
- Validation Engine: interprets a profile to check submitted data
- Document checks: reports badly shaped profile sections
"""

from form_profile.engine.validation_engine import (
    Results,
    ValidationEngine,
    ValidationResult,
    ValidationSeverity,
)

__all__ = [
    "Results",
    "ValidationEngine",
    "ValidationResult",
    "ValidationSeverity",
]

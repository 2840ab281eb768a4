"""
Form Profile - manage validation profiles and derive narrower sub-profiles.

A profile lists the required and optional fields of a form along with the
defaults, filters and constraints for each. This package trims a master
profile down to the fields a given context cares about, or extends it.
"""

__version__ = "0.1.0"

from form_profile.errors import ProfileError, DuplicateFieldError, ShapeMismatchError
from form_profile.profiles.base import ProfileDocument, as_sequence
from form_profile.profiles.projector import ProfileProjector
from form_profile.engine.validation_engine import ValidationEngine, Results

__all__ = [
    "ProfileError",
    "DuplicateFieldError",
    "ShapeMismatchError",
    "ProfileDocument",
    "as_sequence",
    "ProfileProjector",
    "ValidationEngine",
    "Results",
]

"""Profiles module - holding and reshaping profile documents.

A profile document declares, for a set of named fields:
- Which fields are required or optional
- Defaults, filters and constraints per field

The projector narrows or extends a document; it never interprets the rules.
"""

from form_profile.profiles.base import ProfileDocument, FieldOptions, as_sequence
from form_profile.profiles.projector import ProfileProjector
from form_profile.profiles.loader import ProfileLoader, load_profile

__all__ = [
    "ProfileDocument",
    "FieldOptions",
    "as_sequence",
    "ProfileProjector",
    "ProfileLoader",
    "load_profile",
]

"""Profile Projector - narrows, shrinks and extends a profile document."""

import logging
from collections.abc import Callable, Iterable, Mapping, MutableMapping
from typing import Any

from form_profile.engine.validation_engine import ValidationEngine
from form_profile.errors import DuplicateFieldError
from form_profile.profiles.base import (
    LIST_SECTIONS,
    MAPPING_SECTIONS,
    FieldOptions,
    read_list_section,
    read_mapping_section,
)

logger = logging.getLogger(__name__)

# add() option name -> mapping section it writes into
OPTION_SECTIONS: dict[str, str] = {
    "default": "default",
    "dependencies": "dependencies",
    "filters": "field_filters",
    "constraints": "constraint_methods",
}


def _field_set(fields: tuple[Any, ...]) -> set[str]:
    """Accept ``only("a", "b")`` as well as ``only({"a", "b"})``."""
    if len(fields) == 1 and not isinstance(fields[0], str) and isinstance(fields[0], Iterable):
        return set(fields[0])
    return set(fields)


def _mapping(document: MutableMapping[str, Any], section: str) -> dict[str, Any]:
    """Return a mapping section, creating it when absent."""
    if document.get(section) is None:
        document[section] = {}
    return document[section]


class ProfileProjector:
    """Holds one profile document and keeps its sections consistent.

    The document is kept by reference: changes made through :attr:`profile`
    are seen by later operations, and vice versa.

    Example::

        projector = ProfileProjector({"required": ["name", "email"], "optional": ["age"]})
        projector.only("name", "age").add("phone", filters=["trim", "digit"])
        results = projector.check({"name": "Ann", "age": "32"})
    """

    def __init__(
        self,
        document: MutableMapping[str, Any] | None = None,
        /,
        *,
        engine: Any = None,
        **sections: Any,
    ):
        if document is None:
            document = {}
        elif not isinstance(document, MutableMapping):
            raise TypeError(
                f"Profile document must be a mutable mapping, got {type(document).__name__}"
            )
        if sections:
            document.update(sections)
        self._profile = document
        self._engine = engine if engine is not None else ValidationEngine()

    @property
    def profile(self) -> MutableMapping[str, Any]:
        """The held document, by reference, for handing to a validation engine."""
        return self._profile

    @property
    def engine(self) -> Any:
        return self._engine

    def only(self, *fields: Any) -> "ProfileProjector":
        """Reduce the profile to the given fields."""
        lookup = _field_set(fields)
        logger.debug("Projecting profile onto %d field(s)", len(lookup))
        return self._update(lambda name: name in lookup)

    def remove(self, *fields: Any) -> "ProfileProjector":
        """Remove the given fields from the profile."""
        lookup = _field_set(fields)
        logger.debug("Removing %d field(s) from profile", len(lookup))
        return self._update(lambda name: name not in lookup)

    def _update(self, matcher: Callable[[Any], bool]) -> "ProfileProjector":
        """Keep only the fields for which ``matcher`` returns true.

        Only the recognized sections are touched. Cross references held in
        other sections (``dependencies``, ``msgs``) are left as they are.
        """
        profile = self._profile
        updated: dict[str, Any] = {}

        for section in LIST_SECTIONS:
            if section in profile:
                updated[section] = [
                    name for name in read_list_section(profile, section) if matcher(name)
                ]

        for section in MAPPING_SECTIONS:
            if section in profile:
                rules = read_mapping_section(profile, section)
                updated[section] = {name: rules[name] for name in rules if matcher(name)}

        # All sections are computed before any is written back.
        profile.update(updated)
        return self

    def add(self, field: str, **options: Any) -> "ProfileProjector":
        """Add a field to the profile.

        Args:
            field: Name of the field to add
            **options: ``required``, ``default``, ``dependencies``, ``filters``,
                ``constraints`` and ``msgs``

        Raises:
            DuplicateFieldError: If the field is already required or optional
        """
        opts = FieldOptions(**options)
        profile = self._profile

        sections = {section: read_list_section(profile, section) for section in LIST_SECTIONS}
        for section, names in sections.items():
            if field in names:
                raise DuplicateFieldError(field, section)

        for option, section in OPTION_SECTIONS.items():
            if opts.given(option):
                read_mapping_section(profile, section)
        if opts.msgs is not None:
            read_mapping_section(read_mapping_section(profile, "msgs"), "constraints")

        target = "required" if opts.required else "optional"
        profile[target] = sections[target] + [field]

        for option, section in OPTION_SECTIONS.items():
            if opts.given(option):
                _mapping(profile, section)[field] = getattr(opts, option)
        if opts.msgs is not None:
            constraint_msgs = _mapping(_mapping(profile, "msgs"), "constraints")
            for key, value in opts.msgs.items():
                constraint_msgs[key] = value

        logger.debug("Added %s field '%s'", target, field)
        return self

    def check(self, data: Mapping[str, Any]) -> Any:
        """Validate ``data`` against the held profile using the engine."""
        return self.engine.check(data, self._profile)

    def __repr__(self) -> str:
        return f"ProfileProjector({self._profile!r})"

"""Validation Engine - checks submitted data against a profile document.

The engine interprets the sections a profile declares:
- ``field_filters`` are applied to incoming values
- ``default`` fills in absent fields
- ``required`` and ``dependencies`` decide which fields are missing
- ``constraints`` and ``constraint_methods`` decide which fields are invalid

It also checks the shape of a profile document itself.
"""

import logging
import re
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import jsonschema

from form_profile.errors import ShapeMismatchError
from form_profile.profiles.base import (
    LIST_SECTIONS,
    MAPPING_SECTIONS,
    RECOGNIZED_SECTIONS,
    as_sequence,
    declared_fields,
    read_list_section,
    read_mapping_section,
)

logger = logging.getLogger(__name__)


def _keep(pattern: str) -> Callable[[str], str]:
    regex = re.compile(pattern)
    return lambda value: "".join(regex.findall(value))


def _first(pattern: str) -> Callable[[str], str]:
    regex = re.compile(pattern)

    def extract(value: str) -> str:
        match = regex.search(value)
        return match.group(0) if match else ""

    return extract


FILTERS: dict[str, Callable[[str], str]] = {
    "trim": str.strip,
    "ltrim": str.lstrip,
    "rtrim": str.rstrip,
    "squash": lambda value: " ".join(value.split()),
    "lc": str.lower,
    "uc": str.upper,
    "ucfirst": lambda value: value[:1].upper() + value[1:],
    "digit": _keep(r"\d"),
    "alpha": _keep(r"[^\W\d_]"),
    "alphanum": _keep(r"[^\W_]"),
    "integer": _first(r"[-+]?\d+"),
    "decimal": _first(r"[-+]?(?:\d+\.?\d*|\.\d+)"),
}


class ValidationSeverity(str, Enum):
    """Severity levels for validation issues."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: ValidationSeverity
    message: str
    path: str = ""
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "context": self.context,
        }


@dataclass
class ValidationResult:
    """Result of checking the shape of a profile document."""

    valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    def add_issue(
        self,
        severity: ValidationSeverity,
        message: str,
        path: str = "",
        **context: Any,
    ) -> None:
        self.issues.append(
            ValidationIssue(
                severity=severity,
                message=message,
                path=path,
                context=context,
            )
        )
        if severity == ValidationSeverity.ERROR:
            self.valid = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "issues": [i.to_dict() for i in self.issues],
        }


@dataclass
class Results:
    """Outcome of checking submitted data against a profile."""

    valid_fields: dict[str, Any] = field(default_factory=dict)
    missing_fields: list[str] = field(default_factory=list)
    invalid_fields: dict[str, list[str]] = field(default_factory=dict)
    unknown_fields: list[str] = field(default_factory=list)
    messages: dict[str, str] = field(default_factory=dict)

    def success(self) -> bool:
        return not (self.missing_fields or self.invalid_fields)

    def valid(self, name: str | None = None) -> Any:
        """Value of one valid field, or all valid values when no name is given."""
        if name is None:
            return dict(self.valid_fields)
        return self.valid_fields.get(name)

    def has_missing(self) -> bool:
        return bool(self.missing_fields)

    def has_invalid(self) -> bool:
        return bool(self.invalid_fields)

    def missing(self) -> list[str]:
        return list(self.missing_fields)

    def invalid(self, name: str | None = None) -> Any:
        """Failure reasons for one field, or the whole invalid mapping."""
        if name is None:
            return dict(self.invalid_fields)
        return self.invalid_fields.get(name)

    def unknown(self) -> list[str]:
        return list(self.unknown_fields)

    def msgs(self) -> dict[str, str]:
        return dict(self.messages)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success(),
            "valid": self.valid(),
            "missing": self.missing(),
            "invalid": self.invalid(),
            "unknown": self.unknown(),
            "msgs": self.msgs(),
        }


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return all(_is_blank(v) for v in value)
    return False


class ValidationEngine:
    """Engine for checking data against profile documents.

    Enforces:
    - Required fields and dependencies are present
    - Field values pass their constraints
    - Profile documents have well-shaped sections
    """

    def __init__(self, filters: Mapping[str, Callable[[str], str]] | None = None):
        self._filters = dict(FILTERS)
        if filters:
            self._filters.update(filters)

    def check(self, data: Mapping[str, Any], profile: Mapping[str, Any]) -> Results:
        """Check submitted data against a profile.

        Args:
            data: Mapping of field name to submitted value
            profile: Profile document

        Returns:
            Results describing valid, missing and invalid fields
        """
        values = self._apply_filters(dict(data), read_mapping_section(profile, "field_filters"))
        present = {name: value for name, value in values.items() if not _is_blank(value)}

        for name, value in read_mapping_section(profile, "default").items():
            if name not in present and not _is_blank(value):
                present[name] = value

        required = read_list_section(profile, "required")
        for name, deps in read_mapping_section(profile, "dependencies").items():
            if name in present:
                required.extend(self._dependency_fields(deps, present[name]))

        results = Results()
        for name in required:
            if name not in present and name not in results.missing_fields:
                results.missing_fields.append(name)

        rules = self._collect_rules(profile)
        for name, value in present.items():
            errors = [
                message
                for rule in rules.get(name, [])
                for message in self._run_rule(rule, value)
            ]
            if errors:
                results.invalid_fields[name] = errors
            else:
                results.valid_fields[name] = value

        known = set(declared_fields(profile))
        results.unknown_fields = [name for name in present if name not in known]
        results.messages = self._messages(profile, results)

        logger.debug(
            "Checked %d field(s): %d missing, %d invalid",
            len(values),
            len(results.missing_fields),
            len(results.invalid_fields),
        )
        return results

    def _apply_filters(
        self,
        values: dict[str, Any],
        field_filters: Mapping[str, Any],
    ) -> dict[str, Any]:
        for name, filters in field_filters.items():
            if name not in values:
                continue
            values[name] = self._filter_value(values[name], as_sequence(filters))
        return values

    def _filter_value(self, value: Any, filters: list[Any]) -> Any:
        if isinstance(value, list):
            return [self._filter_value(v, filters) for v in value]
        for f in filters:
            if callable(f):
                value = f(value)
            elif not isinstance(value, str):
                continue
            elif f in self._filters:
                value = self._filters[f](value)
            else:
                logger.debug("Ignoring unknown filter %r", f)
        return value

    def _dependency_fields(self, deps: Any, value: Any) -> list[str]:
        if not isinstance(deps, Mapping):
            return as_sequence(deps)
        fields: list[str] = []
        for v in as_sequence(value):
            if isinstance(v, Hashable):
                fields.extend(as_sequence(deps.get(v)))
        return fields

    def _collect_rules(self, profile: Mapping[str, Any]) -> dict[str, list[Any]]:
        rules: dict[str, list[Any]] = {}
        for section in ("constraints", "constraint_methods"):
            for name, rule in read_mapping_section(profile, section).items():
                rules.setdefault(name, []).extend(
                    [rule] if isinstance(rule, Mapping) else as_sequence(rule)
                )
        return rules

    def _run_rule(self, rule: Any, value: Any) -> list[str]:
        """Run one constraint, returning failure messages."""
        if isinstance(rule, Mapping):
            try:
                jsonschema.Draft202012Validator.check_schema(rule)
            except jsonschema.SchemaError as e:
                return [f"Invalid schema: {e.message}"]
            validator = jsonschema.Draft202012Validator(rule)
            return [e.message for e in validator.iter_errors(value)]
        if callable(rule):
            return [] if rule(value) else [getattr(rule, "__name__", "constraint")]
        if isinstance(rule, (str, re.Pattern)):
            if re.fullmatch(rule, str(value)):
                return []
            pattern = rule.pattern if isinstance(rule, re.Pattern) else rule
            return [f"does not match '{pattern}'"]
        logger.debug("Ignoring unsupported constraint %r", rule)
        return []

    def _messages(self, profile: Mapping[str, Any], results: Results) -> dict[str, str]:
        msgs = read_mapping_section(profile, "msgs")
        constraint_msgs = read_mapping_section(msgs, "constraints")
        messages = {name: msgs.get("missing", "Missing") for name in results.missing_fields}
        for name in results.invalid_fields:
            messages[name] = constraint_msgs.get(name, msgs.get("invalid", "Invalid"))
        return messages

    def validate_document(self, document: Mapping[str, Any]) -> ValidationResult:
        """Validate the shape of a profile document.

        Checks:
        - List sections hold sequences and mapping sections hold mappings
        - No field is both required and optional
        - No duplicate names within a list section
        - Rules only reference declared fields
        """
        result = ValidationResult(valid=True)

        if not isinstance(document, Mapping):
            result.add_issue(
                ValidationSeverity.ERROR,
                f"Profile must be a mapping, got {type(document).__name__}",
            )
            return result

        lists: dict[str, list[Any]] = {}
        for section in LIST_SECTIONS:
            try:
                lists[section] = read_list_section(document, section)
            except ShapeMismatchError as e:
                result.add_issue(ValidationSeverity.ERROR, str(e), path=section)
                continue

            seen: set[Any] = set()
            for i, name in enumerate(lists[section]):
                if not isinstance(name, str):
                    result.add_issue(
                        ValidationSeverity.ERROR,
                        f"Field name must be a string: {name!r}",
                        path=f"{section}[{i}]",
                    )
                    continue
                if name in seen:
                    result.add_issue(
                        ValidationSeverity.WARNING,
                        f"Duplicate field name: {name}",
                        path=f"{section}[{i}]",
                    )
                seen.add(name)

        both = [
            name
            for name in lists.get("required", [])
            if isinstance(name, str) and name in lists.get("optional", [])
        ]
        for name in both:
            result.add_issue(
                ValidationSeverity.WARNING,
                f"Field is both required and optional: {name}",
                path="optional",
            )

        declared = {
            name
            for names in lists.values()
            for name in names
            if isinstance(name, str)
        }
        for section in MAPPING_SECTIONS:
            try:
                rules = read_mapping_section(document, section)
            except ShapeMismatchError as e:
                result.add_issue(ValidationSeverity.ERROR, str(e), path=section)
                continue
            for name in rules:
                if name not in declared:
                    result.add_issue(
                        ValidationSeverity.WARNING,
                        f"Rule for undeclared field: {name}",
                        path=f"{section}.{name}",
                    )

        for section in document:
            if section not in RECOGNIZED_SECTIONS:
                result.add_issue(
                    ValidationSeverity.INFO,
                    f"Section is passed through unchanged: {section}",
                    path=str(section),
                )

        return result

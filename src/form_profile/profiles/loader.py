"""Profile Loader for reading and writing profile documents as YAML or JSON."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from form_profile.errors import ShapeMismatchError
from form_profile.profiles.base import LIST_SECTIONS, ProfileDocument, as_sequence
from form_profile.profiles.projector import ProfileProjector

logger = logging.getLogger(__name__)


class ProfileLoader:
    """Loads profile documents from YAML or JSON files."""

    def load_file(self, path: Path | str) -> dict[str, Any]:
        """Load a profile document from a file.

        Args:
            path: Path to the YAML or JSON file

        Returns:
            The profile document
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Profile file not found: {path}")

        logger.debug("Loading profile from %s", path)
        return self.load_from_string(path.read_text(encoding="utf-8"))

    def load_from_string(self, content: str) -> dict[str, Any]:
        """Load a profile document from a YAML (or JSON) string.

        Args:
            content: YAML content as string

        Returns:
            The profile document
        """
        data = yaml.safe_load(content)
        if data is None:
            return {}
        return self._parse_document(data)

    def _parse_document(self, data: Any) -> dict[str, Any]:
        """Check section shapes and normalize lone field names into lists.

        Sections keep the order they have in the file.
        """
        if not isinstance(data, Mapping):
            raise ShapeMismatchError("profile", "mapping", data)
        ProfileDocument.from_mapping(data)
        return {
            name: as_sequence(value) if name in LIST_SECTIONS and value is not None else value
            for name, value in data.items()
        }

    def save_file(self, document: Mapping[str, Any], path: Path | str) -> None:
        """Save a profile document; ``.json`` files are written as JSON.

        Args:
            document: The profile document to save
            path: Path for the output file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            if path.suffix == ".json":
                json.dump(dict(document), f, indent=2, default=str)
            else:
                f.write(self.dump(document))

    def dump(self, document: Mapping[str, Any]) -> str:
        """Render a profile document as YAML."""
        return yaml.safe_dump(dict(document), default_flow_style=False, sort_keys=False)


def load_profile(path: Path | str, **kwargs: Any) -> ProfileProjector:
    """Convenience function to load a profile file into a projector.

    Args:
        path: Path to the YAML or JSON file
        **kwargs: Passed through to ProfileProjector (e.g. ``engine``)

    Returns:
        ProfileProjector holding the loaded document
    """
    loader = ProfileLoader()
    return ProfileProjector(loader.load_file(path), **kwargs)

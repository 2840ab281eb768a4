"""Tests for the form-profile CLI.

Tests cover:
- Printing and projecting profile files
- Adding fields
- Document validation and data checks
- Error cases
"""

import tempfile
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from form_profile import __version__
from form_profile.cli.main import cli


MASTER_PROFILE = {
    "required": ["this", "that"],
    "optional": ["other", "thing"],
    "field_filters": {"this": ["trim", "digit"]},
}


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir():
    """Create temporary working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def profile_file(temp_dir):
    """Write the master profile to disk."""
    path = temp_dir / "master.yaml"
    path.write_text(yaml.safe_dump(MASTER_PROFILE, sort_keys=False))
    return path


class TestShow:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_show(self, runner, profile_file):
        result = runner.invoke(cli, ["show", str(profile_file)])

        assert result.exit_code == 0
        assert yaml.safe_load(result.output) == MASTER_PROFILE


class TestProjection:
    """Tests for the only and remove commands."""

    def test_only_to_stdout(self, runner, profile_file):
        result = runner.invoke(cli, ["only", str(profile_file), "this", "thing"])

        assert result.exit_code == 0
        assert yaml.safe_load(result.output) == {
            "required": ["this"],
            "optional": ["thing"],
            "field_filters": {"this": ["trim", "digit"]},
        }

    def test_remove_to_file(self, runner, profile_file, temp_dir):
        output = temp_dir / "out" / "reduced.yaml"
        result = runner.invoke(cli, ["remove", str(profile_file), "this", "-o", str(output)])

        assert result.exit_code == 0
        assert "Wrote profile" in result.output
        assert yaml.safe_load(output.read_text()) == {
            "required": ["that"],
            "optional": ["other", "thing"],
            "field_filters": {},
        }

    def test_fields_are_required(self, runner, profile_file):
        result = runner.invoke(cli, ["only", str(profile_file)])
        assert result.exit_code != 0

    def test_badly_shaped_profile(self, runner, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("required:\n  this: 1\n")

        result = runner.invoke(cli, ["only", str(path), "this"])

        assert result.exit_code == 1
        assert "Error" in result.output


class TestAdd:
    """Tests for the add command."""

    def test_add_with_options(self, runner, profile_file):
        result = runner.invoke(cli, [
            "add", str(profile_file), "phone",
            "--required",
            "--filter", "trim",
            "--filter", "digit",
            "--constraint", r"\d{10}",
            "--message", "Bad phone",
        ])

        assert result.exit_code == 0
        document = yaml.safe_load(result.output)
        assert document["required"] == ["this", "that", "phone"]
        assert document["field_filters"]["phone"] == ["trim", "digit"]
        assert document["constraint_methods"] == {"phone": r"\d{10}"}
        assert document["msgs"] == {"constraints": {"phone": "Bad phone"}}

    def test_add_optional_with_default(self, runner, profile_file):
        result = runner.invoke(cli, ["add", str(profile_file), "city", "-d", "Vancouver"])

        assert result.exit_code == 0
        document = yaml.safe_load(result.output)
        assert document["optional"] == ["other", "thing", "city"]
        assert document["default"] == {"city": "Vancouver"}

    def test_add_duplicate(self, runner, profile_file):
        result = runner.invoke(cli, ["add", str(profile_file), "other"])

        assert result.exit_code == 1
        assert "already declared" in result.output


class TestValidate:
    """Tests for the validate command."""

    def test_valid_profile(self, runner, profile_file):
        result = runner.invoke(cli, ["validate", str(profile_file)])

        assert result.exit_code == 0
        assert "VALID" in result.output

    def test_invalid_profile(self, runner, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("required:\n  this: 1\n")

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 1
        assert "INVALID" in result.output


class TestCheck:
    """Tests for the check command."""

    def test_check_passes(self, runner, temp_dir):
        profile = temp_dir / "profile.yaml"
        profile.write_text("required:\n  - this\n  - that\n")
        data = temp_dir / "data.yaml"
        data.write_text("this: here\nthat: there\nother: nowhere\n")

        result = runner.invoke(cli, ["check", str(profile), str(data)])

        assert result.exit_code == 0
        assert "All fields passed" in result.output

    def test_check_fails_on_missing(self, runner, profile_file, temp_dir):
        data = temp_dir / "data.json"
        data.write_text('{"this": "12"}')

        result = runner.invoke(cli, ["check", str(profile_file), str(data)])

        assert result.exit_code == 1
        assert "Check Failed" in result.output

    def test_check_with_only(self, runner, profile_file, temp_dir):
        data = temp_dir / "data.json"
        data.write_text('{"this": "12"}')

        result = runner.invoke(cli, ["check", str(profile_file), str(data), "--only", "this"])

        assert result.exit_code == 0

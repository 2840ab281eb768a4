"""Integration tests: deriving sub-profiles from one master profile."""

import copy
import tempfile
from pathlib import Path

import pytest

from form_profile import ProfileProjector
from form_profile.profiles.loader import ProfileLoader, load_profile


MASTER_YAML = """
required:
  - username
  - email
  - password
optional:
  - first_name
  - last_name
  - phone
default:
  phone: ""
field_filters:
  username: [trim, lc]
  email: trim
  phone: [trim, digit]
constraint_methods:
  email: '[^@\\s]+@[^@\\s]+'
  phone:
    type: string
    pattern: '^[0-9]{10}$'
dependencies:
  last_name: [first_name]
msgs:
  missing: Required
  constraints:
    email: Enter a valid email address
"""


@pytest.fixture
def master():
    return ProfileLoader().load_from_string(MASTER_YAML)


class TestSubProfiles:
    """Each form works on a slice of the master profile."""

    def test_login_form(self, master):
        login = ProfileProjector(copy.deepcopy(master)).only("username", "password")

        results = login.check({"username": "  Alice ", "password": "s3cret"})

        assert results.success()
        assert results.valid("username") == "alice"
        assert login.profile["constraint_methods"] == {}
        assert login.profile["dependencies"] == {"last_name": ["first_name"]}

    def test_profile_edit_form(self, master):
        edit = (
            ProfileProjector(copy.deepcopy(master))
            .remove("username", "password")
            .add("nickname", filters="trim")
        )

        assert edit.profile["required"] == ["email"]
        assert edit.profile["optional"] == ["first_name", "last_name", "phone", "nickname"]

        results = edit.check({"email": "bad", "last_name": "Smith", "phone": "604 555 0100"})

        assert results.missing() == ["first_name"]
        assert results.invalid() == {"email": ["does not match '[^@\\s]+@[^@\\s]+'"]}
        assert results.msgs()["email"] == "Enter a valid email address"
        assert results.valid("phone") == "6045550100"

    def test_derived_profile_survives_a_file_round_trip(self, master):
        derived = ProfileProjector(copy.deepcopy(master)).only("email", "phone")

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "contact.yaml"
            ProfileLoader().save_file(derived.profile, path)
            reloaded = load_profile(path)

        assert reloaded.profile == derived.profile
        assert reloaded.check({"email": "a@b.c"}).success()

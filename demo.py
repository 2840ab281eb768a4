#!/usr/bin/env python3
"""
Demo script showing basic usage of Form Profile.

Run this script after installing the package:
    pip install -e .
    python demo.py
"""

import copy

from form_profile import DuplicateFieldError, ProfileProjector
from form_profile.engine.validation_engine import ValidationEngine


MASTER_PROFILE = {
    "required": ["username", "email", "password"],
    "optional": ["first_name", "last_name", "phone"],
    "field_filters": {"username": ["trim", "lc"], "phone": ["trim", "digit"]},
    "constraint_methods": {
        "email": r"[^@\s]+@[^@\s]+",
        "phone": {"type": "string", "minLength": 10, "maxLength": 10},
    },
    "dependencies": {"last_name": ["first_name"]},
    "msgs": {"constraints": {"email": "Enter a valid email address"}},
}


def demo_only():
    """Demonstrate reducing a master profile to a login form."""
    print("=" * 60)
    print("1. REDUCING A PROFILE")
    print("=" * 60)

    login = ProfileProjector(copy.deepcopy(MASTER_PROFILE)).only("username", "password")

    print(f"Required: {login.profile['required']}")
    print(f"Optional: {login.profile['optional']}")
    print(f"Filters:  {login.profile['field_filters']}")
    print()

    return login


def demo_remove_and_add():
    """Demonstrate removing fields and adding new ones."""
    print("=" * 60)
    print("2. REMOVING AND ADDING FIELDS")
    print("=" * 60)

    account = (
        ProfileProjector(copy.deepcopy(MASTER_PROFILE))
        .remove("password")
        .add("nickname", filters="trim", msgs={"nickname": "Pick a shorter nickname"})
    )

    print(f"Required: {account.profile['required']}")
    print(f"Optional: {account.profile['optional']}")
    print(f"Messages: {account.profile['msgs']['constraints']}")

    try:
        account.add("email")
    except DuplicateFieldError as e:
        print(f"Refused: {e}")
    print()

    return account


def demo_check(login, account):
    """Demonstrate handing profiles to the validation engine."""
    print("=" * 60)
    print("3. CHECKING DATA")
    print("=" * 60)

    results = login.check({"username": "  Alice ", "password": "s3cret"})
    print(f"Login success: {results.success()}")
    print(f"  username: {results.valid('username')!r}")

    results = account.check({
        "username": "bob",
        "email": "not-an-email",
        "last_name": "Smith",
        "phone": "(604) 555-0100",
    })
    print(f"Account success: {results.success()}")
    print(f"  missing: {results.missing()}")
    print(f"  invalid: {list(results.invalid())}")
    print(f"  messages: {results.msgs()}")
    print()


def demo_document_validation():
    """Demonstrate checking the shape of a profile document."""
    print("=" * 60)
    print("4. VALIDATING A DOCUMENT")
    print("=" * 60)

    engine = ValidationEngine()
    result = engine.validate_document({
        "required": ["email", "email"],
        "optional": "phone",
        "default": {"fax": ""},
    })

    print(f"Valid: {result.valid}")
    for issue in result.issues:
        print(f"  [{issue.severity.value}] {issue.path}: {issue.message}")
    print()


def main():
    """Run all demos."""
    print("\n" + "=" * 60)
    print("FORM PROFILE DEMO")
    print("=" * 60 + "\n")

    login = demo_only()
    account = demo_remove_and_add()
    demo_check(login, account)
    demo_document_validation()

    print("=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()

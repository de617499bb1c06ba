import re

import pytest

from relay_app.core_app.tools.user_id import derive_user_id


def test_dots_and_at_become_underscores():
    assert derive_user_id("a.b@x.com") == "a_b_x_com"


def test_allowed_characters_are_kept():
    assert derive_user_id("Ann_Lee-42") == "Ann_Lee-42"


@pytest.mark.parametrize("email", ["ann+tag@mail.example.org", "é@x.io", "space here@x", ""])
def test_output_only_contains_allowed_characters(email):
    user_id = derive_user_id(email)

    assert re.fullmatch(r"[A-Za-z0-9_-]*", user_id)
    assert len(user_id) == len(email)


def test_derivation_is_deterministic():
    assert derive_user_id("someone@example.com") == derive_user_id("someone@example.com")

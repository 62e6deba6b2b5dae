"""Tests for cfcli.generator.naming."""

from __future__ import annotations

import re

import pytest

from cfcli.generator.naming import normalize_flag, normalize_name, unique_op_name

SLUG_RE = re.compile(r"^([a-z0-9]+(-[a-z0-9]+)*)?$")


# ---------------------------------------------------------------------------
# normalize_name
# ---------------------------------------------------------------------------


class TestNormalizeName:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("DNS Records for a Zone", "dns-records-for-a-zone"),
            ("zones_{zone_id}_settings", "zones-zone-id-settings"),
            ("Zone", "zone"),
            ("  leading and trailing  ", "leading-and-trailing"),
            ("already-a-slug", "already-a-slug"),
            ("Cloudflare IPs", "cloudflare-ips"),
            ("get_/zones/{zone_id}", "get-zones-zone-id"),
        ],
    )
    def test_examples(self, text: str, expected: str) -> None:
        assert normalize_name(text) == expected

    def test_empty_string(self) -> None:
        assert normalize_name("") == ""

    def test_only_symbols(self) -> None:
        assert normalize_name("***") == ""
        assert normalize_name("-- //") == ""

    def test_non_ascii_letters_are_separators(self) -> None:
        assert normalize_name("Zoné Réglages") == "zon-r-glages"

    @pytest.mark.parametrize(
        "text",
        ["", "A", "a--b", "--x--", "Über Cool!", "x_y.z", "1.2.3", "{id}", "ΑΒΓ", "tab\tsep"],
    )
    def test_output_is_always_a_slug(self, text: str) -> None:
        assert SLUG_RE.match(normalize_name(text))

    def test_idempotent(self) -> None:
        once = normalize_name("Zone Settings -- Edit (beta)")
        assert normalize_name(once) == once


# ---------------------------------------------------------------------------
# normalize_flag
# ---------------------------------------------------------------------------


class TestNormalizeFlag:
    def test_snake_case(self) -> None:
        assert normalize_flag("zone_id") == "zone-id"

    def test_camel_case_is_only_lowercased(self) -> None:
        assert normalize_flag("accountId") == "accountid"

    def test_leading_underscores(self) -> None:
        assert normalize_flag("__cursor") == "cursor"

    def test_never_contains_double_dash(self) -> None:
        for name in ["a__b", "a-_-b", "match[]", "page[size]", "x---y"]:
            assert "--" not in normalize_flag(name)

    def test_empty(self) -> None:
        assert normalize_flag("$") == ""


# ---------------------------------------------------------------------------
# unique_op_name
# ---------------------------------------------------------------------------


class TestUniqueOpName:
    def test_free_base_is_used(self) -> None:
        assert unique_op_name(set(), "get", "get") == "get"

    def test_method_suffix_on_first_collision(self) -> None:
        assert unique_op_name({"get"}, "get", "post") == "get-post"

    def test_same_method_collision(self) -> None:
        assert unique_op_name({"get"}, "get", "get") == "get-get"

    def test_numbered_suffix_after_method_suffix(self) -> None:
        assert unique_op_name({"get", "get-get"}, "get", "get") == "get-get-2"
        assert unique_op_name({"get", "get-get", "get-get-2"}, "get", "get") == "get-get-3"

    def test_method_is_lowercased(self) -> None:
        assert unique_op_name({"list"}, "list", "DELETE") == "list-delete"

    def test_sequence_of_insertions_stays_unique(self) -> None:
        taken: set[str] = set()
        for method in ["get", "get", "get", "post", "get"]:
            name = unique_op_name(taken, "zones", method)
            assert name not in taken
            taken.add(name)
        assert taken == {"zones", "zones-get", "zones-get-2", "zones-post", "zones-get-3"}

"""Tests for cfcli.client.request."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from cfcli.client.request import (
    build_request,
    load_body,
    param_key,
    parse_key_values,
    split_key_value,
    split_list,
)
from cfcli.exceptions import InvalidUsageError
from cfcli.models import Operation, ParamDef


def _op(*params: ParamDef, path: str = "/zones/{zone_id}/dns_records", method: str = "GET") -> Operation:
    return Operation(
        name="list",
        display_name="list",
        method=method,
        path=path,
        parameters=list(params),
    )


ZONE_ID = ParamDef(name="zone_id", flag="zone-id", location="path", required=True)
TYPE = ParamDef(name="type", flag="type", location="query")
TAG = ParamDef(name="tag", flag="tag", location="query", list=True, schema_type="string")


# ---------------------------------------------------------------------------
# Path parameters
# ---------------------------------------------------------------------------


class TestPathParams:
    def test_substitution(self) -> None:
        request = build_request(_op(ZONE_ID), {param_key(ZONE_ID): "abc123"})
        assert request.method == "GET"
        assert request.path == "/zones/abc123/dns_records"

    def test_value_is_percent_encoded(self) -> None:
        request = build_request(_op(ZONE_ID), {param_key(ZONE_ID): "a/b c?"})
        assert request.path == "/zones/a%2Fb%20c%3F/dns_records"

    def test_missing_value(self) -> None:
        with pytest.raises(InvalidUsageError, match="missing path param zone_id"):
            build_request(_op(ZONE_ID), {})

    def test_zone_default(self) -> None:
        request = build_request(_op(ZONE_ID), {}, zone_id="from-env")
        assert request.path == "/zones/from-env/dns_records"

    def test_flag_beats_default(self) -> None:
        request = build_request(_op(ZONE_ID), {param_key(ZONE_ID): "flag"}, zone_id="env")
        assert request.path == "/zones/flag/dns_records"

    @pytest.mark.parametrize("name", ["account_id", "account_identifier", "accountId"])
    def test_account_default(self, name: str) -> None:
        param = ParamDef(name=name, flag=name, location="path", required=True)
        op = _op(param, path="/accounts/{" + name + "}/tokens")
        request = build_request(op, {}, account_id="acc")
        assert request.path == "/accounts/acc/tokens"

    def test_account_default_does_not_fill_zone(self) -> None:
        with pytest.raises(InvalidUsageError):
            build_request(_op(ZONE_ID), {}, account_id="acc")

    def test_other_path_params_have_no_default(self) -> None:
        param = ParamDef(name="record_id", flag="record-id", location="path")
        with pytest.raises(InvalidUsageError, match="record_id"):
            build_request(_op(param, path="/r/{record_id}"), {}, zone_id="z", account_id="a")


# ---------------------------------------------------------------------------
# Query and header parameters
# ---------------------------------------------------------------------------


class TestQueryAndHeaderParams:
    def test_scalar_query(self) -> None:
        request = build_request(_op(TYPE), {param_key(TYPE): "A"})
        assert request.query == [("type", "A")]

    def test_unset_optional_is_omitted(self) -> None:
        request = build_request(_op(TYPE, TAG), {param_key(TYPE): None})
        assert request.query == []

    def test_list_repeated_and_comma_separated(self) -> None:
        request = build_request(_op(TAG), {param_key(TAG): ("a,b", "c", " d , ,e")})
        assert request.query == [("tag", "a"), ("tag", "b"), ("tag", "c"), ("tag", "d"), ("tag", "e")]

    def test_list_single_string(self) -> None:
        request = build_request(_op(TAG), {param_key(TAG): "x,y"})
        assert request.query == [("tag", "x"), ("tag", "y")]

    def test_scalar_keeps_commas(self) -> None:
        request = build_request(_op(TYPE), {param_key(TYPE): "A,AAAA"})
        assert request.query == [("type", "A,AAAA")]

    def test_required_query_missing(self) -> None:
        param = ParamDef(name="name", flag="name", location="query", required=True)
        with pytest.raises(InvalidUsageError, match="missing query param name"):
            build_request(_op(param), {})

    def test_header(self) -> None:
        param = ParamDef(name="X-Auth-Email", flag="x-auth-email", location="header")
        request = build_request(_op(param), {param_key(param): "me@example.com"})
        assert request.headers == [("X-Auth-Email", "me@example.com")]
        assert request.query == []

    def test_other_locations_are_ignored(self) -> None:
        param = ParamDef(name="session", flag="session", location="cookie", required=True)
        request = build_request(_op(param), {param_key(param): "s"})
        assert request.query == []
        assert request.headers == []

    def test_same_name_in_two_locations(self) -> None:
        path_id = ParamDef(name="id", flag="id", location="path")
        query_id = ParamDef(name="id", flag="id", location="query")
        request = build_request(
            _op(path_id, query_id, path="/x/{id}"),
            {param_key(path_id): "p", param_key(query_id): "q"},
        )
        assert request.path == "/x/p"
        assert request.query == [("id", "q")]

    def test_body_is_passed_through(self) -> None:
        request = build_request(_op(method="POST", path="/zones"), {}, body={"name": "x"})
        assert request.body == {"name": "x"}


# ---------------------------------------------------------------------------
# Splitting helpers
# ---------------------------------------------------------------------------


class TestSplitting:
    def test_split_list(self) -> None:
        assert split_list("a, b,,c") == ["a", "b", "c"]
        assert split_list("single") == ["single"]
        assert split_list(",") == []

    @pytest.mark.parametrize(
        ("item", "expected"),
        [
            ("per_page=50", ("per_page", "50")),
            ("X-Trace:abc", ("X-Trace", "abc")),
            ("url=https://x", ("url", "https://x")),
            ("a=b=c", ("a", "b=c")),
            ("empty=", ("empty", "")),
            ("novalue", None),
        ],
    )
    def test_split_key_value(self, item: str, expected: Any) -> None:
        assert split_key_value(item) == expected

    def test_parse_key_values_drops_invalid(self) -> None:
        assert parse_key_values(["a=1", "junk", "b:2"]) == [("a", "1"), ("b", "2")]
        assert parse_key_values(None) == []


# ---------------------------------------------------------------------------
# Body loading
# ---------------------------------------------------------------------------


class TestLoadBody:
    def test_none(self) -> None:
        assert load_body() is None

    def test_inline_json(self) -> None:
        assert load_body('{"type": "A", "ttl": 1}') == {"type": "A", "ttl": 1}

    def test_at_file(self, tmp_path: Path) -> None:
        path = tmp_path / "record.json"
        path.write_text(json.dumps({"name": "www"}), encoding="utf-8")
        assert load_body(f"@{path}") == {"name": "www"}

    def test_body_file(self, tmp_path: Path) -> None:
        path = tmp_path / "record.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_body(body_file=str(path)) == [1, 2]

    def test_mutually_exclusive(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidUsageError, match="mutually exclusive"):
            load_body("{}", str(tmp_path / "x.json"))

    def test_invalid_inline_json(self) -> None:
        with pytest.raises(InvalidUsageError, match="invalid JSON body"):
            load_body("{nope")

    def test_invalid_file_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("nope", encoding="utf-8")
        with pytest.raises(InvalidUsageError, match="invalid JSON body file"):
            load_body(body_file=str(path))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidUsageError, match="cannot read body file"):
            load_body(body_file=str(tmp_path / "absent.json"))

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.policy_gate.plan import PlanError, load_plan, parse_plan


def _rc(address: str, actions: list[str], after: object) -> dict:
    return {
        "address": address,
        "type": address.split(".")[0],
        "change": {"actions": actions, "after": after},
    }


def test_parse_plan_keeps_order_and_fields() -> None:
    doc = {
        "resource_changes": [
            _rc("aws_ecr_repository.svc[\"orders\"]", ["create"], {"tags_all": {"Project": "p"}}),
            _rc("aws_s3_bucket.logs", ["update"], {"tags": {"Owner": "o"}}),
        ]
    }
    plan = parse_plan(doc)

    assert [r.address for r in plan] == [
        'aws_ecr_repository.svc["orders"]',
        "aws_s3_bucket.logs",
    ]
    assert plan[0].type == "aws_ecr_repository"
    assert plan[0].action == "create"
    assert plan[0].tags == {"Project": "p"}
    assert plan[1].action == "update"
    assert plan[1].tags == {"Owner": "o"}


def test_tags_all_preferred_over_tags() -> None:
    plan = parse_plan(
        {
            "resource_changes": [
                _rc(
                    "aws_ecr_repository.a",
                    ["create"],
                    {"tags": {"Name": "a"}, "tags_all": {"Name": "a", "Owner": "x"}},
                )
            ]
        }
    )
    assert plan[0].tags == {"Name": "a", "Owner": "x"}


def test_tags_fall_back_when_tags_all_is_null() -> None:
    plan = parse_plan(
        {"resource_changes": [_rc("x.a", ["create"], {"tags_all": None, "tags": {"Owner": "x"}})]}
    )
    assert plan[0].tags == {"Owner": "x"}


def test_null_tag_values_count_as_absent() -> None:
    plan = parse_plan(
        {"resource_changes": [_rc("x.a", ["create"], {"tags_all": {"Owner": None, "Project": "p"}})]}
    )
    assert plan[0].tags == {"Project": "p"}


@pytest.mark.parametrize(
    ("actions", "expected"),
    [
        (["create"], "create"),
        (["delete", "create"], "create"),
        (["create", "delete"], "create"),
        (["delete"], "delete"),
        (["update"], "update"),
        (["read"], "read"),
        (["no-op"], "no-op"),
        ([], "no-op"),
    ],
)
def test_action_derivation(actions: list[str], expected: str) -> None:
    plan = parse_plan({"resource_changes": [_rc("x.a", actions, {})]})
    assert plan[0].action == expected
    assert plan[0].actions == tuple(actions)


def test_tolerates_missing_or_odd_change_blocks() -> None:
    plan = parse_plan(
        {
            "resource_changes": [
                {"address": "x.a", "type": "x"},
                {"address": "x.b", "type": "x", "change": {"actions": ["create"], "after": None}},
                {"address": "x.c", "type": "x", "change": {"actions": ["create"], "after": "unknown"}},
            ]
        }
    )
    assert [r.action for r in plan] == ["no-op", "create", "create"]
    assert all(r.tags == {} for r in plan)


def test_missing_resource_changes_is_empty_plan() -> None:
    assert parse_plan({"format_version": "1.2"}) == []


@pytest.mark.parametrize("doc", [[], "plan", {"resource_changes": {"a": 1}}])
def test_malformed_documents_raise(doc: object) -> None:
    with pytest.raises(PlanError):
        parse_plan(doc)


def test_load_plan_reads_json(tmp_path: Path) -> None:
    p = tmp_path / "tfplan.json"
    p.write_text(json.dumps({"resource_changes": [_rc("x.a", ["create"], {})]}))
    assert [r.address for r in load_plan(p)] == ["x.a"]


def test_load_plan_rejects_invalid_json(tmp_path: Path) -> None:
    p = tmp_path / "tfplan.json"
    p.write_text("{not json")
    with pytest.raises(PlanError):
        load_plan(p)


def test_load_plan_rejects_non_utf8(tmp_path: Path) -> None:
    p = tmp_path / "tfplan.json"
    p.write_bytes(b'{"resource_changes": ["\xff"]}')
    with pytest.raises(PlanError):
        load_plan(p)

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

logger = logging.getLogger(__name__)

PlanAction = Literal["create", "update", "delete", "read", "no-op"]


class PlanError(ValueError):
    pass


@dataclass(frozen=True)
class PlanResource:
    address: str
    type: str
    action: PlanAction
    actions: tuple[str, ...] = ()
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def is_create(self) -> bool:
        return self.action == "create"


def _ensure_obj(v: Any) -> dict[str, Any]:
    return v if isinstance(v, dict) else {}


def _action_for(actions: tuple[str, ...]) -> PlanAction:
    # Replacements report ["delete", "create"] or ["create", "delete"]; both create.
    if "create" in actions:
        return "create"
    if "delete" in actions:
        return "delete"
    if "update" in actions:
        return "update"
    if "read" in actions:
        return "read"
    return "no-op"


def _effective_tags(after: dict[str, Any]) -> dict[str, str]:
    """Prefer tags_all (includes provider default_tags) over tags."""
    for key in ("tags_all", "tags"):
        raw = after.get(key)
        if isinstance(raw, dict):
            # A null value means the engine knows the key but has no value.
            return {str(k): str(v) for k, v in raw.items() if v is not None}
        if raw is not None:
            logger.debug("ignoring non-mapping %s: %r", key, raw)
    return {}


def parse_resource_change(rc: Any) -> PlanResource:
    entry = _ensure_obj(rc)
    change = _ensure_obj(entry.get("change"))
    raw_actions = change.get("actions")
    actions = (
        tuple(str(a) for a in raw_actions) if isinstance(raw_actions, list) else ()
    )
    return PlanResource(
        address=str(entry.get("address") or ""),
        type=str(entry.get("type") or ""),
        action=_action_for(actions),
        actions=actions,
        tags=_effective_tags(_ensure_obj(change.get("after"))),
    )


def parse_plan(doc: Any) -> list[PlanResource]:
    """Parse a ``terraform show -json`` document into plan order."""
    if not isinstance(doc, dict):
        raise PlanError("plan document must be a JSON object")
    changes = doc.get("resource_changes")
    if changes is None:
        return []
    if not isinstance(changes, list):
        raise PlanError("resource_changes must be a list")
    return [parse_resource_change(rc) for rc in changes]


def load_plan(path: str | Path) -> list[PlanResource]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise PlanError(f"plan is not UTF-8 text: {exc}") from exc
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PlanError(f"invalid plan JSON: {exc}") from exc
    return parse_plan(doc)

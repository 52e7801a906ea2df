from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from src.policy_gate.plan import PlanResource

# Fixed organizational policy; not read from the environment.
MANDATORY_TAGS: tuple[str, ...] = ("Project", "Environment", "Owner", "CostCenter")


@dataclass(frozen=True)
class TagViolation:
    address: str
    type: str
    missing_keys: tuple[str, ...]


def missing_tags(
    resource: PlanResource, mandatory_tags: Sequence[str] = MANDATORY_TAGS
) -> tuple[str, ...]:
    return tuple(k for k in mandatory_tags if k not in resource.tags)


def audit(
    plan: Iterable[PlanResource],
    mandatory_tags: Sequence[str] = MANDATORY_TAGS,
) -> list[TagViolation]:
    """Report every created resource lacking a mandatory tag, in plan order.

    Only resources whose action is ``create`` are checked. Tags are taken as
    reported by the plan (``tags_all`` already merges provider default tags).
    """
    out: list[TagViolation] = []
    for r in plan:
        if not r.is_create:
            continue
        missing = missing_tags(r, mandatory_tags)
        if missing:
            out.append(TagViolation(address=r.address, type=r.type, missing_keys=missing))
    return out


def format_tag_violation(v: TagViolation) -> str:
    return f"{v.address} ({v.type}) missing: {', '.join(v.missing_keys)}"

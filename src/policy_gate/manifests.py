from __future__ import annotations

from typing import Any

import yaml

from src.policy_gate.dockerfile import ConventionViolation

WORKLOAD_KINDS = {"Deployment", "StatefulSet", "DaemonSet"}
REQUIRED_PROBES = ("livenessProbe", "readinessProbe")


def _obj(v: Any) -> dict[str, Any]:
    return v if isinstance(v, dict) else {}


def _containers(doc: dict[str, Any]) -> list[dict[str, Any]]:
    pod = _obj(_obj(_obj(doc.get("spec")).get("template")).get("spec"))
    raw = pod.get("containers")
    return [c for c in raw if isinstance(c, dict)] if isinstance(raw, list) else []


def _name(doc: dict[str, Any]) -> str:
    meta = doc.get("metadata")
    if isinstance(meta, dict) and meta.get("name"):
        return str(meta["name"])
    return "<unnamed>"


def check_rendered_probes(text: str) -> list[ConventionViolation]:
    """Require liveness and readiness probes on every workload container.

    ``text`` is multi-document YAML as produced by ``helm template``.
    Raises yaml.YAMLError when the input does not parse.
    """
    out: list[ConventionViolation] = []
    workloads = 0
    for doc in yaml.safe_load_all(text or ""):
        kind = doc.get("kind") if isinstance(doc, dict) else None
        if not isinstance(kind, str) or kind not in WORKLOAD_KINDS:
            continue
        workloads += 1
        ref = f"{doc['kind']}/{_name(doc)}"
        containers = _containers(doc)
        if not containers:
            out.append(
                ConventionViolation(rule="containers-missing", message=f"{ref} has no containers")
            )
        for c in containers:
            cname = str(c.get("name") or "<unnamed>")
            for probe in REQUIRED_PROBES:
                if not c.get(probe):
                    out.append(
                        ConventionViolation(
                            rule=f"{probe}-missing",
                            message=f"{ref} container {cname} missing {probe}",
                        )
                    )
    if workloads == 0:
        out.append(
            ConventionViolation(
                rule="workload-missing", message="no Deployment, StatefulSet or DaemonSet rendered"
            )
        )
    return out

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import yaml

from src.platform_scaffold import config
from src.policy_gate.audit import MANDATORY_TAGS, audit, format_tag_violation
from src.policy_gate.dockerfile import check_dockerfile
from src.policy_gate.manifests import check_rendered_probes
from src.policy_gate.plan import PlanError, load_plan

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_BAD_INPUT = 2


def _report(header: str, lines: list[str], ok_message: str) -> int:
    # GitHub Actions picks up ::error:: lines as annotations.
    if lines:
        print(f"::error::{header}")
        for ln in lines:
            print(ln)
        return EXIT_VIOLATIONS
    print(f"OK: {ok_message}")
    return EXIT_OK


def cmd_audit_plan(args: argparse.Namespace) -> int:
    try:
        plan = load_plan(args.plan)
    except (OSError, PlanError) as exc:
        print(f"::error::cannot read plan {args.plan}: {exc}")
        return EXIT_BAD_INPUT
    violations = audit(plan, MANDATORY_TAGS)
    logger.info("audited %d resource change(s)", len(plan))
    return _report(
        "Missing required tags:",
        [format_tag_violation(v) for v in violations],
        "required tags present",
    )


def cmd_check_dockerfile(args: argparse.Namespace) -> int:
    try:
        text = Path(args.path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"::error::cannot read {args.path}: {exc}")
        return EXIT_BAD_INPUT
    violations = check_dockerfile(text)
    return _report(
        f"{args.path} violates Dockerfile conventions:",
        [f"{v.message} (line {v.line})" if v.line else v.message for v in violations],
        "Dockerfile best practices enforced",
    )


def cmd_check_probes(args: argparse.Namespace) -> int:
    try:
        text = Path(args.path).read_text(encoding="utf-8")
        violations = check_rendered_probes(text)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        print(f"::error::cannot read {args.path}: {exc}")
        return EXIT_BAD_INPUT
    return _report(
        "Probes missing in rendered manifests:",
        [v.message for v in violations],
        "Probes present in Helm output",
    )


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="policy-gate",
        description="Static gates for the microservice dry-run pipeline.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    a = sub.add_parser("audit-plan", help="require mandatory tags on created resources")
    a.add_argument("plan", help="output of `terraform show -json`")
    a.set_defaults(func=cmd_audit_plan)

    d = sub.add_parser("check-dockerfile", help="check USER and HEALTHCHECK directives")
    d.add_argument("path")
    d.set_defaults(func=cmd_check_dockerfile)

    r = sub.add_parser("check-probes", help="require probes in `helm template` output")
    r.add_argument("path")
    r.set_defaults(func=cmd_check_probes)
    return p


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    logging.basicConfig(
        level=config.log_level(), format="%(levelname)s %(name)s: %(message)s"
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())

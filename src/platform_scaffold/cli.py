from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from src.platform_scaffold import config
from src.platform_scaffold.context import build_scaffold_context
from src.platform_scaffold.manifest import build_manifest
from src.platform_scaffold.writer import (
    OverwritePolicy,
    WriteOutcome,
    WriteResult,
    ensure_gitignore_block,
    write_targets,
)

NEXT_STEPS = (
    "Next:\n"
    "  1) git add -A && git commit -m 'Microservices dry-run scaffolding'\n"
    "  2) git push origin main  # triggers the workflow\n"
    "  3) (optional local test)\n"
    "     terraform -chdir=terraform init -backend=false\n"
    "     terraform -chdir=terraform fmt -recursive && terraform -chdir=terraform validate\n"
    "     terraform -chdir=terraform plan -refresh=false -var-file=../tfvars/minimal.tfvars\n"
)


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="dryrun-scaffold",
        description="Write the microservice dry-run scaffold (Terraform, Helm, Docker, CI).",
    )
    p.add_argument(
        "--force",
        action="store_true",
        help="overwrite files that already exist",
    )
    p.add_argument(
        "--root",
        default=".",
        help="directory to scaffold into (default: current directory)",
    )
    return p


def run(root: Path, policy: OverwritePolicy) -> list[WriteResult]:
    ctx = build_scaffold_context()
    results = write_targets(root, build_manifest(ctx), policy)
    gitignore = ensure_gitignore_block(root, policy)
    # No SKIP line for a preserved .gitignore.
    if gitignore.outcome is not WriteOutcome.SKIPPED:
        results.append(gitignore)
    return results


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    logging.basicConfig(
        level=config.log_level(), format="%(levelname)s %(name)s: %(message)s"
    )

    policy = OverwritePolicy.from_flag(args.force)
    try:
        results = run(Path(args.root), policy)
    except ValueError as exc:
        print(f"error: invalid scaffold settings: {exc}", file=sys.stderr)
        return 2
    for r in results:
        print(r.describe())

    failed = [r for r in results if not r.ok]
    if failed:
        print(f"\n{len(failed)} target(s) failed.", file=sys.stderr)
        return 1

    print()
    print("Setup complete.")
    print(NEXT_STEPS, end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import re
from dataclasses import dataclass

from src.platform_scaffold import config

_SAFE_NAME_RE = re.compile(r"[^a-z0-9-]+")


@dataclass(frozen=True)
class ScaffoldContext:
    project: str
    environment: str
    aws_region: str
    name_prefix: str
    ecr_repos: tuple[str, ...]
    owner: str
    cost_center: str
    chart_name: str
    terraform_version: str


def _normalize_name(s: str) -> str:
    # ECR repository names and chart names: lowercase, dash separated.
    s = (s or "").strip().lower()
    s = _SAFE_NAME_RE.sub("-", s)
    return re.sub(r"-+", "-", s).strip("-")


def build_scaffold_context(
    *,
    project: str | None = None,
    environment: str | None = None,
    aws_region: str | None = None,
    name_prefix: str | None = None,
    ecr_repos: list[str] | tuple[str, ...] | None = None,
    owner: str | None = None,
    cost_center: str | None = None,
    chart_name: str | None = None,
    terraform_version: str | None = None,
) -> ScaffoldContext:
    """Build the rendering context, falling back to DRYRUN_* settings."""
    repos: list[str] = []
    for r in ecr_repos if ecr_repos is not None else config.ecr_repos():
        n = _normalize_name(str(r))
        if n and n not in repos:
            repos.append(n)
    if not repos:
        raise ValueError("at least one ECR repository name is required")

    chart = _normalize_name(chart_name or config.chart_name()) or "microservice"

    return ScaffoldContext(
        project=(project or "").strip() or config.project_name(),
        environment=(environment or "").strip() or config.environment_name(),
        aws_region=(aws_region or "").strip() or config.aws_region(),
        name_prefix=_normalize_name(name_prefix or config.name_prefix()) or "ms",
        ecr_repos=tuple(repos),
        owner=(owner or "").strip() or config.tag_owner(),
        cost_center=(cost_center or "").strip() or config.tag_cost_center(),
        chart_name=chart,
        terraform_version=(terraform_version or "").strip()
        or config.terraform_version(),
    )

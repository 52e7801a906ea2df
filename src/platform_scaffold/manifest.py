from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from src.platform_scaffold import config
from src.platform_scaffold.context import ScaffoldContext
from src.platform_scaffold.render_app import (
    render_dockerfile,
    render_package_json,
    render_server_js,
)
from src.platform_scaffold.render_ci import render_workflow_yml
from src.platform_scaffold.render_helm import (
    render_chart_yaml,
    render_deployment_yaml,
    render_helpers_tpl,
    render_service_yaml,
    render_values_yaml,
)
from src.platform_scaffold.render_infra import (
    render_main_tf,
    render_minimal_tfvars,
    render_providers_tf,
    render_variables_tf,
    render_versions_tf,
)


@dataclass(frozen=True)
class ScaffoldTarget:
    path: str  # relative to the scaffold root, POSIX separators
    content: bytes


Renderer = Callable[[ScaffoldContext], str]


def _render_workflow(ctx: ScaffoldContext) -> str:
    return render_workflow_yml(ctx, gate_package=config.gate_package_spec())


# Order only affects reporting; targets are disjoint paths.
MANIFEST: tuple[tuple[str, Renderer], ...] = (
    ("terraform/versions.tf", render_versions_tf),
    ("terraform/providers.tf", render_providers_tf),
    ("terraform/variables.tf", render_variables_tf),
    ("terraform/main.tf", render_main_tf),
    ("tfvars/minimal.tfvars", render_minimal_tfvars),
    ("app/Dockerfile", render_dockerfile),
    ("app/package.json", render_package_json),
    ("app/src/server.js", render_server_js),
    ("helm/app/Chart.yaml", render_chart_yaml),
    ("helm/app/values.yaml", render_values_yaml),
    ("helm/app/templates/deployment.yaml", render_deployment_yaml),
    ("helm/app/templates/service.yaml", render_service_yaml),
    ("helm/app/templates/_helpers.tpl", render_helpers_tpl),
    (".github/workflows/microservices-dryrun.yml", _render_workflow),
)


def manifest_paths() -> list[str]:
    return [p for p, _ in MANIFEST]


def build_manifest(ctx: ScaffoldContext) -> list[ScaffoldTarget]:
    return [
        ScaffoldTarget(path=path, content=render(ctx).encode("utf-8"))
        for path, render in MANIFEST
    ]

from __future__ import annotations

import os


def _env_str(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip() or default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return list(default)
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    return parts or list(default)


def project_name() -> str:
    return _env_str("DRYRUN_PROJECT", "microservices-standard")


def environment_name() -> str:
    return _env_str("DRYRUN_ENVIRONMENT", "dryrun")


def aws_region() -> str:
    # No API calls are made in dry runs; the region only ends up in tfvars.
    return _env_str("DRYRUN_AWS_REGION", "us-east-1")


def name_prefix() -> str:
    return _env_str("DRYRUN_NAME_PREFIX", "ms")


def ecr_repos() -> list[str]:
    return _env_list("DRYRUN_ECR_REPOS", ["orders", "billing"])


def tag_owner() -> str:
    return _env_str("DRYRUN_OWNER", "dry-run-demo")


def tag_cost_center() -> str:
    return _env_str("DRYRUN_COST_CENTER", "simulation-only")


def chart_name() -> str:
    return _env_str("DRYRUN_CHART_NAME", "microservice")


def terraform_version() -> str:
    return _env_str("DRYRUN_TERRAFORM_VERSION", "1.6.6")


def log_level() -> str:
    v = _env_str("DRYRUN_LOG_LEVEL", "WARNING").upper()
    return v if v in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL") else "WARNING"


def gate_package_spec() -> str:
    # pip requirement the workflow installs to get the policy-gate command.
    return _env_str("DRYRUN_GATE_PACKAGE", ".")

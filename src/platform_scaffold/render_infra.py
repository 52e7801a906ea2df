from __future__ import annotations

import json

from src.platform_scaffold.context import ScaffoldContext


def _hcl_string(s: str) -> str:
    # JSON string escaping is valid HCL; template markers need doubling to stay literal.
    return json.dumps(s).replace("${", "$${").replace("%{", "%%{")


def _hcl_list(items: tuple[str, ...]) -> str:
    return json.dumps(list(items), separators=(",", ":"))


def render_versions_tf(_ctx: ScaffoldContext) -> str:
    return (
        "terraform {\n"
        '  required_version = ">= 1.4.0"\n'
        "  required_providers {\n"
        "    aws = {\n"
        '      source  = "hashicorp/aws"\n'
        '      version = "~> 5.50"\n'
        "    }\n"
        "  }\n"
        "}\n"
    )


def render_providers_tf(ctx: ScaffoldContext) -> str:
    # default_tags feed tags_all on every resource, which is what the tag gate reads.
    return (
        'provider "aws" {\n'
        "  region                      = var.aws_region\n"
        "  skip_credentials_validation = true\n"
        "  skip_requesting_account_id  = true\n"
        "  skip_metadata_api_check     = true\n"
        "\n"
        "  default_tags {\n"
        "    tags = {\n"
        "      Project     = var.project\n"
        "      Environment = var.environment\n"
        f"      Owner       = {_hcl_string(ctx.owner)}\n"
        f"      CostCenter  = {_hcl_string(ctx.cost_center)}\n"
        "    }\n"
        "  }\n"
        "}\n"
    )


def render_variables_tf(ctx: ScaffoldContext) -> str:
    return (
        'variable "project" {\n'
        "  type        = string\n"
        f"  default     = {_hcl_string(ctx.project)}\n"
        '  description = "Project tag"\n'
        "}\n"
        "\n"
        'variable "environment" {\n'
        "  type        = string\n"
        f"  default     = {_hcl_string(ctx.environment)}\n"
        '  description = "Environment"\n'
        "}\n"
        "\n"
        'variable "aws_region" {\n'
        "  type        = string\n"
        f"  default     = {_hcl_string(ctx.aws_region)}\n"
        '  description = "Region (no API calls in dry run)"\n'
        "}\n"
        "\n"
        'variable "name_prefix" {\n'
        "  type        = string\n"
        f"  default     = {_hcl_string(ctx.name_prefix)}\n"
        '  description = "Resource name prefix"\n'
        "}\n"
        "\n"
        'variable "ecr_repos" {\n'
        "  type        = list(string)\n"
        f"  default     = {_hcl_list(ctx.ecr_repos)}\n"
        '  description = "Service repositories"\n'
        "}\n"
        "\n"
        'variable "enable_eks" {\n'
        "  type        = bool\n"
        "  default     = false\n"
        '  description = "EKS disabled for dry run"\n'
        "}\n"
    )


def render_main_tf(_ctx: ScaffoldContext) -> str:
    # Everything here is plan-only; force_delete keeps teardown of demo repos simple.
    return (
        "############################################\n"
        "# Standardized ECR registries (plan-only)\n"
        "############################################\n"
        "locals {\n"
        '  repo_prefix = "${var.name_prefix}-${var.environment}"\n'
        "}\n"
        "\n"
        'resource "aws_ecr_repository" "svc" {\n'
        "  for_each                 = toset(var.ecr_repos)\n"
        '  name                     = "${local.repo_prefix}-${each.key}"\n'
        '  image_tag_mutability     = "MUTABLE"\n'
        "  image_scanning_configuration { scan_on_push = true }\n"
        "  force_delete             = true\n"
        '  tags = { Name = "${local.repo_prefix}-${each.key}" }\n'
        "}\n"
        "\n"
        'resource "aws_ecr_lifecycle_policy" "svc" {\n'
        "  for_each   = aws_ecr_repository.svc\n"
        "  repository = each.value.name\n"
        "  policy     = jsonencode({\n"
        "    rules = [\n"
        "      {\n"
        "        rulePriority = 1,\n"
        '        description  = "Keep last 10 images"\n'
        "        selection = {\n"
        '          tagStatus     = "any"\n'
        '          countType     = "imageCountMoreThan"\n'
        "          countNumber   = 10\n"
        "        }\n"
        '        action = { type = "expire" }\n'
        "      }\n"
        "    ]\n"
        "  })\n"
        "}\n"
        "\n"
        'output "microservices_summary" {\n'
        "  value = {\n"
        "    ecr_repos = [for r in aws_ecr_repository.svc : r.name]\n"
        "  }\n"
        "}\n"
    )


def render_minimal_tfvars(ctx: ScaffoldContext) -> str:
    return (
        f"project     = {_hcl_string(ctx.project)}\n"
        f"environment = {_hcl_string(ctx.environment)}\n"
        f"aws_region  = {_hcl_string(ctx.aws_region)}\n"
        f"name_prefix = {_hcl_string(ctx.name_prefix)}\n"
        f"ecr_repos   = {_hcl_list(ctx.ecr_repos)}\n"
        "enable_eks  = false\n"
    )

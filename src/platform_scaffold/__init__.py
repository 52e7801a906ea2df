"""Dry-run scaffolding for a standardized microservice.

Writes Terraform (ECR registries), a Helm chart, a container image definition
and a CI workflow into a repository. Non-destructive by default: existing files
are kept unless the caller passes ``OverwritePolicy.FORCE``.
"""

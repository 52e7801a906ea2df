"""Static gates for the dry-run pipeline: plan tag audit, Dockerfile and
rendered-manifest conventions. Violations are returned, never raised."""

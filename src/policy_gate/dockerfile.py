from __future__ import annotations

import re
from dataclasses import dataclass

_USER_RE = re.compile(r"^USER[ \t]+(\S+)", re.IGNORECASE | re.MULTILINE)
_HEALTHCHECK_RE = re.compile(r"^HEALTHCHECK[ \t]+(\S+)", re.IGNORECASE | re.MULTILINE)

_ROOT_USERS = {"root", "0"}


@dataclass(frozen=True)
class ConventionViolation:
    rule: str
    message: str
    line: int | None = None


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _is_root(user_spec: str) -> bool:
    # USER accepts "name", "uid", "name:group" or "uid:gid".
    user = user_spec.split(":", 1)[0].strip().lower()
    return user in _ROOT_USERS


def check_dockerfile(text: str) -> list[ConventionViolation]:
    """Check Dockerfile conventions; every failed check is reported.

    - a USER directive must be present
    - no USER directive may switch to root
    - a HEALTHCHECK directive must be present (``HEALTHCHECK NONE`` does not count)
    """
    src = text or ""
    out: list[ConventionViolation] = []

    users = list(_USER_RE.finditer(src))
    if not users:
        out.append(
            ConventionViolation(rule="user-missing", message="Dockerfile missing USER")
        )
    for m in users:
        if _is_root(m.group(1)):
            out.append(
                ConventionViolation(
                    rule="user-root",
                    message="Dockerfile runs as root",
                    line=_line_of(src, m.start()),
                )
            )

    checks = [m for m in _HEALTHCHECK_RE.finditer(src) if m.group(1).upper() != "NONE"]
    if not checks:
        out.append(
            ConventionViolation(
                rule="healthcheck-missing", message="Dockerfile missing HEALTHCHECK"
            )
        )
    return out

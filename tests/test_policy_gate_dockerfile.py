from __future__ import annotations

from src.policy_gate.dockerfile import check_dockerfile

GOOD = """\
FROM node:20-alpine
RUN adduser -S app
USER app
HEALTHCHECK --interval=30s CMD wget -qO- http://127.0.0.1:8080/healthz || exit 1
CMD ["node", "src/server.js"]
"""


def _rules(text: str) -> list[str]:
    return [v.rule for v in check_dockerfile(text)]


def test_conforming_dockerfile_passes() -> None:
    assert check_dockerfile(GOOD) == []


def test_missing_user_and_healthcheck_are_both_reported() -> None:
    text = 'FROM node:20-alpine\nCMD ["node", "x.js"]\n'
    assert _rules(text) == ["user-missing", "healthcheck-missing"]


def test_root_user_is_reported_with_line() -> None:
    text = GOOD.replace("USER app", "USER root")
    violations = check_dockerfile(text)
    assert [v.rule for v in violations] == ["user-root"]
    assert violations[0].line == 3


def test_root_variants() -> None:
    for spec in ("root:root", "0", "0:0", "ROOT"):
        assert _rules(GOOD.replace("USER app", f"USER {spec}")) == ["user-root"], spec


def test_root_anywhere_fails_even_if_later_dropped() -> None:
    text = GOOD.replace("USER app", "USER root\nRUN apk add curl\nUSER app")
    assert _rules(text) == ["user-root"]


def test_names_starting_with_root_are_fine() -> None:
    assert _rules(GOOD.replace("USER app", "USER rootless")) == []


def test_healthcheck_none_does_not_count() -> None:
    text = GOOD.replace(
        "HEALTHCHECK --interval=30s CMD wget -qO- http://127.0.0.1:8080/healthz || exit 1",
        "HEALTHCHECK NONE",
    )
    assert _rules(text) == ["healthcheck-missing"]


def test_directives_must_start_the_line() -> None:
    text = "FROM alpine\n# USER app\nRUN echo HEALTHCHECK CMD true\n"
    assert _rules(text) == ["user-missing", "healthcheck-missing"]


def test_root_user_and_missing_healthcheck_reported_together() -> None:
    text = "FROM alpine\nUSER root\n"
    assert _rules(text) == ["user-root", "healthcheck-missing"]

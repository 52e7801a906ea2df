from __future__ import annotations

import enum
import logging
import os
import tempfile
from collections.abc import Iterable
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from src.platform_scaffold.manifest import ScaffoldTarget
from src.platform_scaffold.paths import resolve_target
from src.platform_scaffold.render_ci import GITIGNORE_MARKER, render_gitignore_block

logger = logging.getLogger(__name__)

_DEFAULT_MODE = 0o644


class OverwritePolicy(enum.Enum):
    PRESERVE = "preserve"
    FORCE = "force"

    @classmethod
    def from_flag(cls, force: bool) -> OverwritePolicy:
        return cls.FORCE if force else cls.PRESERVE


class WriteOutcome(enum.Enum):
    WROTE = "WROTE"
    SKIPPED = "SKIP"
    UPDATED = "UPDATED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class WriteResult:
    path: str
    outcome: WriteOutcome
    existed: bool
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is not WriteOutcome.FAILED

    def describe(self) -> str:
        if self.outcome is WriteOutcome.SKIPPED:
            return f"SKIP: {self.path} exists (use --force to overwrite)"
        if self.outcome is WriteOutcome.FAILED:
            return f"FAILED: {self.path}: {self.error}"
        return f"{self.outcome.value}: {self.path}"


def _atomic_write(target: Path, content: bytes) -> None:
    # Temp file in the same directory so os.replace stays on one filesystem.
    mode = target.stat().st_mode & 0o777 if target.exists() else _DEFAULT_MODE
    fd, tmp = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        os.chmod(tmp, mode)
        os.replace(tmp, target)
    except BaseException:
        with suppress(FileNotFoundError):
            os.unlink(tmp)
        raise


def write_file(
    path: str | Path, content: bytes, policy: OverwritePolicy
) -> WriteOutcome:
    """Write ``content`` to ``path`` unless it exists and policy is PRESERVE.

    Missing parent directories are created. The file is replaced as a whole:
    either the new content lands or the previous file is left untouched.
    Raises OSError on filesystem failures.
    """
    if not str(path or "").strip():
        raise ValueError("empty path")
    target = Path(path)
    if target.exists() and policy is OverwritePolicy.PRESERVE:
        return WriteOutcome.SKIPPED

    target.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write(target, bytes(content))
    logger.debug("wrote %s (%d bytes)", target, len(content))
    return WriteOutcome.WROTE


def write_targets(
    root: str | Path,
    targets: Iterable[ScaffoldTarget],
    policy: OverwritePolicy,
) -> list[WriteResult]:
    """Write every target under ``root``, one result per target.

    A failure on one target is recorded and does not stop the others.
    """
    base = Path(root)
    results: list[WriteResult] = []
    for t in targets:
        try:
            full = resolve_target(base, t.path)
            existed = full.exists()
            outcome = write_file(full, t.content, policy)
        except (OSError, ValueError) as exc:
            logger.warning("failed to write %s: %s", t.path, exc)
            results.append(
                WriteResult(
                    path=t.path,
                    outcome=WriteOutcome.FAILED,
                    existed=False,
                    error=str(exc) or exc.__class__.__name__,
                )
            )
            continue
        results.append(WriteResult(path=t.path, outcome=outcome, existed=existed))
    return results


def ensure_gitignore_block(root: str | Path, policy: OverwritePolicy) -> WriteResult:
    """Append the local-artifacts block to .gitignore.

    Existing lines are never removed. The block is appended when .gitignore is
    missing or when FORCE is given and the block is not there yet.
    """
    path = Path(root) / ".gitignore"
    try:
        existed = path.exists()
        if existed and policy is OverwritePolicy.PRESERVE:
            return WriteResult(
                path=".gitignore", outcome=WriteOutcome.SKIPPED, existed=True
            )
        current = path.read_text(encoding="utf-8") if existed else ""
        if GITIGNORE_MARKER in current.splitlines():
            return WriteResult(
                path=".gitignore", outcome=WriteOutcome.SKIPPED, existed=True
            )
        path.parent.mkdir(parents=True, exist_ok=True)
        sep = "" if not current or current.endswith("\n") else "\n"
        _atomic_write(path, (current + sep + render_gitignore_block()).encode("utf-8"))
    except OSError as exc:
        logger.warning("failed to update %s: %s", path, exc)
        return WriteResult(
            path=".gitignore",
            outcome=WriteOutcome.FAILED,
            existed=False,
            error=str(exc) or exc.__class__.__name__,
        )
    return WriteResult(path=".gitignore", outcome=WriteOutcome.UPDATED, existed=existed)

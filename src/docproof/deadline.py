"""Cooperative per-request deadlines checked between units of work."""

from __future__ import annotations

from dataclasses import dataclass
import time

from docproof.errors import OperationTimeoutError


@dataclass(frozen=True, slots=True)
class Deadline:
    """Monotonic cut-off; `check` is called between rules and between package parts."""

    expires_at: float
    timeout_seconds: float

    @classmethod
    def after(cls, timeout_seconds: float) -> "Deadline":
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        return cls(expires_at=time.monotonic() + timeout_seconds, timeout_seconds=timeout_seconds)

    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def check(self, stage: str) -> None:
        if self.expired():
            raise OperationTimeoutError(f"Timed out after {self.timeout_seconds:g}s during {stage}")


def check_deadline(deadline: Deadline | None, stage: str) -> None:
    """No-op when the caller did not ask for a deadline."""

    if deadline is not None:
        deadline.check(stage)

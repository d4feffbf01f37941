"""
Sync report — the outcome of one model synchronization run.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SyncReport:
    """What a sync run did.

    ``run()`` only returns once every scheduled fetch and write has
    finished, so the report is complete when the caller sees it.
    """

    base_url: str = ""
    model_path: str = ""
    user: str | None = None
    type_names: list[str] = field(default_factory=list)
    written: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    registry: str | None = None
    aborted: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.aborted and not self.failed and self.registry is not None

    @property
    def status(self) -> str:
        if self.aborted:
            return "aborted"
        if self.ok:
            return "ok"
        if self.written:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "base_url": self.base_url,
            "model_path": self.model_path,
            "user": self.user,
            "types": list(self.type_names),
            "written": list(self.written),
            "removed": list(self.removed),
            "failed": list(self.failed),
            "registry": self.registry,
            "errors": list(self.errors),
        }

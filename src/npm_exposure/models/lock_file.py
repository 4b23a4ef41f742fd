"""Lock file input model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class LockFile:
    """Text of one lock file, tagged with its format (the lock file name)."""

    format: str
    text: str

    def __post_init__(self) -> None:
        if not self.format:
            raise ValueError("Lock format must be provided")

    @classmethod
    def from_path(cls, path: Path) -> LockFile:
        """Read ``path``, using its file name as the format tag."""
        return cls(format=path.name, text=path.read_text(encoding="utf-8"))

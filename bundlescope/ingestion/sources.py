from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class SourceFile(Protocol):
    """What ingestion needs from the host: a name, a byte size and its text."""

    name: str
    size_bytes: int

    async def read_text(self) -> str: ...


@dataclass(frozen=True)
class LocalFile:
    path: Path
    name: str
    size_bytes: int

    @classmethod
    def from_path(cls, path: Path) -> "LocalFile":
        p = Path(path)
        return cls(path=p, name=p.name, size_bytes=int(p.stat().st_size))

    async def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8", errors="replace")


@dataclass(frozen=True)
class InMemoryFile:
    name: str
    text: str
    size_bytes: int = -1

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            object.__setattr__(self, "size_bytes", len(self.text.encode("utf-8")))

    async def read_text(self) -> str:
        return self.text

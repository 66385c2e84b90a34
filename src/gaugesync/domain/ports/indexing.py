"""Port for the indexed (subgraph) view of the gauge registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Set
    from datetime import datetime

    from gaugesync.domain.deadline import Deadline


@dataclass(frozen=True, slots=True)
class RemoteRoutedRecord:
    """A root gauge on the home chain that forwards emissions to another chain."""

    address: str
    chain: str
    recipient: str | None = None
    first_seen_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class LocalRecord:
    """A gauge living on the home chain itself."""

    address: str
    first_seen_at: datetime | None = None


IndexRecord: TypeAlias = RemoteRoutedRecord | LocalRecord


@runtime_checkable
class IndexSource(Protocol):
    """Return every indexed gauge whose address is in ``addresses``."""

    def __call__(
        self,
        addresses: Set[str],
        *,
        deadline: Deadline | None = None,
    ) -> list[IndexRecord]: ...


__all__ = ["IndexRecord", "IndexSource", "LocalRecord", "RemoteRoutedRecord"]

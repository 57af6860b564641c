"""Data classes for WFM Client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class ConnectionState(Enum):
    IDLE = "idle"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    LISTING = "listing"
    LISTED = "listed"
    LISTING_FAILED = "listing_failed"
    VERIFICATION_FAILED = "verification_failed"


@dataclass
class TreeNode:
    label: str
    path: str | None = None  # None for the overall root and server roots
    children: list[TreeNode] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def add(self, child: TreeNode) -> None:
        self.children.append(child)

    def walk(self, depth: int = 0) -> Iterator[tuple[int, TreeNode]]:
        """Yield ``(depth, node)`` pairs depth-first, this node first."""
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)


@dataclass(frozen=True)
class ServerEntry:
    name: str
    url: str


@dataclass
class ServerOutcome:
    entry: ServerEntry
    state: ConnectionState = ConnectionState.IDLE
    node: TreeNode | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.state is ConnectionState.LISTED and self.node is not None

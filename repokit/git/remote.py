"""Remote repository value object."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class RemoteDirection(IntEnum):
    """Which way a remote is used."""

    PUSH_FETCH = 0
    PUSH = 1
    FETCH = 2


@dataclass
class GitRemote:
    """A named remote endpoint.

    Building a GitRemote does not check anything against a repository;
    git validates the remote when it is actually registered or used.
    """

    url: str
    name: str = "origin"
    direction: RemoteDirection = RemoteDirection.PUSH_FETCH

    def is_push(self) -> bool:
        """Can the remote be used for pushing only?"""
        return self.direction == RemoteDirection.PUSH

    def is_fetch(self) -> bool:
        """Can the remote be used for fetching only?"""
        return self.direction == RemoteDirection.FETCH

    def is_push_fetch(self) -> bool:
        """Is the remote used both for push and fetch?"""
        return self.direction == RemoteDirection.PUSH_FETCH

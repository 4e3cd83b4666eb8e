"""
Identity of the invoking host user, handed to the entrypoint so it can
recreate that user inside the container.
"""
from dataclasses import dataclass

import psutil


@dataclass(frozen=True)
class HostIdentity:
    """Username and numeric ids of the current process."""

    username: str
    uid: int
    gid: int

    def __post_init__(self):
        if self.uid < 0 or self.gid < 0:
            raise ValueError(f"Invalid identity uid={self.uid} gid={self.gid}")

    @classmethod
    def current(cls) -> "HostIdentity":
        """Reads the real user and group of the running process."""
        proc = psutil.Process()
        return cls(
            username=proc.username(),
            uid=proc.uids().real,
            gid=proc.gids().real,
        )

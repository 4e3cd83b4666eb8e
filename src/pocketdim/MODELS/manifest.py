"""
Models describing a container to be assembled: image, init steps and host sharing.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import PACKAGES_PLACEHOLDER
from ..errors import UnknownContainer


class MountSpec(BaseModel):
    """
    A filesystem mount such as a bind or volume.
    Corresponds to the `--mount` argument of `podman create`.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    ty: str = Field(alias="type")
    src: Optional[str] = None
    dst: str
    opts: List[str] = []


class InitSpec(BaseModel):
    """
    Steps the entrypoint performs inside the container before the real workload.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Shell commands run as root, before package installation
    pre_init: List[str] = []
    # Shell commands run as root, after package installation
    init: List[str] = []
    packages: List[str] = []
    # Template for images whose package manager the entrypoint does not know
    package_command: Optional[str] = None

    @field_validator("package_command")
    @classmethod
    def _has_placeholder(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and PACKAGES_PLACEHOLDER not in value:
            raise ValueError(
                f"package_command must contain the {PACKAGES_PLACEHOLDER} placeholder"
            )
        return value


class ShareSpec(BaseModel):
    """
    What the container shares with the host.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Namespace modes; None is passed to the engine as an explicit empty value
    net: Optional[str] = None
    ipc: Optional[str] = None
    # Security options, strictly additive
    sec: List[str] = []
    # Shorthand for binding the host's /dev and /sys
    dev: bool = False
    # Shorthand for binding the host's /mnt and /media
    mnt: bool = False
    mounts: List[MountSpec] = []


class Manifest(BaseModel):
    """
    The declarative description of one container.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = ""
    image: str
    pull: Optional[str] = None
    # Inserted verbatim right after `podman create`
    additional_args: List[str] = []
    init: InitSpec = Field(default_factory=InitSpec)
    share: ShareSpec = Field(default_factory=ShareSpec)

    def with_name(self, name: str) -> "Manifest":
        """
        Returns a copy of this manifest with a different container name.

        :param name: The container name (also used as its hostname).
        :return: A new Manifest.
        """
        return self.model_copy(update={"name": name})


class ManifestSet(BaseModel):
    """
    All containers declared in one manifest file, keyed by container identifier.
    """
    model_config = ConfigDict(frozen=True)

    containers: Dict[str, Manifest] = {}

    def get(self, container: str, name: Optional[str] = None) -> Manifest:
        """
        Looks up a container, optionally under a different name.

        :param container: The container identifier.
        :param name: Overrides the manifest's name when given.
        :return: The manifest, ready to compile.
        :raises UnknownContainer: If no such container is declared.
        """
        try:
            manifest = self.containers[container]
        except KeyError:
            raise UnknownContainer(container) from None
        return manifest.with_name(name) if name else manifest

# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Builders turning the `share` section of a manifest into `podman create` arguments.

Each builder is a pure function returning a flat list of argument strings.
"""
from typing import List, Optional

from ..constants import DEV_SHORTHAND_PATHS, EMPTY_SENTINEL, MNT_SHORTHAND_PATHS
from ..MODELS.manifest import MountSpec, ShareSpec


def _mode_args(flag: str, value: Optional[str]) -> List[str]:
    # An unset mode is passed as an explicit empty value, never omitted.
    return [flag, value if value is not None else EMPTY_SENTINEL]


def network_args(share: ShareSpec) -> List[str]:
    """Builds the `--network` pair."""
    return _mode_args("--network", share.net)


def ipc_args(share: ShareSpec) -> List[str]:
    """Builds the `--ipc` pair."""
    return _mode_args("--ipc", share.ipc)


def security_args(share: ShareSpec) -> List[str]:
    """
    Builds one `--security-opt` pair per security option, in manifest order.
    No defaults are added.
    """
    args = []
    for option in share.sec:
        args.extend(["--security-opt", option])
    return args


def serialize_mount(mount: MountSpec) -> str:
    """
    Serializes a mount to the comma separated form `--mount` expects.

    Fields appear as type, src (only when set), dst, then each option verbatim.

    :param mount: The mount to serialize.
    :return: e.g. "type=bind,src=/host,dst=/ctr,ro"
    """
    arg = f"type={mount.ty},"
    if mount.src is not None:
        arg += f"src={mount.src},"
    arg += f"dst={mount.dst},"
    for opt in mount.opts:
        arg += f"{opt},"

    # Drop the trailing separator
    return arg[:-1]


def shorthand_mounts(share: ShareSpec) -> List[MountSpec]:
    """
    Expands the `dev` and `mnt` shorthands into host bind mounts.

    :param share: The share section of a manifest.
    :return: Bind mounts mapping each host path onto the same container path.
    """
    paths = []
    if share.dev:
        paths.extend(DEV_SHORTHAND_PATHS)
    if share.mnt:
        paths.extend(MNT_SHORTHAND_PATHS)
    return [MountSpec(ty="bind", src=path, dst=path) for path in paths]


def mount_args(share: ShareSpec) -> List[str]:
    """
    Builds one `--mount` pair per mount. Explicit mounts keep their manifest
    order and are followed by any shorthand mounts.
    """
    args = []
    for mount in list(share.mounts) + shorthand_mounts(share):
        args.extend(["--mount", serialize_mount(mount)])
    return args

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
Fixed values shared by the invocation compiler and the in-container entrypoint.

The flag names below are the wire format between the two processes; both
sides must change together.
"""

# Container engine
CONTAINER_ENGINE = "podman"
CREATE_SUBCOMMAND = "create"

# Label attached to every container we create, for discovery and cleanup.
MANAGEMENT_LABEL = "manager=pocket-dimension"

# The entrypoint performs privileged setup before dropping to the host user.
FORCED_USER = "root:root"

# Where our own executable is bind mounted inside the container.
ENTRYPOINT_PATH = "/usr/bin/entrypoint"

# Symbolic link to the running executable.
SELF_EXE_LINK = "/proc/self/exe"

# Passed as the value of --network/--ipc when the manifest leaves them unset.
EMPTY_SENTINEL = '""'

# Substituted by the entrypoint with the space-joined package list.
PACKAGES_PLACEHOLDER = "%packages%"

# Entrypoint flags
FLAG_USERNAME = "--username"
FLAG_UID = "--uid"
FLAG_GID = "--gid"
FLAG_PRE_INIT = "--pre-init"
FLAG_INIT = "--init"
FLAG_PACKAGES = "--packages"
FLAG_PACKAGE_COMMAND = "--package-command"

# Host paths bind mounted by the `dev` and `mnt` shorthands.
DEV_SHORTHAND_PATHS = ("/dev", "/sys")
MNT_SHORTHAND_PATHS = ("/mnt", "/media")

DEFAULT_MANIFEST_FILE = "pocket-dimension.toml"

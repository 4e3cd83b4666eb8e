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
Compilation of a manifest into the `podman create` invocation that assembles it.
"""
import json
import logging
import shlex
from typing import Callable, List, Optional, Sequence

from .. import constants
from ..errors import PayloadEncodingFailed
from ..MODELS.manifest import Manifest
from ..UTILS.identity import HostIdentity
from ..UTILS.self_locator import resolve_self_path
from .share_arguments import ipc_args, mount_args, network_args, security_args

LOG = logging.getLogger(__name__)

# Program name followed by its arguments, ready to be spawned without a shell.
Invocation = List[str]


def encode_payload(field: str, values: Sequence[str]) -> str:
    """
    JSON encodes one init payload sequence for the entrypoint.

    :param field: Name of the payload, used in errors.
    :param values: The strings to encode, order preserved.
    :return: A compact JSON array.
    :raises PayloadEncodingFailed: If the values cannot be encoded.
    """
    try:
        return json.dumps(list(values), ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise PayloadEncodingFailed(field, str(e)) from e


class InvocationCompiler:
    """
    Maps a manifest to the ordered argument list of `podman create`.

    The running executable is bind mounted into the container and set as its
    entrypoint; the init steps it must perform are passed after the image.
    """

    def __init__(self,
                 identity: Optional[HostIdentity] = None,
                 self_path_resolver: Optional[Callable[[], str]] = None):
        """
        Initializes the compiler.

        :param identity: The host user handed to the entrypoint. Read from the
            running process at compile time when not given.
        :param self_path_resolver: Returns the path of the executable to inject.
            Defaults to reading /proc/self/exe.
        """
        self.identity = identity
        self.self_path_resolver = self_path_resolver or resolve_self_path

    def compile(self, manifest: Manifest) -> Invocation:
        """
        Compiles a manifest into an invocation.

        :param manifest: The container to create, with its final name.
        :return: The program name and its arguments.
        :raises SelfPathUnavailable: If the executable to inject cannot be found.
        :raises PayloadEncodingFailed: If an init payload cannot be encoded.
        """
        self_path = self.self_path_resolver()
        identity = self.identity or HostIdentity.current()
        init = manifest.init
        share = manifest.share

        args = [constants.CONTAINER_ENGINE, constants.CREATE_SUBCOMMAND]
        args.extend(manifest.additional_args)
        args.extend(["--hostname", manifest.name])
        args.extend(["--name", manifest.name])
        args.extend(["--label", constants.MANAGEMENT_LABEL])
        # The entrypoint expects to start as root.
        args.extend(["--user", constants.FORCED_USER])
        args.extend(network_args(share))
        args.extend(ipc_args(share))
        args.extend(security_args(share))
        args.extend(mount_args(share))
        args.extend([
            "--mount",
            f"type=bind,source={self_path},dst={constants.ENTRYPOINT_PATH},ro=true",
        ])
        args.extend(["--entrypoint", constants.ENTRYPOINT_PATH])
        args.extend([
            manifest.image,
            constants.FLAG_USERNAME, identity.username,
            constants.FLAG_UID, str(identity.uid),
            constants.FLAG_GID, str(identity.gid),
            constants.FLAG_PRE_INIT, encode_payload("pre_init", init.pre_init),
            constants.FLAG_INIT, encode_payload("init", init.init),
            constants.FLAG_PACKAGES, encode_payload("packages", init.packages),
        ])

        if init.package_command is not None:
            args.extend([constants.FLAG_PACKAGE_COMMAND, init.package_command])

        LOG.debug(f"Compiled {manifest.name}: {shlex.join(args)}")
        return args

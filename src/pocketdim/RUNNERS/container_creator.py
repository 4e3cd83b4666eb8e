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
Execution of compiled invocations against the container engine.
"""
import logging
import shlex
import shutil
import subprocess
from typing import List

from ..errors import ContainerCreationFailed, EngineNotFound

LOG = logging.getLogger(__name__)


class ContainerCreator:
    """
    Spawns a `podman create` invocation and waits for it to finish.
    """
    def create(self, invocation: List[str]):
        """
        Runs the invocation. Blocks until the engine exits; there is no timeout
        and no retry, since a failed creation may be partially applied.

        :param invocation: Program name and arguments, as compiled.
        :raises EngineNotFound: If the program is not on PATH.
        :raises ContainerCreationFailed: If the engine exits with a non-zero status.
        """
        engine = invocation[0]
        if shutil.which(engine) is None:
            raise EngineNotFound(engine)

        LOG.info(f"Creating container: {shlex.join(invocation)}")

        # No shell, the manifest values are passed as literal arguments.
        process = subprocess.Popen(invocation, shell=False)
        exit_code = process.wait()

        if exit_code != 0:
            LOG.error(f"{engine} exited with code {exit_code}")
            raise ContainerCreationFailed(exit_code, invocation)

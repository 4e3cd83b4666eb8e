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
Exceptions raised while loading, compiling and creating containers.
"""
from typing import List, Optional


class PocketDimensionError(Exception):
    """Base class for all pocketdim errors."""


class SelfPathUnavailable(PocketDimensionError):
    """
    The path of the running executable could not be resolved, so it cannot
    be injected into the container as its entrypoint.
    """

    def __init__(self, link: str, reason: str):
        self.link = link
        self.reason = reason
        super().__init__(f"Cannot resolve own executable via {link}: {reason}")


class PayloadEncodingFailed(PocketDimensionError):
    """An init payload field could not be JSON encoded."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Failed to encode {field} payload: {reason}")


class ContainerCreationFailed(PocketDimensionError):
    """The container engine exited with a non-zero status."""

    def __init__(self, exit_code: int, command: Optional[List[str]] = None):
        self.exit_code = exit_code
        self.command = command or []
        super().__init__(f"Container creation failed with exit code {exit_code}")


class EngineNotFound(PocketDimensionError):
    """The container engine binary is not on PATH."""

    def __init__(self, engine: str):
        self.engine = engine
        super().__init__(f"{engine} not found in PATH")


class ManifestLoadError(PocketDimensionError):
    """A manifest file could not be read, parsed or validated."""


class UnknownContainer(PocketDimensionError):
    """No manifest exists for the requested container identifier."""

    def __init__(self, container: str):
        self.container = container
        super().__init__(f"No manifest for container '{container}'")

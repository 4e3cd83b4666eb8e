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
Parsers for container manifest files in TOML or YAML.
"""
import logging
import os
import tomllib
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from ..errors import ManifestLoadError
from ..MODELS.manifest import Manifest, ManifestSet
from ..UTILS.string_interpolation import EnvironmentInterpolator

LOG = logging.getLogger(__name__)

FORMATS = {
    '.toml': 'toml',
    '.yml': 'yaml',
    '.yaml': 'yaml',
}


class ManifestParser:
    """
    Parser for manifest files mapping container identifiers to manifests.
    """
    def __init__(self, context: Optional[Dict[str, str]] = None):
        """
        Initializes the parser with an optional environment context for interpolation.

        :param context: A dictionary of environment variables for interpolation.
        """
        self.context = context if context is not None else dict(os.environ)

    def parse(self, manifest_path: str) -> ManifestSet:
        """
        Parses a manifest file from a path. The extension selects the format.

        :param manifest_path: Path to the manifest file.
        :return: Parsed manifests.
        :raises ManifestLoadError: If the file cannot be read or is invalid.
        """
        ext = os.path.splitext(manifest_path)[1].lower()
        fmt = FORMATS.get(ext)
        if fmt is None:
            raise ManifestLoadError(f"{manifest_path}: unsupported manifest format '{ext}'")

        try:
            with open(manifest_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise ManifestLoadError(f"{manifest_path}: {e.strerror or e}") from e

        LOG.debug(f"Loaded manifest file {manifest_path}")
        return self.parse_from_string(content, fmt)

    def parse_from_string(self, content: str, fmt: str = 'toml') -> ManifestSet:
        """
        Parses manifests from a string.

        :param content: The manifest file content.
        :param fmt: Either 'toml' or 'yaml'.
        :return: Parsed manifests.
        :raises ManifestLoadError: If the content is malformed or invalid.
        """
        data = self._load(content, fmt)
        if not isinstance(data, dict):
            raise ManifestLoadError("Manifest file must map container names to manifests")

        containers = {}
        for container, spec in data.items():
            containers[container] = self._parse_container(container, spec)
        return ManifestSet(containers=containers)

    def _load(self, content: str, fmt: str) -> Any:
        """
        Decodes the raw file content.
        """
        try:
            if fmt == 'toml':
                return tomllib.loads(content)
            if fmt == 'yaml':
                return yaml.safe_load(content) or {}
        except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
            raise ManifestLoadError(f"Malformed {fmt} manifest: {e}") from e
        raise ManifestLoadError(f"Unsupported manifest format '{fmt}'")

    def _parse_container(self, container: str, spec: Any) -> Manifest:
        """
        Validates a single container manifest.

        :param container: The container identifier, used as name when none is set.
        :param spec: The raw manifest mapping.
        :return: A Manifest instance.
        """
        if not isinstance(spec, dict):
            raise ManifestLoadError(f"{container}: manifest must be a table")

        try:
            manifest = Manifest.model_validate(spec)
        except ValidationError as e:
            raise ManifestLoadError(f"{container}: {e}") from e

        try:
            manifest = self._interpolate_host_fields(manifest)
        except KeyError as e:
            raise ManifestLoadError(f"{container}: {e.args[0]}") from e

        if not manifest.name:
            manifest = manifest.with_name(container)
        return manifest

    def _interpolate_host_fields(self, manifest: Manifest) -> Manifest:
        """
        Expands host variables in the fields evaluated on the host: name,
        image, additional arguments and mount sources. Init commands run
        inside the container and are passed on untouched.
        """
        interp = EnvironmentInterpolator(self.context)
        mounts = [
            mount.model_copy(update={"src": interp.interpolate(mount.src)})
            if mount.src is not None else mount
            for mount in manifest.share.mounts
        ]
        return manifest.model_copy(update={
            "name": interp.interpolate(manifest.name),
            "image": interp.interpolate(manifest.image),
            "additional_args": [interp.interpolate(a) for a in manifest.additional_args],
            "share": manifest.share.model_copy(update={"mounts": mounts}),
        })

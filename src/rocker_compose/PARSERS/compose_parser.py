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
Parsers for rocker-compose YAML files.
"""
import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..errors import ComposeParseError
from ..MODELS.compose_config import DEFAULT_NAMESPACE, ComposeConfig
from ..MODELS.container_config import ContainerConfig
from ..UTILS.string_interpolation import EnvironmentInterpolator

logger = logging.getLogger(__name__)


class ComposeParser:
    """
    Parser for rocker-compose files: a namespace plus a mapping of containers.
    """
    def __init__(self, context: Optional[Mapping[str, str]] = None):
        """
        Initializes the parser with an optional environment context for interpolation.

        :param context: A mapping of variables for interpolation. Defaults to os.environ.
        """
        self.context = dict(os.environ) if context is None else dict(context)

    def parse(self, compose_path: str) -> ComposeConfig:
        """
        Parses a compose file from a path.

        :param compose_path: Path to the compose file.
        :return: Parsed configuration.
        """
        logger.debug("Reading compose file %s", compose_path)
        with open(compose_path, 'r') as f:
            content = f.read()
        return self.parse_from_string(content)

    def parse_from_string(self, content: str) -> ComposeConfig:
        """
        Parses a compose file from a string.

        :param content: YAML content of the compose file.
        :return: Parsed configuration.
        :raises ComposeParseError: If the content is not a valid compose file.
        """
        content = EnvironmentInterpolator.interpolate(content, self.context)

        try:
            data = yaml.safe_load(content)
        except (yaml.YAMLError, ValueError) as e:
            raise ComposeParseError(f"invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ComposeParseError(f"expected a mapping at the top level, got {type(data).__name__}")

        namespace = str(data.get('namespace') or DEFAULT_NAMESPACE)
        specs = data.get('containers') or {}
        if not isinstance(specs, dict):
            raise ComposeParseError(f"expected a mapping of containers, got {type(specs).__name__}")

        containers = {}
        for name, spec in specs.items():
            containers[str(name)] = self._parse_container(str(name), spec, namespace)

        logger.debug("Parsed %d containers in namespace %s", len(containers), namespace)
        return ComposeConfig(namespace=namespace, containers=containers)

    def _parse_container(self, name: str, spec: Any, namespace: str) -> ContainerConfig:
        """
        Parses a single container definition from a compose file.

        :param name: The name of the container.
        :param spec: The container specification dictionary.
        :param namespace: The namespace of the file, applied to unqualified links.
        :return: A ContainerConfig instance.
        """
        if spec is None:
            spec = {}
        if not isinstance(spec, dict):
            raise ComposeParseError(f"expected a mapping, got {type(spec).__name__}", container=name)

        try:
            config = ContainerConfig.model_validate(spec)
        except ValidationError as e:
            raise ComposeParseError(str(e), container=name) from e

        updates: Dict[str, Any] = {}
        if config.links:
            updates['links'] = [link.with_default_namespace(namespace) for link in config.links]
        if config.volumes_from:
            updates['volumes_from'] = [c.with_default_namespace(namespace) for c in config.volumes_from]
        if updates:
            config = config.model_copy(update=updates)
        return config

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
Converters from `docker inspect` data back to rocker-compose models.
"""
import logging
from typing import Any, Mapping, Union

import yaml
from pydantic import ValidationError

from ..errors import ConfigMissing, ConfigParseError
from ..labels import LABEL_CONFIG, is_internal_label, strip_internal_labels
from ..MODELS.container import Container, ContainerState
from ..MODELS.container_config import ContainerConfig
from ..MODELS.names import ContainerName, ImageName
from ..MODELS.runtime_descriptor import RuntimeDescriptor

logger = logging.getLogger(__name__)

DescriptorLike = Union[RuntimeDescriptor, Mapping[str, Any]]


def _as_descriptor(descriptor: DescriptorLike) -> RuntimeDescriptor:
    if isinstance(descriptor, RuntimeDescriptor):
        return descriptor
    return RuntimeDescriptor.from_inspect(dict(descriptor))


def config_from_docker(descriptor: DescriptorLike) -> ContainerConfig:
    """
    Recovers the configuration a container was created from.

    :param descriptor: Inspect data of the container.
    :return: The stored configuration, without rocker-compose bookkeeping labels.
    :raises ConfigMissing: If the container has no configuration label.
    :raises ConfigParseError: If the label cannot be parsed.
    """
    descriptor = _as_descriptor(descriptor)

    payload = descriptor.labels.get(LABEL_CONFIG)
    if payload is None:
        raise ConfigMissing(descriptor.name, LABEL_CONFIG)

    try:
        config = ContainerConfig.from_yaml(payload)
    except (yaml.YAMLError, ValidationError, ValueError) as e:
        raise ConfigParseError(descriptor.name, e) from e

    if config.labels and any(is_internal_label(k) for k in config.labels):
        logger.debug("Dropping internal labels from stored config of %s", descriptor.name)
        config = config.model_copy(update={"labels": strip_internal_labels(config.labels)})

    return config


def container_from_docker(descriptor: DescriptorLike) -> Container:
    """
    Builds a Container from inspect data and the configuration stored on it.

    :param descriptor: Inspect data of the container.
    :return: The assembled container.
    :raises ConfigMissing: If the container has no configuration label.
    :raises ConfigParseError: If the label cannot be parsed.
    """
    descriptor = _as_descriptor(descriptor)
    config = config_from_docker(descriptor)

    state = descriptor.state
    container = Container(
        id=descriptor.id,
        image=ImageName.parse(descriptor.config.image) if descriptor.config.image else None,
        image_id=descriptor.image,
        name=ContainerName.parse(descriptor.name),
        created=descriptor.created,
        state=ContainerState(
            running=state.running,
            paused=state.paused,
            restarting=state.restarting,
            oom_killed=state.oom_killed,
            pid=state.pid,
            exit_code=state.exit_code,
            error=state.error,
            started_at=state.started_at,
            finished_at=state.finished_at,
        ),
        config=config,
    )
    container._descriptor = descriptor
    return container

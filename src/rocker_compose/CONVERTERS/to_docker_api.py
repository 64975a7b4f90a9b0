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
Converters from a ContainerConfig to the Docker Engine "create container" request.

Fields that are None in the configuration are never written, so Docker keeps
its own defaults for them.
"""
from typing import Any, Dict, List, Optional

from ..labels import LABEL_CONFIG
from ..MODELS.api_config import ApiConfig, ApiHostConfig, ApiPortBinding, ApiUlimit
from ..MODELS.container_config import ConfigMemory, ContainerConfig


def _bytes(memory: Optional[ConfigMemory]) -> Optional[int]:
    return memory.to_bytes() if memory is not None else None


def build_api_config(config: ContainerConfig) -> ApiConfig:
    """
    Projects a configuration onto the general section of the create request.

    :param config: The container configuration.
    :return: The Config section.
    """
    api_config = ApiConfig(
        image=config.image,
        cmd=list(config.cmd.parts) if config.cmd is not None else None,
        entrypoint=list(config.entrypoint.parts) if config.entrypoint is not None else None,
        hostname=config.hostname,
        domainname=config.domainname,
        working_dir=config.workdir,
        user=config.user,
        memory=_bytes(config.memory),
        memory_swap=_bytes(config.memory_swap),
        cpuset=config.cpuset,
        cpu_shares=config.cpu_shares,
        network_disabled=config.network_disabled,
        labels=dict(config.labels) if config.labels is not None else None,
    )

    if config.expose is not None:
        api_config.exposed_ports = {port: {} for port in config.expose}

    if config.env is not None:
        api_config.env = [f"{key}={value}" for key, value in config.env.items()]

    volumes = config.named_volumes
    if volumes:
        api_config.volumes = {volume: {} for volume in volumes}

    return api_config


def build_api_host_config(config: ContainerConfig) -> ApiHostConfig:
    """
    Projects a configuration onto the HostConfig section of the create request.
    Malformed entries such as an odd bind string are passed through unchanged.

    :param config: The container configuration.
    :return: The HostConfig section.
    """
    host_config = ApiHostConfig(
        dns=list(config.dns) if config.dns is not None else None,
        extra_hosts=list(config.add_host) if config.add_host is not None else None,
        restart_policy=config.restart.to_docker_api() if config.restart is not None else None,
        # Docker accepts the limits in both sections; send the same values to each
        memory=_bytes(config.memory),
        memory_swap=_bytes(config.memory_swap),
        network_mode=config.net,
        pid_mode=config.pid,
        cpuset_cpus=config.cpuset,
        privileged=config.privileged,
        publish_all_ports=config.publish_all_ports,
    )

    binds = config.binds
    if binds:
        host_config.binds = binds

    if config.ports:
        port_bindings: Dict[str, List[ApiPortBinding]] = {}
        for binding in config.ports:
            port_bindings.setdefault(binding.port, []).append(
                ApiPortBinding(host_ip=binding.host_ip, host_port=binding.host_port)
            )
        host_config.port_bindings = port_bindings

    if config.links:
        host_config.links = [link.to_docker_api() for link in config.links]

    if config.volumes_from:
        host_config.volumes_from = [str(name) for name in config.volumes_from]

    if config.ulimits:
        host_config.ulimits = [
            ApiUlimit(name=ulimit.name, soft=ulimit.soft, hard=ulimit.hard)
            for ulimit in config.ulimits
        ]

    return host_config


def config_labels(config: ContainerConfig) -> Dict[str, str]:
    """
    Returns the labels to create a container with: the user's own labels plus
    the serialized configuration under the reserved key.
    """
    labels = dict(config.labels or {})
    labels[LABEL_CONFIG] = config.to_yaml()
    return labels


def build_create_request(config: ContainerConfig) -> Dict[str, Any]:
    """
    Builds the complete JSON body for POST /containers/create.

    :param config: The container configuration.
    :return: The Config section with HostConfig nested and the configuration label attached.
    """
    api_config = build_api_config(config)
    api_config.labels = config_labels(config)

    body = api_config.to_docker()
    body["HostConfig"] = build_api_host_config(config).to_docker()
    return body

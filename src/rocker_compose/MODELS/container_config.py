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
Models for the declarative container configuration, including memory sizes,
restart policies, port bindings, links and ulimits.
"""
import shlex
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    field_validator,
    model_serializer,
    model_validator,
)

from ..UTILS.sizes import ram_in_bytes
from .api_config import ApiRestartPolicy
from .names import ContainerName

VOLUME_SEPARATOR = ":"


def is_bind_volume(volume: str) -> bool:
    """
    Tells a host bind mount ('host:container[:mode]') from a named or
    anonymous volume ('/data'). Only the separator decides.
    """
    return VOLUME_SEPARATOR in volume


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _as_list(value: Any) -> Any:
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return [value]
    return value


class ConfigMemory(BaseModel):
    """
    A memory size as written by the user, e.g. '512m' or 1073741824.
    -1 means unlimited, as Docker uses for memory_swap.
    """
    model_config = ConfigDict(frozen=True)

    value: str

    @model_validator(mode="before")
    @classmethod
    def _from_scalar(cls, data: Any) -> Any:
        if isinstance(data, (str, int)) and not isinstance(data, bool):
            return {"value": str(data)}
        return data

    @field_validator("value")
    @classmethod
    def _check_size(cls, v: str) -> str:
        ram_in_bytes(v)
        return v

    def to_bytes(self) -> int:
        return ram_in_bytes(self.value)

    @model_serializer
    def _serialize(self) -> str:
        return self.value


class ConfigCmd(BaseModel):
    """
    A command line. A plain string is split the way a POSIX shell would.
    """
    model_config = ConfigDict(frozen=True)

    parts: List[str]

    @model_validator(mode="before")
    @classmethod
    def _from_scalar(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"parts": shlex.split(data)}
        if isinstance(data, (list, tuple)):
            return {"parts": [_stringify(p) for p in data]}
        return data

    @model_serializer
    def _serialize(self) -> List[str]:
        return list(self.parts)


class RestartPolicyCondition(str, Enum):
    """
    Conditions under which a container should be restarted.
    """
    NO = "no"
    ALWAYS = "always"
    ON_FAILURE = "on-failure"
    UNLESS_STOPPED = "unless-stopped"


class RestartPolicy(BaseModel):
    """
    Defines how a container should be restarted on failure or exit.
    Written as 'always' or 'on-failure,5' (a colon works as well).
    """
    model_config = ConfigDict(frozen=True)

    condition: RestartPolicyCondition = RestartPolicyCondition.NO
    max_retries: int = 0

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, bool):
            # YAML reads a bare 'no' as False
            return {"condition": "always" if data else "no"}
        if isinstance(data, str):
            condition, _, retries = data.replace(":", ",").partition(",")
            result = {"condition": condition.strip()}
            if retries.strip():
                result["max_retries"] = int(retries)
            return result
        return data

    def to_docker_api(self) -> ApiRestartPolicy:
        return ApiRestartPolicy(name=self.condition.value, maximum_retry_count=self.max_retries)

    @model_serializer
    def _serialize(self) -> str:
        return str(self)

    def __str__(self) -> str:
        if self.max_retries:
            return f"{self.condition.value},{self.max_retries}"
        return self.condition.value


class PortBinding(BaseModel):
    """
    A published port: '[[host_ip:]host_port:]container_port[/proto]'.
    """
    model_config = ConfigDict(frozen=True)

    port: str
    host_ip: str = ""
    host_port: str = ""

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, int) and not isinstance(data, bool):
            data = str(data)
        if isinstance(data, str):
            parts = data.rsplit(":", 2)
            if len(parts) == 3:
                return {"host_ip": parts[0], "host_port": parts[1], "port": parts[2]}
            if len(parts) == 2:
                return {"host_port": parts[0], "port": parts[1]}
            return {"port": parts[0]}
        return data

    @field_validator("port", mode="before")
    @classmethod
    def _default_protocol(cls, v: Any) -> str:
        return normalize_port(v)

    @field_validator("host_port", mode="before")
    @classmethod
    def _host_port_string(cls, v: Any) -> str:
        return _stringify(v)

    @model_serializer
    def _serialize(self) -> str:
        return str(self)

    def __str__(self) -> str:
        if self.host_ip:
            return f"{self.host_ip}:{self.host_port}:{self.port}"
        if self.host_port:
            return f"{self.host_port}:{self.port}"
        return self.port


def normalize_port(port: Any) -> str:
    """
    Returns the 'port/proto' key Docker uses, assuming tcp when no protocol is given.
    """
    port = _stringify(port)
    if "/" not in port:
        return f"{port}/tcp"
    return port


class Link(BaseModel):
    """
    A link to another container, written as '[namespace.]name[:alias]'.
    """
    model_config = ConfigDict(frozen=True)

    container: ContainerName
    alias: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            name, _, alias = data.partition(":")
            return {"container": name, "alias": alias or None}
        return data

    def with_default_namespace(self, namespace: str) -> "Link":
        return Link(container=self.container.with_default_namespace(namespace), alias=self.alias)

    def to_docker_api(self) -> str:
        return f"{self.container}:{self.alias or self.container.name}"

    @model_serializer
    def _serialize(self) -> str:
        return str(self)

    def __str__(self) -> str:
        if self.alias:
            return f"{self.container}:{self.alias}"
        return str(self.container)


class Ulimit(BaseModel):
    """
    A resource limit triple. Also accepts the 'nofile=1024:2048' shorthand.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    soft: int
    hard: int

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            name, _, limits = data.partition("=")
            soft, _, hard = limits.partition(":")
            return {"name": name, "soft": soft, "hard": hard or soft}
        return data


class ContainerConfig(BaseModel):
    """
    The declarative configuration of a single container.
    Every field is optional; None means the field is left to Docker's default.
    """
    model_config = ConfigDict(frozen=True)

    image: Optional[str] = None
    cmd: Optional[ConfigCmd] = None
    entrypoint: Optional[ConfigCmd] = None

    hostname: Optional[str] = None
    domainname: Optional[str] = None
    workdir: Optional[str] = None
    user: Optional[str] = None

    # Resources
    memory: Optional[ConfigMemory] = None
    memory_swap: Optional[ConfigMemory] = None
    cpuset: Optional[str] = None
    cpu_shares: Optional[int] = None
    ulimits: Optional[List[Ulimit]] = None

    # Networking
    network_disabled: Optional[bool] = None
    net: Optional[str] = None
    pid: Optional[str] = None
    dns: Optional[List[str]] = None
    add_host: Optional[List[str]] = None
    expose: Optional[List[str]] = None
    ports: Optional[List[PortBinding]] = None
    publish_all_ports: Optional[bool] = None
    links: Optional[List[Link]] = None

    # Environment
    env: Optional[Dict[str, str]] = None

    # Storage
    volumes: Optional[List[str]] = None
    volumes_from: Optional[List[ContainerName]] = None

    # Lifecycle
    restart: Optional[RestartPolicy] = None
    privileged: Optional[bool] = None

    # Metadata
    labels: Optional[Dict[str, str]] = None

    @field_validator("ports", "links", "volumes_from", mode="before")
    @classmethod
    def _to_list(cls, v: Any) -> Any:
        return _as_list(v)

    @field_validator("expose", mode="before")
    @classmethod
    def _normalize_expose(cls, v: Any) -> Any:
        v = _as_list(v)
        if isinstance(v, list):
            return [normalize_port(p) for p in v]
        return v

    @field_validator("image", "hostname", "domainname", "workdir", "user", "cpuset", "net", "pid", mode="before")
    @classmethod
    def _scalar_text(cls, v: Any) -> Any:
        # YAML reads `user: 1000` or `cpuset: 0` as numbers
        if isinstance(v, (int, float, bool, date)):
            return _stringify(v)
        return v

    @field_validator("dns", "add_host", "volumes", mode="before")
    @classmethod
    def _stringify_items(cls, v: Any) -> Any:
        v = _as_list(v)
        if isinstance(v, list):
            return [_stringify(item) for item in v]
        return v

    @field_validator("env", "labels", mode="before")
    @classmethod
    def _to_string_map(cls, v: Any) -> Any:
        if isinstance(v, list):
            result = {}
            for item in v:
                key, _, value = _stringify(item).partition("=")
                result[key] = value
            return result
        if isinstance(v, dict):
            return {_stringify(k): _stringify(val) for k, val in v.items()}
        return v

    @field_validator("ulimits", mode="before")
    @classmethod
    def _ulimits_mapping(cls, v: Any) -> Any:
        # Compose style: {nofile: {soft: 1024, hard: 2048}} or {nproc: 65535}
        if isinstance(v, dict):
            result = []
            for name, limits in v.items():
                if isinstance(limits, dict):
                    result.append({"name": name, **limits})
                else:
                    result.append({"name": name, "soft": limits, "hard": limits})
            return result
        return v

    @property
    def named_volumes(self) -> List[str]:
        """Volumes managed by Docker, i.e. entries without a host path."""
        return [v for v in self.volumes or [] if not is_bind_volume(v)]

    @property
    def binds(self) -> List[str]:
        """Host bind mounts, passed to Docker verbatim."""
        return [v for v in self.volumes or [] if is_bind_volume(v)]

    @classmethod
    def from_yaml(cls, content: str) -> "ContainerConfig":
        """
        Parses a configuration from YAML.

        :param content: YAML document describing a single container.
        :return: The parsed configuration.
        :raises yaml.YAMLError: If the document is not valid YAML.
        :raises ValueError: If the document does not describe a container.
        """
        data = yaml.safe_load(content)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping, got {type(data).__name__}")
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

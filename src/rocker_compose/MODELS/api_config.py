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
Models for the two request sections of the Docker Engine "create container" call.
Field aliases are the exact wire names used by the Engine API.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """
    Base for wire models. Unset fields are left out of the request entirely.
    """
    model_config = ConfigDict(populate_by_name=True)

    def to_docker(self) -> Dict[str, Any]:
        """
        Serializes the model using Engine API field names, omitting unset fields.
        """
        return self.model_dump(by_alias=True, exclude_none=True)


class ApiRestartPolicy(ApiModel):
    name: str = Field(alias="Name")
    maximum_retry_count: int = Field(0, alias="MaximumRetryCount")


class ApiPortBinding(ApiModel):
    host_ip: str = Field("", alias="HostIp")
    host_port: str = Field("", alias="HostPort")


class ApiUlimit(ApiModel):
    name: str = Field(alias="Name")
    soft: int = Field(alias="Soft")
    hard: int = Field(alias="Hard")


class ApiConfig(ApiModel):
    """
    General container configuration, the top level of the create request body.
    Sets such as ExposedPorts and Volumes are maps to empty objects on the wire.
    """
    image: Optional[str] = Field(None, alias="Image")
    cmd: Optional[List[str]] = Field(None, alias="Cmd")
    entrypoint: Optional[List[str]] = Field(None, alias="Entrypoint")
    hostname: Optional[str] = Field(None, alias="Hostname")
    domainname: Optional[str] = Field(None, alias="Domainname")
    working_dir: Optional[str] = Field(None, alias="WorkingDir")
    user: Optional[str] = Field(None, alias="User")
    memory: Optional[int] = Field(None, alias="Memory")
    memory_swap: Optional[int] = Field(None, alias="MemorySwap")
    cpuset: Optional[str] = Field(None, alias="Cpuset")
    cpu_shares: Optional[int] = Field(None, alias="CpuShares")
    network_disabled: Optional[bool] = Field(None, alias="NetworkDisabled")
    exposed_ports: Optional[Dict[str, Dict[str, Any]]] = Field(None, alias="ExposedPorts")
    env: Optional[List[str]] = Field(None, alias="Env")
    labels: Optional[Dict[str, str]] = Field(None, alias="Labels")
    volumes: Optional[Dict[str, Dict[str, Any]]] = Field(None, alias="Volumes")


class ApiHostConfig(ApiModel):
    """
    Host and resource configuration, sent as HostConfig in the create request.
    """
    dns: Optional[List[str]] = Field(None, alias="Dns")
    extra_hosts: Optional[List[str]] = Field(None, alias="ExtraHosts")
    restart_policy: Optional[ApiRestartPolicy] = Field(None, alias="RestartPolicy")
    memory: Optional[int] = Field(None, alias="Memory")
    memory_swap: Optional[int] = Field(None, alias="MemorySwap")
    network_mode: Optional[str] = Field(None, alias="NetworkMode")
    pid_mode: Optional[str] = Field(None, alias="PidMode")
    cpuset_cpus: Optional[str] = Field(None, alias="CpusetCpus")
    binds: Optional[List[str]] = Field(None, alias="Binds")
    privileged: Optional[bool] = Field(None, alias="Privileged")
    publish_all_ports: Optional[bool] = Field(None, alias="PublishAllPorts")
    port_bindings: Optional[Dict[str, List[ApiPortBinding]]] = Field(None, alias="PortBindings")
    links: Optional[List[str]] = Field(None, alias="Links")
    volumes_from: Optional[List[str]] = Field(None, alias="VolumesFrom")
    ulimits: Optional[List[ApiUlimit]] = Field(None, alias="Ulimits")

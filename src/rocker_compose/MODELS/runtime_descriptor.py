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
Models for the subset of `docker inspect` output needed to recover a container.
"""
import re
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Docker reports nanoseconds; datetime only holds microseconds
_FRACTION = re.compile(r'(\.\d{6})\d+')


def _truncate_nanos(value: Any) -> Any:
    if isinstance(value, str):
        return _FRACTION.sub(r'\1', value)
    return value


class DescriptorModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DescriptorState(DescriptorModel):
    running: bool = Field(False, alias="Running")
    paused: bool = Field(False, alias="Paused")
    restarting: bool = Field(False, alias="Restarting")
    oom_killed: bool = Field(False, alias="OOMKilled")
    pid: int = Field(0, alias="Pid")
    exit_code: int = Field(0, alias="ExitCode")
    error: str = Field("", alias="Error")
    started_at: Optional[datetime] = Field(None, alias="StartedAt")
    finished_at: Optional[datetime] = Field(None, alias="FinishedAt")

    @field_validator("started_at", "finished_at", mode="before")
    @classmethod
    def _timestamps(cls, v: Any) -> Any:
        return _truncate_nanos(v)


class DescriptorConfig(DescriptorModel):
    image: str = Field("", alias="Image")
    labels: Optional[Dict[str, str]] = Field(None, alias="Labels")


class RuntimeDescriptor(DescriptorModel):
    """
    A container as reported by the Docker Engine inspect endpoint.
    """
    id: str = Field(alias="Id")
    name: str = Field(alias="Name")
    image: str = Field("", alias="Image")
    created: Optional[datetime] = Field(None, alias="Created")
    state: DescriptorState = Field(default_factory=DescriptorState, alias="State")
    config: DescriptorConfig = Field(default_factory=DescriptorConfig, alias="Config")

    @field_validator("created", mode="before")
    @classmethod
    def _created(cls, v: Any) -> Any:
        return _truncate_nanos(v)

    @classmethod
    def from_inspect(cls, data: Dict[str, Any]) -> "RuntimeDescriptor":
        """
        Builds a descriptor from the JSON object returned by `docker inspect`.
        """
        return cls.model_validate(data)

    @property
    def labels(self) -> Dict[str, str]:
        return self.config.labels or {}

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
Models for a live container as seen through rocker-compose.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, PrivateAttr

from .container_config import ContainerConfig
from .names import ContainerName, ImageName
from .runtime_descriptor import RuntimeDescriptor


class ContainerState(BaseModel):
    """
    Snapshot of the container's process state at inspect time.
    """
    model_config = ConfigDict(frozen=True)

    running: bool = False
    paused: bool = False
    restarting: bool = False
    oom_killed: bool = False
    pid: int = 0
    exit_code: int = 0
    error: str = ""
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None


class Container(BaseModel):
    """
    A running (or stopped) container together with the configuration it was created from.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    image: Optional[ImageName] = None
    image_id: str = ""
    name: ContainerName
    created: Optional[datetime] = None
    state: ContainerState
    config: ContainerConfig

    _descriptor: Optional[RuntimeDescriptor] = PrivateAttr(default=None)

    @property
    def descriptor(self) -> Optional[RuntimeDescriptor]:
        """The inspect data this container was built from, for fields not modeled here."""
        return self._descriptor

    def is_running(self) -> bool:
        return self.state.running

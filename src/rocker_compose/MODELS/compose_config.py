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
Models for a whole compose file.
"""
from typing import Dict

from pydantic import BaseModel

from .container_config import ContainerConfig
from .names import ContainerName

DEFAULT_NAMESPACE = "default"


class ComposeConfig(BaseModel):
    """
    Every container declared in one compose file, under a shared namespace.
    """
    namespace: str = DEFAULT_NAMESPACE
    containers: Dict[str, ContainerConfig] = {}

    def container_name(self, name: str) -> ContainerName:
        """The name Docker knows the container by."""
        return ContainerName(namespace=self.namespace, name=name)

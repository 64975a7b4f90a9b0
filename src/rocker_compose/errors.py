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
Exceptions raised while translating container configurations.
"""
from typing import Optional


class RockerComposeError(Exception):
    """
    Base class for all errors raised by rocker-compose.
    """


class ConfigMissing(RockerComposeError):
    """
    The container carries no stored configuration label, so it is not
    managed by rocker-compose.
    """
    def __init__(self, container_name: str, label: str):
        self.container_name = container_name
        self.label = label
        super().__init__(
            f"Expecting container {container_name} to have label '{label}' to parse it"
        )


class ConfigParseError(RockerComposeError):
    """
    The stored configuration label is present but cannot be deserialized.
    """
    def __init__(self, container_name: str, cause: Exception):
        self.container_name = container_name
        self.cause = cause
        super().__init__(
            f"Failed to parse YAML config for container {container_name}, error: {cause}"
        )


class ComposeParseError(RockerComposeError):
    """
    A compose file could not be read or does not describe valid containers.
    """
    def __init__(self, message: str, container: Optional[str] = None):
        self.container = container
        if container:
            message = f"container {container}: {message}"
        super().__init__(message)

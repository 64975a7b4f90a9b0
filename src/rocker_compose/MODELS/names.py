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
Image and container name parsing.
Parses references like 'nginx:latest' or 'quay.io/org/app:1.2', and
namespaced container names like 'myapp.web'.
"""
from typing import Any, ClassVar, Dict, Optional

from pydantic import BaseModel, ConfigDict, model_serializer, model_validator


class ImageName(BaseModel):
    """
    Parsed Docker image name.

    Examples:
        - nginx -> registry None, name 'nginx', tag 'latest'
        - myuser/myimage:v1 -> registry None, name 'myuser/myimage', tag 'v1'
        - localhost:5000/myimage:v1 -> registry 'localhost:5000', name 'myimage', tag 'v1'
        - gcr.io/project/image@sha256:abc -> digest 'sha256:abc', no tag
    """
    model_config = ConfigDict(frozen=True)

    registry: Optional[str] = None
    name: str
    tag: Optional[str] = None
    digest: Optional[str] = None

    DEFAULT_TAG: ClassVar[str] = "latest"

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return cls._split(data)
        return data

    @classmethod
    def parse(cls, reference: str) -> "ImageName":
        """
        Parse a Docker image name string.

        :param reference: Image name such as 'nginx:latest' or 'myuser/myimage:v1'.
        :return: Parsed ImageName.
        """
        return cls.model_validate(reference)

    @classmethod
    def _split(cls, reference: str) -> Dict[str, Optional[str]]:
        if not reference:
            raise ValueError("Empty image name")

        digest = None
        if "@" in reference:
            reference, digest = reference.rsplit("@", 1)

        # A colon followed by a slash belongs to a registry port, not a tag
        tag = None
        last_colon = reference.rfind(":")
        if last_colon != -1 and "/" not in reference[last_colon + 1:]:
            tag = reference[last_colon + 1:]
            reference = reference[:last_colon]

        registry = None
        first, _, rest = reference.partition("/")
        if rest and ("." in first or ":" in first or first == "localhost"):
            registry = first
            reference = rest

        if not tag and not digest:
            tag = cls.DEFAULT_TAG

        return {"registry": registry, "name": reference, "tag": tag, "digest": digest}

    @model_serializer
    def _serialize(self) -> str:
        return str(self)

    def __str__(self) -> str:
        name = f"{self.registry}/{self.name}" if self.registry else self.name
        if self.digest:
            return f"{name}@{self.digest}"
        if self.tag:
            return f"{name}:{self.tag}"
        return name


class ContainerName(BaseModel):
    """
    A container name, optionally qualified by the namespace of the compose
    file that declared it. Docker sees the qualified form 'namespace.name'.
    """
    model_config = ConfigDict(frozen=True)

    namespace: Optional[str] = None
    name: str

    @model_validator(mode="before")
    @classmethod
    def _from_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            # Docker inspect reports names with a leading slash
            data = data.lstrip("/")
            if not data:
                raise ValueError("Empty container name")
            namespace, sep, name = data.partition(".")
            if not sep:
                return {"name": namespace}
            return {"namespace": namespace, "name": name}
        return data

    @classmethod
    def parse(cls, value: str) -> "ContainerName":
        return cls.model_validate(value)

    def with_default_namespace(self, namespace: str) -> "ContainerName":
        """
        Returns this name qualified with the given namespace unless it already has one.
        """
        if self.namespace:
            return self
        return ContainerName(namespace=namespace, name=self.name)

    @model_serializer
    def _serialize(self) -> str:
        return str(self)

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

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
Unit tests for building Docker create requests from a configuration.
"""
from rocker_compose.CONVERTERS.to_docker_api import (
    build_api_config,
    build_api_host_config,
    build_create_request,
)
from rocker_compose.labels import LABEL_CONFIG
from rocker_compose.MODELS.container_config import ContainerConfig, PortBinding


class TestBuildApiConfig:
    """Tests for the general Config section."""

    def test_empty_config_sets_nothing(self):
        assert build_api_config(ContainerConfig()).to_docker() == {}

    def test_scalars(self):
        config = ContainerConfig(
            image="nginx:1.21",
            hostname="web",
            domainname="example.com",
            workdir="/app",
            user="www-data",
            cpuset="0-1",
            cpu_shares=512,
            network_disabled=False,
            cmd=["nginx", "-g", "daemon off;"],
            entrypoint="/docker-entrypoint.sh",
        )
        api = build_api_config(config).to_docker()
        assert api == {
            "Image": "nginx:1.21",
            "Hostname": "web",
            "Domainname": "example.com",
            "WorkingDir": "/app",
            "User": "www-data",
            "Cpuset": "0-1",
            "CpuShares": 512,
            "NetworkDisabled": False,
            "Cmd": ["nginx", "-g", "daemon off;"],
            "Entrypoint": ["/docker-entrypoint.sh"],
        }

    def test_absent_hostname_is_not_emptied(self):
        api = build_api_config(ContainerConfig(image="nginx")).to_docker()
        host = build_api_host_config(ContainerConfig(image="nginx")).to_docker()
        assert "Hostname" not in api
        assert "Hostname" not in host

    def test_memory(self):
        config = ContainerConfig(memory="512m", memory_swap="1g")
        api = build_api_config(config).to_docker()
        assert api["Memory"] == 536870912
        assert api["MemorySwap"] == 1073741824

    def test_env(self):
        api = build_api_config(ContainerConfig(env={"A": "1", "B": "2"}))
        assert sorted(api.env) == ["A=1", "B=2"]

    def test_exposed_ports(self):
        api = build_api_config(ContainerConfig(expose=["80", "53/udp"])).to_docker()
        assert api["ExposedPorts"] == {"80/tcp": {}, "53/udp": {}}

    def test_volumes(self):
        api = build_api_config(ContainerConfig(volumes=["/data", "/host:/data"])).to_docker()
        assert api["Volumes"] == {"/data": {}}

    def test_bind_only_volumes_are_omitted(self):
        api = build_api_config(ContainerConfig(volumes=["/host:/data"])).to_docker()
        assert "Volumes" not in api

    def test_labels(self):
        api = build_api_config(ContainerConfig(labels={"team": "core"})).to_docker()
        assert api["Labels"] == {"team": "core"}


class TestBuildApiHostConfig:
    """Tests for the HostConfig section."""

    def test_empty_config_sets_nothing(self):
        assert build_api_host_config(ContainerConfig()).to_docker() == {}

    def test_scalars(self):
        config = ContainerConfig(
            dns=["8.8.8.8"],
            add_host=["db:10.0.0.2"],
            restart="on-failure,3",
            net="host",
            pid="host",
            cpuset="0",
            privileged=True,
            publish_all_ports=False,
        )
        host = build_api_host_config(config).to_docker()
        assert host == {
            "Dns": ["8.8.8.8"],
            "ExtraHosts": ["db:10.0.0.2"],
            "RestartPolicy": {"Name": "on-failure", "MaximumRetryCount": 3},
            "NetworkMode": "host",
            "PidMode": "host",
            "CpusetCpus": "0",
            "Privileged": True,
            "PublishAllPorts": False,
        }

    def test_memory_matches_config_section(self):
        config = ContainerConfig(memory="512m", memory_swap="1g")
        host = build_api_host_config(config).to_docker()
        api = build_api_config(config).to_docker()
        assert host["Memory"] == api["Memory"] == 536870912
        assert host["MemorySwap"] == api["MemorySwap"] == 1073741824

    def test_binds(self):
        host = build_api_host_config(ContainerConfig(volumes=["/data", "/host:/data"])).to_docker()
        assert host["Binds"] == ["/host:/data"]

    def test_named_only_volumes_have_no_binds(self):
        host = build_api_host_config(ContainerConfig(volumes=["/data"])).to_docker()
        assert "Binds" not in host

    def test_malformed_bind_passes_through(self):
        host = build_api_host_config(ContainerConfig(volumes=["/a:/b:/c:/d"])).to_docker()
        assert host["Binds"] == ["/a:/b:/c:/d"]

    def test_port_bindings_are_grouped_in_order(self):
        config = ContainerConfig(ports=[
            PortBinding(port="80/tcp", host_ip="0.0.0.0", host_port="8080"),
            PortBinding(port="443/tcp", host_ip="", host_port="8443"),
            PortBinding(port="80/tcp", host_ip="0.0.0.0", host_port="8081"),
        ])
        host = build_api_host_config(config).to_docker()
        assert host["PortBindings"] == {
            "80/tcp": [
                {"HostIp": "0.0.0.0", "HostPort": "8080"},
                {"HostIp": "0.0.0.0", "HostPort": "8081"},
            ],
            "443/tcp": [{"HostIp": "", "HostPort": "8443"}],
        }

    def test_links_and_volumes_from(self):
        config = ContainerConfig(links=["app.db:database", "app.cache"], volumes_from=["app.data"])
        host = build_api_host_config(config).to_docker()
        assert host["Links"] == ["app.db:database", "app.cache:cache"]
        assert host["VolumesFrom"] == ["app.data"]

    def test_empty_lists_are_omitted(self):
        config = ContainerConfig(links=[], volumes_from=[], ulimits=[], ports=[], volumes=[])
        assert build_api_host_config(config).to_docker() == {}

    def test_ulimits(self):
        config = ContainerConfig(ulimits=[{"name": "nofile", "soft": 1024, "hard": 2048}])
        host = build_api_host_config(config).to_docker()
        assert host["Ulimits"] == [{"Name": "nofile", "Soft": 1024, "Hard": 2048}]


def test_build_create_request():
    config = ContainerConfig(image="nginx", labels={"team": "core"}, volumes=["/host:/data"])
    body = build_create_request(config)

    assert body["Image"] == "nginx"
    assert body["Labels"]["team"] == "core"
    assert ContainerConfig.from_yaml(body["Labels"][LABEL_CONFIG]) == config
    assert body["HostConfig"] == {"Binds": ["/host:/data"]}
    # the configuration itself is left untouched
    assert config.labels == {"team": "core"}

"""Tests for the docker SDK adapter, using a mocked DockerClient."""
from __future__ import annotations

import ipaddress
from unittest.mock import MagicMock

import docker.errors
import pytest

from netapi.directory.docker import DockerContainerDirectory, DockerNetworkDirectory
from netapi.errors import ContainerNotFound, DirectoryError, InvalidContainer, NetworkNotFound
from netapi.services import EndpointAttachmentService, build_network_resource

NET_ID = "9f" + "1" * 62


def _network_model(network_id: str, name: str, containers: dict | None = None) -> MagicMock:
    model = MagicMock()
    model.id = network_id
    model.name = name
    model.attrs = {
        "Id": network_id,
        "Name": name,
        "Driver": "bridge",
        "Options": {"com.docker.network.bridge.name": "br-test"},
        "Containers": containers or {},
    }
    return model


@pytest.fixture
def mock_docker_client():
    return MagicMock()


class TestDockerNetworkDirectory:
    def test_find_by_name_requires_exact_match(self, mock_docker_client):
        mock_docker_client.networks.list.return_value = [
            _network_model("a" * 64, "net1-extra"),
            _network_model(NET_ID, "net1"),
        ]
        mock_docker_client.networks.get.return_value = _network_model(NET_ID, "net1")

        network = DockerNetworkDirectory(mock_docker_client).find_by_name("net1")

        assert network.id == NET_ID
        mock_docker_client.networks.list.assert_called_once_with(names=["net1"])
        mock_docker_client.networks.get.assert_called_once_with(NET_ID)

    def test_find_by_name_not_found(self, mock_docker_client):
        mock_docker_client.networks.list.return_value = [_network_model("a" * 64, "net1-extra")]

        with pytest.raises(NetworkNotFound):
            DockerNetworkDirectory(mock_docker_client).find_by_name("net1")

    def test_find_by_id_prefix_skips_networks_removed_meanwhile(self, mock_docker_client):
        mock_docker_client.networks.list.return_value = [
            _network_model(NET_ID, "net1"),
            _network_model("9f" + "2" * 62, "net2"),
        ]
        mock_docker_client.networks.get.side_effect = [
            _network_model(NET_ID, "net1"),
            docker.errors.NotFound("gone"),
        ]

        networks = DockerNetworkDirectory(mock_docker_client).find_by_id_prefix("9f")

        assert [n.name for n in networks] == ["net1"]
        mock_docker_client.networks.list.assert_called_once_with(ids=["9f"])

    def test_empty_prefix_lists_all(self, mock_docker_client):
        mock_docker_client.networks.list.return_value = [_network_model(NET_ID, "net1")]
        mock_docker_client.networks.get.return_value = _network_model(NET_ID, "net1")

        networks = DockerNetworkDirectory(mock_docker_client).find_by_id_prefix("")

        assert len(networks) == 1
        mock_docker_client.networks.list.assert_called_once_with()

    def test_endpoints_from_containers_attr(self, mock_docker_client):
        model = _network_model(
            NET_ID,
            "net1",
            containers={
                "c1": {
                    "Name": "web",
                    "EndpointID": "ep1",
                    "MacAddress": "02:42:ac:12:00:02",
                    "IPv4Address": "172.18.0.2/16",
                    "IPv6Address": "",
                },
            },
        )
        mock_docker_client.networks.list.return_value = [model]
        mock_docker_client.networks.get.return_value = model

        network = DockerNetworkDirectory(mock_docker_client).find("net1")
        (endpoint,) = network.endpoints()
        info = endpoint.info()

        assert endpoint.id == "ep1"
        assert info.sandbox.container_id == "c1"
        assert info.iface.address == ipaddress.IPv4Interface("172.18.0.2/16")
        assert info.iface.address_ipv6 is None
        assert network.options == {"com.docker.network.bridge.name": "br-test"}

        resource = build_network_resource(network)
        assert resource.containers["c1"].ipv6_address == ""
        assert resource.containers["c1"].ipv4_address == "172.18.0.2/16"

    def test_create_passes_through_api_error(self, mock_docker_client):
        mock_docker_client.networks.create.side_effect = docker.errors.APIError("plugin not found")

        with pytest.raises(docker.errors.APIError):
            DockerNetworkDirectory(mock_docker_client).create("net1", "weird", {})

    def test_create_reloads_full_attrs(self, mock_docker_client):
        mock_docker_client.networks.create.return_value = MagicMock(id=NET_ID)
        mock_docker_client.networks.get.return_value = _network_model(NET_ID, "net1")

        network = DockerNetworkDirectory(mock_docker_client).create("net1", "", {})

        assert network.name == "net1"
        mock_docker_client.networks.create.assert_called_once_with("net1", driver=None, options=None)

    def test_delete_removes_model(self, mock_docker_client):
        model = _network_model(NET_ID, "net1")
        mock_docker_client.networks.list.return_value = [model]
        mock_docker_client.networks.get.return_value = model

        DockerNetworkDirectory(mock_docker_client).find("net1").delete()

        model.remove.assert_called_once_with()


class TestDockerContainerDirectory:
    def test_not_found(self, mock_docker_client):
        mock_docker_client.containers.get.side_effect = docker.errors.NotFound("No such container")

        with pytest.raises(ContainerNotFound):
            DockerContainerDirectory(mock_docker_client).find("ghost")

    def test_other_errors_become_directory_errors(self, mock_docker_client):
        mock_docker_client.containers.get.side_effect = docker.errors.APIError("boom")

        with pytest.raises(DirectoryError):
            DockerContainerDirectory(mock_docker_client).find("c1")

    def test_connect_by_network_name(self, mock_docker_client):
        model = _network_model(NET_ID, "net1")
        mock_docker_client.networks.list.return_value = [model]
        mock_docker_client.networks.get.return_value = model
        mock_docker_client.containers.get.return_value = MagicMock(id="c" * 64)

        service = EndpointAttachmentService(
            DockerNetworkDirectory(mock_docker_client),
            DockerContainerDirectory(mock_docker_client),
        )
        service.connect(NET_ID, "web")

        mock_docker_client.api.connect_container_to_network.assert_called_once_with("c" * 64, "net1")

    def test_disconnect_by_network_id(self, mock_docker_client):
        model = _network_model(NET_ID, "net1")
        mock_docker_client.networks.list.return_value = [model]
        mock_docker_client.networks.get.return_value = model
        mock_docker_client.containers.get.return_value = MagicMock(id="c" * 64)

        service = EndpointAttachmentService(
            DockerNetworkDirectory(mock_docker_client),
            DockerContainerDirectory(mock_docker_client),
        )
        service.disconnect("net1", "web")

        mock_docker_client.api.disconnect_container_from_network.assert_called_once_with("c" * 64, NET_ID)

    def test_missing_container_wrapped_by_service(self, mock_docker_client):
        model = _network_model(NET_ID, "net1")
        mock_docker_client.networks.list.return_value = [model]
        mock_docker_client.networks.get.return_value = model
        mock_docker_client.containers.get.side_effect = docker.errors.NotFound("No such container: ghost")

        service = EndpointAttachmentService(
            DockerNetworkDirectory(mock_docker_client),
            DockerContainerDirectory(mock_docker_client),
        )
        with pytest.raises(InvalidContainer, match="ghost"):
            service.connect("net1", "ghost")

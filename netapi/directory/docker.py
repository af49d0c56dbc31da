"""Docker-backed network and container directory.

Maps Docker networks and containers onto the directory contracts using the
docker SDK. Docker only reports endpoints for containers that have joined a
network, so every endpoint produced here carries a sandbox.

Lookup failures (``NotFound``) are translated to NetworkNotFound and
ContainerNotFound. Every other SDK error, and every error from create,
remove, connect and disconnect, propagates unchanged so the HTTP layer can
answer with Docker's own status code.
"""

from __future__ import annotations

import ipaddress
import logging
from typing import Any

import docker
from docker.errors import DockerException, NotFound

from netapi.directory.base import (
    Container,
    ContainerDirectory,
    Endpoint,
    EndpointInfo,
    InterfaceInfo,
    Network,
    NetworkDirectory,
    Sandbox,
)
from netapi.errors import ContainerNotFound, DirectoryError, NetworkNotFound

logger = logging.getLogger(__name__)


def _parse_interface(value: str | None, version: int) -> Any:
    """Parse "addr/prefix" into an ip_interface, None when empty or invalid."""
    if not value:
        return None
    try:
        iface = ipaddress.ip_interface(value)
    except ValueError:
        logger.debug(f"Ignoring malformed address {value!r}")
        return None
    if iface.version != version:
        return None
    return iface


class DockerEndpoint(Endpoint):
    """Endpoint built from one entry of a network's ``Containers`` map."""

    def __init__(self, container_id: str, data: dict[str, Any]):
        self._container_id = container_id
        self._data = data

    @property
    def id(self) -> str:
        return self._data.get("EndpointID", "")

    def info(self) -> EndpointInfo:
        iface = InterfaceInfo(
            mac_address=self._data.get("MacAddress") or None,
            address=_parse_interface(self._data.get("IPv4Address"), 4),
            address_ipv6=_parse_interface(self._data.get("IPv6Address"), 6),
        )
        return EndpointInfo(sandbox=Sandbox(container_id=self._container_id), iface=iface)


class DockerNetwork(Network):
    def __init__(self, model: docker.models.networks.Network):
        self._model = model

    @property
    def attrs(self) -> dict[str, Any]:
        return self._model.attrs

    @property
    def id(self) -> str:
        return self._model.id

    @property
    def name(self) -> str:
        return self.attrs.get("Name", "")

    @property
    def driver(self) -> str:
        return self.attrs.get("Driver", "")

    @property
    def options(self) -> dict[str, str]:
        return dict(self.attrs.get("Options") or {})

    def endpoints(self) -> list[Endpoint]:
        containers = self.attrs.get("Containers") or {}
        return [DockerEndpoint(cid, data) for cid, data in containers.items()]

    def delete(self) -> None:
        self._model.remove()
        logger.info(f"Removed docker network {self.name} ({self.id[:12]})")


class DockerNetworkDirectory(NetworkDirectory):
    name = "docker"

    def __init__(self, client: docker.DockerClient):
        self.client = client

    def _load(self, network_id: str) -> DockerNetwork | None:
        """Fetch full network detail; None if it vanished since listing."""
        try:
            return DockerNetwork(self.client.networks.get(network_id))
        except NotFound:
            logger.debug(f"Network {network_id[:12]} disappeared during lookup")
            return None

    def find_by_name(self, name: str) -> Network:
        # The daemon's name filter is a partial match
        for summary in self.client.networks.list(names=[name]):
            if summary.name != name:
                continue
            network = self._load(summary.id)
            if network is not None:
                return network
        raise NetworkNotFound(name)

    def find_by_id_prefix(self, prefix: str) -> list[Network]:
        if prefix:
            summaries = self.client.networks.list(ids=[prefix])
        else:
            summaries = self.client.networks.list()

        matched = [s for s in summaries if s.id.startswith(prefix)]
        exact = [s for s in matched if s.id == prefix]
        if exact:
            matched = exact

        networks: list[Network] = []
        for summary in matched:
            network = self._load(summary.id)
            if network is not None:
                networks.append(network)
        return networks

    def create(self, name: str, driver: str, options: dict[str, str]) -> Network:
        model = self.client.networks.create(name, driver=driver or None, options=options or None)
        logger.info(f"Created docker network {name} ({model.id[:12]})")
        # create() returns a model with partial attrs
        return self._load(model.id) or DockerNetwork(model)


class DockerContainer(Container):
    def __init__(self, client: docker.DockerClient, model: docker.models.containers.Container):
        self._client = client
        self._model = model

    @property
    def id(self) -> str:
        return self._model.id

    def connect_to_network(self, network_name: str) -> None:
        self._client.api.connect_container_to_network(self.id, network_name)
        logger.info(f"Connected container {self._model.name} to {network_name}")

    def disconnect_from_network(self, network: Network) -> None:
        self._client.api.disconnect_container_from_network(self.id, network.id)
        logger.info(f"Disconnected container {self._model.name} from {network.name}")


class DockerContainerDirectory(ContainerDirectory):
    def __init__(self, client: docker.DockerClient):
        self.client = client

    def find(self, identifier: str) -> Container:
        try:
            model = self.client.containers.get(identifier)
        except NotFound as e:
            raise ContainerNotFound(identifier) from e
        except DockerException as e:
            raise DirectoryError(str(e)) from e
        return DockerContainer(self.client, model)

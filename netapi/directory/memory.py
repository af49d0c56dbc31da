"""In-process network and container directory.

Holds networks, endpoints and containers in memory. Used for development
(``NETAPI_DIRECTORY_BACKEND=memory``) and as a deterministic collaborator in
tests. Address assignment is sequential within each network's subnet.
"""

from __future__ import annotations

import ipaddress
import logging
import secrets
import threading
from typing import Iterator, cast

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
from netapi.errors import (
    ContainerNotFound,
    DirectoryError,
    EndpointExists,
    EndpointNotFound,
    InvalidNetworkOptions,
    NetworkInUse,
    NetworkNotFound,
)

logger = logging.getLogger(__name__)

DEFAULT_DRIVER = "bridge"
DEFAULT_SUBNET = "172.18.0.0/16"


def _generate_id() -> str:
    return secrets.token_hex(32)


def _mac_from_id(endpoint_id: str) -> str:
    """Locally administered MAC derived from the endpoint ID."""
    octets = ["02"] + [endpoint_id[i:i + 2] for i in range(0, 10, 2)]
    return ":".join(octets)


class MemoryEndpoint(Endpoint):
    def __init__(self, endpoint_id: str, network: "MemoryNetwork"):
        self._id = endpoint_id
        self.network = network
        self.sandbox: Sandbox | None = None
        self.iface: InterfaceInfo | None = None

    @property
    def id(self) -> str:
        return self._id

    def info(self) -> EndpointInfo:
        return EndpointInfo(sandbox=self.sandbox, iface=self.iface)


class MemoryNetwork(Network):
    def __init__(
        self,
        directory: "MemoryNetworkDirectory",
        network_id: str,
        name: str,
        driver: str,
        options: dict[str, str],
    ):
        self._directory = directory
        self._id = network_id
        self._name = name
        self._driver = driver
        self._options = dict(options)
        self._endpoints: dict[str, MemoryEndpoint] = {}
        raw_subnet = self._options.get("subnet", DEFAULT_SUBNET)
        try:
            subnet = ipaddress.ip_network(raw_subnet)
        except ValueError as e:
            raise InvalidNetworkOptions("subnet", raw_subnet, str(e)) from e
        self.subnet = subnet
        self._hosts: Iterator = subnet.hosts()
        # First host address is the gateway
        next(self._hosts, None)

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def driver(self) -> str:
        return self._driver

    @property
    def options(self) -> dict[str, str]:
        return dict(self._options)

    def endpoints(self) -> list[Endpoint]:
        with self._directory.lock:
            return list(self._endpoints.values())

    def delete(self) -> None:
        self._directory.remove(self)

    def endpoint_for_container(self, container_id: str) -> MemoryEndpoint | None:
        for endpoint in self._endpoints.values():
            if endpoint.sandbox and endpoint.sandbox.container_id == container_id:
                return endpoint
        return None

    def add_endpoint(self, container_id: str) -> MemoryEndpoint:
        address = next(self._hosts, None)
        if address is None:
            raise DirectoryError(f"no free addresses left in {self.subnet}")

        endpoint = MemoryEndpoint(_generate_id(), self)
        endpoint.sandbox = Sandbox(container_id=container_id)
        iface_address = ipaddress.ip_interface(f"{address}/{self.subnet.prefixlen}")
        if isinstance(iface_address, ipaddress.IPv6Interface):
            endpoint.iface = InterfaceInfo(
                mac_address=_mac_from_id(endpoint.id), address_ipv6=iface_address
            )
        else:
            endpoint.iface = InterfaceInfo(
                mac_address=_mac_from_id(endpoint.id), address=iface_address
            )
        self._endpoints[endpoint.id] = endpoint
        return endpoint

    def add_detached_endpoint(self) -> MemoryEndpoint:
        """Create an endpoint with no sandbox (not yet joined by a container).

        Public seeding hook: the HTTP surface never creates such endpoints, but
        a driver may, and they still count as active when the network is
        deleted.
        """
        endpoint = MemoryEndpoint(_generate_id(), self)
        self._endpoints[endpoint.id] = endpoint
        return endpoint

    def remove_endpoint(self, endpoint: MemoryEndpoint) -> None:
        self._endpoints.pop(endpoint.id, None)


class MemoryNetworkDirectory(NetworkDirectory):
    """Networks kept in insertion order."""

    name = "memory"

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._networks: dict[str, MemoryNetwork] = {}

    def find_by_name(self, name: str) -> Network:
        with self.lock:
            for network in self._networks.values():
                if network.name == name:
                    return network
        raise NetworkNotFound(name)

    def find_by_id_prefix(self, prefix: str) -> list[Network]:
        with self.lock:
            exact = self._networks.get(prefix)
            if exact is not None:
                return [exact]
            return [n for n in self._networks.values() if n.id.startswith(prefix)]

    def create(self, name: str, driver: str, options: dict[str, str]) -> Network:
        network = MemoryNetwork(
            self, _generate_id(), name, driver or DEFAULT_DRIVER, options or {}
        )
        with self.lock:
            self._networks[network.id] = network
        logger.info(f"Created network {name} ({network.id[:12]}, driver={network.driver})")
        return network

    def remove(self, network: MemoryNetwork) -> None:
        with self.lock:
            if network.id not in self._networks:
                raise NetworkNotFound(network.id)
            count = len(network.endpoints())
            if count:
                raise NetworkInUse(network.name, network.id, count)
            del self._networks[network.id]
        logger.info(f"Deleted network {network.name} ({network.id[:12]})")

    def contains(self, network_id: str) -> bool:
        with self.lock:
            return network_id in self._networks

    def count_by_name(self, name: str) -> int:
        with self.lock:
            return sum(1 for n in self._networks.values() if n.name == name)


class MemoryContainer(Container):
    def __init__(self, directory: "MemoryContainerDirectory", container_id: str, name: str):
        self._directory = directory
        self._id = container_id
        self.name = name

    @property
    def id(self) -> str:
        return self._id

    def connect_to_network(self, network_name: str) -> None:
        networks = self._directory.networks
        with networks.lock:
            network = cast(MemoryNetwork, networks.find(network_name))
            if network.endpoint_for_container(self.id) is not None:
                raise EndpointExists(self.id, network.name)
            endpoint = network.add_endpoint(self.id)
        logger.info(f"Connected {self.name} to {network.name} (endpoint {endpoint.id[:12]})")

    def disconnect_from_network(self, network: Network) -> None:
        networks = self._directory.networks
        with networks.lock:
            if not isinstance(network, MemoryNetwork) or not networks.contains(network.id):
                raise NetworkNotFound(network.id)
            endpoint = network.endpoint_for_container(self.id)
            if endpoint is None:
                raise EndpointNotFound(self.id, network.name)
            network.remove_endpoint(endpoint)
        logger.info(f"Disconnected {self.name} from {network.name}")


class MemoryContainerDirectory(ContainerDirectory):
    """Containers registered explicitly with ``add``."""

    def __init__(self, networks: MemoryNetworkDirectory):
        self.networks = networks
        self._containers: dict[str, MemoryContainer] = {}

    def add(self, name: str, container_id: str | None = None) -> MemoryContainer:
        container = MemoryContainer(self, container_id or _generate_id(), name)
        with self.networks.lock:
            self._containers[container.id] = container
        return container

    def find(self, identifier: str) -> Container:
        with self.networks.lock:
            if identifier in self._containers:
                return self._containers[identifier]
            for container in self._containers.values():
                if container.name == identifier:
                    return container
            matches = [c for c in self._containers.values() if identifier and c.id.startswith(identifier)]
        if len(matches) == 1:
            return matches[0]
        raise ContainerNotFound(identifier)

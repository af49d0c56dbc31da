"""Connecting and disconnecting containers to networks."""

from __future__ import annotations

import logging

from netapi.directory.base import Container, ContainerDirectory, NetworkDirectory
from netapi.errors import InvalidContainer

logger = logging.getLogger(__name__)


class EndpointAttachmentService:
    def __init__(self, networks: NetworkDirectory, containers: ContainerDirectory):
        self.networks = networks
        self.containers = containers

    def _find_container(self, identifier: str) -> Container:
        try:
            return self.containers.find(identifier)
        except Exception as e:
            raise InvalidContainer(identifier, e) from e

    def connect(self, network_identifier: str, container_identifier: str) -> None:
        """Attach a container to a network.

        The container is attached by network *name*, so the container runtime
        resolves the name again on its side.
        """
        network = self.networks.find(network_identifier)
        container = self._find_container(container_identifier)
        container.connect_to_network(network.name)
        logger.info(f"Connected {container_identifier} to network {network.name} ({network.id[:12]})")

    def disconnect(self, network_identifier: str, container_identifier: str) -> None:
        """Detach a container from the resolved network object."""
        network = self.networks.find(network_identifier)
        container = self._find_container(container_identifier)
        container.disconnect_from_network(network)
        logger.info(f"Disconnected {container_identifier} from network {network.name} ({network.id[:12]})")

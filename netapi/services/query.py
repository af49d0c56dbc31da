"""Read side: list and inspect networks."""

from __future__ import annotations

import logging

from netapi.directory.base import NetworkDirectory
from netapi.errors import NetworkNotFound
from netapi.filters import KNOWN_FIELDS, parse_filters
from netapi.schemas import NetworkResource
from netapi.services.resources import build_network_resource

logger = logging.getLogger(__name__)


class NetworkQueryService:
    """Resolves list/get requests against a network directory."""

    def __init__(self, networks: NetworkDirectory):
        self.networks = networks

    def list(self, filter_spec: str | None = None) -> list[NetworkResource]:
        """List networks, optionally narrowed by ``name`` and ``id`` filters.

        The two filters are additive: the result holds the name matches (in
        listed order) followed by the ID matches (in listed order), so a
        network matching both appears twice. Unknown names are skipped. ID
        values match by prefix and may each yield several networks. With
        neither filter every network is returned.
        """
        filters = parse_filters(filter_spec)
        ignored = sorted(set(filters) - KNOWN_FIELDS)
        if ignored:
            logger.debug(f"Ignoring unsupported network filters: {ignored}")

        resources: list[NetworkResource] = []

        names = filters.get("name")
        if names is not None:
            for name in names:
                try:
                    network = self.networks.find_by_name(name)
                except NetworkNotFound:
                    continue
                resources.append(build_network_resource(network))

        ids = filters.get("id")
        if ids is not None:
            for network_id in ids:
                for network in self.networks.find_by_id_prefix(network_id):
                    resources.append(build_network_resource(network))

        if names is None and ids is None:
            for network in self.networks.find_by_id_prefix(""):
                resources.append(build_network_resource(network))

        return resources

    def get(self, identifier: str) -> NetworkResource:
        """Inspect one network by name, ID or ID prefix."""
        return build_network_resource(self.networks.find(identifier))

"""Network creation and deletion."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from netapi.directory.base import NetworkDirectory
from netapi.errors import NetworkNameConflict, NetworkNotFound

logger = logging.getLogger(__name__)


@dataclass
class NetworkCreateResult:
    """ID of the new network and an optional duplicate-name warning."""
    id: str
    warning: str = ""


class NetworkLifecycleService:
    """Creates and deletes networks.

    Network names are not unique. A caller opts into uniqueness per request
    with ``check_duplicate``; without it a same-named network only produces a
    warning.
    """

    def __init__(self, networks: NetworkDirectory):
        self.networks = networks

    def create(
        self,
        name: str,
        driver: str = "",
        options: dict[str, str] | None = None,
        check_duplicate: bool = False,
    ) -> NetworkCreateResult:
        warning = ""
        try:
            existing = self.networks.find_by_name(name)
        except NetworkNotFound:
            existing = None

        if existing is not None:
            if check_duplicate:
                logger.info(f"Refusing to create network {name}: name already in use by {existing.id[:12]}")
                raise NetworkNameConflict(name)
            warning = f"Network with name {existing.name} (id : {existing.id}) already exists"
            logger.warning(warning)

        network = self.networks.create(name, driver, options or {})
        logger.info(f"Network {name} created ({network.id[:12]})")
        return NetworkCreateResult(id=network.id, warning=warning)

    def delete(self, identifier: str) -> None:
        """Delete a network. Directory refusals (e.g. active endpoints) propagate."""
        network = self.networks.find(identifier)
        network.delete()
        logger.info(f"Network {network.name} deleted ({network.id[:12]})")

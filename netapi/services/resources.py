"""Resource builders: directory objects -> wire resource views.

Pure transformations. An endpoint only appears in a network's ``Containers``
map when it is attached to a sandbox; unattached endpoints are skipped.
"""

from __future__ import annotations

import logging
import re

from netapi.directory.base import Endpoint, Network
from netapi.schemas import EndpointResource, NetworkResource

logger = logging.getLogger(__name__)

_MAC_SEPARATORS = re.compile(r"[:\-.]")


def format_mac(mac: str) -> str:
    """Canonical lower-case colon form, "" if ``mac`` is not a 48-bit MAC."""
    digits = _MAC_SEPARATORS.sub("", mac).lower()
    if len(digits) != 12 or not all(c in "0123456789abcdef" for c in digits):
        logger.debug(f"Ignoring malformed MAC address {mac!r}")
        return ""
    return ":".join(digits[i:i + 2] for i in range(0, 12, 2))


def build_endpoint_resource(endpoint: Endpoint | None) -> EndpointResource:
    resource = EndpointResource()
    if endpoint is None:
        return resource

    resource.endpoint_id = endpoint.id
    iface = endpoint.info().iface
    if iface is not None:
        if iface.mac_address is not None:
            resource.mac_address = format_mac(iface.mac_address)
        if iface.address is not None:
            resource.ipv4_address = str(iface.address)
        if iface.address_ipv6 is not None:
            resource.ipv6_address = str(iface.address_ipv6)
    return resource


def build_network_resource(network: Network | None) -> NetworkResource:
    resource = NetworkResource()
    if network is None:
        return resource

    resource.id = network.id
    resource.name = network.name
    resource.driver = network.driver
    for endpoint in network.endpoints():
        sandbox = endpoint.info().sandbox
        if sandbox is None:
            continue
        resource.containers[sandbox.container_id] = build_endpoint_resource(endpoint)
    return resource

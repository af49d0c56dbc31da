"""Network services."""

from netapi.services.attachment import EndpointAttachmentService
from netapi.services.lifecycle import NetworkCreateResult, NetworkLifecycleService
from netapi.services.query import NetworkQueryService
from netapi.services.resources import build_endpoint_resource, build_network_resource

__all__ = [
    "EndpointAttachmentService",
    "NetworkCreateResult",
    "NetworkLifecycleService",
    "NetworkQueryService",
    "build_endpoint_resource",
    "build_network_resource",
]

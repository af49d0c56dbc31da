"""Error hierarchy for the network management API.

Every error carries an HTTP ``status_code`` used by the transport layer's
exception handler. Errors raised by directory backends derive from
``DirectoryError`` and pass through the services unchanged.
"""

from __future__ import annotations


class NetworkAPIError(Exception):
    """Base exception for all netapi errors."""

    status_code: int = 500


class InvalidRequest(NetworkAPIError):
    """Request could not be parsed (e.g. non-JSON body)."""

    status_code = 400


class InvalidFilterSyntax(NetworkAPIError):
    """The ``filters`` parameter is not a well-formed filter specification."""

    status_code = 400

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid filter '{raw}': {reason}")


class NetworkNotFound(NetworkAPIError):
    """No network matches the given name, ID or ID prefix."""

    status_code = 404

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"network {identifier} not found")


class NetworkNameConflict(NetworkAPIError):
    """A network with this name exists and the caller asked for uniqueness."""

    status_code = 409

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"network with name {name} already exists")


class InvalidContainer(NetworkAPIError):
    """Container lookup failed during connect/disconnect."""

    status_code = 404

    def __init__(self, identifier: str, cause: Exception):
        self.identifier = identifier
        self.cause = cause
        super().__init__(f"invalid container {identifier} : {cause}")


# --- Directory (collaborator) failures ---

class DirectoryError(NetworkAPIError):
    """Failure reported by a network or container directory."""


class ContainerNotFound(DirectoryError):
    status_code = 404

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"no such container: {identifier}")


class AmbiguousNetworkID(DirectoryError):
    """An ID prefix matched more than one network."""

    status_code = 400

    def __init__(self, prefix: str, matches: int):
        self.prefix = prefix
        self.matches = matches
        super().__init__(f"network id prefix {prefix} is ambiguous ({matches} matches)")


class InvalidNetworkOptions(DirectoryError):
    """Driver options rejected by the directory."""

    status_code = 400

    def __init__(self, option: str, value: str, reason: str):
        self.option = option
        self.value = value
        super().__init__(f"invalid network option {option}={value}: {reason}")


class NetworkInUse(DirectoryError):
    """Network still has endpoints and cannot be removed."""

    status_code = 403

    def __init__(self, name: str, network_id: str, endpoints: int):
        self.name = name
        self.network_id = network_id
        self.endpoints = endpoints
        super().__init__(
            f"network {name} id {network_id} has active endpoints ({endpoints})"
        )


class EndpointExists(DirectoryError):
    status_code = 409

    def __init__(self, container_id: str, network_name: str):
        super().__init__(
            f"container {container_id} is already connected to network {network_name}"
        )


class EndpointNotFound(DirectoryError):
    status_code = 404

    def __init__(self, container_id: str, network_name: str):
        super().__init__(
            f"container {container_id} is not connected to network {network_name}"
        )

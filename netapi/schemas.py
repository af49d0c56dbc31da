"""Wire schemas for the network API.

Field aliases carry the JSON names used on the wire (``Id``, ``Containers``,
``EndpointID``...). Python code uses the snake_case attribute names.
"""

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --- Resource views ---

class EndpointResource(_WireModel):
    """One container's attachment to a network. Unset addresses are ""."""
    endpoint_id: str = Field(default="", alias="EndpointID")
    mac_address: str = Field(default="", alias="MacAddress")
    ipv4_address: str = Field(default="", alias="IPv4Address")  # e.g. "172.18.0.2/16"
    ipv6_address: str = Field(default="", alias="IPv6Address")


class NetworkResource(_WireModel):
    """Snapshot of a network and the containers attached to it."""
    id: str = Field(default="", alias="Id")
    name: str = Field(default="", alias="Name")
    driver: str = Field(default="", alias="Driver")
    # container ID -> endpoint
    containers: dict[str, EndpointResource] = Field(default_factory=dict, alias="Containers")


# --- Requests ---

class NetworkCreate(_WireModel):
    """POST /networks/create body."""
    name: str = Field(alias="Name", min_length=1)
    driver: str = Field(default="", alias="Driver")
    options: dict[str, str] = Field(default_factory=dict, alias="Options")
    check_duplicate: bool = Field(default=False, alias="CheckDuplicate")


class NetworkCreateResponse(_WireModel):
    id: str = Field(alias="Id")
    warning: str = Field(default="", alias="Warning")


class NetworkConnect(_WireModel):
    """POST /networks/{id}/connect body."""
    container: str = Field(alias="Container", min_length=1)


class NetworkDisconnect(_WireModel):
    """POST /networks/{id}/disconnect body."""
    container: str = Field(alias="Container", min_length=1)

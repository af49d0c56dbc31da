"""Tests for the network/endpoint resource builders."""
from __future__ import annotations

import ipaddress

from netapi.directory.base import Endpoint, EndpointInfo, InterfaceInfo, Network, Sandbox
from netapi.schemas import EndpointResource, NetworkResource
from netapi.services.resources import build_endpoint_resource, build_network_resource, format_mac


class StubEndpoint(Endpoint):
    def __init__(self, endpoint_id: str, info: EndpointInfo):
        self._id = endpoint_id
        self._info = info

    @property
    def id(self) -> str:
        return self._id

    def info(self) -> EndpointInfo:
        return self._info


class StubNetwork(Network):
    def __init__(self, endpoints: list[Endpoint] | None = None):
        self._endpoints = endpoints or []

    id = "n" * 64
    name = "net1"
    driver = "bridge"
    options: dict[str, str] = {}

    def endpoints(self) -> list[Endpoint]:
        return self._endpoints

    def delete(self) -> None:
        raise AssertionError("builders must not mutate")


def _attached(endpoint_id: str, container_id: str, **iface) -> StubEndpoint:
    return StubEndpoint(
        endpoint_id,
        EndpointInfo(sandbox=Sandbox(container_id), iface=InterfaceInfo(**iface)),
    )


class TestBuildNetworkResource:
    def test_none_returns_zero_value(self):
        resource = build_network_resource(None)
        assert resource == NetworkResource()
        assert resource.containers == {}

    def test_network_without_endpoints_has_empty_containers(self):
        resource = build_network_resource(StubNetwork())
        assert resource.id == "n" * 64
        assert resource.name == "net1"
        assert resource.driver == "bridge"
        assert resource.containers == {}

    def test_endpoints_keyed_by_container_id(self):
        network = StubNetwork([
            _attached("ep1", "c1", address=ipaddress.IPv4Interface("172.18.0.2/16")),
            _attached("ep2", "c2"),
        ])

        resource = build_network_resource(network)

        assert set(resource.containers) == {"c1", "c2"}
        assert resource.containers["c1"].endpoint_id == "ep1"
        assert resource.containers["c1"].ipv4_address == "172.18.0.2/16"
        assert resource.containers["c2"].endpoint_id == "ep2"

    def test_endpoint_without_sandbox_is_omitted(self):
        detached = StubEndpoint("ep-detached", EndpointInfo())
        network = StubNetwork([detached, _attached("ep1", "c1")])

        resource = build_network_resource(network)

        assert list(resource.containers) == ["c1"]

    def test_wire_names(self):
        network = StubNetwork([_attached("ep1", "c1", mac_address="02:42:ac:12:00:02")])
        payload = build_network_resource(network).model_dump(by_alias=True)

        assert set(payload) == {"Id", "Name", "Driver", "Containers"}
        assert payload["Containers"]["c1"] == {
            "EndpointID": "ep1",
            "MacAddress": "02:42:ac:12:00:02",
            "IPv4Address": "",
            "IPv6Address": "",
        }


class TestBuildEndpointResource:
    def test_none_returns_zero_value(self):
        assert build_endpoint_resource(None) == EndpointResource()

    def test_no_interface_only_sets_id(self):
        endpoint = StubEndpoint("ep1", EndpointInfo(sandbox=Sandbox("c1")))
        resource = build_endpoint_resource(endpoint)
        assert resource.endpoint_id == "ep1"
        assert resource.mac_address == ""
        assert resource.ipv4_address == ""
        assert resource.ipv6_address == ""

    def test_unset_ipv6_renders_empty(self):
        endpoint = _attached(
            "ep1",
            "c1",
            mac_address="02:42:AC:12:00:02",
            address=ipaddress.IPv4Interface("10.0.0.5/24"),
        )
        resource = build_endpoint_resource(endpoint)
        assert resource.mac_address == "02:42:ac:12:00:02"
        assert resource.ipv4_address == "10.0.0.5/24"
        assert resource.ipv6_address == ""

    def test_ipv6_rendered_in_canonical_form(self):
        endpoint = _attached(
            "ep1", "c1", address_ipv6=ipaddress.IPv6Interface("2001:0db8:0000::0010/64")
        )
        resource = build_endpoint_resource(endpoint)
        assert resource.ipv6_address == "2001:db8::10/64"
        assert resource.ipv4_address == ""


class TestFormatMac:
    def test_dash_separated(self):
        assert format_mac("02-42-AC-12-00-02") == "02:42:ac:12:00:02"

    def test_dotted_cisco_style(self):
        assert format_mac("0242.ac12.0002") == "02:42:ac:12:00:02"

    def test_malformed_renders_empty(self):
        assert format_mac("not-a-mac") == ""
        assert format_mac("02:42:ac") == ""

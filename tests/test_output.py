"""Tests for the output renderer."""

import json

import pytest

from mping.address import IPVersion, SocketAddress
from mping.models import LocalAddress, MulticastAddress, SessionAddresses, Target
from mping.options import build_options
from mping.output import render, render_to_string, session_to_dict

# -- Fixtures ----------------------------------------------------------------


def _remote(label: str, addr: str) -> Target:
    target = Target(label, [SocketAddress.from_text(addr, 4321)])
    target.materialize(IPVersion.ANY)
    return target


def _session(**overrides: object) -> SessionAddresses:
    """SessionAddresses for an IPv4 session with two remote hosts."""
    defaults: dict = {
        "local": LocalAddress(
            host_name="node1",
            address=SocketAddress.from_text("192.168.1.10", 4321),
            ifname="eth0",
        ),
        "mcast": MulticastAddress(
            label="232.43.211.234",
            address=SocketAddress.from_text("232.43.211.234", 4321),
        ),
        "port": 4321,
        "ifname": "eth0",
        "targets": [_remote("node2", "192.168.1.11"), _remote("node3", "192.168.1.12")],
        "ip_version": IPVersion.V4,
        "single_target": False,
    }
    defaults.update(overrides)
    return SessionAddresses(**defaults)


# -- Table -------------------------------------------------------------------


class TestTableOutput:
    def test_contains_every_address(self) -> None:
        out = render_to_string(_session(), "table")

        for text in ("192.168.1.10", "232.43.211.234", "192.168.1.11", "192.168.1.12"):
            assert text in out
        assert "node2" in out
        assert "IPv4" in out

    def test_summary_line(self) -> None:
        out = render_to_string(_session(), "table")
        assert "interface eth0, port 4321, 2 remote" in out

    def test_single_target_summary(self) -> None:
        out = render_to_string(_session(single_target=True), "table")
        assert "single target" in out

    def test_options_table(self) -> None:
        out = render_to_string(_session(), "table", options=build_options())
        assert "Session options" in out
        assert "dup_buf_items" in out

    def test_unconstrained_title(self) -> None:
        out = render_to_string(_session(ip_version=IPVersion.ANY), "table")
        assert "any IP version" in out


# -- JSON --------------------------------------------------------------------


class TestJsonOutput:
    def test_structure(self) -> None:
        payload = json.loads(render_to_string(_session(), "json"))

        assert payload["ip_version"] == 4
        assert payload["port"] == 4321
        assert payload["ifname"] == "eth0"
        assert payload["single_target"] is False
        assert payload["local"] == {
            "host_name": "node1",
            "address": "192.168.1.10",
            "port": 4321,
            "version": 4,
        }
        assert payload["mcast"]["address"] == "232.43.211.234"
        assert [t["label"] for t in payload["targets"]] == ["node2", "node3"]
        assert "options" not in payload

    def test_with_options(self) -> None:
        payload = json.loads(render_to_string(_session(), "json", options=build_options()))
        assert payload["options"]["ttl"] == 64

    def test_scope_id_included_when_set(self) -> None:
        local = LocalAddress(
            host_name="node1",
            address=SocketAddress.from_text("fe80::10", 4321, scope_id=2),
            ifname="eth0",
        )
        payload = session_to_dict(_session(local=local, ip_version=IPVersion.V6))

        assert payload["local"]["scope_id"] == 2


class TestRenderDispatch:
    def test_unknown_format_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown output format"):
            render(_session(), "xml")

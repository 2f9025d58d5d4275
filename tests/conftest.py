"""Shared fakes for name resolution and interface enumeration."""

import ipaddress
import socket
from collections import namedtuple
from collections.abc import Iterator
from unittest.mock import patch

import psutil
import pytest

# Same field layout as psutil's snicaddr.
Snic = namedtuple("Snic", ["family", "address", "netmask", "broadcast", "ptp"])

LOCAL_V4 = "192.168.1.10"
LOCAL_V6 = "2001:db8::10"

DEFAULT_INTERFACES = {
    "lo": [
        Snic(socket.AF_INET, "127.0.0.1", "255.0.0.0", None, None),
        Snic(socket.AF_INET6, "::1", "ffff:ffff:ffff:ffff:ffff:ffff:ffff:ffff", None, None),
    ],
    "eth0": [
        Snic(psutil.AF_LINK, "52:54:00:12:34:56", None, "ff:ff:ff:ff:ff:ff", None),
        Snic(socket.AF_INET, LOCAL_V4, "255.255.255.0", "192.168.1.255", None),
        Snic(socket.AF_INET6, LOCAL_V6, "ffff:ffff:ffff:ffff::", None, None),
        Snic(socket.AF_INET6, "fe80::10%2", "ffff:ffff:ffff:ffff::", None, None),
    ],
}


def make_getaddrinfo(table: dict[str, list[str]]):
    """Build a ``socket.getaddrinfo`` stand-in answering from *table*.

    Hosts missing from *table* resolve only if they are literal addresses.
    """

    def fake_getaddrinfo(host, port, family=socket.AF_UNSPEC, type=0, proto=0, flags=0):
        if host in table:
            texts = table[host]
        else:
            try:
                ipaddress.ip_address(host.partition("%")[0])
            except ValueError:
                raise socket.gaierror(
                    socket.EAI_NONAME, "Name or service not known"
                ) from None
            texts = [host]

        results = []
        for text in texts:
            ip = ipaddress.ip_address(text.partition("%")[0])
            fam = socket.AF_INET if ip.version == 4 else socket.AF_INET6
            if family not in (socket.AF_UNSPEC, fam):
                continue
            if fam == socket.AF_INET:
                sockaddr = (text, int(port))
            else:
                sockaddr = (text, int(port), 0, 0)
            results.append((fam, socket.SOCK_DGRAM, 17, "", sockaddr))

        if not results:
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
        return results

    return fake_getaddrinfo


@pytest.fixture
def dns_table() -> Iterator[dict[str, list[str]]]:
    """Patch the resolver; tests fill the returned hostname → addresses table."""
    table: dict[str, list[str]] = {}
    with patch("mping.dns.socket.getaddrinfo", side_effect=make_getaddrinfo(table)):
        yield table


@pytest.fixture
def local_interfaces() -> Iterator[dict]:
    """Patch ``psutil.net_if_addrs``; tests may edit the returned mapping."""
    ifaces = {name: list(addrs) for name, addrs in DEFAULT_INTERFACES.items()}
    with patch("mping.interfaces.psutil.net_if_addrs", return_value=ifaces):
        yield ifaces

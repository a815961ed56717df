import socket
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from cloud_hostinfo import system


def addr(family, address):
    return SimpleNamespace(family=family, address=address, netmask=None, broadcast=None, ptp=None)


def stats(isup):
    return SimpleNamespace(isup=isup)


def interfaces(addrs, if_stats):
    return (
        patch("cloud_hostinfo.system.psutil.net_if_addrs", return_value=addrs),
        patch("cloud_hostinfo.system.psutil.net_if_stats", return_value=if_stats),
    )


def test_outbound_ip_skips_loopback_down_and_ipv6():
    addrs = {
        "lo": [addr(socket.AF_INET, "127.0.0.1")],
        "eth0": [addr(socket.AF_INET, "10.0.0.5")],
        "eth1": [addr(socket.AF_INET6, "fe80::1"), addr(socket.AF_INET, "192.168.1.20")],
    }
    if_stats = {"lo": stats(True), "eth0": stats(False), "eth1": stats(True)}
    addrs_patch, stats_patch = interfaces(addrs, if_stats)
    with addrs_patch, stats_patch:
        assert system.outbound_ip() == "192.168.1.20"


def test_outbound_ip_not_connected():
    addrs_patch, stats_patch = interfaces({"lo": [addr(socket.AF_INET, "127.0.0.1")]}, {"lo": stats(True)})
    with addrs_patch, stats_patch, pytest.raises(OSError, match="connected"):
        system.outbound_ip()


def test_reverse_lookup():
    with patch("socket.gethostbyaddr", return_value=("host.example.com", ["alias.example.com"], ["198.51.100.1"])):
        assert system.reverse_lookup("198.51.100.1") == ["host.example.com", "alias.example.com"]


@pytest.mark.parametrize("error", [socket.herror(1, "Unknown host"), socket.gaierror(-2, "Name or service not known")])
def test_reverse_lookup_no_record(error):
    with patch("socket.gethostbyaddr", side_effect=error):
        assert system.reverse_lookup("198.51.100.1") == []


def test_cname():
    with patch("socket.gethostbyname_ex", return_value=("vm-1.example.com", ["vm-1"], ["10.0.0.5"])) as lookup:
        assert system.cname("vm-1") == "vm-1.example.com"
    lookup.assert_called_once_with("vm-1")


def test_lookup_host_deduplicates():
    infos = [
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("10.0.0.5", 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("10.0.0.5", 0)),
        (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("fd00::5", 0, 0, 0)),
    ]
    with patch("socket.gethostname", return_value="vm-1"), patch("socket.getaddrinfo", return_value=infos) as getaddrinfo:
        assert system.lookup_host() == ["10.0.0.5", "fd00::5"]
    assert getaddrinfo.call_args.args[0] == "vm-1"


def test_collect_captures_failures():
    with patch("socket.gethostname", return_value="vm-1"), \
            patch("socket.gethostbyname_ex", side_effect=socket.gaierror(-2, "Name or service not known")), \
            patch("socket.getaddrinfo", side_effect=socket.gaierror(-2, "Name or service not known")), \
            patch("cloud_hostinfo.system.outbound_ip", return_value="10.0.0.5"):
        results = {r.name: r for r in system.collect()}

    assert results["hostname"].value == "vm-1"
    assert not results["cname"].ok
    assert not results["addresses"].ok
    assert results["outbound_ip"].value == "10.0.0.5"

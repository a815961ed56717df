"""Host information from the operating system, independent of any cloud provider."""

from .cloud_meta import FieldResult, capture
import ipaddress
import logging
import psutil
import socket


logger = logging.getLogger(__name__)


def hostname() -> str:
    return socket.gethostname()


def cname(name: str | None = None) -> str:
    """Canonical name of `name` (the local hostname by default)."""
    return socket.gethostbyname_ex(name or hostname())[0]


def lookup_host(name: str | None = None) -> list[str]:
    """Addresses `name` (the local hostname by default) resolves to."""
    infos = socket.getaddrinfo(name or hostname(), None, proto=socket.IPPROTO_TCP)
    addresses = []
    for _family, _type, _proto, _canonname, sockaddr in infos:
        if sockaddr[0] not in addresses:
            addresses.append(sockaddr[0])
    return addresses


def reverse_lookup(address: str) -> list[str]:
    """Names registered for `address`, the primary one first. Empty if there's no record."""
    try:
        name, aliases, _ = socket.gethostbyaddr(address)
    except (socket.herror, socket.gaierror) as e:
        logger.debug("No reverse record for %s: %s", address, e)
        return []
    return [name] + aliases


def outbound_ip() -> str:
    """First IPv4 address of an interface that is up and isn't a loopback."""
    stats = psutil.net_if_stats()
    for iface, addrs in psutil.net_if_addrs().items():
        if iface in stats and not stats[iface].isup:
            continue
        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            if ipaddress.ip_address(addr.address).is_loopback:
                continue
            return addr.address
    raise OSError("are you connected to the network?")


def collect() -> list[FieldResult]:
    return [
        capture("hostname", hostname, errors=OSError),
        capture("cname", cname, errors=OSError),
        capture("addresses", lookup_host, errors=OSError),
        capture("outbound_ip", outbound_ip, errors=OSError),
    ]

"""
Address resolution and connection attempts shared by every probe of a scan.
"""
import socket
from functools import lru_cache
from typing import Any, Tuple

# (family, sockaddr) as returned by getaddrinfo, with port 0.
ResolvedAddress = Tuple[int, Tuple[Any, ...]]

@lru_cache(maxsize=128)
def resolve_host(host: str) -> Tuple[ResolvedAddress, ...]:
    """
    Resolves a hostname or IP literal (IPv6 zones included) to TCP addresses.

    A full scan probes the same host tens of thousands of times, so the
    answer is cached. Returns an empty tuple when the name does not resolve.
    """
    try:
        infos = socket.getaddrinfo(host, None, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError):
        return ()
    addresses = []
    for family, _, _, _, sockaddr in infos:
        if family in (socket.AF_INET, socket.AF_INET6) and (family, sockaddr) not in addresses:
            addresses.append((family, sockaddr))
    return tuple(addresses)

def try_connect(host: str, port: int, timeout: float) -> bool:
    """Returns True if any resolved address of host accepts a TCP connection on port."""
    for family, sockaddr in resolve_host(host):
        target = (sockaddr[0], port) + tuple(sockaddr[2:])
        try:
            with socket.socket(family, socket.SOCK_STREAM) as sock:
                sock.settimeout(timeout)
                if sock.connect_ex(target) == 0:
                    return True
        except OSError:
            continue
    return False

"""Best-guess LAN address for sharing the UI link with other devices."""
from __future__ import annotations

import re
import socket
from typing import Iterable, List, Tuple

import psutil


Candidate = Tuple[str, str]  # (interface name, IPv4 address)

LOOPBACK_IP = "127.0.0.1"

_VIRTUAL_MARKERS = ("vmnet", "virtual", "wsl", "docker", "pseudo", "veth", "vbox", "br-", "tun", "tap")
_PREFERRED = re.compile(r"^(wi-?fi|wlan|wl|ethernet|eth|en)", re.IGNORECASE)


def list_ipv4_candidates() -> List[Candidate]:
    """Non-loopback IPv4 addresses, in interface enumeration order."""
    out: List[Candidate] = []
    for name, addrs in psutil.net_if_addrs().items():
        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            if not addr.address or addr.address.startswith("127."):
                continue
            out.append((name, addr.address))
    return out


def _is_virtual(name: str) -> bool:
    n = name.lower()
    return any(marker in n for marker in _VIRTUAL_MARKERS)


def pick_lan_ip(candidates: Iterable[Candidate]) -> str:
    candidates = list(candidates)
    physical = [c for c in candidates if not _is_virtual(c[0])]
    preferred = [c for c in physical if _PREFERRED.match(c[0].strip())]
    for pool in (preferred, physical, candidates):
        if pool:
            return pool[0][1]
    return LOOPBACK_IP


def get_lan_ip() -> str:
    try:
        return pick_lan_ip(list_ipv4_candidates())
    except OSError:
        return LOOPBACK_IP

from __future__ import annotations

import ipaddress
import logging
import socket

logger = logging.getLogger(__name__)


def enumerate_addresses(network: str) -> list[str]:
    """Return every address in ``network`` in ascending order.

    Ranges holding more than two addresses lose their first (network) and
    last (broadcast) address. A malformed range is logged and yields no
    addresses.
    """
    try:
        net = ipaddress.ip_network(network.strip(), strict=False)
    except ValueError as exc:
        logger.error("Error parsing network range %s: %s", network, exc)
        return []

    addresses = [str(ip) for ip in net]
    if len(addresses) > 2:
        return addresses[1:-1]
    return addresses


def detect_local_network() -> str:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            local_ip = sock.getsockname()[0]
        network = ipaddress.ip_network(f"{local_ip}/24", strict=False)
        logger.debug("Detected local network: %s", network)
        return str(network)
    except OSError as exc:
        raise RuntimeError("Could not detect local network") from exc

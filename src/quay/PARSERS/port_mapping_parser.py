"""
Parser for --port SERVICE:HOST_PORT:CONTAINER_PORT tokens.
"""
import re
from typing import List, Sequence, Tuple
from ..MODELS.selection import PortOverride
from ..errors import PortMappingError

EXPECTED_FORMAT = "invalid format, expected SERVICE:HOST_PORT:CONTAINER_PORT"

# Ports are ASCII digits only; \d would also accept other Unicode digits.
_DIGITS = re.compile(r"[0-9]+")


def parse_port_mapping(token: str) -> PortOverride:
    """
    Decodes one port mapping token. The token must match exactly; no
    whitespace is trimmed and port ranges (1-65535) are not enforced.

    :param token: Raw token, e.g. ``web:8080:80``.
    :return: The decoded override.
    :raises PortMappingError: If the token is malformed.
    """
    parts = token.split(":")
    if len(parts) != 3 or not parts[0]:
        raise PortMappingError(token, EXPECTED_FORMAT)

    service_name, host_port, container_port = parts
    if not _DIGITS.fullmatch(host_port):
        raise PortMappingError(token, f"invalid host port: {host_port}")
    if not _DIGITS.fullmatch(container_port):
        raise PortMappingError(token, f"invalid container port: {container_port}")

    return PortOverride(
        service_name=service_name,
        host_port=host_port,
        container_port=int(container_port),
    )


def parse_port_mappings(tokens: Sequence[str]) -> Tuple[List[PortOverride], List[PortMappingError]]:
    """
    Decodes every token, skipping malformed ones.

    :return: The overrides in token order, and the errors for skipped tokens.
    """
    overrides: List[PortOverride] = []
    errors: List[PortMappingError] = []
    for token in tokens:
        try:
            overrides.append(parse_port_mapping(token))
        except PortMappingError as e:
            errors.append(e)
    return overrides, errors

"""
Rewrites published ports of services according to --port overrides.
"""
from typing import Dict, Iterable, List, Tuple
from ..MODELS.selection import PortOverride
from ..MODELS.topology import PortBinding, ServiceDefinition, Topology
from .topology_assembler import assemble_topology


def apply_port_overrides(topology: Topology,
                         overrides: Iterable[PortOverride]) -> Tuple[Topology, List[str]]:
    """
    Applies overrides in order to an already filtered topology.

    An existing binding for the same container port keeps its position and
    protocol and only gets a new published port; otherwise a tcp binding is
    appended. Overrides for services that are not in the topology are
    skipped and reported.

    :param topology: The filtered topology. It is not modified.
    :param overrides: Decoded --port directives, in command-line order.
    :return: The updated topology and the names of services that were not found.
    """
    services: Dict[str, ServiceDefinition] = dict(topology.services)
    missing: List[str] = []
    changed = False

    for override in overrides:
        service = services.get(override.service_name)
        if service is None:
            if override.service_name not in missing:
                missing.append(override.service_name)
            continue

        ports = list(service.ports)
        index = service.find_port(override.container_port)
        if index is not None:
            ports[index] = ports[index].model_copy(update={"published": override.host_port})
        else:
            ports.append(PortBinding(
                target=override.container_port,
                published=override.host_port,
                protocol="tcp",
            ))

        services[override.service_name] = service.model_copy(update={"ports": ports})
        changed = True

    if not changed:
        return topology, missing
    return assemble_topology(topology, services), missing

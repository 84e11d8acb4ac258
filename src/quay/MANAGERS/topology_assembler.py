"""
Combines a transformed service mapping with the untouched parts of a topology.
"""
from typing import Dict
from ..MODELS.topology import ServiceDefinition, Topology


def assemble_topology(original: Topology, services: Dict[str, ServiceDefinition]) -> Topology:
    """
    Returns a copy of ``original`` whose services are exactly ``services``.

    Networks, volumes and every other top-level section are carried over as
    they are. References from the remaining services to removed ones (or to
    networks only a removed service used) are not pruned; docker-compose
    tolerates them the same way it does for a hand-edited file.
    """
    return original.model_copy(update={"services": dict(services)})

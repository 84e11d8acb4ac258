# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Selection of the services a compose command should act on.
"""
from typing import AbstractSet, Dict, List, Tuple
from ..MODELS.topology import ServiceDefinition, Topology
from .topology_assembler import assemble_topology


def select_services(topology: Topology,
                    include_names: AbstractSet[str] = frozenset(),
                    exclude_names: AbstractSet[str] = frozenset()) -> Tuple[Topology, List[str]]:
    """
    Narrows a topology to the requested services.

    With ``include_names`` only those services are kept; otherwise with
    ``exclude_names`` every other service is kept; with neither the
    topology is returned unchanged. Names match case-sensitively.

    :param topology: The parsed topology. It is not modified.
    :param include_names: Services to keep.
    :param exclude_names: Services to drop.
    :return: The filtered topology and the sorted names that matched no service.
    """
    include = frozenset(include_names)
    exclude = frozenset(exclude_names)

    if not include and not exclude:
        return topology, []

    services: Dict[str, ServiceDefinition] = {}
    if include:
        for name, service in topology.services.items():
            if name in include:
                services[name] = service
        missing = include.difference(topology.services)
    else:
        for name, service in topology.services.items():
            if name not in exclude:
                services[name] = service
        missing = exclude.difference(topology.services)

    return assemble_topology(topology, services), sorted(missing)

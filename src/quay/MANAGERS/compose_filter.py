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
The filtering pipeline: select services, apply port overrides, assemble.
"""
from dataclasses import dataclass, field
from typing import List, Optional
from ..MODELS.selection import ClassifiedArguments, MissingNamesReport
from ..MODELS.topology import Topology
from ..PARSERS.compose_parser import ComposeParser
from ..PARSERS.port_mapping_parser import parse_port_mappings
from ..errors import PortMappingError
from .port_override_applier import apply_port_overrides
from .selection_engine import select_services


@dataclass
class FilterResult:
    """Outcome of one pipeline run."""

    topology: Topology
    missing: MissingNamesReport = field(default_factory=MissingNamesReport)
    port_errors: List[PortMappingError] = field(default_factory=list)
    load_warnings: List[str] = field(default_factory=list)

    def warnings(self) -> List[str]:
        """
        All non-fatal problems of the run as one block of lines.
        """
        lines = [f"Warning: {message}" for message in self.load_warnings]
        lines.extend(f"Warning: {error}" for error in self.port_errors)
        if self.missing:
            lines.append(self.missing.format())
        return lines


class ComposeFilter:
    """
    Loads a compose file and narrows it to what the directives ask for.
    """
    def __init__(self, parser: Optional[ComposeParser] = None):
        """
        :param parser: Parser used to load compose files.
        """
        self.parser = parser or ComposeParser()

    def transform(self, topology: Topology, arguments: ClassifiedArguments) -> FilterResult:
        """
        Runs selection and port overrides on an already loaded topology.

        :param topology: The parsed topology. It is not modified.
        :param arguments: The classified command-line directives.
        :return: The transformed topology with everything worth warning about.
        :raises ConfigurationError: If include and exclude are both given.
        """
        selection = arguments.selection()
        overrides, port_errors = parse_port_mappings(arguments.port_tokens)

        filtered, missing_selected = select_services(
            topology, selection.include_names, selection.exclude_names
        )
        final, missing_ports = apply_port_overrides(filtered, overrides)

        return FilterResult(
            topology=final,
            missing=MissingNamesReport.merge(missing_selected, missing_ports),
            port_errors=port_errors,
        )

    def load_and_transform(self, compose_path: str, arguments: ClassifiedArguments) -> FilterResult:
        """
        Loads ``compose_path`` and transforms it.

        The selection is checked before the file is read.

        :raises ConfigurationError: If include and exclude are both given.
        :raises LoadError: If the compose file cannot be loaded.
        """
        arguments.selection()
        topology = self.parser.parse(compose_path)
        result = self.transform(topology, arguments)
        result.load_warnings = list(self.parser.warnings)
        return result

"""
Models describing what the user asked for on the command line.
"""
from typing import FrozenSet, Iterable, List
from pydantic import BaseModel, ConfigDict, Field
from ..errors import ConfigurationError


class PortOverride(BaseModel):
    """
    One decoded ``--port SERVICE:HOST_PORT:CONTAINER_PORT`` directive.
    """
    model_config = ConfigDict(frozen=True)

    service_name: str
    host_port: str
    container_port: int = Field(ge=0)


class SelectionRequest(BaseModel):
    """
    The include or exclude set for one run. At most one of the two is non-empty.
    """
    model_config = ConfigDict(frozen=True)

    include_names: FrozenSet[str] = frozenset()
    exclude_names: FrozenSet[str] = frozenset()

    @classmethod
    def from_directives(cls,
                        include_names: Iterable[str] = (),
                        exclude_names: Iterable[str] = ()) -> "SelectionRequest":
        """
        Builds a request, rejecting include and exclude used together.

        :param include_names: Names given with --include.
        :param exclude_names: Names given with --exclude.
        :return: The selection request.
        :raises ConfigurationError: If both lists are non-empty.
        """
        include = frozenset(include_names)
        exclude = frozenset(exclude_names)
        if include and exclude:
            raise ConfigurationError("cannot use both --include and --exclude options together")
        return cls(include_names=include, exclude_names=exclude)


class ClassifiedArguments(BaseModel):
    """
    The tokens following the compose sub-command, split by role.
    """
    command_options: List[str] = []
    include_names: List[str] = []
    exclude_names: List[str] = []
    port_tokens: List[str] = []

    @property
    def has_directives(self) -> bool:
        """True when any --include, --exclude or --port was given."""
        return bool(self.include_names or self.exclude_names or self.port_tokens)

    def selection(self) -> SelectionRequest:
        return SelectionRequest.from_directives(self.include_names, self.exclude_names)


class MissingNamesReport(BaseModel):
    """
    Service names referenced by a directive but absent from the topology.
    """
    names: List[str] = []

    @classmethod
    def merge(cls, *groups: Iterable[str]) -> "MissingNamesReport":
        """
        Concatenates name groups in order, dropping repeats.
        """
        names: List[str] = []
        for group in groups:
            for name in group:
                if name not in names:
                    names.append(name)
        return cls(names=names)

    def __bool__(self) -> bool:
        return bool(self.names)

    def format(self) -> str:
        lines = ["Warning: Some requested services were not found in the compose file:"]
        lines.extend(f"  - {name}" for name in self.names)
        return "\n".join(lines)

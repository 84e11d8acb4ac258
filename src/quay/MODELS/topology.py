"""
Models for a parsed compose file: the topology, its services and their port bindings.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_serializer, model_validator


class OrderedModel(BaseModel):
    """
    A model that writes its keys back in the order they were read.

    Declared fields would otherwise be dumped ahead of extra keys. Keys added
    after loading go last.
    """
    model_config = ConfigDict(extra="allow")

    _key_order: List[str] = PrivateAttr(default_factory=list)

    @model_validator(mode="wrap")
    @classmethod
    def _remember_key_order(cls, data: Any, handler: Any) -> Any:
        model = handler(data)
        if isinstance(data, dict):
            model._key_order = list(data)
        return model

    @model_serializer(mode="wrap")
    def _dump_in_key_order(self, handler: Any) -> Dict[str, Any]:
        data = handler(self)
        ordered = {key: data[key] for key in self._key_order if key in data}
        ordered.update((key, value) for key, value in data.items() if key not in ordered)
        return ordered


class PortBinding(OrderedModel):
    """
    A published port of a service, in compose long syntax.

    ``published`` stays a string because compose accepts ranges
    ("8000-8010") there.
    """
    target: int = Field(ge=0)
    published: Optional[str] = None
    protocol: str = "tcp"
    host_ip: Optional[str] = None
    mode: Optional[str] = None

    @field_validator("published", mode="before")
    @classmethod
    def _published_as_string(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("published port must be a number or a string")
        if isinstance(value, int):
            return str(value)
        return value


class ServiceDefinition(OrderedModel):
    """
    A single compose service.

    Only ``ports`` is modelled; every other key (image, build, networks,
    depends_on, environment, ...) is kept as-is so it can be written back.
    """
    ports: List[PortBinding] = []

    def find_port(self, target: int) -> Optional[int]:
        """
        Returns the index of the first binding for a container port.

        :param target: The in-container port.
        :return: Index into ``ports`` or None.
        """
        for index, binding in enumerate(self.ports):
            if binding.target == target:
                return index
        return None


class Topology(OrderedModel):
    """
    Complete configuration for a multi-service stack.
    Equivalent to a parsed docker-compose.yml file.

    Top-level sections other than ``services`` (networks, volumes, secrets,
    configs, name, x-* extensions) are extra fields and pass through untouched.
    """
    services: Dict[str, ServiceDefinition] = {}

    @property
    def service_names(self) -> List[str]:
        return list(self.services)

    @property
    def sections(self) -> Dict[str, Any]:
        """Top-level sections other than ``services``."""
        return dict(self.model_extra or {})

    def to_document(self) -> Dict[str, Any]:
        """
        Converts the topology back into a plain compose document.

        Fields the source document did not contain are left out, so a
        service without ports does not gain an empty ``ports`` list.
        """
        return self.model_dump(exclude_unset=True)

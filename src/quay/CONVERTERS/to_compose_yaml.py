"""
Converter for writing a topology back out as compose YAML.
"""
from typing import Any
import yaml
from ..MODELS.topology import Topology


class ComposeYamlConverter:
    """
    Serializes a topology into a compose document for docker-compose to read.
    """

    def __init__(self, topology: Topology):
        """
        :param topology: The topology to write.
        """
        self.topology = topology

    def convert(self) -> str:
        """
        Generates the YAML text.

        Values were interpolated while loading, and docker-compose interpolates
        again when it reads the document, so literal ``$`` is escaped as ``$$``.

        :return: The compose document.
        """
        document = _escape_dollars(self.topology.to_document())
        return yaml.safe_dump(document, sort_keys=False, default_flow_style=False, allow_unicode=True)


def _escape_dollars(data: Any) -> Any:
    if isinstance(data, str):
        return data.replace("$", "$$")
    if isinstance(data, dict):
        return {key: _escape_dollars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_escape_dollars(item) for item in data]
    return data

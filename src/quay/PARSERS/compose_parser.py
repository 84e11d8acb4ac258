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
Parsers for Docker Compose YAML files.
"""
import os
import re
from typing import Any, Callable, Dict, List, Optional, Sequence
import yaml
from dotenv import dotenv_values
from pydantic import ValidationError
from ..MODELS.topology import ServiceDefinition, Topology
from ..UTILS.string_interpolation import EnvironmentInterpolator
from ..errors import ComposeFileNotFoundError, LoadError

DEFAULT_COMPOSE_FILES = ("docker-compose.yml", "docker-compose.yaml")
_PORT_RANGE = re.compile(r"([0-9]+)(?:-([0-9]+))?")


def find_compose_file(specified: Optional[str] = None,
                      exists: Callable[[str], bool] = os.path.isfile,
                      candidates: Sequence[str] = DEFAULT_COMPOSE_FILES) -> str:
    """
    Locates the compose file to use: the one given with -f, or the first
    default name that exists in the working directory.

    :param specified: Path given on the command line, if any.
    :param exists: File-existence check, injectable for tests.
    :param candidates: Default file names, in probing order.
    :return: Path to the compose file.
    :raises ComposeFileNotFoundError: If nothing was given and no default exists.
    """
    if specified:
        return specified

    for filename in candidates:
        if exists(filename):
            return filename

    raise ComposeFileNotFoundError("no docker-compose file found")


class ComposeParser:
    """
    Parser for docker-compose.yml files.
    """
    def __init__(self, context: Optional[Dict[str, str]] = None):
        """
        Initializes the parser with an optional environment context for interpolation.

        :param context: Variables for interpolation. When omitted, the .env file
                        next to the compose file overlaid with os.environ is used.
        """
        self.context = context
        self.warnings: List[str] = []

    def parse(self, compose_path: str) -> Topology:
        """
        Parses a compose file from a path.

        :param compose_path: Path to the compose file.
        :return: Parsed topology.
        :raises LoadError: If the file cannot be read or is not a valid compose file.
        """
        try:
            with open(compose_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise LoadError(f"loading project: {compose_path}: {e.strerror}", path=compose_path) from e

        context = self.context
        if context is None:
            context = self.load_context(os.path.dirname(os.path.abspath(compose_path)))
        return self.parse_from_string(content, context=context, source=compose_path)

    @staticmethod
    def load_context(base_dir: str) -> Dict[str, str]:
        """
        Builds the interpolation context: .env values, with the process
        environment taking precedence.

        :param base_dir: Directory holding the compose file.
        """
        context: Dict[str, str] = {}
        env_path = os.path.join(base_dir, ".env")
        if os.path.isfile(env_path):
            context.update({k: v for k, v in dotenv_values(env_path).items() if v is not None})
        context.update(os.environ)
        return context

    def parse_from_string(self,
                          content: str,
                          context: Optional[Dict[str, str]] = None,
                          source: str = "<string>") -> Topology:
        """
        Parses a compose file from a string.

        :param content: YAML content of the compose file.
        :param context: Interpolation variables; defaults to the parser's context or os.environ.
        :param source: Name used in error messages.
        :return: Parsed topology.
        """
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise LoadError(f"loading project: {source}: {e}", path=source) from e
        if not data:
            data = {}
        if not isinstance(data, dict):
            raise LoadError(f"loading project: {source}: top-level object must be a mapping", path=source)
        if any(not isinstance(key, str) for key in data):
            raise LoadError(f"loading project: {source}: top-level keys must be strings", path=source)

        if context is None:
            context = self.context if self.context is not None else dict(os.environ)
        interpolator = EnvironmentInterpolator(context)
        data = interpolator.interpolate_data(data)
        for name in interpolator.missing:
            self.warnings.append(f'The "{name}" variable is not set. Defaulting to a blank string.')

        raw_services = data.get('services') or {}
        if not isinstance(raw_services, dict):
            raise LoadError(f"loading project: {source}: services must be a mapping", path=source)

        services = {}
        for name, spec in raw_services.items():
            services[name] = self._parse_service(name, spec, source)

        try:
            document = {key: services if key == 'services' else value for key, value in data.items()}
            document.setdefault('services', services)
            return Topology.model_validate(document)
        except ValidationError as e:
            raise LoadError(f"loading project: {source}: {e}", path=source) from e

    def _parse_service(self, name: str, spec: Any, source: str) -> ServiceDefinition:
        """
        Parses a single service definition from a compose file.

        :param name: The name of the service.
        :param spec: The service specification dictionary.
        :return: A ServiceDefinition instance.
        """
        if spec is None:
            spec = {}
        if not isinstance(spec, dict):
            raise LoadError(f"loading project: {source}: service {name} must be a mapping", path=source)

        spec = dict(spec)
        try:
            if 'ports' in spec:
                spec['ports'] = normalize_ports(spec['ports'] or [])
            return ServiceDefinition.model_validate(spec)
        except (ValueError, ValidationError) as e:
            raise LoadError(f"loading project: {source}: service {name}: {e}", path=source) from e


def normalize_ports(entries: List[Any]) -> List[Dict[str, Any]]:
    """
    Converts compose port entries (short strings, bare numbers or long-syntax
    mappings) into long-syntax mappings.

    :param entries: The ``ports`` list of a service.
    :return: One mapping per published port.
    :raises ValueError: If an entry cannot be understood.
    """
    if not isinstance(entries, list):
        raise ValueError("ports must be a list")

    result: List[Dict[str, Any]] = []
    for entry in entries:
        if isinstance(entry, dict):
            result.append(entry)
        elif isinstance(entry, int) and not isinstance(entry, bool):
            result.append({'target': entry, 'protocol': 'tcp'})
        elif isinstance(entry, str):
            result.extend(_parse_short_port(entry))
        else:
            raise ValueError(f"invalid port specification: {entry!r}")
    return result


def _parse_short_port(value: str) -> List[Dict[str, Any]]:
    """
    Parses ``[HOST_IP:][HOST_PORT:]CONTAINER_PORT[/PROTOCOL]``.
    """
    spec, _, protocol = value.partition('/')
    protocol = protocol or 'tcp'

    host_ip = None
    if spec.startswith('['):
        end = spec.find(']')
        if end == -1:
            raise ValueError(f"invalid port specification: {value!r}")
        host_ip = spec[1:end]
        spec = spec[end + 1:].lstrip(':')

    parts = spec.split(':')
    if len(parts) == 1:
        published, target = None, parts[0]
    elif len(parts) == 2:
        published, target = parts
    elif len(parts) == 3 and host_ip is None:
        host_ip, published, target = parts
    else:
        raise ValueError(f"invalid port specification: {value!r}")
    published = published or None
    host_ip = host_ip or None

    targets = _port_range(target, value)
    if len(targets) == 1:
        return [_binding(targets[0], published, protocol, host_ip)]
    if published is None:
        return [_binding(t, None, protocol, host_ip) for t in targets]

    published_ports = _port_range(published, value)
    if len(published_ports) != len(targets):
        raise ValueError(f"port ranges don't match in length: {value!r}")
    return [_binding(t, str(p), protocol, host_ip) for t, p in zip(targets, published_ports)]


def _port_range(text: str, value: str) -> List[int]:
    match = _PORT_RANGE.fullmatch(text)
    if not match:
        raise ValueError(f"invalid port specification: {value!r}")
    first = int(match.group(1))
    last = int(match.group(2) or first)
    if last < first:
        raise ValueError(f"invalid port range: {value!r}")
    return list(range(first, last + 1))


def _binding(target: int, published: Optional[str], protocol: str, host_ip: Optional[str]) -> Dict[str, Any]:
    binding: Dict[str, Any] = {'target': target}
    if published is not None:
        binding['published'] = published
    binding['protocol'] = protocol
    if host_ip is not None:
        binding['host_ip'] = host_ip
    return binding

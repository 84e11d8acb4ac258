"""
Utilities for string interpolation using environment variables.
"""
import re
from typing import Any, Dict, List
from ..errors import InterpolationError

_NAME = re.compile(r"[_a-zA-Z][_a-zA-Z0-9]*")
# Body of ${...}: NAME, optionally followed by :- - :+ + :? ? and an argument
_BRACED = re.compile(r"(?P<name>[_a-zA-Z][_a-zA-Z0-9]*)(?:(?P<modifier>:?[-+?])(?P<arg>.*))?", re.DOTALL)


class EnvironmentInterpolator:
    """
    Utility for interpolating environment variables in compose values,
    following the compose file rules for ``$`` substitution.
    Supports $VAR, ${VAR}, ${VAR:-default}, ${VAR-default}, ${VAR:+value},
    ${VAR+value}, ${VAR:?message}, ${VAR?message} and $$. Defaults may
    themselves contain variables, e.g. ${A:-${B}}.
    """
    def __init__(self, context: Dict[str, str]):
        """
        :param context: The environment variables context.
        """
        self.context = context
        self.missing: List[str] = []

    def interpolate(self, template: str) -> str:
        """
        Interpolates environment variables in the template string.

        Unset variables without a default resolve to an empty string and are
        recorded in ``missing``.

        :param template: The string containing $VAR / ${VAR} placeholders.
        :return: The interpolated string.
        :raises InterpolationError: If a ${VAR:?message} variable is unset or empty.
        """
        result = []
        i = 0
        while i < len(template):
            if template[i] != "$" or i + 1 >= len(template):
                result.append(template[i])
                i += 1
                continue

            following = template[i + 1]
            if following == "$":
                result.append("$")
                i += 2
                continue

            if following == "{":
                end = _closing_brace(template, i + 2)
                match = _BRACED.fullmatch(template, i + 2, end) if end != -1 else None
                if match is None:
                    result.append("$")
                    i += 1
                    continue
                result.append(self._resolve(match.group("name"), match.group("modifier"), match.group("arg") or ""))
                i = end + 1
                continue

            match = _NAME.match(template, i + 1)
            if match is None:
                result.append("$")
                i += 1
                continue
            result.append(self._lookup(match.group()))
            i = match.end()

        return "".join(result)

    def _lookup(self, name: str) -> str:
        value = self.context.get(name)
        if value is None:
            if name not in self.missing:
                self.missing.append(name)
            return ""
        return value

    def _resolve(self, name: str, modifier: str, arg: str) -> str:
        """
        Applies a ${NAME<modifier><arg>} expression. ``arg`` is only
        interpolated when it is used.
        """
        if modifier is None:
            return self._lookup(name)

        value = self.context.get(name)
        # A leading ':' means "unset or empty"; without it only "unset" counts.
        unset = not value if modifier.startswith(":") else value is None
        kind = modifier[-1]
        if kind == "-":
            return self.interpolate(arg) if unset else value
        if kind == "+":
            return "" if unset else self.interpolate(arg)
        if unset:
            raise InterpolationError(self.interpolate(arg) or f"required variable {name} is missing a value")
        return value

    def interpolate_data(self, data: Any) -> Any:
        """
        Interpolates every string value in a parsed YAML structure.
        Mapping keys are left as they are.
        """
        if isinstance(data, str):
            return self.interpolate(data)
        if isinstance(data, dict):
            return {key: self.interpolate_data(value) for key, value in data.items()}
        if isinstance(data, list):
            return [self.interpolate_data(item) for item in data]
        return data


def _closing_brace(template: str, start: int) -> int:
    """
    Index of the '}' closing a ${ whose body starts at ``start``, skipping
    nested ${...} and $$. Returns -1 when unbalanced.
    """
    depth = 0
    i = start
    while i < len(template):
        if template.startswith("$$", i):
            i += 2
            continue
        if template.startswith("${", i):
            depth += 1
            i += 2
            continue
        if template[i] == "}":
            if depth == 0:
                return i
            depth -= 1
        i += 1
    return -1

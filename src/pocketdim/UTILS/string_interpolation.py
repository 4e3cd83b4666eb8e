"""
Interpolation of host environment variables into host-side manifest values.
"""
import re
from typing import Dict

# $$ escapes a literal dollar.
_PATTERN = re.compile(r'\$\$|\$\{([^}:]+)(?::(-|\+)([^}]*))?\}')


class EnvironmentInterpolator:
    """
    Expands ${VAR}, ${VAR:-default} and ${VAR:+value} in manifest strings.
    """
    def __init__(self, context: Dict[str, str]):
        """
        :param context: Variables available for expansion.
        """
        self.context = context

    def interpolate(self, template: str) -> str:
        """
        Interpolates a single string.

        :param template: The string containing ${VAR} placeholders.
        :return: The interpolated string.
        :raises KeyError: If a plain ${VAR} is not set.
        """
        def replace(match):
            if match.group(0) == '$$':
                return '$'

            var_name, modifier, alt_value = match.group(1, 2, 3)
            value = self.context.get(var_name)

            if modifier == '-':
                return value if value else alt_value
            if modifier == '+':
                return alt_value if value else ''
            if value is None:
                raise KeyError(f"Variable {var_name} not found in context")
            return value

        return _PATTERN.sub(replace, template)

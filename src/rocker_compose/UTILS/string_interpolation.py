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
Utilities for string interpolation using environment variables.
"""
import logging
import re
from typing import Mapping

logger = logging.getLogger(__name__)


class EnvironmentInterpolator:
    """
    Utility for interpolating environment variables in compose files.
    Supports $VAR, ${VAR}, ${VAR:-default}, ${VAR-default}, ${VAR:+value}
    and $$ as an escaped dollar sign.
    """
    # Group 'escaped': $$
    # Group 'braced': VAR inside ${...}, with optional 'modifier' and 'alt'
    # Group 'named': VAR in bare $VAR form
    PATTERN = re.compile(
        r'\$(?:'
        r'(?P<escaped>\$)'
        r'|\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)(?:(?P<modifier>:-|-|:\+)(?P<alt>[^}]*))?\}'
        r'|(?P<named>[A-Za-z_][A-Za-z0-9_]*)'
        r')'
    )

    @classmethod
    def interpolate(cls, template: str, context: Mapping[str, str]) -> str:
        """
        Interpolates environment variables in the template string using the provided context.
        Unset variables without a default resolve to an empty string, as in Docker Compose.

        :param template: The string containing $VAR or ${VAR} placeholders.
        :param context: The environment variables context.
        :return: The interpolated string.
        """
        def replace(match):
            if match.group('escaped'):
                return '$'

            var_name = match.group('braced') or match.group('named')
            modifier = match.group('modifier')
            alt_value = match.group('alt') or ''
            value = context.get(var_name)

            if modifier == ':-':
                return value if value else alt_value
            if modifier == '-':
                return value if value is not None else alt_value
            if modifier == ':+':
                return alt_value if value else ''

            if value is None:
                logger.warning("Variable %s is not set, substituting an empty string", var_name)
                return ''
            return value

        return cls.PATTERN.sub(replace, template)

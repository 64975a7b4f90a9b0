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
Conversion of human readable memory sizes like '512m' or '1.5g' to bytes.
"""
import re
from typing import Union

# Binary multiples, the same convention the Docker CLI uses for --memory.
UNITS = {
    "": 1,
    "b": 1,
    "k": 1024,
    "m": 1024 ** 2,
    "g": 1024 ** 3,
    "t": 1024 ** 4,
    "p": 1024 ** 5,
}

# Docker treats -1 as "unlimited", e.g. for MemorySwap
UNLIMITED = -1

SIZE_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([kmgtp]?)b?\s*$', re.IGNORECASE)


def ram_in_bytes(size: Union[str, int]) -> int:
    """
    Parses a memory size into a byte count.

    :param size: An int (already bytes) or a string such as '1024', '64k', '512m', '2GB'.
    :return: The size in bytes, or -1 for unlimited.
    :raises ValueError: If the string is not a recognizable size.
    """
    if isinstance(size, bool):
        raise ValueError(f"Invalid size: {size!r}")
    if isinstance(size, int):
        if size < 0 and size != UNLIMITED:
            raise ValueError(f"Invalid size: {size!r}")
        return size

    if size.strip() == str(UNLIMITED):
        return UNLIMITED

    match = SIZE_PATTERN.match(size)
    if not match:
        raise ValueError(f"Invalid size: {size!r}")

    number, unit = match.groups()
    multiplier = UNITS[unit.lower()]
    if "." in number:
        return int(float(number) * multiplier)
    return int(number) * multiplier

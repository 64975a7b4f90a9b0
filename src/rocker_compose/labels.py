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
Reserved Docker labels used to store a container's configuration on the container itself.
"""
from typing import Dict, Mapping, Optional

LABEL_PREFIX = "rocker-compose-"
LABEL_CONFIG = LABEL_PREFIX + "config"


def is_internal_label(key: str) -> bool:
    return key.startswith(LABEL_PREFIX)


def strip_internal_labels(labels: Optional[Mapping[str, str]]) -> Optional[Dict[str, str]]:
    """
    Returns a copy of the labels without rocker-compose bookkeeping keys.
    None stays None so that an absent mapping is not turned into an empty one.
    """
    if labels is None:
        return None
    return {k: v for k, v in labels.items() if not is_internal_label(k)}

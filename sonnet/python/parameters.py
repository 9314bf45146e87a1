# Copyright 2010-2025 Google LLC
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

"""Configures how model entities are named and compared."""

import dataclasses

from sonnet.python import math_utils


@dataclasses.dataclass(frozen=True)
class ModelingParameters:
    """Parameters shared by all entities created from the same registry.

    Attributes:
      epsilon: Absolute tolerance used to decide if a bound changed, if a value
        is within its bounds and if a value is integral. Must be non-negative.
      variable_name_prefix: Default variable names are
        f"{variable_name_prefix}_{id}".
      constraint_name_prefix: Default constraint names are
        f"{constraint_name_prefix}_{id}".
    """

    epsilon: float = math_utils.DEFAULT_EPSILON
    variable_name_prefix: str = "Var"
    constraint_name_prefix: str = "Con"

    def __post_init__(self) -> None:
        if not self.epsilon >= 0.0:
            raise ValueError(f"epsilon must be non-negative, was: {self.epsilon}")
        if not self.variable_name_prefix:
            raise ValueError("variable_name_prefix must not be empty")
        if not self.constraint_name_prefix:
            raise ValueError("constraint_name_prefix must not be empty")

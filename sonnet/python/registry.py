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

"""Id allocation and default naming for variables and constraints.

Each entity draws its id from a registry. The module level default registries
are used when no registry is given explicitly; tests and applications that want
isolated id sequences create and inject their own:

  reg = registry.VariableRegistry()
  x = variables.Variable(registry=reg)  # x.id == 0, x.name == "Var_0"
"""

import threading
from typing import Optional

from sonnet.python import parameters as parameters_lib


class IdAllocator:
    """A monotonic counter, ids are never reused.

    Thread-safety: next_id() is safe to call concurrently.
    """

    def __init__(self, first_id: int = 0) -> None:
        if first_id < 0:
            raise ValueError(f"first_id must be non-negative, was: {first_id}")
        self._lock = threading.Lock()
        self._next_id: int = first_id

    def next_id(self) -> int:
        """Returns a new id, strictly larger than all ids returned before."""
        with self._lock:
            result = self._next_id
            self._next_id += 1
            return result

    def peek(self) -> int:
        """Returns the id the next call to next_id() will return."""
        with self._lock:
            return self._next_id


class EntityRegistry:
    """Hands out ids and default names for one kind of model entity."""

    def __init__(
        self,
        name_prefix: str,
        *,
        parameters: Optional[parameters_lib.ModelingParameters] = None,
        allocator: Optional[IdAllocator] = None,
    ) -> None:
        if not name_prefix:
            raise ValueError("name_prefix must not be empty")
        self._name_prefix: str = name_prefix
        self._parameters: parameters_lib.ModelingParameters = (
            parameters or parameters_lib.ModelingParameters()
        )
        self._allocator: IdAllocator = allocator or IdAllocator()

    @property
    def parameters(self) -> parameters_lib.ModelingParameters:
        return self._parameters

    @property
    def epsilon(self) -> float:
        return self._parameters.epsilon

    @property
    def name_prefix(self) -> str:
        return self._name_prefix

    def new_id(self) -> int:
        return self._allocator.next_id()

    def default_name(self, entity_id: int) -> str:
        return f"{self._name_prefix}_{entity_id}"


class VariableRegistry(EntityRegistry):
    """Registry for variables, names default to "Var_<id>"."""

    def __init__(
        self,
        *,
        parameters: Optional[parameters_lib.ModelingParameters] = None,
        allocator: Optional[IdAllocator] = None,
    ) -> None:
        parameters = parameters or parameters_lib.ModelingParameters()
        super().__init__(
            parameters.variable_name_prefix,
            parameters=parameters,
            allocator=allocator,
        )


class ConstraintRegistry(EntityRegistry):
    """Registry for constraints, names default to "Con_<id>"."""

    def __init__(
        self,
        *,
        parameters: Optional[parameters_lib.ModelingParameters] = None,
        allocator: Optional[IdAllocator] = None,
    ) -> None:
        parameters = parameters or parameters_lib.ModelingParameters()
        super().__init__(
            parameters.constraint_name_prefix,
            parameters=parameters,
            allocator=allocator,
        )


_DEFAULT_VARIABLE_REGISTRY = VariableRegistry()
_DEFAULT_CONSTRAINT_REGISTRY = ConstraintRegistry()


def default_variable_registry() -> VariableRegistry:
    """Returns the process wide registry used when none is injected."""
    return _DEFAULT_VARIABLE_REGISTRY


def default_constraint_registry() -> ConstraintRegistry:
    return _DEFAULT_CONSTRAINT_REGISTRY

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

"""Identity shared by model entities (variables and constraints).

This file is an implementation detail and not part of the public API.
"""

from typing import Any, Dict, Tuple

from sonnet.python import errors
from sonnet.python import registry as registry_lib


class ModelEntity:
    """The id, name and solver offsets of a variable or constraint.

    An entity can be held by several solvers at once. Each solver stores the
    entity at some offset (e.g. a column index for a variable). The entity does
    not own the solvers, it only remembers which ones it must keep informed.
    """

    __slots__ = "_id", "_name", "_offsets"

    def __init__(self, entity_registry: registry_lib.EntityRegistry, name: str = ""):
        self._id: int = entity_registry.new_id()
        self._name: str = name if name else entity_registry.default_name(self._id)
        # Insertion ordered, so solvers are informed in attach order.
        self._offsets: Dict[Any, int] = {}

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def assigned(self) -> bool:
        """True if at least one solver holds this entity."""
        return bool(self._offsets)

    @property
    def solvers(self) -> Tuple[Any, ...]:
        """The solvers holding this entity, in the order they were attached.

        A tuple is returned so callers can notify the solvers while some of them
        detach.
        """
        return tuple(self._offsets)

    def assign(self, solver: Any, offset: int) -> None:
        """Records that solver stores this entity at offset."""
        if offset < 0:
            raise ValueError(f"offset must be non-negative, was: {offset}")
        self._offsets[solver] = offset

    def unassign(self, solver: Any) -> bool:
        """Forgets solver, returns False if it was not holding this entity."""
        return self._offsets.pop(solver, None) is not None

    def is_assigned_to(self, solver: Any) -> bool:
        return solver in self._offsets

    def offset(self, solver: Any) -> int:
        try:
            return self._offsets[solver]
        except KeyError:
            raise errors.UnknownSolverError(self._name, solver) from None

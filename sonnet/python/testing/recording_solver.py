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

"""A solver.Solver for tests that records the notifications it receives."""

import dataclasses
from typing import Any, List, Tuple

from sonnet.python import solver
from sonnet.python import variables


@dataclasses.dataclass(frozen=True)
class Notification:
    """One call to a notification method of the solver.

    Attributes:
      method: The name of the method, e.g. "set_variable_upper".
      variable: The variable passed to the method.
      args: The remaining arguments.
    """

    method: str
    variable: variables.Variable
    args: Tuple[Any, ...]


class RecordingSolver(solver.Solver):
    """Records every notification, in order.

    Example:
      s = RecordingSolver()
      x = variables.Variable(lower_bound=0.0, upper_bound=10.0)
      s.attach(x)
      x.upper_bound = 5.0
      s.notifications
        => [Notification("set_variable_upper", x, (5.0,))]
    """

    def __init__(self) -> None:
        self.notifications: List[Notification] = []
        self._next_offset: int = 0

    def attach(self, variable: variables.Variable) -> int:
        """Attaches variable at the next offset and returns it."""
        offset = self._next_offset
        self._next_offset += 1
        variable.attach(self, offset)
        return offset

    def assign(
        self, variable: variables.Variable, value: float, reduced_cost: float = 0.0
    ) -> None:
        """Assigns a solution value as a solver would after solving."""
        if variable.is_attached(self):
            offset = variable.offset(self)
        else:
            offset = self._next_offset
            self._next_offset += 1
        variable.assign(self, offset, value, reduced_cost)

    def methods(self) -> List[str]:
        return [notification.method for notification in self.notifications]

    def count(self, method: str) -> int:
        return sum(1 for n in self.notifications if n.method == method)

    def clear(self) -> None:
        self.notifications = []

    def _record(self, method: str, variable: variables.Variable, *args: Any) -> None:
        self.notifications.append(Notification(method, variable, tuple(args)))

    def set_variable_upper(self, variable: variables.Variable, value: float) -> None:
        self._record("set_variable_upper", variable, value)

    def set_variable_lower(self, variable: variables.Variable, value: float) -> None:
        self._record("set_variable_lower", variable, value)

    def set_variable_bounds(
        self, variable: variables.Variable, lower: float, upper: float
    ) -> None:
        self._record("set_variable_bounds", variable, lower, upper)

    def set_variable_type(
        self, variable: variables.Variable, var_type: variables.VariableType
    ) -> None:
        self._record("set_variable_type", variable, var_type)

    def set_variable_name(self, variable: variables.Variable, name: str) -> None:
        self._record("set_variable_name", variable, name)

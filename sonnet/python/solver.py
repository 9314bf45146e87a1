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

"""The capabilities a solver must offer to hold variables."""

import abc
import typing

if typing.TYPE_CHECKING:
    from sonnet.python import variables


class Solver(abc.ABC):
    """Receives the changes made to the variables it holds.

    A solver holds a variable once it called variable.attach() or
    variable.assign(). From then on, every change of the declared state of the
    variable (bounds, type, name, freezing) is pushed to the solver through the
    methods below, so the solver model never diverges from the variables.

    All notifications are one-way: return values are ignored. They are called
    synchronously, from the thread mutating the variable.

    Solvers must be hashable; the default identity hash is what variables
    expect.

    Example:
      x = variables.Variable("x", 0.0, 10.0)
      solver = in_memory_solver.InMemorySolver()
      solver.add_variable(x)
      x.upper_bound = 5.0
        => solver.set_variable_upper(x, 5.0)
    """

    @abc.abstractmethod
    def set_variable_upper(self, variable: "variables.Variable", value: float) -> None:
        """The upper bound of variable changed to value."""

    @abc.abstractmethod
    def set_variable_lower(self, variable: "variables.Variable", value: float) -> None:
        """The lower bound of variable changed to value."""

    @abc.abstractmethod
    def set_variable_bounds(
        self, variable: "variables.Variable", lower: float, upper: float
    ) -> None:
        """Both bounds of variable must be set (freezing and unfreezing)."""

    @abc.abstractmethod
    def set_variable_type(
        self, variable: "variables.Variable", var_type: "variables.VariableType"
    ) -> None:
        """The type of variable changed to var_type."""

    @abc.abstractmethod
    def set_variable_name(self, variable: "variables.Variable", name: str) -> None:
        """The name of variable changed to name."""

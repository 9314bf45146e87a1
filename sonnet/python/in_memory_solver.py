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

"""A minimal pure python implementation of solver.Solver.

InMemorySolver keeps its own copy of the columns (bounds, integrality, name) of
the variables it holds and keeps it in sync through the solver notifications.
It does not solve anything: solution values computed elsewhere are pushed back
to the variables with load_solution().
"""

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Union

from absl import logging
import numpy as np

from sonnet.python import errors
from sonnet.python import solver
from sonnet.python import variables

_ArrayLike = Union[Sequence[float], np.ndarray]


class _VariableColumn:
    """Data specific to each decision variable held by the solver."""

    def __init__(self, lb: float, ub: float, is_integer: bool, name: str) -> None:
        self.lower_bound: float = lb
        self.upper_bound: float = ub
        self.is_integer: bool = is_integer
        self.name: str = name


class InMemorySolver(solver.Solver):
    """Mirrors the variables attached to it in memory.

    Offsets are assigned in order of addition and are never reused, even after
    remove_variable().

    Changes are tracked like a storage update tracker: updated_variables()
    returns the variables whose column changed since the last call to
    advance_checkpoint() (or since creation).

    Example:
      solver = InMemorySolver()
      x = variables.Variable("x", 0.0, 10.0)
      solver.add_variable(x)            # => 0
      x.upper_bound = 5.0
      solver.get_variable_ub(x)         # => 5.0
      solver.load_solution([4.0], [0.0])
      x.value                           # => 4.0
    """

    def __init__(self, name: str = "") -> None:
        self._name: str = name
        self._columns: List[Optional[_VariableColumn]] = []
        self._variables: List[Optional[variables.Variable]] = []
        self._updated: Set[int] = set()

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self):
        return f"<InMemorySolver name: {self._name!r}, columns: {len(self._columns)}>"

    def next_offset(self) -> int:
        return len(self._columns)

    def num_variables(self) -> int:
        return sum(1 for var in self._variables if var is not None)

    def attached_variables(self) -> Iterator[variables.Variable]:
        """Yields the variables held by this solver in offset order."""
        for var in self._variables:
            if var is not None:
                yield var

    def add_variable(self, variable: variables.Variable) -> int:
        """Adds variable if not yet held, returns its offset.

        The column is initialized with the declared state of variable, except
        that a frozen variable is pinned to its value.
        """
        if variable.is_attached(self):
            return variable.offset(self)
        offset = len(self._columns)
        lb = variable.lower_bound
        ub = variable.upper_bound
        if variable.is_frozen:
            lb = ub = variable.value
        self._columns.append(_VariableColumn(lb, ub, variable.integer, variable.name))
        self._variables.append(variable)
        variable.attach(self, offset)
        return offset

    def add_variables(self, variable_list: Iterable[variables.Variable]) -> List[int]:
        return [self.add_variable(var) for var in variable_list]

    def remove_variable(self, variable: variables.Variable) -> None:
        """Stops holding variable; it won't be notified or assigned anymore."""
        offset = variable.offset(self)
        variable.detach(self)
        self._columns[offset] = None
        self._variables[offset] = None
        self._updated.discard(offset)

    def _column(self, variable: variables.Variable) -> _VariableColumn:
        column = self._columns[variable.offset(self)]
        if column is None:
            raise errors.UnknownSolverError(variable.name, self)
        return column

    def get_variable_lb(self, variable: variables.Variable) -> float:
        return self._column(variable).lower_bound

    def get_variable_ub(self, variable: variables.Variable) -> float:
        return self._column(variable).upper_bound

    def get_variable_is_integer(self, variable: variables.Variable) -> bool:
        return self._column(variable).is_integer

    def get_variable_name(self, variable: variables.Variable) -> str:
        return self._column(variable).name

    def set_variable_upper(self, variable: variables.Variable, value: float) -> None:
        self._column(variable).upper_bound = value
        self._updated.add(variable.offset(self))

    def set_variable_lower(self, variable: variables.Variable, value: float) -> None:
        self._column(variable).lower_bound = value
        self._updated.add(variable.offset(self))

    def set_variable_bounds(
        self, variable: variables.Variable, lower: float, upper: float
    ) -> None:
        column = self._column(variable)
        column.lower_bound = lower
        column.upper_bound = upper
        self._updated.add(variable.offset(self))

    def set_variable_type(
        self, variable: variables.Variable, var_type: variables.VariableType
    ) -> None:
        self._column(variable).is_integer = var_type == variables.VariableType.INTEGER
        self._updated.add(variable.offset(self))

    def set_variable_name(self, variable: variables.Variable, name: str) -> None:
        self._column(variable).name = name
        self._updated.add(variable.offset(self))

    def updated_variables(self) -> List[variables.Variable]:
        """Returns the variables changed since the last checkpoint, by offset."""
        return [self._variables[offset] for offset in sorted(self._updated)]

    def advance_checkpoint(self) -> None:
        """Track changes to the columns only after this function call."""
        self._updated = set()

    def load_solution(
        self, values: _ArrayLike, reduced_costs: Optional[_ArrayLike] = None
    ) -> None:
        """Assigns a solution to all the variables held by this solver.

        Args:
          values: The value of each column, indexed by offset. Its length must be
            next_offset(); entries of removed variables are ignored.
          reduced_costs: The reduced cost of each column, zero if None.

        Raises:
          ValueError: values or reduced_costs have the wrong shape.
        """
        expected_shape = (len(self._columns),)
        values = np.asarray(values, dtype=np.float64)
        if values.shape != expected_shape:
            raise ValueError(
                f"values has shape {values.shape}, expected {expected_shape}"
            )
        if reduced_costs is None:
            reduced_costs = np.zeros(expected_shape, dtype=np.float64)
        else:
            reduced_costs = np.asarray(reduced_costs, dtype=np.float64)
            if reduced_costs.shape != expected_shape:
                raise ValueError(
                    f"reduced_costs has shape {reduced_costs.shape}, expected"
                    f" {expected_shape}"
                )
        logging.debug("Loading a solution of %d column(s) in %r", len(values), self)
        for offset, var in enumerate(self._variables):
            if var is None:
                continue
            var.assign(self, offset, values[offset], reduced_costs[offset])

    def solution_as_dict(self) -> Dict[variables.Variable, float]:
        return {var: var.value for var in self.attached_variables()}

    def is_feasible(self) -> bool:
        """True if all held variables have a value within bounds and domain."""
        return all(var.is_feasible() for var in self.attached_variables())

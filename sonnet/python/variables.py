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

"""Define Variables and the factories creating them in bulk."""

import enum
import math
import typing
from typing import (
    Dict,
    Hashable,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from absl import logging
import numpy as np

from sonnet.python import errors
from sonnet.python import expressions
from sonnet.python import math_utils
from sonnet.python import model_entity
from sonnet.python import registry as registry_lib

if typing.TYPE_CHECKING:
    from sonnet.python import solver as solver_lib

K = TypeVar("K", bound=Hashable)


@enum.unique
class VariableType(enum.Enum):
    """The domain of a variable.

    Attributes:
      CONTINUOUS: The variable takes real values.
      INTEGER: The variable takes integer values.
    """

    CONTINUOUS = "Continuous"
    INTEGER = "Integer"

    def __str__(self):
        return self.value


class VarEqVar(expressions.Constraint):
    """The result of the equality comparison between two Variable.

    It is an equality constraint between the two variables, so it can be used
    anywhere a constraint is expected. Unlike other constraints it can be
    converted to bool: it is true if the two operands are the same variable. This
    keeps `x in list_of_variables` and list.index() working.
    """

    __slots__ = "_first_variable", "_second_variable"

    def __init__(
        self,
        first_variable: "Variable",
        second_variable: "Variable",
    ) -> None:
        super().__init__(
            first_variable, expressions.ConstraintType.EQUAL, second_variable
        )
        self._first_variable: "Variable" = first_variable
        self._second_variable: "Variable" = second_variable

    @property
    def first_variable(self) -> "Variable":
        return self._first_variable

    @property
    def second_variable(self) -> "Variable":
        return self._second_variable

    def __bool__(self) -> bool:
        return self._first_variable is self._second_variable


class Variable(expressions.LinearBase):
    """A decision variable for an optimization model.

    A decision variable takes a value from a domain, either the real numbers or
    the integers, and restricted to be in some interval [lb, ub] (where lb and ub
    can be infinite). lb > ub is not rejected here, it makes models using the
    variable infeasible.

    Variables are created standalone and are not explicitly added to a model: a
    solver attaches itself to the variables used by the constraints and
    objective it holds. A variable can be held by several solvers at once. The
    variable is the single source of truth for its declared state; every change
    of lower_bound, upper_bound, type or name is pushed synchronously to all the
    attached solvers. Setting a property to its current value (within the
    registry epsilon) does nothing.

    After a solve, the solver calls assign() to set the value and reduced cost of
    the variable. Reading them before that raises VariableNotSolvedError.

    A variable can be frozen to its current value with freeze(): its bounds in
    all attached solvers are set to the value, while lower_bound and upper_bound
    keep the declared bounds. Freezing is reference counted; the bounds are
    restored by the unfreeze() call matching the first freeze(). Bound changes
    made while frozen are pushed to the solvers like any other change.

    Example:
      x = Variable("x", 0.0, 10.0)
      y = Variable("y", var_type=VariableType.INTEGER)
      c = x + 2 * y <= 8
    """

    __slots__ = (
        "_entity",
        "_lower_bound",
        "_upper_bound",
        "_type",
        "_frozen_count",
        "_value",
        "_reduced_cost",
        "_epsilon",
    )

    def __init__(
        self,
        name: str = "",
        lower_bound: float = 0.0,
        upper_bound: float = math.inf,
        var_type: VariableType = VariableType.CONTINUOUS,
        *,
        registry: Optional[registry_lib.VariableRegistry] = None,
    ) -> None:
        """Creates a new variable.

        Args:
          name: The name of the variable. If empty, "Var_<id>" is used.
          lower_bound: The lower bound, 0.0 by default.
          upper_bound: The upper bound, +inf by default.
          var_type: CONTINUOUS by default.
          registry: Where the id of the variable comes from. The process wide
            default registry is used if None.

        Raises:
          TypeError: var_type is not a VariableType.
          ValueError: a bound is NaN.
        """
        if not isinstance(var_type, VariableType):
            raise TypeError(
                f"var_type should be a VariableType, was: {type(var_type).__name__}"
            )
        self._lower_bound: float = _as_bound(lower_bound, "lower_bound")
        self._upper_bound: float = _as_bound(upper_bound, "upper_bound")
        registry = registry or registry_lib.default_variable_registry()
        self._entity = model_entity.ModelEntity(registry, name)
        self._type: VariableType = var_type
        self._frozen_count: int = 0
        self._value: Optional[float] = None
        self._reduced_cost: float = 0.0
        self._epsilon: float = registry.epsilon

    @property
    def id(self) -> int:
        return self._entity.id

    @property
    def name(self) -> str:
        return self._entity.name

    @name.setter
    def name(self, value: str) -> None:
        if self._entity.name == value:
            return
        self._entity.name = value
        solvers = self._entity.solvers
        logging.debug(
            "Renaming variable %d to %r in %d solver(s)", self.id, value, len(solvers)
        )
        for solver in solvers:
            solver.set_variable_name(self, value)

    @property
    def lower_bound(self) -> float:
        return self._lower_bound

    @lower_bound.setter
    def lower_bound(self, value: float) -> None:
        value = _as_bound(value, "lower_bound")
        if math_utils.compare_to_eps(self._lower_bound, value, self._epsilon) == 0:
            return
        self._lower_bound = value
        solvers = self._entity.solvers
        logging.debug(
            "Propagating lower bound %s of %r to %d solver(s)",
            value,
            self.name,
            len(solvers),
        )
        for solver in solvers:
            solver.set_variable_lower(self, value)

    @property
    def upper_bound(self) -> float:
        return self._upper_bound

    @upper_bound.setter
    def upper_bound(self, value: float) -> None:
        value = _as_bound(value, "upper_bound")
        if math_utils.compare_to_eps(self._upper_bound, value, self._epsilon) == 0:
            return
        self._upper_bound = value
        solvers = self._entity.solvers
        logging.debug(
            "Propagating upper bound %s of %r to %d solver(s)",
            value,
            self.name,
            len(solvers),
        )
        for solver in solvers:
            solver.set_variable_upper(self, value)

    def set_lower(self, value: float) -> None:
        self.lower_bound = value

    def set_upper(self, value: float) -> None:
        self.upper_bound = value

    @property
    def type(self) -> VariableType:
        return self._type

    @type.setter
    def type(self, value: VariableType) -> None:
        if not isinstance(value, VariableType):
            raise TypeError(
                f"type should be a VariableType, was: {type(value).__name__}"
            )
        if self._type == value:
            return
        self._type = value
        solvers = self._entity.solvers
        logging.debug(
            "Propagating type %s of %r to %d solver(s)", value, self.name, len(solvers)
        )
        for solver in solvers:
            solver.set_variable_type(self, value)

    @property
    def integer(self) -> bool:
        return self._type == VariableType.INTEGER

    @property
    def frozen_count(self) -> int:
        return self._frozen_count

    @property
    def is_frozen(self) -> bool:
        return self._frozen_count > 0

    def freeze(self) -> bool:
        """Freezes the current value of this variable.

        In effect, the lower and upper bounds in all attached solvers are both set
        to the current value. lower_bound and upper_bound are left unchanged.

        Returns:
          True if this variable was not yet frozen before, and False otherwise.

        Raises:
          VariableNotSolvedError: the variable was not frozen and has no value.
        """
        if self._frozen_count > 0:
            self._frozen_count += 1
            return False
        # Read before counting so that an unsolved variable stays unfrozen.
        value = self.value
        self._frozen_count = 1
        solvers = self._entity.solvers
        logging.debug(
            "Freezing %r at %s in %d solver(s)", self.name, value, len(solvers)
        )
        for solver in solvers:
            solver.set_variable_bounds(self, value, value)
        return True

    def unfreeze(self) -> bool:
        """Attempts to unfreeze this variable.

        If freeze() is called multiple times, then unfreeze() must be called at
        least as many times. Only the last call restores the bounds in the
        solvers, to the current lower_bound and upper_bound (which may have
        changed while frozen).

        Returns:
          True if the variable was unfrozen by this call, and False otherwise.
        """
        if self._frozen_count == 0:
            return False
        self._frozen_count -= 1
        if self._frozen_count > 0:
            return False
        solvers = self._entity.solvers
        logging.debug(
            "Unfreezing %r to [%s, %s] in %d solver(s)",
            self.name,
            self._lower_bound,
            self._upper_bound,
            len(solvers),
        )
        for solver in solvers:
            solver.set_variable_bounds(self, self._lower_bound, self._upper_bound)
        return True

    @property
    def value(self) -> float:
        """The value of this variable in the last solution assigned to it."""
        if self._value is None:
            raise errors.VariableNotSolvedError(self.name)
        return self._value

    @property
    def reduced_cost(self) -> float:
        """The reduced cost of this variable in the last solution assigned to it."""
        if self._value is None:
            raise errors.VariableNotSolvedError(self.name)
        return self._reduced_cost

    @property
    def solved(self) -> bool:
        """True if a solver assigned a value to this variable."""
        return self._value is not None

    def is_feasible(self) -> bool:
        """Tests if the value is within the bounds, and integral if applicable."""
        value = self.value
        if not math_utils.is_between(
            value, self._lower_bound, self._upper_bound, self._epsilon
        ):
            return False
        if self._type == VariableType.INTEGER and not math_utils.is_integer(
            value, self._epsilon
        ):
            return False
        return True

    @property
    def solvers(self) -> Tuple["solver_lib.Solver", ...]:
        """The solvers this variable is attached to."""
        return self._entity.solvers

    @property
    def assigned(self) -> bool:
        return self._entity.assigned

    def is_attached(self, solver: "solver_lib.Solver") -> bool:
        return self._entity.is_assigned_to(solver)

    def offset(self, solver: "solver_lib.Solver") -> int:
        """The offset of this variable in solver, see attach()."""
        return self._entity.offset(solver)

    def attach(self, solver: "solver_lib.Solver", offset: int) -> None:
        """Internal use only, called by solvers holding this variable.

        Args:
          solver: From now on, solver receives all changes of this variable.
          offset: The offset of this variable in the array of variables of the
            solver.
        """
        logging.debug("Attaching %r to %r at offset %d", self.name, solver, offset)
        self._entity.assign(solver, offset)

    def detach(self, solver: "solver_lib.Solver") -> bool:
        """Internal use only, returns False if solver was not attached."""
        detached = self._entity.unassign(solver)
        if detached:
            logging.debug("Detached %r from %r", self.name, solver)
        return detached

    def assign(
        self,
        solver: "solver_lib.Solver",
        offset: int,
        value: float,
        reduced_cost: float,
    ) -> None:
        """Internal use only, assigns the solution of solver to this variable.

        Called by solvers after they finished solving.

        Args:
          solver: The solver to be assigned, attached if it was not yet.
          offset: The offset of this variable in the array of variables of the
            solver.
          value: The value of this variable in the current solution.
          reduced_cost: The reduced cost of this variable in the current solution.
        """
        self._entity.assign(solver, offset)
        self._value = float(value)
        self._reduced_cost = float(reduced_cost)

    def to_level_string(self) -> str:
        """Returns "<str(self)> = <value>   ( <reduced cost> )"."""
        return f"{self!s} = {self.value}   ( {self.reduced_cost} )"

    def __str__(self):
        return (
            f"{self.name} : {self._type} :"
            f" [{self._lower_bound}, {self._upper_bound}]"
        )

    def __repr__(self):
        return f"<Variable id: {self.id}, name: {self.name!r}>"

    @typing.overload
    def __eq__(self, rhs: "Variable") -> VarEqVar: ...

    @typing.overload
    def __eq__(
        self, rhs: Union[int, float, expressions.Expression]
    ) -> expressions.Constraint: ...

    def __eq__(self, rhs):
        if isinstance(rhs, Variable):
            return VarEqVar(self, rhs)
        return super().__eq__(rhs)

    def __hash__(self) -> int:
        return hash(self.id)


def _as_bound(value: float, bound_name: str) -> float:
    """Converts a bound to float; NaN is rejected, infinities are allowed."""
    value = float(value)
    if math.isnan(value):
        raise ValueError(f"{bound_name} cannot be NaN")
    return value


def _key_label(key: Hashable) -> str:
    if isinstance(key, enum.Enum):
        return key.name
    return str(key)


def new_variables(
    n: int,
    name: str = "",
    lower_bound: float = 0.0,
    upper_bound: float = math.inf,
    var_type: VariableType = VariableType.CONTINUOUS,
    *,
    registry: Optional[registry_lib.VariableRegistry] = None,
) -> List[Variable]:
    """Returns n new variables sharing bounds and type.

    If a name is given, the variables are named f"{name}_{i}" for i in
    range(n). Otherwise each variable gets its own default name "Var_<id>".

    Args:
      n: The number of new variables.
      name: The base part of the name of the new variables.
      lower_bound: The lower bound of the new variables.
      upper_bound: The upper bound of the new variables.
      var_type: The type of the new variables.
      registry: Passed to each Variable.

    Raises:
      ValueError: n is negative.
    """
    if n < 0:
        raise ValueError(f"the number of variables must be non-negative, was: {n}")
    return [
        Variable(
            f"{name}_{i}" if name else "",
            lower_bound,
            upper_bound,
            var_type,
            registry=registry,
        )
        for i in range(n)
    ]


def new_variable_dict(
    keys: Iterable[K],
    name: str = "",
    lower_bound: float = 0.0,
    upper_bound: float = math.inf,
    var_type: VariableType = VariableType.CONTINUOUS,
    *,
    registry: Optional[registry_lib.VariableRegistry] = None,
) -> Dict[K, Variable]:
    """Returns a new variable for each element of keys, in iteration order.

    If a name is given, the variables are named f"{name}_{key}" (the member
    name is used for enum keys). Otherwise each variable gets its own default
    name "Var_<id>".

    Example:
      x = new_variable_dict(["bread", "milk"], "buy", 0.0, 10.0)
      x["milk"].name  # "buy_milk"

    Args:
      keys: Any iterable of hashable elements, including an enum.Enum class.
      name: The base part of the name of the new variables.
      lower_bound: The lower bound of the new variables.
      upper_bound: The upper bound of the new variables.
      var_type: The type of the new variables.
      registry: Passed to each Variable.

    Raises:
      InvalidDomainError: keys is not iterable or has an unhashable element.
      ValueError: keys contains duplicates.
    """
    try:
        elements = list(keys)
    except TypeError:
        raise errors.InvalidDomainError(
            f"cannot create variables over a non-iterable {type(keys).__name__!r}"
        ) from None
    seen = set()
    for key in elements:
        try:
            duplicate = key in seen
        except TypeError:
            raise errors.InvalidDomainError(
                f"cannot create a variable for the unhashable key {key!r}"
            ) from None
        if duplicate:
            raise ValueError(f"duplicate key in variable domain: {key!r}")
        seen.add(key)
    return {
        key: Variable(
            f"{name}_{_key_label(key)}" if name else "",
            lower_bound,
            upper_bound,
            var_type,
            registry=registry,
        )
        for key in elements
    }


def new_enum_variables(
    enum_type: typing.Type[enum.Enum],
    name: str = "",
    lower_bound: float = 0.0,
    upper_bound: float = math.inf,
    var_type: VariableType = VariableType.CONTINUOUS,
    *,
    registry: Optional[registry_lib.VariableRegistry] = None,
) -> Dict[enum.Enum, Variable]:
    """Returns a new variable for each member of enum_type.

    See new_variable_dict() for naming.

    Raises:
      InvalidDomainError: enum_type is not an enum.Enum subclass.
    """
    if not (isinstance(enum_type, type) and issubclass(enum_type, enum.Enum)):
        raise errors.InvalidDomainError(
            f"{enum_type!r} must be an enumerated type (an enum.Enum subclass)"
        )
    return new_variable_dict(
        enum_type, name, lower_bound, upper_bound, var_type, registry=registry
    )


def solution_values(variable_list: Iterable[Variable]) -> np.ndarray:
    """Returns the values of the variables as a float numpy array.

    Raises:
      VariableNotSolvedError: one of the variables has no value.
    """
    return np.fromiter(
        (variable.value for variable in variable_list), dtype=np.float64
    )

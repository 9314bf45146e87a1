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

"""Linear expressions and the constraints built from them.

Each arithmetic and relational rule has exactly one implementation, a method of
Expression. The named builders of this module (add, subtract, scale, divide,
less_or_equal, greater_or_equal, equal_to) wrap their operands into expressions
and forward to those methods. Operator overloading, provided by LinearBase for
both expressions and variables, forwards to the builders:

  x + 2 * y <= 10         # same as less_or_equal(add(x, scale(y, 2)), 10)
  x == y                  # an equality constraint
  x != y                  # raises NotEqualUnsupportedError

There is no not-equal builder: `x != c` is not a linear
constraint.
"""

import collections
import enum
import math
from typing import (
    Any,
    DefaultDict,
    Dict,
    Iterable,
    Mapping,
    NoReturn,
    Optional,
    Type,
    Union,
)

import immutabledict

from sonnet.python import errors
from sonnet.python import math_utils
from sonnet.python import model_entity
from sonnet.python import registry as registry_lib

LinearTypes = Union[int, float, "LinearBase"]

_CHAINED_COMPARISON_MESSAGE = (
    "If you were trying to create a two-sided or "
    "ranged linear inequality of the form `lb <= "
    "expr <= ub`, add two constraints `lb <= expr` and `expr <= ub` instead"
)


def _raise_binary_operator_type_error(
    operator: str,
    lhs: Type[Any],
    rhs: Type[Any],
    extra_message: Optional[str] = None,
) -> NoReturn:
    """Raises TypeError on unsupported operators."""
    message = (
        f"unsupported operand type(s) for {operator}: {lhs.__name__!r} and"
        f" {rhs.__name__!r}"
    )
    if extra_message is not None:
        message += "\n" + extra_message
    raise TypeError(message)


def _check_scalar(operator: str, expr: "LinearBase", constant: Any) -> float:
    if not isinstance(constant, (int, float)):
        _raise_binary_operator_type_error(operator, type(expr), type(constant))
    return float(constant)


class LinearBase:
    """Operator overloading for types that can build linear expressions.

    Subclasses are Expression itself and Variable. All operators forward to the
    named builders of this module; a non-expression operand (a variable) is
    first wrapped into a single-term Expression.
    """

    __slots__ = ()

    def __eq__(self, rhs: LinearTypes) -> "Constraint":  # pytype: disable=signature-mismatch
        if not isinstance(rhs, (int, float, LinearBase)):
            _raise_binary_operator_type_error("==", type(self), type(rhs))
        return equal_to(self, rhs)

    def __ne__(self, rhs: LinearTypes) -> NoReturn:  # pytype: disable=signature-mismatch
        raise errors.NotEqualUnsupportedError()

    def __le__(self, rhs: LinearTypes) -> "Constraint":
        if isinstance(rhs, Constraint):
            _raise_binary_operator_type_error(
                "<=", type(self), type(rhs), _CHAINED_COMPARISON_MESSAGE
            )
        if not isinstance(rhs, (int, float, LinearBase)):
            _raise_binary_operator_type_error("<=", type(self), type(rhs))
        return less_or_equal(self, rhs)

    def __ge__(self, lhs: LinearTypes) -> "Constraint":
        if isinstance(lhs, Constraint):
            _raise_binary_operator_type_error(
                ">=", type(self), type(lhs), _CHAINED_COMPARISON_MESSAGE
            )
        if not isinstance(lhs, (int, float, LinearBase)):
            _raise_binary_operator_type_error(">=", type(self), type(lhs))
        return greater_or_equal(self, lhs)

    def __add__(self, expr: LinearTypes) -> "Expression":
        if not isinstance(expr, (int, float, LinearBase)):
            return NotImplemented
        return add(self, expr)

    def __radd__(self, expr: LinearTypes) -> "Expression":
        if not isinstance(expr, (int, float, LinearBase)):
            return NotImplemented
        return add(expr, self)

    def __sub__(self, expr: LinearTypes) -> "Expression":
        if not isinstance(expr, (int, float, LinearBase)):
            return NotImplemented
        return subtract(self, expr)

    def __rsub__(self, expr: LinearTypes) -> "Expression":
        if not isinstance(expr, (int, float, LinearBase)):
            return NotImplemented
        return subtract(expr, self)

    def __mul__(self, other: float) -> "Expression":
        if isinstance(other, LinearBase):
            _raise_binary_operator_type_error(
                "*",
                type(self),
                type(other),
                "The product of two non-constant expressions is not linear",
            )
        if not isinstance(other, (int, float)):
            return NotImplemented
        return scale(self, other)

    def __rmul__(self, constant: float) -> "Expression":
        if not isinstance(constant, (int, float)):
            return NotImplemented
        return scale(self, constant)

    def __truediv__(self, constant: float) -> "Expression":
        if not isinstance(constant, (int, float)):
            return NotImplemented
        return divide(self, constant)

    def __neg__(self) -> "Expression":
        return as_expression(self).negate()


class Expression(LinearBase):
    """For variables x, an expression: b + sum_{i in I} a_i * x_i.

    Any hashable LinearBase that is not an Expression (i.e. a Variable) is
    treated as a single variable term. Expressions are immutable, all methods
    return new expressions or constraints.
    """

    __slots__ = "_terms", "_offset"

    def __init__(self, other: LinearTypes = 0.0, coefficient: float = 1.0) -> None:
        coefficient = float(coefficient)
        if isinstance(other, (int, float)):
            self._offset: float = float(other) * coefficient
            self._terms: Mapping[Any, float] = immutabledict.immutabledict()
        elif isinstance(other, Expression):
            self._offset = other.offset * coefficient
            self._terms = immutabledict.immutabledict(
                (var, coef * coefficient) for var, coef in other.terms.items()
            )
        elif isinstance(other, LinearBase):
            self._offset = 0.0
            self._terms = immutabledict.immutabledict({other: coefficient})
        else:
            raise TypeError(
                "unsupported type for Expression: " f"{type(other).__name__!r}"
            )

    @classmethod
    def _from_parts(cls, terms: Mapping[Any, float], offset: float) -> "Expression":
        result = cls.__new__(cls)
        result._terms = immutabledict.immutabledict(terms)
        result._offset = float(offset)
        return result

    @property
    def terms(self) -> Mapping[Any, float]:
        return self._terms

    @property
    def offset(self) -> float:
        return self._offset

    def add(self, other: LinearTypes) -> "Expression":
        """Returns self + other."""
        other = as_expression(other)
        terms: Dict[Any, float] = dict(self._terms)
        for var, coef in other.terms.items():
            terms[var] = terms.get(var, 0.0) + coef
        return Expression._from_parts(terms, self._offset + other.offset)

    def subtract(self, other: LinearTypes) -> "Expression":
        """Returns self - other."""
        return self.add(as_expression(other).negate())

    def multiply(self, constant: float) -> "Expression":
        """Returns constant * self."""
        constant = _check_scalar("*", self, constant)
        return Expression._from_parts(
            {var: coef * constant for var, coef in self._terms.items()},
            self._offset * constant,
        )

    def divide(self, constant: float) -> "Expression":
        """Returns self / constant, raises ZeroDivisionError if constant is 0."""
        constant = _check_scalar("/", self, constant)
        return Expression._from_parts(
            {var: coef / constant for var, coef in self._terms.items()},
            self._offset / constant,
        )

    def negate(self) -> "Expression":
        return self.multiply(-1.0)

    def less_or_equal(self, rhs: LinearTypes) -> "Constraint":
        return Constraint(self, ConstraintType.LESS_EQUAL, rhs)

    def greater_or_equal(self, rhs: LinearTypes) -> "Constraint":
        return Constraint(self, ConstraintType.GREATER_EQUAL, rhs)

    def equal_to(self, rhs: LinearTypes) -> "Constraint":
        return Constraint(self, ConstraintType.EQUAL, rhs)

    def evaluate(self, variable_values: Mapping[Any, float]) -> float:
        """Returns the value of this expression for given variable values.

        E.g. if this is 3 * x + 4 and variable_values = {x: 2.0}, then
        evaluate(variable_values) equals 10.0.

        Args:
          variable_values: Must contain a value for every variable in expression.

        Returns:
          The value of this expression when replacing variables by their value.
        """
        result = self._offset
        for var, coef in sorted(
            self._terms.items(), key=lambda var_coef_pair: var_coef_pair[0].id
        ):
            result += coef * variable_values[var]
        return result

    @property
    def value(self) -> float:
        """The value of this expression for the solved values of its variables.

        Raises VariableNotSolvedError if one of the variables has no value.
        """
        return self.evaluate({var: var.value for var in self._terms})

    def __str__(self):
        result = str(self._offset)
        for var in sorted(self._terms.keys(), key=lambda var: var.id):
            coefficient = self._terms[var]
            if coefficient == 0.0:
                continue
            if coefficient > 0:
                result += " + "
            else:
                result += " - "
            result += str(abs(coefficient)) + " * " + var.name
        return result

    def __repr__(self):
        result = f"Expression({self._offset}, " + "{"
        result += ", ".join(
            f"{var!r}: {coefficient}" for var, coefficient in self._terms.items()
        )
        result += "})"
        return result


@enum.unique
class ConstraintType(enum.Enum):
    """The relation between the expression and the right-hand side."""

    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="
    EQUAL = "=="


class Constraint:
    """A linear constraint `expression (<=|>=|==) rhs`.

    The constraint is normalized when built: every variable term is moved to the
    left-hand side and every constant to the right-hand side, so
    `x + 3 <= y` is stored as `x - y <= -3`.

    Like variables, constraints get an id and a default name ("Con_<id>") from
    a registry.

    Constraints can't be converted to bool, this catches chained comparisons
    `lb <= expr <= ub` that python would otherwise silently evaluate as
    `(lb <= expr) and (expr <= ub)`.
    """

    __slots__ = "_entity", "_expression", "_sense", "_rhs", "_epsilon"

    def __init__(
        self,
        lhs: LinearTypes,
        sense: ConstraintType,
        rhs: LinearTypes,
        *,
        name: str = "",
        registry: Optional[registry_lib.EntityRegistry] = None,
    ) -> None:
        registry = registry or registry_lib.default_constraint_registry()
        difference = as_expression(lhs).subtract(rhs)
        self._expression: Expression = Expression._from_parts(difference.terms, 0.0)
        self._sense: ConstraintType = sense
        self._rhs: float = 0.0 - difference.offset
        self._epsilon: float = registry.epsilon
        self._entity = model_entity.ModelEntity(registry, name)

    @property
    def id(self) -> int:
        return self._entity.id

    @property
    def name(self) -> str:
        return self._entity.name

    @name.setter
    def name(self, value: str) -> None:
        self._entity.name = value

    @property
    def expression(self) -> Expression:
        return self._expression

    @property
    def sense(self) -> ConstraintType:
        return self._sense

    @property
    def rhs(self) -> float:
        return self._rhs

    @property
    def lower_bound(self) -> float:
        if self._sense == ConstraintType.LESS_EQUAL:
            return -math.inf
        return self._rhs

    @property
    def upper_bound(self) -> float:
        if self._sense == ConstraintType.GREATER_EQUAL:
            return math.inf
        return self._rhs

    def is_satisfied(self) -> bool:
        """True if the solved values of the variables satisfy this constraint."""
        return math_utils.is_between(
            self._expression.value, self.lower_bound, self.upper_bound, self._epsilon
        )

    def __bool__(self) -> bool:
        raise TypeError(
            "__bool__ is unsupported for Constraint" + "\n" + _CHAINED_COMPARISON_MESSAGE
        )

    def __str__(self):
        return f"{self.name} : {self._expression!s} {self._sense.value} {self._rhs}"

    def __repr__(self):
        return (
            f"<Constraint id: {self.id}, name: {self.name!r},"
            f" {self._expression!r} {self._sense.value} {self._rhs}>"
        )


def as_expression(value: LinearTypes) -> Expression:
    """Converts floats, ints, variables and expressions to an Expression."""
    if isinstance(value, Expression):
        return value
    if not isinstance(value, (int, float, LinearBase)):
        raise TypeError(
            f"unsupported type for a linear expression: {type(value).__name__!r}"
        )
    return Expression(value)


def add(lhs: LinearTypes, rhs: LinearTypes) -> Expression:
    return as_expression(lhs).add(rhs)


def subtract(lhs: LinearTypes, rhs: LinearTypes) -> Expression:
    return as_expression(lhs).subtract(rhs)


def scale(expr: LinearTypes, constant: float) -> Expression:
    return as_expression(expr).multiply(constant)


def divide(expr: LinearTypes, constant: float) -> Expression:
    return as_expression(expr).divide(constant)


def less_or_equal(lhs: LinearTypes, rhs: LinearTypes) -> Constraint:
    return as_expression(lhs).less_or_equal(rhs)


def greater_or_equal(lhs: LinearTypes, rhs: LinearTypes) -> Constraint:
    return as_expression(lhs).greater_or_equal(rhs)


def equal_to(lhs: LinearTypes, rhs: LinearTypes) -> Constraint:
    return as_expression(lhs).equal_to(rhs)


def fast_sum(summands: Iterable[LinearTypes]) -> Expression:
    """Sums the elements of summands into a single Expression.

    Faster than sum(summands), which builds one intermediate Expression per
    element.

    Args:
      summands: The elements to add up.

    Returns:
      The sum of the elements.
    """
    terms: DefaultDict[Any, float] = collections.defaultdict(float)
    offset = 0.0
    for summand in summands:
        expr = as_expression(summand)
        offset += expr.offset
        for var, coef in expr.terms.items():
            terms[var] += coef
    return Expression._from_parts(terms, offset)

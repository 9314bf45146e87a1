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

"""Errors raised by the modeling layer.

We use the standard Python error we would expect for each condition as the
base class so that callers can catch either the precise error or the familiar
one (e.g. LookupError, TypeError).
"""


class VariableNotSolvedError(LookupError):
    """Raised when reading the value or reduced cost of an unsolved variable.

    A variable only gets a value once a solver that contains it has assigned
    its solution. Solve a model containing the variable first.
    """

    def __init__(self, variable_name: str):
        super().__init__(
            f"variable {variable_name!r} has no assigned value: it has not been"
            " solved by any solver yet"
        )
        self.variable_name = variable_name


class NotEqualUnsupportedError(TypeError):
    """Raised when `!=` is used on a variable or an expression.

    `x != c` is not a linear constraint, so no constraint is ever built for it.
    """

    def __init__(self):
        super().__init__("!= constraints are not supported")


class InvalidDomainError(TypeError):
    """Raised when variables are created over a domain that can't be enumerated."""


class UnknownSolverError(LookupError):
    """Raised when a variable is queried for a solver it is not attached to."""

    def __init__(self, variable_name: str, solver):
        super().__init__(
            f"variable {variable_name!r} is not attached to solver {solver!r}"
        )
        self.variable_name = variable_name
        self.solver = solver

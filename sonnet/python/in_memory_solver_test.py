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

import math

from absl.testing import absltest
import numpy as np
from sonnet.python import errors
from sonnet.python import in_memory_solver
from sonnet.python import registry
from sonnet.python import variables


class InMemorySolverTest(absltest.TestCase):

    def setUp(self) -> None:
        super().setUp()
        reg = registry.VariableRegistry()
        self.x = variables.Variable("x", 0.0, 10.0, registry=reg)
        self.y = variables.Variable(
            "y", -1.0, 5.0, variables.VariableType.INTEGER, registry=reg
        )
        self.solver = in_memory_solver.InMemorySolver("mem")

    def test_add_variable(self) -> None:
        self.assertEqual(self.solver.add_variable(self.x), 0)
        self.assertEqual(self.solver.add_variable(self.y), 1)
        self.assertEqual(self.solver.add_variable(self.x), 0)
        self.assertEqual(self.solver.num_variables(), 2)
        self.assertEqual(self.solver.next_offset(), 2)
        self.assertEqual(self.x.offset(self.solver), 0)
        self.assertEqual(self.y.offset(self.solver), 1)
        self.assertTrue(self.x.is_attached(self.solver))
        self.assertEqual(self.solver.get_variable_lb(self.y), -1.0)
        self.assertEqual(self.solver.get_variable_ub(self.y), 5.0)
        self.assertTrue(self.solver.get_variable_is_integer(self.y))
        self.assertFalse(self.solver.get_variable_is_integer(self.x))
        self.assertEqual(self.solver.get_variable_name(self.x), "x")

    def test_add_variables(self) -> None:
        self.assertEqual(self.solver.add_variables([self.y, self.x]), [0, 1])
        self.assertEqual(list(self.solver.attached_variables()), [self.y, self.x])

    def test_changes_are_mirrored(self) -> None:
        self.solver.add_variables([self.x, self.y])
        self.x.upper_bound = 5.0
        self.x.lower_bound = 1.0
        self.y.type = variables.VariableType.CONTINUOUS
        self.y.name = "z"
        self.assertEqual(self.solver.get_variable_ub(self.x), 5.0)
        self.assertEqual(self.solver.get_variable_lb(self.x), 1.0)
        self.assertFalse(self.solver.get_variable_is_integer(self.y))
        self.assertEqual(self.solver.get_variable_name(self.y), "z")

    def test_update_tracking(self) -> None:
        self.solver.add_variables([self.x, self.y])
        self.assertEmpty(self.solver.updated_variables())
        self.y.upper_bound = 4.0
        self.x.name = "x2"
        self.assertEqual(self.solver.updated_variables(), [self.x, self.y])
        self.solver.advance_checkpoint()
        self.assertEmpty(self.solver.updated_variables())
        self.y.upper_bound = 4.0
        self.assertEmpty(self.solver.updated_variables())

    def test_two_solvers_stay_in_sync(self) -> None:
        other = in_memory_solver.InMemorySolver("other")
        other.add_variable(self.y)
        other.add_variable(self.x)
        self.solver.add_variable(self.x)
        self.x.upper_bound = 3.0
        self.assertEqual(self.solver.get_variable_ub(self.x), 3.0)
        self.assertEqual(other.get_variable_ub(self.x), 3.0)
        self.assertEqual(self.x.offset(self.solver), 0)
        self.assertEqual(self.x.offset(other), 1)

    def test_remove_variable(self) -> None:
        self.solver.add_variables([self.x, self.y])
        self.solver.remove_variable(self.x)
        self.assertFalse(self.x.is_attached(self.solver))
        self.assertEqual(self.solver.num_variables(), 1)
        self.assertEqual(self.solver.next_offset(), 2)
        self.x.upper_bound = 1.0
        self.assertEmpty(self.solver.updated_variables())
        with self.assertRaises(errors.UnknownSolverError):
            self.solver.get_variable_ub(self.x)
        self.assertEqual(self.solver.add_variable(self.x), 2)
        self.assertEqual(self.solver.get_variable_ub(self.x), 1.0)

    def test_load_solution(self) -> None:
        self.solver.add_variables([self.x, self.y])
        self.solver.load_solution([4.0, 2.0], np.array([0.5, 0.0]))
        self.assertEqual(self.x.value, 4.0)
        self.assertEqual(self.x.reduced_cost, 0.5)
        self.assertEqual(self.y.value, 2.0)
        self.assertEqual(self.solver.solution_as_dict(), {self.x: 4.0, self.y: 2.0})
        self.assertTrue(self.solver.is_feasible())
        self.solver.load_solution([4.0, 2.5])
        self.assertEqual(self.y.reduced_cost, 0.0)
        self.assertFalse(self.solver.is_feasible())

    def test_load_solution_skips_removed(self) -> None:
        self.solver.add_variables([self.x, self.y])
        self.solver.remove_variable(self.x)
        self.solver.load_solution([math.nan, 3.0])
        self.assertFalse(self.x.solved)
        self.assertEqual(self.y.value, 3.0)

    def test_load_solution_bad_shape(self) -> None:
        self.solver.add_variables([self.x, self.y])
        with self.assertRaisesRegex(ValueError, "values has shape"):
            self.solver.load_solution([1.0])
        with self.assertRaisesRegex(ValueError, "reduced_costs has shape"):
            self.solver.load_solution([1.0, 2.0], [0.0])

    def test_freeze_and_unfreeze(self) -> None:
        self.solver.add_variables([self.x, self.y])
        self.solver.load_solution([4.0, 2.0])
        self.assertTrue(self.x.freeze())
        self.assertEqual(self.solver.get_variable_lb(self.x), 4.0)
        self.assertEqual(self.solver.get_variable_ub(self.x), 4.0)
        self.assertEqual(self.x.lower_bound, 0.0)
        self.assertEqual(self.x.upper_bound, 10.0)
        self.x.upper_bound = 8.0
        self.assertEqual(self.solver.get_variable_lb(self.x), 4.0)
        self.assertEqual(self.solver.get_variable_ub(self.x), 8.0)
        self.assertTrue(self.x.unfreeze())
        self.assertEqual(self.solver.get_variable_lb(self.x), 0.0)
        self.assertEqual(self.solver.get_variable_ub(self.x), 8.0)

    def test_removed_column_lookup(self) -> None:
        self.solver.add_variables([self.x, self.y])
        self.solver.remove_variable(self.x)
        self.x.attach(self.solver, 0)
        with self.assertRaises(errors.UnknownSolverError):
            self.solver.get_variable_lb(self.x)

    def test_add_frozen_variable(self) -> None:
        self.solver.add_variable(self.x)
        self.solver.load_solution([6.0])
        self.x.freeze()
        other = in_memory_solver.InMemorySolver()
        other.add_variable(self.x)
        self.assertEqual(other.get_variable_lb(self.x), 6.0)
        self.assertEqual(other.get_variable_ub(self.x), 6.0)
        self.x.unfreeze()
        self.assertEqual(other.get_variable_lb(self.x), 0.0)
        self.assertEqual(other.get_variable_ub(self.x), 10.0)

    def test_repr(self) -> None:
        self.solver.add_variable(self.x)
        self.assertEqual(repr(self.solver), "<InMemorySolver name: 'mem', columns: 1>")
        self.assertEqual(self.solver.name, "mem")


if __name__ == "__main__":
    absltest.main()

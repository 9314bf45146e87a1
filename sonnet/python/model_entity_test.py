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

from absl.testing import absltest
from sonnet.python import errors
from sonnet.python import model_entity
from sonnet.python import registry


class _FakeSolver:
    pass


class ModelEntityTest(absltest.TestCase):

    def test_id_and_default_name(self) -> None:
        reg = registry.VariableRegistry()
        first = model_entity.ModelEntity(reg)
        second = model_entity.ModelEntity(reg, "y")
        self.assertEqual(first.id, 0)
        self.assertEqual(first.name, "Var_0")
        self.assertEqual(second.id, 1)
        self.assertEqual(second.name, "y")

    def test_not_assigned(self) -> None:
        entity = model_entity.ModelEntity(registry.VariableRegistry())
        self.assertFalse(entity.assigned)
        self.assertEmpty(entity.solvers)
        with self.assertRaises(errors.UnknownSolverError):
            entity.offset(_FakeSolver())

    def test_assign_several_solvers(self) -> None:
        entity = model_entity.ModelEntity(registry.VariableRegistry())
        s1 = _FakeSolver()
        s2 = _FakeSolver()
        entity.assign(s1, 3)
        entity.assign(s2, 0)
        self.assertTrue(entity.assigned)
        self.assertEqual(entity.solvers, (s1, s2))
        self.assertEqual(entity.offset(s1), 3)
        self.assertEqual(entity.offset(s2), 0)
        self.assertTrue(entity.is_assigned_to(s2))

    def test_reassign_updates_offset(self) -> None:
        entity = model_entity.ModelEntity(registry.VariableRegistry())
        s = _FakeSolver()
        entity.assign(s, 3)
        entity.assign(s, 5)
        self.assertEqual(entity.solvers, (s,))
        self.assertEqual(entity.offset(s), 5)

    def test_unassign(self) -> None:
        entity = model_entity.ModelEntity(registry.VariableRegistry())
        s = _FakeSolver()
        entity.assign(s, 0)
        self.assertTrue(entity.unassign(s))
        self.assertFalse(entity.unassign(s))
        self.assertFalse(entity.is_assigned_to(s))
        self.assertFalse(entity.assigned)

    def test_negative_offset(self) -> None:
        entity = model_entity.ModelEntity(registry.VariableRegistry())
        with self.assertRaisesRegex(ValueError, "offset"):
            entity.assign(_FakeSolver(), -1)

    def test_unknown_solver_is_lookup_error(self) -> None:
        entity = model_entity.ModelEntity(registry.VariableRegistry(), "x")
        with self.assertRaisesRegex(LookupError, "'x' is not attached"):
            entity.offset(_FakeSolver())


if __name__ == "__main__":
    absltest.main()

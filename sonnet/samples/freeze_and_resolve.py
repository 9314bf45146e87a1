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

"""Freezes part of a solution, shared by two solvers, before solving again.

The items get a variable each, held by a "master" and a "copy" solver. A first
solution is loaded in the master, the integral items are frozen to their value,
then the bounds of the remaining items are tightened. Both solvers mirror every
change.
"""

from typing import List, Sequence

from absl import app
from absl import flags
import numpy as np

from sonnet.python import expressions
from sonnet.python import in_memory_solver
from sonnet.python import math_utils
from sonnet.python import variables

_NUM_ITEMS = flags.DEFINE_integer("num_items", 6, "Number of items.")
_CAPACITY = flags.DEFINE_float("capacity", 10.0, "Capacity of the knapsack.")
_SEED = flags.DEFINE_integer("seed", 0, "Seed of the random item weights.")


def _print_columns(solver: in_memory_solver.InMemorySolver) -> None:
    print(f"{solver!r}")
    for var in solver.attached_variables():
        print(
            f"  {solver.get_variable_name(var)}: ["
            f"{solver.get_variable_lb(var)}, {solver.get_variable_ub(var)}]"
        )


def freeze_integral(
    take: Sequence[variables.Variable],
) -> List[variables.Variable]:
    """Freezes the variables whose value is integral, returns them."""
    frozen = [var for var in take if math_utils.is_integer(var.value)]
    for var in frozen:
        var.freeze()
    return frozen


def main(argv: Sequence[str]) -> None:
    del argv  # Unused.

    rng = np.random.default_rng(_SEED.value)
    weights = rng.uniform(1.0, 5.0, size=_NUM_ITEMS.value)

    take = variables.new_variables(_NUM_ITEMS.value, "take", 0.0, 1.0)
    weight = expressions.fast_sum(w * x for w, x in zip(weights.tolist(), take))
    capacity = weight <= _CAPACITY.value
    print(capacity)

    master = in_memory_solver.InMemorySolver("master")
    copy = in_memory_solver.InMemorySolver("copy")
    master.add_variables(take)
    copy.add_variables(reversed(take))

    # Greedy fractional solution: take the lightest items first.
    values = np.zeros(_NUM_ITEMS.value)
    remaining = _CAPACITY.value
    for i in np.argsort(weights):
        values[i] = min(1.0, remaining / weights[i])
        remaining -= values[i] * weights[i]
    master.load_solution(values)
    for var in take:
        print(var.to_level_string())
    print(f"capacity satisfied: {capacity.is_satisfied()}")

    frozen = freeze_integral(take)
    for var in take:
        if not var.is_frozen:
            var.upper_bound = 0.5
    _print_columns(master)
    _print_columns(copy)

    for var in frozen:
        var.unfreeze()
    _print_columns(copy)


if __name__ == "__main__":
    app.run(main)

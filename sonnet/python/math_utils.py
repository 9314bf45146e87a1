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

"""Tolerance aware comparisons of floating point values.

Bounds, values and coefficients are never compared with exact floating point
equality. All comparisons in this package go through these functions with an
absolute tolerance `eps`.
"""

import math

DEFAULT_EPSILON = 1e-5


def compare_to_eps(a: float, b: float, eps: float = DEFAULT_EPSILON) -> int:
    """Returns 0 if a and b are within eps of each other, else -1 or 1.

    Identical values (including two equal infinities) always compare as 0. NaN
    never compares as 0, not even to itself.

    Args:
      a: The first value.
      b: The second value.
      eps: The absolute tolerance.

    Returns:
      -1 if a < b - eps, 1 if a > b + eps and 0 otherwise.
    """
    if a == b:
        return 0
    if math.isnan(a) or math.isnan(b):
        return 1
    if abs(a - b) <= eps:
        return 0
    return -1 if a < b else 1


def is_close(a: float, b: float, eps: float = DEFAULT_EPSILON) -> bool:
    return compare_to_eps(a, b, eps) == 0


def is_between(
    value: float, lower: float, upper: float, eps: float = DEFAULT_EPSILON
) -> bool:
    """Returns true if lower - eps <= value <= upper + eps."""
    if math.isnan(value):
        return False
    return (
        compare_to_eps(value, lower, eps) >= 0
        and compare_to_eps(value, upper, eps) <= 0
    )


def is_integer(value: float, eps: float = DEFAULT_EPSILON) -> bool:
    """Returns true if value is finite and within eps of an integer."""
    if not math.isfinite(value):
        return False
    return abs(value - round(value)) <= eps

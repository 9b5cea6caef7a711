## foundational point and vector operations for curvemesh

## Copyright (c) curvemesh contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""point and vector operations for **curvemesh**

====================
OVERVIEW
====================

Points in curvemesh are plain ``(x, y, z)`` tuples of floats.  They
are values: every operation returns a new tuple and nothing is ever
normalized implicitly.  Addition, subtraction and scaling are single
float operations per component, so composing them is exact in the
sense that no hidden rescaling or rounding happens along the way.

constants
=========

``epsilon`` is the tolerance used by the ``close`` and ``vclose``
predicates.  It is deliberately tighter than the welding precision
used by ``curvemesh.mesh``, which is a construction parameter.
"""

from __future__ import annotations

from math import sqrt
from typing import Iterable, Sequence, Tuple

Vec3 = Tuple[float, float, float]

epsilon = 5e-7


def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n, bool)) and isinstance(n, (int, float))


def close(a, b):
    """ are two scalars the same within epsilon
    """
    return abs(a - b) < epsilon


def point(x=0.0, y=0.0, z=0.0) -> Vec3:
    """Point creation from scalars or from another point-like sequence"""
    if isinstance(x, (tuple, list)):
        if len(x) < 3:
            raise ValueError('point-like value needs three components: {}'.format(x))
        return (float(x[0]), float(x[1]), float(x[2]))
    for c in (x, y, z):
        if not isgoodnum(c):
            raise ValueError('bad coordinate passed to point: {}'.format(c))
    return (float(x), float(y), float(z))


def add(a: Sequence[float], b: Sequence[float]) -> Vec3:
    """ 3 vector, `a + b`"""
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Sequence[float], b: Sequence[float]) -> Vec3:
    """ 3 vector, `a - b`"""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale3(a: Sequence[float], c: float) -> Vec3:
    """ 3 vector, vector ``a`` times scalar ``c``, `a * c`"""
    return (a[0] * c, a[1] * c, a[2] * c)


## component-wise 3vect multiplication
def mul(a: Sequence[float], b: Sequence[float]) -> Vec3:
    """ component-wise 3 vector multiplication"""
    return (a[0] * b[0], a[1] * b[1], a[2] * b[2])


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    """ 3 vector ``a`` dot ``b`` """
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    """ 3 vector ``a`` cross ``b`` """
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def mag(a: Sequence[float]) -> float:
    """ compute the magnitude of 3 vector ``a``"""
    return sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def dist(a: Sequence[float], b: Sequence[float]) -> float:
    """ euclidean distance between points ``a`` and ``b``"""
    return mag(sub(a, b))


def normalize(a: Sequence[float]) -> Vec3:
    """return the unit vector in the direction of ``a``; a zero-length
    vector raises ``ValueError``"""
    m = mag(a)
    if m < epsilon:
        raise ValueError('cannot normalize zero-length vector: {}'.format(a))
    return (a[0] / m, a[1] / m, a[2] / m)


def vclose(a: Sequence[float], b: Sequence[float]) -> bool:
    return close(dist(a, b), 0)


def midpoint(a: Sequence[float], b: Sequence[float]) -> Vec3:
    return scale3(add(a, b), 0.5)


def centroid(points: Iterable[Sequence[float]]) -> Vec3:
    """Arithmetic mean of ``points`` (their center of mass)."""
    sx = sy = sz = 0.0
    n = 0
    for p in points:
        sx += p[0]
        sy += p[1]
        sz += p[2]
        n += 1
    if n == 0:
        raise ValueError('centroid of an empty point list is undefined')
    return (sx / n, sy / n, sz / n)


__all__ = [
    "Vec3",
    "epsilon",
    "isgoodnum",
    "close",
    "point",
    "add",
    "sub",
    "scale3",
    "mul",
    "dot",
    "cross",
    "mag",
    "dist",
    "normalize",
    "vclose",
    "midpoint",
    "centroid",
]

## matrix transformations and pivot-relative point transforms for
## curvemesh

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

from math import cos, sin, pi
from typing import Iterable, List, Sequence

from curvemesh import vec
from curvemesh.vec import Vec3

## a matrix is represented as a list of four four-element rows.
## Matrices act on column vectors, so ``M.mul(p)`` transforms point
## ``p`` and ``A.mul(B)`` applies ``B`` first, then ``A``.  Points are
## ``(x, y, z)`` tuples, lifted to homogeneous form with w=1 on the way
## in and projected back on the way out.


class Matrix:
    """4x4 transformation matrix class for transforming homogeneous 3D coordinates"""

    def __init__(self, a=None, trans=False):
        self.m = [[1.0, 0.0, 0.0, 0.0],
                  [0.0, 1.0, 0.0, 0.0],
                  [0.0, 0.0, 1.0, 0.0],
                  [0.0, 0.0, 0.0, 1.0]]
        self.trans = False

        if isinstance(a, Matrix):
            for i in range(4):
                self.setrow(i, a.getrow(i))

        elif isinstance(a, (tuple, list)):
            if len(a) == 4:
                if not all(isinstance(r, (tuple, list)) and len(r) == 4 for r in a):
                    raise ValueError('bad row in matrix initialization: {}'.format(a))
                for i in range(4):
                    for j in range(4):
                        x = a[i][j]
                        if vec.isgoodnum(x):
                            self.m[i][j] = float(x)
                        else:
                            raise ValueError('bad element in matrix initialization: {}'.format(x))
            elif len(a) == 16:
                for i in range(4):
                    for j in range(4):
                        x = a[i * 4 + j]
                        if vec.isgoodnum(x):
                            self.m[i][j] = float(x)
                        else:
                            raise ValueError('bad element in matrix initialization: {}'.format(x))
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not None:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        self.trans = trans

    def __repr__(self):
        return "Matrix({},{},{},{},{})".format(self.m[0], self.m[1],
                                               self.m[2], self.m[3], self.trans)

    #return value indexed by i,j
    def get(self, i, j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i, j))
        if self.trans:
            return self.m[j][i]
        return self.m[i][j]

    #set value indexed by i,j
    def set(self, i, j, x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to set: {},{}'.format(i, j))
        if not vec.isgoodnum(x):
            raise ValueError('bad value passed to set: {}'.format(x))
        if self.trans:
            self.m[j][i] = x
        else:
            self.m[i][j] = x

    def getrow(self, i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        if self.trans:
            return [self.m[0][i], self.m[1][i], self.m[2][i], self.m[3][i]]
        return list(self.m[i])

    def getcol(self, j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        if not self.trans:
            return [self.m[0][j], self.m[1][j], self.m[2][j], self.m[3][j]]
        return list(self.m[j])

    def setrow(self, i, x):
        if len(x) != 4:
            raise ValueError('bad non-row passed to setrow: {}'.format(x))
        if i < 0 or i > 3:
            raise ValueError('bad row index passed to setrow: {}'.format(i))
        if self.trans:
            for k in range(4):
                self.m[k][i] = x[k]
        else:
            self.m[i] = list(x)

    # matrix multiply.  If x is a matrix, compute MX.  If x is a
    # point, compute Mx and return the projected point.  If x is a
    # scalar, compute xM.  Respects transpose flag.
    def mul(self, x):
        if isinstance(x, Matrix):
            result = Matrix()
            for i in range(4):
                row = self.getrow(i)
                for j in range(4):
                    col = x.getcol(j)
                    result.set(i, j, sum(row[k] * col[k] for k in range(4)))
            return result
        elif isinstance(x, (tuple, list)) and len(x) == 3:
            h = (x[0], x[1], x[2], 1.0)
            r = [sum(row[k] * h[k] for k in range(4))
                 for row in (self.getrow(i) for i in range(4))]
            if r[3] != 1.0 and r[3] != 0.0:
                return (r[0] / r[3], r[1] / r[3], r[2] / r[3])
            return (r[0], r[1], r[2])
        elif vec.isgoodnum(x):
            result = Matrix()
            for i in range(4):
                result.setrow(i, [c * x for c in self.getrow(i)])
            return result

        raise ValueError('bad thing passed to mul(): {}'.format(x))


# return the generalized 4x4 arbitrary axis rotation matrix, angle in
# degrees
def Rotation(axis, angle, inverse=False):
    m = vec.mag(axis)
    if m < vec.epsilon:
        raise ValueError('zero-length rotation axis not allowed')
    u = vec.scale3(axis, 1.0 / m)

    if inverse:
        angle *= -1.0
    rad = (angle % 360.0) * pi / 180.0

    ux, uy, uz = u

    cang = cos(rad)
    cmin = 1.0 - cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux*ux*cmin, ux*uy*cmin - uz*sang, ux*uz*cmin + uy*sang, 0],
         [uy*ux*cmin + uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang, 0],
         [uz*ux*cmin - uy*sang, uz*uy*cmin + ux*sang, cang + uz*uz*cmin, 0],
         [0, 0, 0, 1]]

    return Matrix(R)


def Translation(delta, inverse=False):
    if inverse:
        delta = vec.scale3(delta, -1.0)
    T = [[1, 0, 0, delta[0]],
         [0, 1, 0, delta[1]],
         [0, 0, 1, delta[2]],
         [0, 0, 0, 1]]
    return Matrix(T)


def Scale(x, y=None, z=None, inverse=False):
    if vec.isgoodnum(x):
        sx = x
        if vec.isgoodnum(y) and vec.isgoodnum(z):
            sy = y
            sz = z
        else:
            sy = sz = x
    elif isinstance(x, (tuple, list)) and len(x) >= 3:
        sx, sy, sz = x[0], x[1], x[2]
    else:
        raise ValueError('bad scaling values passed to Scale')

    if inverse:
        sx = 1.0 / sx
        sy = 1.0 / sy
        sz = 1.0 / sz

    S = [[sx, 0, 0, 0],
         [0, sy, 0, 0],
         [0, 0, sz, 0],
         [0, 0, 0, 1.0]]
    return Matrix(S)


## pivot-relative point transforms used by the part builders

def rotate_about(p: Sequence[float], pivot: Sequence[float],
                 axis: Sequence[float], angle: float) -> Vec3:
    """Rotate point ``p`` by ``angle`` degrees about ``axis`` passing
    through ``pivot``."""
    R = Rotation(axis, angle)
    return vec.add(R.mul(vec.sub(p, pivot)), pivot)


def scale_about(p: Sequence[float], pivot: Sequence[float], factor: float) -> Vec3:
    """Uniformly scale point ``p`` by ``factor`` relative to ``pivot``."""
    return vec.add(vec.scale3(vec.sub(p, pivot), factor), pivot)


def scale_about_by_vector(p: Sequence[float], pivot: Sequence[float],
                          factors: Sequence[float]) -> Vec3:
    """Scale ``p`` relative to ``pivot`` with a separate factor per axis."""
    return vec.add(vec.mul(vec.sub(p, pivot), factors), pivot)


def translate_points(points: Iterable[Sequence[float]], delta: Sequence[float]) -> List[Vec3]:
    return [vec.add(p, delta) for p in points]


def rotate_points(points: Iterable[Sequence[float]], pivot: Sequence[float],
                  axis: Sequence[float], angle: float) -> List[Vec3]:
    # one matrix for the whole list
    R = Rotation(axis, angle)
    return [vec.add(R.mul(vec.sub(p, pivot)), pivot) for p in points]


def scale_points(points: Iterable[Sequence[float]], pivot: Sequence[float],
                 factors) -> List[Vec3]:
    """Scale every point about ``pivot``; ``factors`` is a scalar or a
    per-axis triple."""
    if vec.isgoodnum(factors):
        return [scale_about(p, pivot, factors) for p in points]
    return [scale_about_by_vector(p, pivot, factors) for p in points]


def transform_points(points: Iterable[Sequence[float]], M: Matrix) -> List[Vec3]:
    return [M.mul(p) for p in points]


__all__ = [
    "Matrix",
    "Rotation",
    "Translation",
    "Scale",
    "rotate_about",
    "scale_about",
    "scale_about_by_vector",
    "translate_points",
    "rotate_points",
    "scale_points",
    "transform_points",
]

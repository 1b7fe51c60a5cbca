"""Baby Jubjub twisted Edwards curve over the BN254 scalar field.

    a * x^2 + y^2 = 1 + d * x^2 * y^2,   a = 168700, d = 168696

Points are kept in affine coordinates; the twisted Edwards addition law is
complete for this curve (a is a square, d is not), so no special cases are
needed for doubling or the identity (0, 1).
"""

import random
from dataclasses import dataclass
from typing import List

from primitives.field import BABYJUBJUB_SUBGROUP_ORDER, FL

EDWARDS_A = FL(168700)
EDWARDS_D = FL(168696)
COFACTOR = 8

# Generator of the prime-order subgroup (8 * the curve generator)
BASE_X = 5299619240641551281634865583518297030282874472190772894086521144482721001553
BASE_Y = 16950150798460657717958625567821834550301663161624707787222815936182638968203


@dataclass(frozen=True, eq=False)
class Point:
    """Affine Baby Jubjub point with FL coordinates."""
    x: FL
    y: FL

    @classmethod
    def identity(cls) -> "Point":
        return cls(FL(0), FL(1))

    @classmethod
    def generator(cls) -> "Point":
        """Generator of the subgroup of order BABYJUBJUB_SUBGROUP_ORDER."""
        return cls(FL(BASE_X), FL(BASE_Y))

    @classmethod
    def random(cls, rng: random.Random) -> "Point":
        """Random non-identity subgroup point, sampled from an explicit source."""
        return cls.generator() * rng.randrange(1, BABYJUBJUB_SUBGROUP_ORDER)

    def is_on_curve(self) -> bool:
        xx = self.x * self.x
        yy = self.y * self.y
        return bool(EDWARDS_A * xx + yy == FL(1) + EDWARDS_D * xx * yy)

    def is_identity(self) -> bool:
        return bool(self.x == 0 and self.y == 1)

    def __add__(self, other: "Point") -> "Point":
        x1x2 = self.x * other.x
        y1y2 = self.y * other.y
        dxy = EDWARDS_D * x1x2 * y1y2
        x3 = (self.x * other.y + self.y * other.x) / (FL(1) + dxy)
        y3 = (y1y2 - EDWARDS_A * x1x2) / (FL(1) - dxy)
        return Point(x3, y3)

    def __neg__(self) -> "Point":
        return Point(-self.x, self.y)

    def __mul__(self, scalar: int) -> "Point":
        """Double-and-add scalar multiplication."""
        scalar = int(scalar)
        if scalar < 0:
            return (-self) * (-scalar)
        result = Point.identity()
        addend = self
        while scalar:
            if scalar & 1:
                result = result + addend
            addend = addend + addend
            scalar >>= 1
        return result

    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return bool(self.x == other.x and self.y == other.y)

    def __hash__(self) -> int:
        return hash((int(self.x), int(self.y)))

    def to_field_elements(self) -> List[FL]:
        """Sponge encoding of the point: its affine coordinates [x, y]."""
        return [self.x, self.y]

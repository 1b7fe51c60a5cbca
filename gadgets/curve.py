"""Baby Jubjub points as circuit variables."""

from typing import Callable, List

from constraints.base import ConstraintError, ConstraintSystem
from gadgets.fp import FpVar
from primitives.babyjubjub import EDWARDS_A, EDWARDS_D, Point


class PointVar:
    """Affine Baby Jubjub point whose coordinates are native field variables.

    Allocation enforces the curve equation a*x^2 + y^2 = 1 + d*x^2*y^2 with
    three multiplication constraints. Subgroup membership is not checked.
    """

    def __init__(self, x: FpVar, y: FpVar):
        self.x = x
        self.y = y

    @classmethod
    def new_witness(cls, cs: ConstraintSystem, point_fn: Callable[[], Point]) -> "PointVar":
        with cs.namespace("point"):
            try:
                point = point_fn()
            except Exception as e:
                raise ConstraintError(f"Failed to compute point at '{cs.current_namespace()}': {e}") from e
            x = FpVar.new_witness(cs, lambda: point.x)
            y = FpVar.new_witness(cs, lambda: point.y)
            var = cls(x, y)
            var.enforce_on_curve()
        return var

    def enforce_on_curve(self) -> None:
        xx = self.x.square()
        yy = self.y.square()
        xxyy = xx * yy
        lhs = xx * int(EDWARDS_A) + yy
        rhs = xxyy * int(EDWARDS_D) + 1
        lhs.enforce_equal(rhs)

    @property
    def value(self) -> Point:
        return Point(self.x.value, self.y.value)

    def to_constraint_field(self) -> List[FpVar]:
        """Sponge encoding [x, y], matching Point.to_field_elements()."""
        return [self.x, self.y]

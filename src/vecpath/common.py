"""Central module containing types, enums and errors shared by the path modules."""

from __future__ import annotations

from enum import Enum, IntFlag, auto
from typing import Sequence, Union

###############################################################################
# Types
###############################################################################


# Anything that can be read as a point: a Point instance or an (x, y) sequence.
PointLike = Union["Point", Sequence[float]]  # noqa: F821

# Affine transformation [a00, a01, a10, a11, b0, b1]:
#     x' = a00 * x + a01 * y + b0
#     y' = a10 * x + a11 * y + b1
AffineTrafo = Sequence[Union[int, float]]


###############################################################################
# Enums
###############################################################################


class StrokeJoin(Enum):
    """Shape used at interior corners of a stroked path."""

    ROUND = auto()
    BEVEL = auto()
    MITER = auto()


class StrokeCap(Enum):
    """Shape used at both ends of a stroked open path."""

    ROUND = auto()
    BUTT = auto()
    SQUARE = auto()


class SelectionState(IntFlag):
    """Selection flags of a single segment."""

    NONE = 0
    HANDLE_IN = 1
    HANDLE_OUT = 2
    POINT = 4


class ChangeFlag(IntFlag):
    """Change signals a path uses to invalidate its cached values.

    GEOMETRY drops everything derived from segment positions.
    STROKE only drops values that also depend on the stroke style.
    """

    GEOMETRY = 1
    STROKE = 2


###############################################################################
# Errors
###############################################################################


class PathUsageError(ValueError):
    """Raised when a path operation is called in a state that does not allow it.

    Examples are curve drawing commands on a path without a current segment or
    a curve_to parameter that produces a non-finite handle.
    """

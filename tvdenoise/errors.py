class TVDenoiseError(Exception):
    """Base class for all errors raised by tvdenoise."""


class ShapeMismatchError(TVDenoiseError, ValueError):
    """Raised when two operands of a binary operation have different shapes."""


class AxisOutOfBoundsError(TVDenoiseError, IndexError):
    """Raised when a difference is requested along a nonexistent axis."""


class AxisTooShortError(TVDenoiseError, ValueError):
    """Raised when a difference is requested along an axis of length <= 1."""


class ImageTooSmallError(AxisTooShortError):
    """Raised by the solvers when an image has a spatial axis of length <= 1."""


def check_same_shape(left_shape, right_shape):
    """
    Raises a ShapeMismatchError unless both shapes are equal.

    :param left_shape: shape of the left operand
    :param right_shape: shape of the right operand
    """
    if tuple(left_shape) != tuple(right_shape):
        raise ShapeMismatchError(
            f"incompatible shapes, left = {tuple(left_shape)} x right = {tuple(right_shape)}"
        )

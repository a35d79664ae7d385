import numpy

from tvdenoise.bundle import ChannelBundle
from tvdenoise.errors import check_same_shape


def apply_binary(operation, left, right):
    """
    Applies an elementwise binary operation to matrices, bundles or scalars.

    Scalars broadcast to every element, a matrix combined with a bundle is applied
    to each channel, anything else must have exactly the same shape: numpy's
    implicit broadcasting between differently shaped arrays is refused.

    :param operation: numpy ufunc or any callable of two arguments
    :param left: left operand
    :param right: right operand
    :return: result of the same kind as the non-scalar operand
    """
    if isinstance(left, ChannelBundle):
        return left.apply(operation, right)

    if isinstance(right, ChannelBundle):
        return right.apply(lambda a, b: operation(b, a), left)

    if numpy.ndim(left) != 0 and numpy.ndim(right) != 0:
        check_same_shape(numpy.shape(left), numpy.shape(right))

    return operation(left, right)


def add(left, right):
    return apply_binary(numpy.add, left, right)


def subtract(left, right):
    return apply_binary(numpy.subtract, left, right)


def multiply(left, right):
    return apply_binary(numpy.multiply, left, right)


def divide(left, right):
    return apply_binary(numpy.divide, left, right)


def copy(image):
    return image.copy() if isinstance(image, ChannelBundle) else numpy.array(image, copy=True)

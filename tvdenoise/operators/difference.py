"""
Wrapping finite differences.

Boundaries are periodic: the element that falls off one edge of an axis
reappears on the opposite edge. With this choice the backward difference is
exactly the transpose of the forward difference, i.e. for any same-shape A, B
and axis X:

    sum(forward_difference(A, X) * B) == sum(A * backward_difference(B, X))
"""

import numpy

from tvdenoise.bundle import ChannelBundle
from tvdenoise.errors import AxisOutOfBoundsError, AxisTooShortError
from tvdenoise.operators.arithmetic import add


def check_axis(shape, axis):
    """
    Checks that a shift can be performed along the given axis of an array of
    the given shape.

    :param shape: array shape
    :param axis: axis index, negative values count from the end
    """
    ndim = len(shape)
    if not -ndim <= axis < ndim:
        raise AxisOutOfBoundsError(
            f"axis {axis} is out of bounds for array of dimension {ndim}"
        )
    if shape[axis] <= 1:
        raise AxisTooShortError(
            f"axis {axis} of array of shape {tuple(shape)} is too short to be shifted"
        )


def positive_shift(array, axis):
    """
    Shifts towards growing indices, the last index wrapping around to index 0.
    """
    array = numpy.asarray(array, dtype=numpy.float64)
    check_axis(array.shape, axis)
    return numpy.roll(array, 1, axis=axis)


def negative_shift(array, axis):
    """
    Shifts towards shrinking indices, index 0 wrapping around to the last index.
    """
    array = numpy.asarray(array, dtype=numpy.float64)
    check_axis(array.shape, axis)
    return numpy.roll(array, -1, axis=axis)


def forward_difference(image, axis):
    if isinstance(image, ChannelBundle):
        return image.map(lambda channel: forward_difference(channel, axis))
    array = numpy.asarray(image, dtype=numpy.float64)
    return array - positive_shift(array, axis)


def backward_difference(image, axis):
    """
    Transposed difference, adjoint of forward_difference along the same axis.
    """
    if isinstance(image, ChannelBundle):
        return image.map(lambda channel: backward_difference(channel, axis))
    array = numpy.asarray(image, dtype=numpy.float64)
    return array - negative_shift(array, axis)


def gradient(image, axes=(0, 1)):
    """
    Forward differences of an image along each of the given axes.

    :param image: array or ChannelBundle
    :param axes: spatial axes
    :return: tuple with one difference per axis
    """
    return tuple(forward_difference(image, axis) for axis in axes)


def divergence(duals, axes=(0, 1)):
    """
    Discrete adjoint of gradient: sum of the backward differences of each dual
    component along its axis.

    :param duals: sequence of arrays or bundles, one per axis
    :param axes: spatial axes, same order as for gradient
    """
    result = None
    for dual, axis in zip(duals, axes):
        difference = backward_difference(dual, axis)
        result = difference if result is None else add(result, difference)
    return result

"""
Pointwise projections of 2D vector fields onto the unit Euclidean ball.

A pair of matrices (a, b) holds the two components of one vector per pixel.
Vectors inside the unit ball are left untouched, longer ones are rescaled to
unit length. The multichannel variants follow Bredies (2014): the length is
taken over the vector components of every channel at once so that all
channels share the same divisor at a pixel (colour TV), which is not the
same as projecting each channel separately.
"""

import numexpr
import numpy

from tvdenoise.bundle import ChannelBundle
from tvdenoise.errors import AxisOutOfBoundsError, check_same_shape


def vector_length(a, b):
    """
    Length of the vectors (a[i], b[i]) at each pixel.

    :param a: first component, array or ChannelBundle
    :param b: second component, same shape as a
    :return: array (or bundle of per-channel lengths)
    """
    if isinstance(a, ChannelBundle) and isinstance(b, ChannelBundle):
        check_same_shape(a.shape, b.shape)
        return ChannelBundle(
            *(vector_length(ac, bc) for ac, bc in zip(a.channels, b.channels))
        )

    a = numpy.asarray(a, dtype=numpy.float64)
    b = numpy.asarray(b, dtype=numpy.float64)
    check_same_shape(a.shape, b.shape)
    return numexpr.evaluate("sqrt(a**2 + b**2)", local_dict={'a': a, 'b': b})


def vector_length_multichannel(a, b):
    """
    Length of the vectors formed by the components of all three channels at
    each pixel: sqrt(sum over channels of a_c^2 + b_c^2).

    :param a: first component, ChannelBundle
    :param b: second component, ChannelBundle
    :return: single matrix
    """
    check_same_shape(a.shape, b.shape)
    return numexpr.evaluate(
        "sqrt((ar**2 + br**2) + (ag**2 + bg**2) + (ab**2 + bb**2))",
        local_dict={
            'ar': a.red,
            'ag': a.green,
            'ab': a.blue,
            'br': b.red,
            'bg': b.green,
            'bb': b.blue,
        },
    )


def vector_length_on_axis(a, b, axis):
    """
    Length of the vectors whose components run along the given axis of two
    stacked arrays, e.g. the colour axis of (W, H, C) arrays. The axis is kept
    with length 1 so the result broadcasts back against a and b.
    """
    a = numpy.asarray(a, dtype=numpy.float64)
    b = numpy.asarray(b, dtype=numpy.float64)
    check_same_shape(a.shape, b.shape)
    if not -a.ndim <= axis < a.ndim:
        raise AxisOutOfBoundsError(
            f"axis {axis} is out of bounds for array of dimension {a.ndim}"
        )

    squares = numexpr.evaluate("a**2 + b**2", local_dict={'a': a, 'b': b})
    summed = squares.sum(axis=axis, keepdims=True)
    return numexpr.evaluate("sqrt(summed)", local_dict={'summed': summed})


def _unit_ball_divisor(length):
    # max(1, length), so that zero-length vectors are divided by 1
    return numexpr.evaluate(
        "where(length > 1.0, length, 1.0)", local_dict={'length': length}
    )


def ball_projection(a, b):
    """
    Projects each vector (a[i], b[i]) onto the unit ball. For bundles every
    channel is projected on its own.

    :return: tuple (projected a, projected b)
    """
    if isinstance(a, ChannelBundle) and isinstance(b, ChannelBundle):
        check_same_shape(a.shape, b.shape)
        projected = [ball_projection(ac, bc) for ac, bc in zip(a.channels, b.channels)]
        return (
            ChannelBundle(*(pa for pa, _ in projected)),
            ChannelBundle(*(pb for _, pb in projected)),
        )

    a = numpy.asarray(a, dtype=numpy.float64)
    b = numpy.asarray(b, dtype=numpy.float64)
    divisor = _unit_ball_divisor(vector_length(a, b))
    return a / divisor, b / divisor


def ball_projection_multichannel(a, b):
    """
    Projects the vectors of three coupled channels: one divisor per pixel,
    computed from all channels, rescales every channel at that pixel.

    :param a: first component, ChannelBundle
    :param b: second component, ChannelBundle
    :return: tuple of bundles
    """
    divisor = _unit_ball_divisor(vector_length_multichannel(a, b))
    return a.divide(divisor), b.divide(divisor)


def ball_projection_on_axis(a, b, axis):
    """
    Coupled projection of stacked arrays, the components of each vector running
    along the given axis.
    """
    a = numpy.asarray(a, dtype=numpy.float64)
    b = numpy.asarray(b, dtype=numpy.float64)
    divisor = _unit_ball_divisor(vector_length_on_axis(a, b, axis))
    return a / divisor, b / divisor

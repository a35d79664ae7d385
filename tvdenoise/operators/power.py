import math

import numpy

from tvdenoise.bundle import ChannelBundle


def squared(image):
    if isinstance(image, ChannelBundle):
        return image.multiply(image)
    image = numpy.asarray(image, dtype=numpy.float64)
    return image * image


def power(image, exponent):
    """
    Elementwise real power. Negative bases with fractional exponents give NaN.

    :param image: array or ChannelBundle
    :param exponent: integer or float exponent
    """
    if isinstance(image, ChannelBundle):
        return image.map(lambda channel: power(channel, exponent))
    image = numpy.asarray(image, dtype=numpy.float64)
    with numpy.errstate(invalid='ignore'):
        return image ** exponent


def norm(image):
    """
    Euclidean norm, for bundles taken over all channels together.
    """
    if isinstance(image, ChannelBundle):
        return math.sqrt(squared(image).sum())
    return math.sqrt(float(squared(image).sum()))

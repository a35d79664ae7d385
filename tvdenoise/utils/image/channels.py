from enum import Enum

import numpy

from tvdenoise.bundle import ChannelBundle
from tvdenoise.errors import ShapeMismatchError, check_same_shape


class Channel(Enum):
    RED = 0
    GREEN = 1
    BLUE = 2


def _check_rgb(pixels):
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ShapeMismatchError(
            f"expected an RGB pixel array of shape (H, W, 3), got {pixels.shape}"
        )


def to_matrix(pixels):
    """
    Widens a grey pixel array of shape (H, W) to a float64 matrix.
    """
    pixels = numpy.asarray(pixels)
    if pixels.ndim != 2:
        raise ShapeMismatchError(
            f"expected a grey pixel array of shape (H, W), got {pixels.shape}"
        )
    return pixels.astype(numpy.float64)


def to_bundle(pixels):
    """
    Splits an RGB pixel array of shape (H, W, 3) into a ChannelBundle of
    float64 matrices of shape (H, W).
    """
    pixels = numpy.asarray(pixels)
    _check_rgb(pixels)
    return ChannelBundle.from_array(pixels.astype(numpy.float64), channel_axis=-1)


def get_channel(pixels, channel):
    pixels = numpy.asarray(pixels)
    _check_rgb(pixels)
    return pixels[..., Channel(channel).value].astype(numpy.float64)


def update_channel(pixels, channel, matrix):
    """
    Returns a copy of an RGB pixel array with one channel replaced by the given
    matrix, narrowed to the pixel type with to_uint8.

    :param pixels: uint8 array of shape (H, W, 3)
    :param channel: Channel (or its index)
    :param matrix: float matrix of shape (H, W)
    """
    pixels = numpy.asarray(pixels)
    _check_rgb(pixels)
    matrix = numpy.asarray(matrix)
    check_same_shape(pixels.shape[:2], matrix.shape)

    updated = pixels.copy()
    updated[..., Channel(channel).value] = to_uint8(matrix)
    return updated


def to_uint8(matrix):
    """
    Narrows real values to 8-bit pixel values: values are clamped to [0, 255]
    and then truncated (not rounded).
    """
    matrix = numpy.asarray(matrix, dtype=numpy.float64)
    matrix = numpy.nan_to_num(matrix, nan=0.0)
    return numpy.clip(matrix, 0, 255).astype(numpy.uint8)


def from_bundle(bundle):
    """
    Packs a ChannelBundle back into an RGB uint8 pixel array of shape (H, W, 3).
    """
    return numpy.stack([to_uint8(channel) for channel in bundle.channels], axis=-1)

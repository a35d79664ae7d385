import numpy
from skimage import data
from skimage.util import random_noise


# Convenience methods to prepare test images:


def add_noise(image, variance=0.01, sap=0.0, dtype=numpy.uint8, seed=0):
    """
    Adds gaussian and salt & pepper noise to an 8-bit image and returns it in
    the given dtype, scaled back to [0, 255].
    """
    noisy = image.astype(numpy.float64) / 255
    noisy = random_noise(noisy, mode="gaussian", var=variance, rng=seed, clip=True)
    if sap > 0:
        noisy = random_noise(noisy, mode="s&p", amount=sap, rng=seed, clip=True)
    noisy = (255 * noisy).astype(dtype)
    return noisy


def squares(size=64, channels=None, seed=0):
    """
    Piecewise constant test image: squares of different intensities on a dark
    background, with independent intensities per channel if channels is given.
    """
    rng = numpy.random.default_rng(seed)
    shape = (size, size) if channels is None else (size, size, channels)
    image = numpy.full(shape, 32, dtype=numpy.uint8)
    step = size // 4
    for y in range(0, size - step, step):
        for x in range(0, size - step, step):
            value = rng.integers(64, 224, size=() if channels is None else channels)
            image[y + step // 4:y + step, x + step // 4:x + step] = value
    return image


# Example datasets


def camera():
    return data.camera()


def astronaut():
    return data.astronaut()

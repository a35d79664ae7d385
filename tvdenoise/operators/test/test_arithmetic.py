import numpy
import pytest

from tvdenoise.bundle import ChannelBundle
from tvdenoise.errors import ShapeMismatchError
from tvdenoise.operators.arithmetic import add, copy, divide, multiply, subtract
from tvdenoise.operators.average import weighted_average


def test_arrays_of_same_shape():
    a = numpy.random.uniform(size=(6, 4))
    b = numpy.random.uniform(1, 2, size=(6, 4))

    assert numpy.array_equal(add(a, b), a + b)
    assert numpy.array_equal(subtract(a, b), a - b)
    assert numpy.array_equal(multiply(a, b), a * b)
    assert numpy.array_equal(divide(a, b), a / b)


def test_scalars_broadcast():
    a = numpy.random.uniform(size=(6, 4))

    assert numpy.array_equal(multiply(2.5, a), 2.5 * a)
    assert numpy.array_equal(divide(a, 4.0), a / 4.0)
    assert numpy.array_equal(subtract(1.0, a), 1.0 - a)


def test_implicit_broadcasting_is_refused():
    with pytest.raises(ShapeMismatchError):
        add(numpy.zeros((2, 3)), numpy.zeros((3, 2)))
    with pytest.raises(ShapeMismatchError):
        add(numpy.zeros((2, 3)), numpy.zeros(3))
    with pytest.raises(ShapeMismatchError):
        multiply(numpy.zeros((2, 1)), numpy.zeros((2, 3)))


def test_matrix_and_bundle():
    matrix = numpy.random.uniform(1, 2, size=(5, 5))
    bundle = ChannelBundle(
        numpy.random.uniform(size=(5, 5)),
        numpy.random.uniform(size=(5, 5)),
        numpy.random.uniform(size=(5, 5)),
    )

    left = subtract(matrix, bundle)
    right = subtract(bundle, matrix)

    for channel, left_channel, right_channel in zip(bundle, left, right):
        assert numpy.array_equal(left_channel, matrix - channel)
        assert numpy.array_equal(right_channel, channel - matrix)

    quotient = divide(bundle, matrix)
    assert numpy.array_equal(quotient.blue, bundle.blue / matrix)

    with pytest.raises(ShapeMismatchError):
        add(bundle, numpy.zeros((5, 4)))


def test_copy_is_deep():
    array = numpy.ones((3, 3))
    bundle = ChannelBundle.zeros((3, 3))

    array_copy = copy(array)
    bundle_copy = copy(bundle)
    array_copy[0, 0] = 7
    bundle_copy.red[0, 0] = 7

    assert array[0, 0] == 1
    assert bundle.red[0, 0] == 0


def test_weighted_average():
    value = numpy.random.uniform(size=(10, 5, 3))
    reference = numpy.random.uniform(size=(10, 5, 3))
    tau = 1.0 / numpy.sqrt(2)
    lambda_ = 0.008

    average = weighted_average(value, reference, tau, lambda_)

    expected = (value + (tau * lambda_ * reference)) / (1.0 + tau * lambda_)
    numpy.testing.assert_allclose(average, expected, rtol=1e-15)


def test_weighted_average_of_bundles():
    value = ChannelBundle.zeros((4, 4))
    reference = ChannelBundle(numpy.ones((4, 4)), 2 * numpy.ones((4, 4)), 3 * numpy.ones((4, 4)))

    average = weighted_average(value, reference, 1.0, 1.0)

    numpy.testing.assert_allclose(average.red, 0.5)
    numpy.testing.assert_allclose(average.blue, 1.5)

import numpy
import pytest

from tvdenoise.bundle import ChannelBundle
from tvdenoise.errors import AxisOutOfBoundsError, ShapeMismatchError
from tvdenoise.operators.projection import (
    ball_projection,
    ball_projection_multichannel,
    ball_projection_on_axis,
    vector_length,
    vector_length_multichannel,
    vector_length_on_axis,
)


def random_bundle(shape, scale=10):
    return ChannelBundle(
        numpy.random.uniform(-scale, scale, size=shape),
        numpy.random.uniform(-scale, scale, size=shape),
        numpy.random.uniform(-scale, scale, size=shape),
    )


def test_vector_length():
    a = numpy.random.randint(0, 256, size=(32, 32)).astype(numpy.float64)
    b = numpy.random.randint(0, 256, size=(32, 32)).astype(numpy.float64)

    numpy.testing.assert_allclose(vector_length(a, b), numpy.sqrt(a * a + b * b))


def test_ball_projection():
    a = numpy.array([[3.0, -0.5], [-3.0, -0.5]])
    b = numpy.array([[4.0, 0.5], [0.0, 0.5]])

    projected_a, projected_b = ball_projection(a, b)

    numpy.testing.assert_allclose(projected_a, [[0.6, -0.5], [-1.0, -0.5]])
    numpy.testing.assert_allclose(projected_b, [[0.8, 0.5], [0.0, 0.5]])


def test_ball_projection_leaves_operands_and_short_vectors_untouched():
    a = numpy.array([[0.0, 0.1], [0.3, -0.2]])
    b = numpy.array([[0.0, -0.2], [0.4, 0.9]])
    a_copy, b_copy = a.copy(), b.copy()

    projected_a, projected_b = ball_projection(a, b)

    assert numpy.array_equal(projected_a, a)
    assert numpy.array_equal(projected_b, b)
    assert numpy.array_equal(a, a_copy)
    assert numpy.array_equal(b, b_copy)


def test_ball_projection_lands_in_unit_ball():
    a = numpy.random.uniform(-100, 100, size=(64, 64))
    b = numpy.random.uniform(-100, 100, size=(64, 64))

    projected_a, projected_b = ball_projection(a, b)

    assert numpy.all(vector_length(projected_a, projected_b) <= 1 + 1e-12)


def test_ball_projection_raises_on_shape_mismatch():
    with pytest.raises(ShapeMismatchError):
        ball_projection(numpy.zeros((3, 4)), numpy.zeros((4, 3)))
    with pytest.raises(ShapeMismatchError):
        ball_projection_multichannel(ChannelBundle.zeros((3, 4)), ChannelBundle.zeros((4, 3)))


def test_vector_length_multichannel():
    a = random_bundle((16, 8))
    b = random_bundle((16, 8))

    expected = numpy.sqrt(
        a.red ** 2 + b.red ** 2 + a.green ** 2 + b.green ** 2 + a.blue ** 2 + b.blue ** 2
    )

    numpy.testing.assert_allclose(vector_length_multichannel(a, b), expected)


def test_coupled_projection_shares_one_divisor_per_pixel():
    # red carries the x component, green the y component of a length 5 vector
    a = ChannelBundle([[3.0, 0.0]], [[0.0, 0.0]], [[0.0, 0.0]])
    b = ChannelBundle([[0.0, 0.0]], [[4.0, 0.0]], [[0.0, 0.0]])

    coupled_a, coupled_b = ball_projection_multichannel(a, b)
    separate_a, separate_b = ball_projection(a, b)

    numpy.testing.assert_allclose(coupled_a.red, [[0.6, 0.0]])
    numpy.testing.assert_allclose(coupled_b.green, [[0.8, 0.0]])

    # projecting each channel on its own rescales both vectors to unit length:
    numpy.testing.assert_allclose(separate_a.red, [[1.0, 0.0]])
    numpy.testing.assert_allclose(separate_b.green, [[1.0, 0.0]])


def test_coupled_projection_lands_in_unit_ball():
    a = random_bundle((32, 32), scale=50)
    b = random_bundle((32, 32), scale=50)

    projected_a, projected_b = ball_projection_multichannel(a, b)

    assert numpy.all(vector_length_multichannel(projected_a, projected_b) <= 1 + 1e-12)


def test_projection_on_axis_matches_multichannel_projection():
    a = random_bundle((12, 10))
    b = random_bundle((12, 10))

    projected_a, projected_b = ball_projection_multichannel(a, b)
    stacked_a, stacked_b = ball_projection_on_axis(a.to_array(), b.to_array(), axis=2)

    numpy.testing.assert_allclose(stacked_a, projected_a.to_array(), rtol=1e-12)
    numpy.testing.assert_allclose(stacked_b, projected_b.to_array(), rtol=1e-12)


def test_vector_length_on_axis():
    for channels in range(1, 5):
        a = numpy.random.randint(0, 256, size=(10, 5, channels)).astype(numpy.float64)
        b = numpy.random.randint(0, 256, size=(10, 5, channels)).astype(numpy.float64)

        length = vector_length_on_axis(a, b, 2)

        expected = numpy.sqrt((a * a + b * b).sum(axis=2))[..., numpy.newaxis]
        assert length.shape == (10, 5, 1)
        numpy.testing.assert_allclose(length, expected)


def test_vector_length_on_axis_raises_if_axis_is_out_of_bounds():
    for ndim in range(1, 6):
        array = numpy.zeros(tuple(range(1, 1 + ndim)))

        with pytest.raises(AxisOutOfBoundsError):
            vector_length_on_axis(array, array, ndim)

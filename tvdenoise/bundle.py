import numpy

from tvdenoise.errors import ShapeMismatchError, check_same_shape


class ChannelBundle:
    """
    Three matrices of identical shape, one per colour channel (red, green, blue).

    A bundle is a value: every arithmetic method returns a new bundle and never
    modifies its operands. The right-hand operand of a binary method can be
    another bundle, a single matrix of the same shape (applied to each channel)
    or a scalar.
    """

    red: numpy.ndarray
    green: numpy.ndarray
    blue: numpy.ndarray

    def __init__(self, red, green, blue):
        """
        Constructs a bundle from three matrices.

        :param red: red channel matrix
        :param green: green channel matrix
        :param blue: blue channel matrix
        """
        red = numpy.asarray(red, dtype=numpy.float64)
        green = numpy.asarray(green, dtype=numpy.float64)
        blue = numpy.asarray(blue, dtype=numpy.float64)

        if not (red.shape == green.shape == blue.shape):
            raise ShapeMismatchError(
                f"channels must all have the same shape, got red = {red.shape}, "
                f"green = {green.shape}, blue = {blue.shape}"
            )

        self.red = red
        self.green = green
        self.blue = blue

    @classmethod
    def zeros(cls, shape):
        return cls(
            numpy.zeros(shape, dtype=numpy.float64),
            numpy.zeros(shape, dtype=numpy.float64),
            numpy.zeros(shape, dtype=numpy.float64),
        )

    @classmethod
    def from_array(cls, array, channel_axis=-1):
        """
        Splits a stacked array holding three channels along channel_axis.
        """
        array = numpy.asarray(array, dtype=numpy.float64)
        if array.shape[channel_axis] != 3:
            raise ShapeMismatchError(
                f"expected 3 channels along axis {channel_axis}, got array of shape {array.shape}"
            )
        red, green, blue = numpy.moveaxis(array, channel_axis, 0)
        return cls(red.copy(), green.copy(), blue.copy())

    @property
    def shape(self):
        return self.red.shape

    @property
    def channels(self):
        return self.red, self.green, self.blue

    def to_array(self, channel_axis=-1):
        return numpy.stack(self.channels, axis=channel_axis)

    def copy(self):
        return ChannelBundle(self.red.copy(), self.green.copy(), self.blue.copy())

    def map(self, function):
        """
        Applies a function to each channel and bundles the results.
        """
        return ChannelBundle(*(function(channel) for channel in self.channels))

    def apply(self, operation, other):
        """
        Applies a binary elementwise operation channel by channel.

        :param operation: callable taking two arrays (or an array and a scalar)
        :param other: bundle, same-shape matrix, or scalar
        :return: new bundle
        """
        if isinstance(other, ChannelBundle):
            check_same_shape(self.shape, other.shape)
            return ChannelBundle(
                *(operation(a, b) for a, b in zip(self.channels, other.channels))
            )

        if numpy.ndim(other) == 0:
            return ChannelBundle(*(operation(a, other) for a in self.channels))

        other = numpy.asarray(other, dtype=numpy.float64)
        check_same_shape(self.shape, other.shape)
        return ChannelBundle(*(operation(a, other) for a in self.channels))

    def add(self, other):
        return self.apply(numpy.add, other)

    def subtract(self, other):
        return self.apply(numpy.subtract, other)

    def multiply(self, other):
        return self.apply(numpy.multiply, other)

    def divide(self, other):
        return self.apply(numpy.divide, other)

    def sum(self):
        return float(self.red.sum() + self.green.sum() + self.blue.sum())

    def __iter__(self):
        return iter(self.channels)

    def __eq__(self, other):
        if not isinstance(other, ChannelBundle):
            return NotImplemented
        return all(
            numpy.array_equal(a, b) for a, b in zip(self.channels, other.channels)
        )

    __hash__ = None

    def __repr__(self):
        return f"ChannelBundle(shape={self.shape})"

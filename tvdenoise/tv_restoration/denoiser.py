import math

import numpy

from tvdenoise.bundle import ChannelBundle
from tvdenoise.tv_restoration.chambolle_pock import (
    denoise,
    denoise_array,
    denoise_each_channel,
    denoise_multichannel,
)
from tvdenoise.utils.image.channels import from_bundle, to_bundle, to_uint8
from tvdenoise.utils.log.log import lprint, lsection


class TVDenoiser:
    """
    TV denoiser

    Holds the parameters of the Chambolle-Pock solver and dispatches images to
    the right solver variant.
    """

    modes = ('multichannel', 'each_channel')

    def __init__(
            self,
            lambda_=0.0259624705,
            tau=None,
            sigma=None,
            gamma=None,
            max_iter=500,
            convergence_threshold=1e-10,
            mode='multichannel',
            workers=1,
    ):
        """
        Constructs a TV denoiser. Unset step sizes follow Chambolle and Pock (2011)
        with tau * sigma * 8 == 1.

        :param lambda_: data fidelity weight, smaller values give smoother results
        :param tau: primal step size, defaults to 1 / sqrt(2)
        :param sigma: dual step size, defaults to 1 / (8 * tau)
        :param gamma: acceleration rate, defaults to 0.35 * lambda_
        :param max_iter: maximum number of iterations
        :param convergence_threshold: relative change below which iterations stop
        :param mode: 'multichannel' couples colour channels, 'each_channel' denoises them independently
        :param workers: number of threads used in 'each_channel' mode
        """
        if mode not in self.modes:
            raise ValueError(f"Unknown denoising mode passed: {mode}")
        if lambda_ <= 0:
            raise ValueError(f"lambda_ must be positive, got {lambda_}")
        if max_iter < 1:
            raise ValueError(f"max_iter must be at least 1, got {max_iter}")

        self.lambda_ = lambda_
        self.tau = 1 / math.sqrt(2) if tau is None else tau
        self.sigma = 1 / (8 * self.tau) if sigma is None else sigma
        self.gamma = 0.35 * lambda_ if gamma is None else gamma
        self.max_iter = max_iter
        self.convergence_threshold = convergence_threshold
        self.mode = mode
        self.workers = workers

    @property
    def parameters(self):
        return dict(
            lambda_=self.lambda_,
            tau=self.tau,
            sigma=self.sigma,
            gamma=self.gamma,
            max_iter=self.max_iter,
            convergence_threshold=self.convergence_threshold,
        )

    def denoise(self, image):
        """
        Denoises a matrix, a ChannelBundle, or a stacked array with the channel
        axis last.

        :param image: 2D array, 3D array of shape (H, W, C), or ChannelBundle
        :return: denoised image of the same kind and shape
        """
        if isinstance(image, ChannelBundle):
            if self.mode == 'multichannel':
                return denoise_multichannel(image, **self.parameters)
            return denoise_each_channel(image, workers=self.workers, **self.parameters)

        image = numpy.asarray(image, dtype=numpy.float64)
        if image.ndim == 2:
            return denoise(image, **self.parameters)

        return denoise_array(
            image,
            channel_axis=-1,
            coupled=self.mode == 'multichannel',
            **self.parameters,
        )

    def denoise_pixels(self, pixels):
        """
        Denoises an 8-bit grey (H, W) or RGB (H, W, 3) pixel array. The result is
        clamped and truncated back to uint8.
        """
        pixels = numpy.asarray(pixels)
        with lsection(f"Denoising pixel array of shape {pixels.shape} in mode '{self.mode}'"):
            if pixels.ndim == 3 and pixels.shape[-1] == 3:
                denoised = from_bundle(self.denoise(to_bundle(pixels)))
            else:
                denoised = to_uint8(self.denoise(pixels))
            lprint("Done.")
        return denoised

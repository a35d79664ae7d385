from concurrent.futures import ThreadPoolExecutor
from functools import partial

import numpy

from tvdenoise.bundle import ChannelBundle
from tvdenoise.errors import AxisOutOfBoundsError, AxisTooShortError, ImageTooSmallError
from tvdenoise.operators.arithmetic import add, copy, multiply, subtract
from tvdenoise.operators.average import weighted_average
from tvdenoise.operators.difference import check_axis, divergence, gradient
from tvdenoise.operators.power import norm
from tvdenoise.operators.projection import (
    ball_projection,
    ball_projection_multichannel,
    ball_projection_on_axis,
)
from tvdenoise.utils.log.log import lprint, lsection

# Upper bound of the squared norm of the 2D discrete gradient:
GRADIENT_NORM_SQUARED = 8.0


# ----

def relative_change(current, previous):
    '''
    Convergence ratio norm(current - previous) / norm(previous).

    Computed with numpy float semantics: when both norms are zero the ratio is
    NaN, which the solver treats as a stop condition.
    '''
    change = numpy.float64(norm(subtract(current, previous)))
    reference = numpy.float64(norm(previous))
    with numpy.errstate(divide='ignore', invalid='ignore'):
        return change / reference


def check_image_size(shape, axes):
    '''
    Raises an ImageTooSmallError if any of the spatial axes has length <= 1,
    in which case no difference can be taken along it.
    '''
    for axis in axes:
        try:
            check_axis(shape, axis)
        except AxisTooShortError as error:
            raise ImageTooSmallError(
                f"image of shape {tuple(shape)} is too small to denoise: "
                f"axis {axis} must have a length of at least 2"
            ) from error


def chambolle_pock(
        noisy,
        lambda_,
        tau,
        sigma,
        gamma,
        max_iter,
        convergence_threshold,
        projection=ball_projection,
        axes=(0, 1),
        callback=None,
):
    '''
    Accelerated Chambolle-Pock algorithm (Chambolle and Pock 2011, algorithm 2)
    for the minimization of the TV-L2 (ROF) objective function
        TV(x) + (lambda_ / 2) * ||x - noisy||_2^2

    noisy : noisy image, numpy array or ChannelBundle
    lambda_ : weight of the data fidelity term: approaching 0 the output becomes
        completely flat, approaching infinity it stays equal to the input
    tau, sigma : initial primal and dual step sizes, should be chosen such that
        tau * sigma * L^2 <= 1 where L^2 <= 8 is the squared norm of the gradient
    gamma : acceleration rate, 0.35 * lambda_ in Chambolle and Pock (2011)
    max_iter : maximum number of iterations
    convergence_threshold : the loop stops once
        norm(current - previous) / norm(previous) < convergence_threshold
    projection : projection of the dual variable pair onto the unit ball
    axes : the two spatial axes
    callback : optional callable(iteration, convergence) invoked after every
        iteration, an exception raised from it aborts the solve

    Both the extrapolated primal variable and the dual variable are warm-started
    from the input (the input itself and its gradient) instead of zero.
    '''

    if max_iter < 1:
        raise ValueError(f"max_iter must be at least 1, got {max_iter}")

    if not isinstance(noisy, ChannelBundle):
        noisy = numpy.asarray(noisy, dtype=numpy.float64)
    check_image_size(noisy.shape, axes)

    with lsection(f"Chambolle-Pock TV denoising of image of shape {noisy.shape}"):
        lprint(
            f"lambda={lambda_}, tau={tau}, sigma={sigma}, gamma={gamma}, "
            f"max_iter={max_iter}, convergence_threshold={convergence_threshold}"
        )
        # tolerance for the rounding of tau = 1/sqrt(2), sigma = 1/(8 tau):
        if tau * sigma * GRADIENT_NORM_SQUARED > 1 + 1e-12:
            lprint(
                f"Warning: tau * sigma * {GRADIENT_NORM_SQUARED} = "
                f"{tau * sigma * GRADIENT_NORM_SQUARED} > 1, the iteration may not converge"
            )

        # primal variable, and its value at the previous iteration:
        current = copy(noisy)
        previous = None
        # extrapolated primal variable:
        current_bar = copy(current)
        # dual variable:
        dual_a, dual_b = gradient(noisy, axes)

        iteration = 1
        while True:
            # Update dual variable:
            gradient_a, gradient_b = gradient(current_bar, axes)
            dual_a, dual_b = projection(
                add(dual_a, multiply(sigma, gradient_a)),
                add(dual_b, multiply(sigma, gradient_b)),
            )

            # Update primal variable:
            previous = copy(current)
            div = divergence((dual_a, dual_b), axes)
            current = weighted_average(
                subtract(current, multiply(tau, div)), noisy, tau, lambda_
            )

            # Update step sizes:
            theta = 1.0 / (1.0 + 2.0 * gamma * tau)
            tau *= theta
            sigma /= theta

            # Extrapolate:
            current_bar = add(current, multiply(theta, subtract(current, previous)))

            convergence = relative_change(current, previous)
            if callback is not None:
                callback(iteration, convergence)

            if numpy.isnan(convergence):
                lprint(f"Image unchanged at iteration {iteration}, stopping.")
                break
            if convergence < convergence_threshold:
                lprint(f"Converged at iteration {iteration}, convergence ratio: {convergence}")
                break
            if iteration >= max_iter:
                lprint(f"Reached max_iter={max_iter}, convergence ratio: {convergence}")
                break
            iteration += 1

    return current


def denoise(image, lambda_, tau, sigma, gamma, max_iter, convergence_threshold, callback=None):
    '''
    Single channel TV denoising of a matrix.
    '''
    return chambolle_pock(
        image,
        lambda_,
        tau,
        sigma,
        gamma,
        max_iter,
        convergence_threshold,
        projection=ball_projection,
        callback=callback,
    )


def denoise_multichannel(bundle, lambda_, tau, sigma, gamma, max_iter, convergence_threshold, callback=None):
    '''
    Colour TV denoising of a ChannelBundle: the dual projection couples the three
    channels, so edges are shared between channels (Bredies 2014).
    '''
    return chambolle_pock(
        bundle,
        lambda_,
        tau,
        sigma,
        gamma,
        max_iter,
        convergence_threshold,
        projection=ball_projection_multichannel,
        callback=callback,
    )


def denoise_each_channel(bundle, lambda_, tau, sigma, gamma, max_iter, convergence_threshold, workers=1):
    '''
    Denoises the three channels of a ChannelBundle independently of each other.
    The three solves share nothing and run on a thread pool when workers > 1.
    '''
    solve = partial(
        denoise,
        lambda_=lambda_,
        tau=tau,
        sigma=sigma,
        gamma=gamma,
        max_iter=max_iter,
        convergence_threshold=convergence_threshold,
    )

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            red, green, blue = executor.map(solve, bundle.channels)
    else:
        red, green, blue = (solve(channel) for channel in bundle.channels)

    return ChannelBundle(red, green, blue)


def denoise_array(
        array,
        lambda_,
        tau,
        sigma,
        gamma,
        max_iter,
        convergence_threshold,
        channel_axis=2,
        coupled=True,
        callback=None,
):
    '''
    TV denoising of a stacked (W, H, C) array, C being 1 for grey images and 3
    for colour images. With coupled=True the dual projection is taken jointly
    along the channel axis, otherwise each channel is projected on its own.
    Rank 2 arrays are denoised as a single channel.
    '''
    array = numpy.asarray(array, dtype=numpy.float64)

    if array.ndim == 2:
        return denoise(
            array, lambda_, tau, sigma, gamma, max_iter, convergence_threshold, callback=callback
        )

    if array.ndim != 3:
        raise ValueError(
            f"expected an array of rank 2 or 3, got array of shape {array.shape}"
        )

    if not -array.ndim <= channel_axis < array.ndim:
        raise AxisOutOfBoundsError(
            f"channel axis {channel_axis} is out of bounds for array of dimension {array.ndim}"
        )
    channel_axis = channel_axis % array.ndim
    axes = tuple(axis for axis in range(array.ndim) if axis != channel_axis)
    projection = (
        partial(ball_projection_on_axis, axis=channel_axis) if coupled else ball_projection
    )

    return chambolle_pock(
        array,
        lambda_,
        tau,
        sigma,
        gamma,
        max_iter,
        convergence_threshold,
        projection=projection,
        axes=axes,
        callback=callback,
    )

from tvdenoise.operators.arithmetic import add, divide, multiply


def weighted_average(value, reference, tau, lambda_):
    """
    Weighted average pulling value back towards reference:
        (value + tau * lambda_ * reference) / (1 + tau * lambda_)

    This is the proximal step of the quadratic data fidelity term.

    :param value: array or ChannelBundle
    :param reference: array or ChannelBundle of the same shape (the noisy input)
    :param tau: primal step size
    :param lambda_: fidelity weight
    """
    weight = tau * lambda_
    return divide(add(value, multiply(weight, reference)), 1.0 + weight)

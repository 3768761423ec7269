import math
import sys
from deltagammainc.errors import NonConvergence

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


# replaces exact zeros in the Lentz recursion
_TINY = 1e-300

# once converged, the Lentz updates still differ from one by a few units of rounding
_ROUNDING = 4 * sys.float_info.epsilon


def log_upper_continued_fraction(z, p, settings):
    r"""Compute ``log(G(p, z))`` for the upper incomplete gamma function using a continued fraction.

    This evaluates the Legendre continued fraction

    .. math::

        G(p, z) = e^{z} z^{-p} \Gamma(p, z) =
            \cfrac{1}{z + 1 - p - \cfrac{1 (1 - p)}{z + 3 - p - \cfrac{2 (2 - p)}{z + 5 - p - \cdots}}}

    with the modified Lentz algorithm. It converges quickly if z is larger than p + 1.

    Args:
        z (float): the positive, finite bound
        p (float): the positive shape parameter
        settings (deltagammainc.configuration.KernelSettings): the tolerance and the maximum number of iterations

    Returns:
        float: the logarithm of the continued fraction

    Raises:
        NonConvergence: if the convergents did not settle within the maximum number of iterations
    """
    b = z + 1 - p
    c = 1 / _TINY
    d = 1 / b if b != 0 else 1 / _TINY
    h = d

    for i in range(1, settings.continued_fraction_max_iterations + 1):
        an = -i * (i - p)
        b += 2

        d = an * d + b
        if abs(d) < _TINY:
            d = _TINY
        c = b + an / c
        if abs(c) < _TINY:
            c = _TINY

        d = 1 / d
        delta = d * c
        h *= delta
        if abs(delta - 1) <= max(settings.tolerance, _ROUNDING):
            return math.log(h)

    raise NonConvergence('The continued fraction did not converge within {} iterations for p={}, z={}.'.format(
        settings.continued_fraction_max_iterations, p, z))

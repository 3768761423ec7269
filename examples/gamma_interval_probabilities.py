import numpy as np
from scipy.special import gammaln
from scipy.stats import gamma

from deltagammainc import deltagammainc, scaled_to_log10
from deltagammainc.scaled_number import LN_10


__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


def interval_probability(lower, upper, shape, scale):
    """The probability that a gamma distributed variable lies between the two bounds.

    The integral of the unnormalized density is computed in scaled form, the normalization by
    ``Gamma(shape) * scale**shape`` is applied to the decimal logarithm such that nothing overflows on the way.
    """
    rho, sigma = deltagammainc(lower, upper, 1 / scale, shape)
    log10_normalization = (gammaln(shape) + shape * np.log(scale)) / LN_10
    return 10 ** (scaled_to_log10(rho, sigma) - log10_normalization)


if __name__ == '__main__':
    """Example of computing interval probabilities of gamma distributions.

    This first compares the probabilities to the difference of two cumulative distribution functions, which agree for
    moderate parameters. It then evaluates bins far in the tail and for very large shapes, where the difference of
    the two cumulative values is lost entirely in double precision.
    """
    shapes = np.array([0.5, 2, 10, 150])
    scales = np.array([1, 0.5, 3, 2])
    lower = gamma.ppf(0.25, shapes, scale=scales)
    upper = gamma.ppf(0.75, shapes, scale=scales)

    print(interval_probability(lower, upper, shapes, scales))
    print(gamma.cdf(upper, shapes, scale=scales) - gamma.cdf(lower, shapes, scale=scales))

    # a narrow bin in the far right tail
    print(interval_probability(400, 400.5, 10, 1))
    print(gamma.sf(400, 10) - gamma.sf(400.5, 10))

    # the integral itself for a huge shape, far beyond double precision
    rho, sigma, method = deltagammainc(1e5, 1.1e5, 1, 1e5, nmr_outputs=3)
    print('{} * 10^{} (method {})'.format(rho, int(sigma), method))

    # the growing integrand, mu < 0
    rho, sigma = deltagammainc(0, 1000, -1, 2.5)
    print('{} * 10^{}'.format(rho, int(sigma)))

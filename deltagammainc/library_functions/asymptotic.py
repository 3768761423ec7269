r"""Asymptotic expansions for a large shape parameter.

For positive mu we use Temme's uniform asymptotic expansion of the regularized incomplete gamma functions
(see for example the Digital Library of Mathematical Functions, section 8.12):

.. math::

    Q(p, z) = \frac{1}{2} \operatorname{erfc}\left(\eta \sqrt{p / 2}\right)
        + \frac{e^{-p \eta^2 / 2}}{\sqrt{2 \pi p}} \sum_{k=0}^{\infty} c_k(\eta) p^{-k}

with :math:`\lambda = z / p` and :math:`\eta^2 / 2 = \lambda - 1 - \log(\lambda)`, :math:`\eta` having the sign of
:math:`\lambda - 1`. The coefficients satisfy

.. math::

    c_0(\eta) = \frac{1}{\lambda - 1} - \frac{1}{\eta}, \quad
    c_k(\eta) = \frac{1}{\eta} \frac{d c_{k-1}(\eta)}{d\eta} + \frac{\alpha_k}{\lambda - 1}

with the constants :math:`\alpha_k` fixed by the analyticity of :math:`c_k` at :math:`\eta = 0`. We need the
coefficients close to :math:`\eta = 0`, where these expressions cancel, so we work with their Taylor series. The
Taylor series are generated once with exact rational arithmetic from the series reversion of :math:`\lambda(\eta)`.

For negative mu the integrand grows and there is no transition point. Substituting :math:`t = z (1 - s)` gives

.. math::

    e^{-z} z^{-p} \int_0^z t^{p-1} e^{t} dt = \int_0^1 e^{-\beta s} h(s) ds, \quad
        \beta = p - 1 + z, \quad h(s) = \exp((p - 1)(\log(1 - s) + s))

and Watson's lemma gives an expansion in inverse powers of :math:`\beta`, useful if p or z is large.
"""
import functools
import math
from fractions import Fraction
import numpy as np
from scipy.special import erfcx
from deltagammainc.library_functions.special_functions import log_gamma_star, lambda_deviation, horner

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


SQRT_2PI = math.sqrt(2 * math.pi)


@functools.lru_cache(maxsize=None)
def temme_coefficients(nmr_orders, nmr_terms):
    """Get the Taylor coefficients of the first orders of the uniform asymptotic expansion.

    Args:
        nmr_orders (int): the number of coefficient functions :math:`c_k`
        nmr_terms (int): the number of Taylor terms in :math:`\\eta` per coefficient function

    Returns:
        ndarray: a matrix of shape (nmr_orders, nmr_terms) with at row k the Taylor coefficients of
            :math:`c_k(\\eta)` in increasing order
    """
    size = nmr_terms + 2 * nmr_orders + 1

    # lambda - 1 = sum_{n >= 1} a_n eta^n, from the differential equation (lambda - 1) d(lambda)/d(eta) = eta lambda
    a = [Fraction(0), Fraction(1)]
    for m in range(2, size + 1):
        cross_terms = sum((m + 1 - i) * a[i] * a[m + 1 - i] for i in range(2, m))
        a.append((a[m - 1] - cross_terms) / (m + 1))

    # 1 / (lambda - 1) = (1 / eta) sum_{n >= 0} r_n eta^n
    r = [Fraction(1)]
    for n in range(1, size):
        r.append(-sum(a[k + 1] * r[n - k] for k in range(1, n + 1)))

    coefficients = [r[1:]]
    for _ in range(1, nmr_orders):
        previous = coefficients[-1]
        alpha = -previous[1]
        coefficients.append([(m + 2) * previous[m + 2] + alpha * r[m + 1] for m in range(len(previous) - 2)])

    return np.array([[float(c) for c in row[:nmr_terms]] for row in coefficients])


def temme_eta(z, p):
    """The variable eta of the uniform asymptotic expansion, with the sign of z - p."""
    eta = math.sqrt(2 * lambda_deviation(z, p))
    return eta if z >= p else -eta


def log_temme_expansion(z, p, kind, settings):
    r"""Compute ``log(G(p, z))`` from the uniform asymptotic expansion.

    Multiplying the expansion with :math:`e^{z} z^{-p} \Gamma(p)` removes all the exponentially large factors:

    .. math::

        G_{upper}(p, z) = \Gamma^*(p) \left(\sqrt{\frac{\pi}{2p}} \operatorname{erfcx}(\eta \sqrt{p/2})
            + \frac{S}{p}\right), \quad
        G_{lower}(p, z) = \Gamma^*(p) \left(\sqrt{\frac{\pi}{2p}} \operatorname{erfcx}(-\eta \sqrt{p/2})
            - \frac{S}{p}\right)

    with :math:`S = \sum_k c_k(\eta) p^{-k}` and :math:`\Gamma^*` the scaled gamma function.

    Args:
        z (float): the positive bound, close to p
        p (float): the large shape parameter
        kind (str): 'lower' for the lower incomplete gamma function, 'upper' for the upper
        settings (deltagammainc.configuration.KernelSettings): the truncation orders of the expansion

    Returns:
        float: the logarithm of G
    """
    eta = temme_eta(z, p)
    table = temme_coefficients(settings.asymptotic_order, settings.asymptotic_taylor_terms)

    series = 0.0
    for row in reversed(table):
        series = series / p + horner(row, eta)

    argument = eta * math.sqrt(p / 2)
    if kind == 'upper':
        bracket = math.sqrt(math.pi / (2 * p)) * float(erfcx(argument)) + series / p
    elif kind == 'lower':
        bracket = math.sqrt(math.pi / (2 * p)) * float(erfcx(-argument)) - series / p
    else:
        raise ValueError('Unknown kind "{}", should be "lower" or "upper".'.format(kind))
    return math.log(bracket) + log_gamma_star(p)


def log_negative_mu_expansion(z, p, settings):
    """Compute ``log(e^-z z^-p int_0^z t^(p-1) e^t dt)`` from the expansion in inverse powers of ``p - 1 + z``.

    The terms :math:`t_n = h_n n! / \\beta^{n+1}`, with :math:`h_n` the Taylor coefficients of :math:`h`, follow the
    recursion ``t[n+1] = n (t[n] - q t[n-1] / beta) / beta`` with ``q = p - 1``. Odd and even terms differ in size,
    so we follow the sum of two consecutive terms. The expansion is divergent, we stop once that pair starts to grow
    or when it no longer changes the sum.

    Args:
        z (float): the non-negative, finite bound
        p (float): the positive shape parameter
        settings (deltagammainc.configuration.KernelSettings): the maximum truncation order and the tolerance

    Returns:
        float: the logarithm of the expansion
    """
    q = p - 1
    beta = q + z

    previous = 1 / beta
    current = 0.0
    total = previous
    smallest_pair = math.inf

    for n in range(1, settings.negative_mu_asymptotic_max_order):
        following = n * (current - q * previous / beta) / beta
        pair = abs(current) + abs(following)

        if n > 4 and pair > 2 * smallest_pair:
            break
        smallest_pair = min(smallest_pair, pair)

        total += following
        if pair <= abs(total) * settings.tolerance:
            break
        previous, current = current, following

    return math.log(total)

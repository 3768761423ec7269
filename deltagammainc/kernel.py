"""The scalar evaluation kernel of the generalized incomplete gamma function.

For one parameter tuple ``(x, y, mu, p)`` this computes

.. math::

    I(x, y, \\mu, p) = \\int_{\\min(x, y)}^{\\max(x, y)} s^{p-1} e^{-\\mu s} ds

as a :class:`~deltagammainc.scaled_number.ScaledNumber`. After substituting :math:`t = |\\mu| s` the integral is a
difference of two cumulative values, one per bound, which we call the two sides. Each side is evaluated in log space
by the technique best suited to its regime and the two sides are combined such that nearly equal values do not
cancel. Intervals too narrow for any difference are integrated directly.

The kernel is a pure function, all numerical constants come from a
:class:`~deltagammainc.configuration.KernelSettings` object.
"""
import enum
import math
import sys
from deltagammainc.configuration import get_kernel_settings
from deltagammainc.errors import InvalidDomain, NonConvergence
from deltagammainc.library_functions.asymptotic import log_temme_expansion, log_negative_mu_expansion
from deltagammainc.library_functions.continued_fraction import log_upper_continued_fraction
from deltagammainc.library_functions.series import log_lower_series, log_negative_mu_series, log_upper_series, \
    log_negative_mu_difference_series
from deltagammainc.library_functions.special_functions import log_gamma, log_regularized_prefactor
from deltagammainc.library_functions.taylor import is_narrow_interval, log_narrow_interval
from deltagammainc.scaled_number import ScaledNumber

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


class Method(enum.IntEnum):
    """The technique that produced a result.

    ``MIXED`` means that the two sides of the integral were evaluated with different techniques, ``TAYLOR`` that the
    interval was integrated directly.
    """
    SERIES = 0
    CONTINUED_FRACTION = 1
    ASYMPTOTIC = 2
    MIXED = 3
    TAYLOR = 4


"""The method code stored for elements that failed to evaluate."""
FAILED_METHOD = -1


class EvaluationRequest:

    def __init__(self, x, y, mu, p):
        """One parameter tuple of the integral, as given by the user.

        Args:
            x (float): one bound, non-negative, infinity is allowed
            y (float): the other bound, non-negative, infinity is allowed
            mu (float): the nonzero rate of the exponential
            p (float): the positive shape parameter
        """
        self.x = x
        self.y = y
        self.mu = mu
        self.p = p

    def evaluate(self, settings=None):
        """Evaluate this request, see :func:`evaluate`."""
        return evaluate(self.x, self.y, self.mu, self.p, settings=settings)

    def __repr__(self):
        return 'EvaluationRequest(x={!r}, y={!r}, mu={!r}, p={!r})'.format(self.x, self.y, self.mu, self.p)


class NormalizedParameters:

    def __init__(self, lower, upper, mu, p):
        """A validated parameter tuple, with ordered bounds and the scale taken out of the rate.

        Args:
            lower (float): the smallest of the two bounds
            upper (float): the largest of the two bounds
            mu (float): the nonzero rate of the exponential
            p (float): the positive shape parameter
        """
        self.lower = lower
        self.upper = upper
        self.mu = mu
        self.p = p
        self.scale = abs(mu)
        self.sign = 1 if mu > 0 else -1
        self.lower_scaled = self.scale * lower
        self.upper_scaled = self.scale * upper

    def __repr__(self):
        return 'NormalizedParameters(lower={!r}, upper={!r}, mu={!r}, p={!r})'.format(
            self.lower, self.upper, self.mu, self.p)


class EvaluationResult:

    def __init__(self, value, method, side_methods=()):
        """The value of one evaluation and the technique used to compute it.

        Args:
            value (ScaledNumber): the value of the integral
            method (Method): the technique tag of the element
            side_methods (tuple of Method): the techniques used for the lower and the upper bound, empty if the
                interval was integrated directly
        """
        self.value = value
        self.method = method
        self.side_methods = tuple(side_methods)

    @property
    def rho(self):
        return self.value.rho

    @property
    def sigma(self):
        return self.value.sigma

    def __repr__(self):
        return 'EvaluationResult(value={!r}, method={!r}, side_methods={!r})'.format(
            self.value, self.method, self.side_methods)


class SideValue:

    def __init__(self, z, sign, kind, method, log_g):
        """The value of one side of the integral.

        This stores the logarithm of the regime quantity ``G``, which is the cumulative value with the exponentially
        large or small factors ``e^(-sign z) z^p`` removed. Keeping these apart allows the combination of two sides
        to cancel the common factors analytically.

        Args:
            z (float): the scaled bound
            sign (int): the sign of mu
            kind (str): 'lower' for an integral from zero to z, 'upper' for an integral from z to infinity
            method (Method): the technique used for this side
            log_g (float): the logarithm of the regime quantity
        """
        self.z = z
        self.sign = sign
        self.kind = kind
        self.method = method
        self.log_g = log_g

    def is_zero(self):
        """If this side has the value zero, that is a lower side at zero or an upper side at infinity."""
        if self.kind == 'lower':
            return self.z == 0
        return math.isinf(self.z)

    def log_value(self, p):
        """The logarithm of the cumulative value of this side, ``-inf`` for a zero side."""
        if self.is_zero():
            return -math.inf
        return p * math.log(self.z) - self.sign * self.z + self.log_g

    def log_regularized(self, p):
        """The logarithm of the regularized value of this side, that is ``P(p, z)`` or ``Q(p, z)``.

        Only defined for positive mu.
        """
        if self.is_zero():
            return -math.inf
        return log_regularized_prefactor(self.z, p) + self.log_g

    def __repr__(self):
        return 'SideValue(z={!r}, kind={!r}, method={!r})'.format(self.z, self.kind, self.method)


def validate(x, y, mu, p):
    """Check a parameter tuple against the domain of the integral and normalize it.

    Args:
        x (float): one bound
        y (float): the other bound
        mu (float): the rate of the exponential
        p (float): the shape parameter

    Returns:
        NormalizedParameters: the validated and normalized parameters

    Raises:
        InvalidDomain: if the parameters are outside of the domain of the integral
    """
    x, y, mu, p = float(x), float(y), float(mu), float(p)

    if any(math.isnan(v) for v in (x, y, mu, p)):
        raise InvalidDomain('The parameters can not be NaN, got x={}, y={}, mu={}, p={}.'.format(x, y, mu, p))
    if p <= 0 or math.isinf(p):
        raise InvalidDomain('The shape parameter p should be positive and finite, {} given.'.format(p))
    if mu == 0 or math.isinf(mu):
        raise InvalidDomain('The rate mu should be nonzero and finite, {} given.'.format(mu))
    if x < 0 or y < 0:
        raise InvalidDomain('The bounds should be non-negative, got x={}, y={}.'.format(x, y))

    params = NormalizedParameters(min(x, y), max(x, y), mu, p)
    if mu < 0 and math.isinf(params.upper_scaled):
        raise InvalidDomain('The integral diverges for negative mu with an unbounded interval, '
                            'got x={}, y={}, mu={}.'.format(x, y, mu))
    for bound, scaled in ((params.lower, params.lower_scaled), (params.upper, params.upper_scaled)):
        if bound > 0 and scaled < sys.float_info.min:
            raise InvalidDomain('The scaled bound |mu| * {} underflows the floating point range for mu={}.'.format(
                bound, mu))
    return params


def classify(z, p, sign, settings):
    """Select the technique and the kind for one side of the integral.

    Args:
        z (float): the scaled bound
        p (float): the shape parameter
        sign (int): the sign of mu
        settings (deltagammainc.configuration.KernelSettings): the regime thresholds

    Returns:
        tuple: the :class:`Method` and the kind, 'lower' or 'upper'
    """
    if sign < 0:
        if _negative_mu_asymptotic(z, p, settings):
            return Method.ASYMPTOTIC, 'lower'
        return Method.SERIES, 'lower'

    if _in_asymptotic_band(z, p, settings):
        return Method.ASYMPTOTIC, ('lower' if z <= p else 'upper')
    if z < p + 1:
        return Method.SERIES, 'lower'
    return _upper_method(z, p, settings), 'upper'


def evaluate_side(z, p, sign, settings, kind=None):
    """Evaluate one side of the integral.

    Args:
        z (float): the scaled bound
        p (float): the shape parameter
        sign (int): the sign of mu
        settings (deltagammainc.configuration.KernelSettings): the numerical settings
        kind (str): if given, force this kind instead of the classified one. Only possible for positive mu.

    Returns:
        SideValue: the evaluated side
    """
    if kind is None:
        method, kind = classify(z, p, sign, settings)
    elif kind == 'lower':
        method = Method.ASYMPTOTIC if _in_asymptotic_band(z, p, settings) else Method.SERIES
    else:
        method = _upper_method(z, p, settings)

    side = SideValue(z, sign, kind, method, None)
    if side.is_zero():
        return side

    if sign < 0:
        if method == Method.ASYMPTOTIC:
            side.log_g = log_negative_mu_expansion(z, p, settings)
        else:
            side.log_g = log_negative_mu_series(z, p, settings)
    elif method == Method.ASYMPTOTIC:
        side.log_g = log_temme_expansion(z, p, kind, settings)
    elif kind == 'lower':
        side.log_g = log_lower_series(z, p, settings)
    elif method == Method.SERIES:
        side.log_g = log_upper_series(z, p, settings)
    else:
        side.log_g = log_upper_continued_fraction(z, p, settings)
    return side


def combine_same_kind(lower_side, upper_side, p):
    """Get the logarithm of the difference of two sides of the same kind.

    With ``a`` the side with the larger value and ``b`` the other, we compute ``log(V(a) - V(b))`` as
    ``log V(a) + log(-expm1(d))`` where ``d = log V(b) - log V(a)`` is assembled from differences, such that nearly
    equal sides keep their leading digits.

    Args:
        lower_side (SideValue): the side at the smallest bound
        upper_side (SideValue): the side at the largest bound
        p (float): the shape parameter

    Returns:
        float: the logarithm of the normalized integral

    Raises:
        NonConvergence: if rounding left no positive difference between the sides
    """
    if lower_side.kind == 'lower':
        large, small = upper_side, lower_side
    else:
        large, small = lower_side, upper_side

    if small.is_zero():
        return large.log_value(p)

    a, b = large.z, small.z
    d = (p * math.log1p((b - a) / a) - large.sign * (b - a) + small.log_g - large.log_g)
    if d >= 0:
        raise NonConvergence('The difference of the two sides vanished in rounding for p={}, z=({}, {}).'.format(
            p, lower_side.z, upper_side.z))
    return large.log_value(p) + math.log(-math.expm1(d))


def combine_mixed(lower_side, upper_side, p, settings):
    """Get the logarithm of the integral between a lower side and an upper side, for positive mu.

    The normalized integral is ``Gamma(p) (1 - P - Q)``. If ``P + Q`` is too close to one, the side with the largest
    share is evaluated again with the other kind and the two sides are combined with :func:`combine_same_kind`.

    Args:
        lower_side (SideValue): the lower kind side at the smallest bound
        upper_side (SideValue): the upper kind side at the largest bound
        p (float): the shape parameter
        settings (deltagammainc.configuration.KernelSettings): the cancellation limit and the evaluator settings

    Returns:
        tuple: the logarithm of the normalized integral and the two sides used
    """
    log_p = lower_side.log_regularized(p)
    log_q = upper_side.log_regularized(p)
    total = math.exp(log_p) + math.exp(log_q)

    if total > settings.mixed_cancellation_limit:
        if log_p < log_q:
            upper_side = evaluate_side(upper_side.z, p, 1, settings, kind='lower')
        else:
            lower_side = evaluate_side(lower_side.z, p, 1, settings, kind='upper')
        return combine_same_kind(lower_side, upper_side, p), (lower_side, upper_side)

    return log_gamma(p) + math.log1p(-total), (lower_side, upper_side)


def pack_result(log_value, method, side_methods=()):
    """Pack the logarithm of a non-negative value into an evaluation result.

    Args:
        log_value (float): the natural logarithm of the value, ``-inf`` for zero
        method (Method): the technique tag
        side_methods (tuple of Method): the techniques used per side

    Returns:
        EvaluationResult: the scaled result
    """
    return EvaluationResult(ScaledNumber.from_log(log_value), method, side_methods)


def evaluate(x, y, mu, p, settings=None):
    """Evaluate the generalized incomplete gamma function for one parameter tuple.

    Args:
        x (float): one bound, non-negative, infinity is allowed for positive mu
        y (float): the other bound, non-negative, infinity is allowed for positive mu
        mu (float): the nonzero rate of the exponential
        p (float): the positive shape parameter
        settings (deltagammainc.configuration.KernelSettings): the numerical settings, if not given we use the
            ones from the runtime configuration

    Returns:
        EvaluationResult: the value of the integral over the interval between x and y, with its technique tag

    Raises:
        InvalidDomain: if the parameters are outside the domain of the integral
        NonConvergence: if one of the evaluators did not converge
    """
    settings = settings if settings is not None else get_kernel_settings()
    params = validate(x, y, mu, p)

    if params.lower == params.upper:
        method = classify(params.lower_scaled, params.p, params.sign, settings)[0]
        return pack_result(-math.inf, method, (method, method))

    if is_narrow_interval(params.lower, params.upper, params.mu, params.p, settings):
        return pack_result(log_narrow_interval(params.lower, params.upper, params.mu, params.p, settings),
                           Method.TAYLOR)

    # both sides in the series regime, the difference is summed directly
    if params.sign < 0 and classify(params.upper_scaled, params.p, params.sign, settings)[0] == Method.SERIES:
        log_value = log_negative_mu_difference_series(params.lower_scaled, params.upper_scaled, params.p, settings)
        return pack_result(log_value - params.p * math.log(params.scale), Method.SERIES,
                           (Method.SERIES, Method.SERIES))

    lower_side = evaluate_side(params.lower_scaled, params.p, params.sign, settings)
    upper_side = evaluate_side(params.upper_scaled, params.p, params.sign, settings)

    if lower_side.kind == 'upper' and upper_side.kind == 'lower':
        lower_side = evaluate_side(params.lower_scaled, params.p, params.sign, settings, kind='lower')

    if (params.sign > 0 and lower_side.kind == upper_side.kind == 'lower'
            and math.exp(lower_side.log_regularized(params.p)) > settings.mixed_cancellation_limit):
        lower_side = evaluate_side(params.lower_scaled, params.p, params.sign, settings, kind='upper')
        upper_side = evaluate_side(params.upper_scaled, params.p, params.sign, settings, kind='upper')

    if lower_side.kind == upper_side.kind:
        log_value = combine_same_kind(lower_side, upper_side, params.p)
    else:
        log_value, (lower_side, upper_side) = combine_mixed(lower_side, upper_side, params.p, settings)

    log_value -= params.p * math.log(params.scale)

    side_methods = (lower_side.method, upper_side.method)
    method = lower_side.method if lower_side.method == upper_side.method else Method.MIXED
    return pack_result(log_value, method, side_methods)


def _upper_method(z, p, settings):
    """The technique for an upper kind side at this bound, for positive mu.

    The continued fraction needs a number of iterations growing like ``1 / z`` for small z, there we use the series.
    """
    if _in_asymptotic_band(z, p, settings):
        return Method.ASYMPTOTIC
    if z <= settings.upper_series_max_argument:
        return Method.SERIES
    return Method.CONTINUED_FRACTION


def _negative_mu_asymptotic(z, p, settings):
    """If the expansion in inverse powers of ``beta = p - 1 + z`` applies at this bound, for negative mu.

    For p below one the expansion misses the contribution of the integrable singularity at the origin, relative to
    the result about ``beta e^-z / p``. That part has to be below the tolerance.
    """
    beta = p - 1 + z
    if beta < settings.negative_mu_asymptotic_min_beta:
        return False
    return p >= 1 or math.log(beta) - z - math.log(p) <= math.log(settings.tolerance)


def _in_asymptotic_band(z, p, settings):
    """If the uniform asymptotic expansion applies at this bound, for positive mu."""
    return (p >= settings.asymptotic_min_shape
            and abs(z / p - 1) <= settings.asymptotic_max_relative_distance)

"""A mantissa/exponent number type with an unbounded decimal exponent.

Values of the generalized incomplete gamma function easily leave the double precision range. We therefore represent
them as ``rho * 10**sigma`` with ``0.1 <= |rho| < 1`` (or ``rho == sigma == 0``) and an integer ``sigma``. Since the
mantissa is normalized, two numbers can be compared or combined without re-normalization ambiguity.
"""
import functools
import math
import numpy as np

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


LN_10 = math.log(10)

# beyond this difference in exponent the smaller operand does not change a double precision mantissa
_MAX_ALIGNMENT = 20


@functools.total_ordering
class ScaledNumber:

    __slots__ = ('_rho', '_sigma')

    def __init__(self, rho, sigma=0):
        """A real number written as ``rho * 10**sigma``.

        The given mantissa does not need to be normalized, we move it into ``[0.1, 1)`` (in absolute value) and
        correct the exponent accordingly.

        Args:
            rho (float): the mantissa, any finite real
            sigma (int): the decimal exponent

        Raises:
            ValueError: if the mantissa is not finite or the exponent is not integral
        """
        rho = float(rho)
        if not math.isfinite(rho):
            raise ValueError('The mantissa of a scaled number should be finite, {} given.'.format(rho))
        if sigma != int(sigma):
            raise ValueError('The exponent of a scaled number should be integral, {} given.'.format(sigma))
        self._rho, self._sigma = _normalize(rho, int(sigma))

    @classmethod
    def zero(cls):
        return cls(0.0, 0)

    @classmethod
    def from_float(cls, value):
        """Create a scaled number from a finite float."""
        return cls(value, 0)

    @classmethod
    def from_log(cls, log_value, sign=1):
        """Create a scaled number from the natural logarithm of its absolute value.

        This is the way results enter this type, the kernel works in log space.

        Args:
            log_value (float): the natural logarithm of the absolute value, ``-inf`` for zero
            sign (int): the sign of the number, 1 or -1

        Returns:
            ScaledNumber: the number ``sign * exp(log_value)``
        """
        if log_value == -math.inf:
            return cls.zero()
        if not math.isfinite(log_value):
            raise ValueError('Can not represent a number with logarithm {}.'.format(log_value))

        sigma = math.floor(log_value / LN_10) + 1
        rho = math.exp(log_value - sigma * LN_10)
        return cls(math.copysign(rho, sign), sigma)

    @property
    def rho(self):
        return self._rho

    @property
    def sigma(self):
        return self._sigma

    def is_zero(self):
        return self._rho == 0

    def as_tuple(self):
        return self._rho, self._sigma

    def log(self):
        """The natural logarithm of the absolute value, ``-inf`` for zero."""
        if self.is_zero():
            return -math.inf
        return math.log(abs(self._rho)) + self._sigma * LN_10

    def log10(self):
        """The decimal logarithm of the absolute value, ``-inf`` for zero."""
        if self.is_zero():
            return -math.inf
        return math.log10(abs(self._rho)) + self._sigma

    def to_float(self):
        """Convert to a float, saturating to infinity on overflow and to zero on underflow."""
        if self._sigma > 309:
            return math.copysign(math.inf, self._rho)
        if self._sigma < -400:
            return math.copysign(0.0, self._rho)
        if self._sigma > 300:
            value = (self._rho * 1e10) * 10.0 ** (self._sigma - 10)
        else:
            value = self._rho * 10.0 ** self._sigma
        return value

    def __float__(self):
        return self.to_float()

    def __neg__(self):
        return ScaledNumber(-self._rho, self._sigma)

    def __abs__(self):
        return ScaledNumber(abs(self._rho), self._sigma)

    def __add__(self, other):
        other = _as_scaled(other)
        if other is NotImplemented:
            return other
        if self.is_zero():
            return other
        if other.is_zero():
            return self

        large, small = (self, other) if self._sigma >= other._sigma else (other, self)
        shift = large._sigma - small._sigma
        if shift > _MAX_ALIGNMENT:
            return large
        return ScaledNumber(large._rho + small._rho * 10.0 ** -shift, large._sigma)

    __radd__ = __add__

    def __sub__(self, other):
        other = _as_scaled(other)
        if other is NotImplemented:
            return other
        return self + (-other)

    def __rsub__(self, other):
        other = _as_scaled(other)
        if other is NotImplemented:
            return other
        return other - self

    def __mul__(self, other):
        other = _as_scaled(other)
        if other is NotImplemented:
            return other
        return ScaledNumber(self._rho * other._rho, self._sigma + other._sigma)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = _as_scaled(other)
        if other is NotImplemented:
            return other
        if other.is_zero():
            raise ZeroDivisionError('Division of a scaled number by zero.')
        return ScaledNumber(self._rho / other._rho, self._sigma - other._sigma)

    def __eq__(self, other):
        other = _as_scaled(other)
        if other is NotImplemented:
            return other
        return self._rho == other._rho and self._sigma == other._sigma

    def __lt__(self, other):
        other = _as_scaled(other)
        if other is NotImplemented:
            return other

        if self._rho < 0 <= other._rho or self._rho <= 0 < other._rho:
            return True
        if other._rho < 0 <= self._rho or other._rho <= 0 < self._rho:
            return False
        if self.is_zero() and other.is_zero():
            return False

        # equal signs from here
        if self._sigma != other._sigma:
            larger_magnitude = self._sigma > other._sigma
            return larger_magnitude if self._rho < 0 else not larger_magnitude
        return self._rho < other._rho

    def __hash__(self):
        return hash((self._rho, self._sigma))

    def __repr__(self):
        return '{}({!r}, {!r})'.format(self.__class__.__name__, self._rho, self._sigma)

    def __str__(self):
        return '{!r}e{}'.format(self._rho, self._sigma)


def scaled_to_float(rho, sigma):
    """Convert arrays of mantissas and exponents to floats.

    Values that do not fit in double precision saturate to infinity or zero.

    Args:
        rho (ndarray): the mantissas
        sigma (ndarray): the exponents

    Returns:
        ndarray: the values ``rho * 10**sigma``
    """
    rho = np.asarray(rho, dtype=np.float64)
    sigma = np.asarray(sigma, dtype=np.float64)
    with np.errstate(over='ignore', under='ignore', invalid='ignore'):
        half = np.floor(sigma / 2)
        return rho * np.power(10.0, half) * np.power(10.0, sigma - half)


def scaled_to_log10(rho, sigma):
    """Convert arrays of mantissas and exponents to the decimal logarithm of their absolute values.

    Args:
        rho (ndarray): the mantissas
        sigma (ndarray): the exponents

    Returns:
        ndarray: ``log10(|rho|) + sigma``, ``-inf`` where rho is zero
    """
    rho = np.asarray(rho, dtype=np.float64)
    sigma = np.asarray(sigma, dtype=np.float64)
    with np.errstate(divide='ignore'):
        return np.log10(np.abs(rho)) + sigma


def _normalize(rho, sigma):
    """Move the mantissa into [0.1, 1) in absolute value and correct the exponent."""
    if rho == 0:
        return 0.0, 0

    shift = math.floor(math.log10(abs(rho))) + 1
    if shift:
        rho = _shift_mantissa(rho, shift)
        sigma += shift

    # log10 can be off by one close to the powers of ten
    if abs(rho) >= 1:
        rho /= 10
        sigma += 1
    elif abs(rho) < 0.1:
        rho *= 10
        sigma -= 1
    return rho, sigma


def _shift_mantissa(rho, shift):
    """Compute ``rho / 10**shift`` without overflowing the intermediate power of ten."""
    if abs(shift) > 300:
        half = shift // 2
        return (rho / 10.0 ** half) / 10.0 ** (shift - half)
    return rho / 10.0 ** shift


def _as_scaled(value):
    if isinstance(value, ScaledNumber):
        return value
    if isinstance(value, (int, float, np.integer, np.floating)):
        return ScaledNumber.from_float(float(value))
    return NotImplemented

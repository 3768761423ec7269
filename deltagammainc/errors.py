"""The exceptions raised by the kernel and by the elementwise driver.

There are two tiers. The driver checks the shape of a call (argument count, element types, shapes) before any
computation and raises one of the ``Bad*`` exceptions. The kernel raises :class:`InvalidDomain` for parameters
outside the domain of the integral and :class:`NonConvergence` when an evaluator reaches its maximum
number of iterations. The latter points at a defect in the regime classification or the tolerance tuning, not
at the user input.
"""

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


class DeltaGammaIncError(Exception):
    """Base class of all the exceptions in this package."""


class InvalidDomain(DeltaGammaIncError, ValueError):
    """Raised if the parameters of an evaluation lie outside the domain of the integral."""


class NonConvergence(DeltaGammaIncError, ArithmeticError):
    """Raised if an evaluator did not reach its tolerance within the maximum number of iterations."""


class BadInputNumber(DeltaGammaIncError, TypeError):
    """Raised if the driver is called with a number of inputs other than four."""


class BadOutputNumber(DeltaGammaIncError, ValueError):
    """Raised if the driver is asked for an unsupported number of outputs."""


class BadInputDataType(DeltaGammaIncError, TypeError):
    """Raised if one of the inputs of the driver is not real valued."""


class BadInputShape(DeltaGammaIncError, ValueError):
    """Raised if the inputs of the driver can not be broadcast to a common shape."""

"""Elementwise evaluation of the kernel over arrays of parameters.

This is the array interface of the package. All the checks on the call itself (number of inputs and outputs, data
types and shapes) happen before any element is evaluated. Errors of single elements are handled according to the
error policy, either re-raised or logged and replaced by NaN.
"""
import logging
import numpy as np
from deltagammainc.configuration import get_kernel_settings, get_error_policy, get_processes
from deltagammainc.errors import BadInputNumber, BadOutputNumber, BadInputDataType, BadInputShape, \
    InvalidDomain, DeltaGammaIncError
from deltagammainc.kernel import EvaluationRequest, FAILED_METHOD
from deltagammainc.lib.utils import split_in_batches, multiprocess_mapping

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


_NMR_INPUTS = 4
_SUPPORTED_NMR_OUTPUTS = (1, 2, 3)
_ERROR_POLICIES = ('raise', 'nan')


def deltagammainc(*arrays, nmr_outputs=2, errors=None, processes=None, settings=None):
    """Evaluate the generalized incomplete gamma function elementwise.

    For every element this computes the integral of ``s^(p-1) exp(-mu s)`` over the interval between x and y, as
    ``rho * 10**sigma`` with ``0.1 <= |rho| < 1`` or ``rho = sigma = 0``.

    Example:

    .. code-block:: python

        rho, sigma = deltagammainc(0, 1, 1, [1, 2, 3])
        values = scaled_to_float(rho, sigma)

    Args:
        *arrays: the four inputs x, y, mu and p. These are broadcast against each other.
        nmr_outputs (int): the number of outputs, 1 for only the mantissa, 2 for the mantissa and the exponent and 3
            to also get the technique tag of every element
        errors (str): the error policy for failing elements, 'raise' or 'nan'. If None we use the one from the
            runtime configuration.
        processes (int): the number of processes to use, if None we use the one from the runtime configuration.
        settings (deltagammainc.configuration.KernelSettings): the numerical settings of the kernel, if None we use
            the ones from the runtime configuration.

    Returns:
        ndarray or tuple: the mantissa array, or a tuple with the mantissa, the exponent (as float64) and the
            technique tag (as int8, -1 for failed elements) arrays, depending on the number of outputs.

    Raises:
        BadInputNumber: if not exactly four inputs are given
        BadOutputNumber: if the number of outputs is not supported
        BadInputDataType: if one of the inputs is not real valued
        BadInputShape: if the inputs can not be broadcast together
    """
    if len(arrays) != _NMR_INPUTS:
        raise BadInputNumber('Expected {} inputs (x, y, mu, p), {} given.'.format(_NMR_INPUTS, len(arrays)))
    if nmr_outputs not in _SUPPORTED_NMR_OUTPUTS:
        raise BadOutputNumber('The number of outputs should be one of {}, {} given.'.format(
            _SUPPORTED_NMR_OUTPUTS, nmr_outputs))

    evaluator = ElementwiseEvaluator(errors=errors, processes=processes, settings=settings)
    results = evaluator.evaluate(*arrays)
    if nmr_outputs == 1:
        return results[0]
    return results[:nmr_outputs]


class ElementwiseEvaluator:

    def __init__(self, errors=None, processes=None, settings=None):
        """Evaluates the kernel for every element of a set of broadcast parameter arrays.

        Args:
            errors (str): the error policy, 'raise' to re-raise the first error, 'nan' to log the error and return NaN
                for the failing element. If None we use the one from the runtime configuration.
            processes (int): the number of processes, 1 for serial evaluation. If None we use the one from the
                runtime configuration.
            settings (deltagammainc.configuration.KernelSettings): the numerical settings of the kernel
        """
        self._logger = logging.getLogger(__name__)
        self._errors = errors if errors is not None else get_error_policy()
        self._processes = int(processes if processes is not None else get_processes())
        self._settings = settings if settings is not None else get_kernel_settings()

        if self._errors not in _ERROR_POLICIES:
            raise ValueError('The error policy should be one of {}, "{}" given.'.format(_ERROR_POLICIES, self._errors))
        if self._processes < 1:
            raise ValueError('The number of processes should be at least one, {} given.'.format(self._processes))

    def evaluate(self, x, y, mu, p):
        """Evaluate all the elements.

        Args:
            x (array-like): one bound of the intervals
            y (array-like): the other bound of the intervals
            mu (array-like): the rates
            p (array-like): the shape parameters

        Returns:
            tuple: the mantissa, exponent and technique tag arrays, all of the broadcast shape
        """
        inputs = [self._check_data_type(name, value) for name, value in zip('x y mu p'.split(), (x, y, mu, p))]

        try:
            broadcast = np.broadcast_arrays(*inputs)
        except ValueError as exc:
            raise BadInputShape('The inputs can not be broadcast together, shapes: {}.'.format(
                ', '.join(str(v.shape) for v in inputs))) from exc

        shape = broadcast[0].shape
        columns = [np.ravel(v).astype(np.float64) for v in broadcast]
        nmr_elements = columns[0].size

        self._logger.debug('Evaluating {} element(s) using {} process(es).'.format(nmr_elements, self._processes))

        batch_size = max(1, int(np.ceil(nmr_elements / (4. * self._processes))))
        items = [(start, [column[start:end] for column in columns])
                 for start, end in split_in_batches(nmr_elements, batch_size)]

        worker = _BatchEvaluator(self._settings, self._errors)
        if self._processes > 1 and len(items) > 1:
            batch_results = multiprocess_mapping(worker, items, processes=self._processes)
        else:
            batch_results = list(map(worker, items))

        rho = np.empty(nmr_elements, dtype=np.float64)
        sigma = np.empty(nmr_elements, dtype=np.float64)
        method = np.empty(nmr_elements, dtype=np.int8)

        nmr_failed = 0
        for (start, _), (batch_rho, batch_sigma, batch_method, failures) in zip(items, batch_results):
            end = start + batch_rho.shape[0]
            rho[start:end] = batch_rho
            sigma[start:end] = batch_sigma
            method[start:end] = batch_method

            for index, exception in failures:
                self._log_failure(index, exception)
            nmr_failed += len(failures)

        if nmr_failed:
            self._logger.info('Finished evaluation, {} of {} element(s) failed.'.format(nmr_failed, nmr_elements))

        return rho.reshape(shape), sigma.reshape(shape), method.reshape(shape)

    def _check_data_type(self, name, value):
        try:
            value = np.asarray(value)
        except ValueError as exc:
            raise BadInputShape('The input "{}" is not a regular array.'.format(name)) from exc
        if value.dtype.kind not in 'fiu':
            raise BadInputDataType('The input "{}" should be real valued, data type "{}" given.'.format(
                name, value.dtype))
        return value

    def _log_failure(self, index, exception):
        if isinstance(exception, InvalidDomain):
            self._logger.warning('Element {} is outside the domain: {}'.format(index, exception))
        else:
            self._logger.error('Element {} failed to evaluate: {}'.format(index, exception))


class _BatchEvaluator:

    def __init__(self, settings, errors):
        """Evaluates one batch of elements, picklable for use in a process pool.

        Args:
            settings (deltagammainc.configuration.KernelSettings): the numerical settings
            errors (str): the error policy
        """
        self._settings = settings
        self._errors = errors

    def __call__(self, item):
        """Evaluate a batch.

        Args:
            item (tuple): the index of the first element and the list of the four parameter columns of the batch

        Returns:
            tuple: the mantissas, the exponents, the technique tags and a list of ``(index, exception)`` pairs for the
                elements that failed
        """
        offset, (x, y, mu, p) = item

        rho = np.zeros(x.shape[0], dtype=np.float64)
        sigma = np.zeros(x.shape[0], dtype=np.float64)
        method = np.zeros(x.shape[0], dtype=np.int8)
        failures = []

        for ind in range(x.shape[0]):
            request = EvaluationRequest(float(x[ind]), float(y[ind]), float(mu[ind]), float(p[ind]))
            try:
                result = request.evaluate(settings=self._settings)
            except DeltaGammaIncError as exc:
                if self._errors == 'raise':
                    raise type(exc)('Element {} {}: {}'.format(offset + ind, request, exc)) from exc
                rho[ind] = np.nan
                sigma[ind] = np.nan
                method[ind] = FAILED_METHOD
                failures.append((offset + ind, exc))
            else:
                rho[ind] = result.rho
                sigma[ind] = result.sigma
                method[ind] = int(result.method)

        return rho, sigma, method, failures

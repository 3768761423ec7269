"""Contains the runtime configuration of the evaluation kernel.

This consists of two parts, functions to get the current runtime settings and configuration actions to update these
settings. To set a new configuration, create a new :py:class:`ConfigAction` and use this within a context environment
using :py:func:`config_context`. Example:

.. code-block:: python

    from deltagammainc.configuration import RuntimeConfigurationAction, config_context

    with config_context(RuntimeConfigurationAction(errors='raise')):
        ...

The numerical tuning constants (tolerances, iteration caps and regime thresholds) are gathered in an immutable
:class:`KernelSettings` object which is passed explicitly to every evaluator. The runtime configuration only holds
the instance used when no settings are given.
"""
from contextlib import contextmanager
import numpy as np

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


class KernelSettings:

    _defaults = {
        'tolerance': float(np.finfo(np.float64).eps),
        'series_max_iterations': 10000,
        'continued_fraction_max_iterations': 10000,
        'asymptotic_min_shape': 20.0,
        'asymptotic_max_relative_distance': 0.3,
        'asymptotic_order': 25,
        'asymptotic_taylor_terms': 25,
        'negative_mu_asymptotic_min_beta': 80.0,
        'negative_mu_asymptotic_max_order': 250,
        'mixed_cancellation_limit': 0.5,
        'upper_series_max_argument': 1.1,
        'taylor_max_distortion': 1.0,
        'taylor_max_iterations': 500,
    }

    def __init__(self, **kwargs):
        """The numerical tuning constants of the kernel.

        Every evaluator takes the settings it needs from this object, there is no hidden module state.

        Args:
            tolerance (float): relative tolerance at which the series, the continued fraction and the narrow
                interval expansion are considered converged.
            series_max_iterations (int): the maximum number of terms of the power series.
            continued_fraction_max_iterations (int): the maximum number of Lentz iterations.
            asymptotic_min_shape (float): the smallest shape parameter p for which the uniform asymptotic expansion
                is used (positive mu).
            asymptotic_max_relative_distance (float): the asymptotic expansion is used if ``|z/p - 1|`` is at most
                this value (positive mu).
            asymptotic_order (int): the number of orders in 1/p of the uniform asymptotic expansion.
            asymptotic_taylor_terms (int): the number of Taylor terms in eta of each coefficient of the expansion.
            negative_mu_asymptotic_min_beta (float): for negative mu, the smallest ``p - 1 + z`` for which the
                asymptotic expansion is used instead of the series.
            negative_mu_asymptotic_max_order (int): the maximum truncation order of the negative mu expansion.
            mixed_cancellation_limit (float): if a lower and an upper side are combined as ``1 - P - Q``, the largest
                ``P + Q`` we accept before re-evaluating one of the sides with the other kind. Two lower sides are both
                re-evaluated as upper sides if ``P`` at the smallest bound exceeds this value (positive mu).
            upper_series_max_argument (float): up to this bound an upper side is computed with the small argument
                series instead of the continued fraction (positive mu).
            taylor_max_distortion (float): the largest bound on the variation of the log integrand for which an
                interval is considered narrow.
            taylor_max_iterations (int): the maximum number of terms of the narrow interval expansion.

        Raises:
            ValueError: if an unknown setting is given or if a value is out of range
        """
        unknown = set(kwargs) - set(self._defaults)
        if unknown:
            raise ValueError('Unknown kernel settings: {}.'.format(', '.join(sorted(unknown))))

        values = dict(self._defaults)
        values.update(kwargs)

        if not 0 < values['tolerance'] < 1:
            raise ValueError('The tolerance should be in (0, 1), {} given.'.format(values['tolerance']))
        for name in ('series_max_iterations', 'continued_fraction_max_iterations', 'asymptotic_order',
                     'asymptotic_taylor_terms', 'negative_mu_asymptotic_max_order', 'taylor_max_iterations'):
            if int(values[name]) < 1:
                raise ValueError('The setting "{}" should be a positive integer, {} given.'.format(
                    name, values[name]))
            values[name] = int(values[name])
        if not 0 < values['mixed_cancellation_limit'] < 1:
            raise ValueError('The mixed cancellation limit should be in (0, 1).')
        if not values['upper_series_max_argument'] > 0:
            raise ValueError('The upper series maximum argument should be positive.')
        if values['asymptotic_max_relative_distance'] < 0:
            raise ValueError('The asymptotic relative distance can not be negative.')

        self._values = values

    def with_changes(self, **kwargs):
        """Get a copy of these settings with some of the values replaced.

        Returns:
            KernelSettings: the new settings object
        """
        values = dict(self._values)
        values.update(kwargs)
        return KernelSettings(**values)

    def as_dict(self):
        return dict(self._values)

    def __getattr__(self, item):
        try:
            return self.__dict__['_values'][item]
        except KeyError:
            raise AttributeError(item)

    def __getstate__(self):
        return self._values

    def __setstate__(self, state):
        self._values = state

    def __eq__(self, other):
        return isinstance(other, KernelSettings) and self._values == other._values

    def __hash__(self):
        return hash(tuple(sorted(self._values.items())))

    def __repr__(self):
        return '{}({})'.format(self.__class__.__name__, ', '.join(
            '{}={!r}'.format(k, v) for k, v in sorted(self._values.items())))


"""The runtime configuration, this can be overwritten at run time.

If no settings are given to the kernel or the driver we use the ones provided by this module. This entire module acts
as a singleton containing the current runtime configuration.
"""
_config = {
    'kernel_settings': KernelSettings(),
    'errors': 'nan',
    'processes': 1
}

_error_policies = ('raise', 'nan')


def get_kernel_settings():
    """Get the kernel settings used if none are given explicitly.

    Returns:
        KernelSettings: the current default kernel settings
    """
    return _config['kernel_settings']


def set_kernel_settings(kernel_settings):
    """Set the default kernel settings.

    Please note that this will change the global configuration, i.e. this is a persistent change. If you do not want
    a persistent state change, consider using :func:`~deltagammainc.configuration.config_context` instead.

    Args:
        kernel_settings (KernelSettings): the new default settings
    """
    if not isinstance(kernel_settings, KernelSettings):
        raise ValueError('The kernel settings should be an instance of KernelSettings.')
    _config['kernel_settings'] = kernel_settings


def get_error_policy():
    """Get the policy of the driver for elements that fail in the kernel.

    Returns:
        str: either 'raise' (re-raise the first error) or 'nan' (log the error and return NaN for that element)
    """
    return _config['errors']


def set_error_policy(errors):
    """Set the default error policy of the driver.

    Args:
        errors (str): one of 'raise' or 'nan'
    """
    if errors not in _error_policies:
        raise ValueError('The error policy should be one of {}, "{}" given.'.format(_error_policies, errors))
    _config['errors'] = errors


def get_processes():
    """Get the number of processes the driver uses by default.

    Returns:
        int: the number of processes, 1 means serial evaluation
    """
    return _config['processes']


def set_processes(processes):
    """Set the default number of processes of the driver.

    Args:
        processes (int): the number of processes, should be at least 1
    """
    if int(processes) < 1:
        raise ValueError('The number of processes should be at least one.')
    _config['processes'] = int(processes)


@contextmanager
def config_context(config_action):
    """Creates a context in which the config action is applied and unapplies the configuration after execution.

    Args:
        config_action (ConfigAction): the configuration action to use
    """
    config_action.apply()
    try:
        yield
    finally:
        config_action.unapply()


class ConfigAction:

    def __init__(self):
        """Defines a configuration action for use in a configuration context.

        This should define an apply and unapply function that sets and unsets the configuration options.

        The applying action needs to remember the state before the application of the action.
        """

    def apply(self):
        """Apply the current action to the current runtime configuration."""

    def unapply(self):
        """Reset the current configuration to the previous state."""


class SimpleConfigAction(ConfigAction):

    def __init__(self):
        """Defines a default implementation of a configuration action.

        This simple config implements a default ``apply()`` method that saves the current state and a default
        ``unapply()`` that restores the previous state.

        For developers, it is easiest to implement ``_apply()`` such that you do not manually need to store the old
        configuration.
        """
        super().__init__()
        self._old_config = {}

    def apply(self):
        """Apply the current action to the current runtime configuration."""
        self._old_config = {k: v for k, v in _config.items()}
        self._apply()

    def unapply(self):
        """Reset the current configuration to the previous state."""
        for key, value in self._old_config.items():
            _config[key] = value

    def _apply(self):
        """Implement this function add apply() logic after this class saves the current config."""


class RuntimeConfigurationAction(SimpleConfigAction):

    def __init__(self, kernel_settings=None, errors=None, processes=None):
        """Updates the runtime settings.

        Args:
            kernel_settings (KernelSettings): the new default kernel settings
            errors (str): the new default error policy of the driver
            processes (int): the new default number of processes of the driver
        """
        super().__init__()
        self._kernel_settings = kernel_settings
        self._errors = errors
        self._processes = processes

    def _apply(self):
        if self._kernel_settings is not None:
            set_kernel_settings(self._kernel_settings)

        if self._errors is not None:
            set_error_policy(self._errors)

        if self._processes is not None:
            set_processes(self._processes)


class KernelSettingsAction(SimpleConfigAction):

    def __init__(self, **changes):
        """Replace some of the values of the current default kernel settings.

        Args:
            **changes: the settings to change, see :class:`KernelSettings`
        """
        super().__init__()
        self._changes = changes

    def _apply(self):
        set_kernel_settings(get_kernel_settings().with_changes(**self._changes))

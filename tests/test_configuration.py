import pickle
import unittest
import numpy as np
from deltagammainc.configuration import KernelSettings, RuntimeConfigurationAction, KernelSettingsAction, \
    config_context, get_kernel_settings, get_error_policy, get_processes, set_error_policy, \
    set_processes, set_kernel_settings

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


class test_KernelSettings(unittest.TestCase):

    def test_defaults(self):
        settings = KernelSettings()
        self.assertEqual(settings.tolerance, np.finfo(np.float64).eps)
        self.assertEqual(settings.asymptotic_min_shape, 20)
        self.assertEqual(settings.negative_mu_asymptotic_min_beta, 80)
        self.assertEqual(settings.upper_series_max_argument, 1.1)

    def test_with_changes(self):
        settings = KernelSettings()
        changed = settings.with_changes(tolerance=1e-10)

        self.assertEqual(changed.tolerance, 1e-10)
        self.assertEqual(settings.tolerance, np.finfo(np.float64).eps)
        self.assertEqual(changed.series_max_iterations, settings.series_max_iterations)
        self.assertNotEqual(settings, changed)

    def test_equality(self):
        self.assertEqual(KernelSettings(), KernelSettings())
        self.assertEqual(hash(KernelSettings(tolerance=1e-12)), hash(KernelSettings(tolerance=1e-12)))

    def test_pickle(self):
        settings = KernelSettings(series_max_iterations=50)
        self.assertEqual(pickle.loads(pickle.dumps(settings)), settings)

    def test_invalid(self):
        self.assertRaises(ValueError, KernelSettings, unknown=1)
        self.assertRaises(ValueError, KernelSettings, tolerance=2)
        self.assertRaises(ValueError, KernelSettings, series_max_iterations=0)
        self.assertRaises(ValueError, KernelSettings, mixed_cancellation_limit=1.5)
        self.assertRaises(ValueError, KernelSettings, upper_series_max_argument=0)

    def test_unknown_attribute(self):
        self.assertRaises(AttributeError, getattr, KernelSettings(), 'unknown')


class test_RuntimeConfiguration(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(get_error_policy(), 'nan')
        self.assertEqual(get_processes(), 1)
        self.assertIsInstance(get_kernel_settings(), KernelSettings)

    def test_config_context(self):
        with config_context(RuntimeConfigurationAction(errors='raise', processes=3)):
            self.assertEqual(get_error_policy(), 'raise')
            self.assertEqual(get_processes(), 3)
        self.assertEqual(get_error_policy(), 'nan')
        self.assertEqual(get_processes(), 1)

    def test_config_context_restores_on_error(self):
        try:
            with config_context(RuntimeConfigurationAction(errors='raise')):
                raise KeyError('test')
        except KeyError:
            pass
        self.assertEqual(get_error_policy(), 'nan')

    def test_kernel_settings_action(self):
        original = get_kernel_settings()
        with config_context(KernelSettingsAction(series_max_iterations=42)):
            self.assertEqual(get_kernel_settings().series_max_iterations, 42)
            self.assertEqual(get_kernel_settings().tolerance, original.tolerance)
        self.assertEqual(get_kernel_settings(), original)

    def test_invalid_values(self):
        self.assertRaises(ValueError, set_error_policy, 'ignore')
        self.assertRaises(ValueError, set_processes, 0)
        self.assertRaises(ValueError, set_kernel_settings, {'tolerance': 1e-10})

from deltagammainc.library_functions.special_functions import log_gamma, log_gamma_1p, log_gamma_star, \
    lambda_deviation, log_regularized_prefactor, horner
from deltagammainc.library_functions.series import log_lower_series, log_negative_mu_series, log_upper_series, \
    log_negative_mu_difference_series
from deltagammainc.library_functions.continued_fraction import log_upper_continued_fraction
from deltagammainc.library_functions.asymptotic import temme_coefficients, log_temme_expansion, \
    log_negative_mu_expansion
from deltagammainc.library_functions.taylor import narrow_interval_distortion, is_narrow_interval, \
    log_narrow_interval


__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'

import logging
from logging import NullHandler
from .__version__ import VERSION, VERSION_STATUS, __version__
from .elementwise import deltagammainc
from .kernel import evaluate, Method
from .scaled_number import ScaledNumber, scaled_to_float, scaled_to_log10
from .errors import DeltaGammaIncError, InvalidDomain, NonConvergence, BadInputNumber, BadOutputNumber, \
    BadInputDataType, BadInputShape

__author__ = 'Robbert Harms'
__date__ = '2026-10-19'
__maintainer__ = 'Robbert Harms'
__email__ = 'robbert@xkls.nl'
__licence__ = 'LGPL v3'


logging.getLogger(__name__).addHandler(NullHandler())

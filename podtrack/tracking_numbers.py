"""Splitting free-form input into tracking numbers, and working out which
carrier a bare tracking number belongs to.

Classification is done by walking RULES from top to bottom, the first
matching pattern decides the carrier. USPS formats come first because
they pin down leading digit groups, while most FedEx formats are only
a length, so a number that could be both is USPS. The generic rules at the
end only see numbers nothing more specific claimed.
"""

import logging
import re

logger = logging.getLogger(__name__)

USPS = 'USPS'
FEDEX = 'FedEx'

_SEPARATORS = re.compile(r'[,\s]+')
_WHITESPACE = re.compile(r'\s+')

def _rule(pattern, label, description):
    return (re.compile(pattern, re.ASCII), label, description)

RULES = [
    _rule(r'^(94|93|92|95)\d{18}$', USPS, 'USPS Priority Mail / Priority Mail Express'),
    _rule(r'^420\d{5}(91|92|93|94|95)\d{8}$', USPS, 'USPS tracking with ZIP routing'),
    _rule(r'^(EA|EC|ED|EE|EH|EJ|EK|EL|EM|EN|EP|ER|ET|EV|EW|EX|EY|EZ)\d{9}US$',
        USPS, 'USPS Priority Mail Express International'),
    _rule(r'^[A-Z]{2}\d{9}US$', USPS, 'USPS international'),
    _rule(r'^70\d{14}$', USPS, 'USPS Certified Mail'),
    _rule(r'^23\d{8}$', USPS, 'USPS Priority Mail Express'),
    _rule(r'^91\d{18}$', USPS, 'USPS 20 digit'),

    _rule(r'^\d{12}$', FEDEX, 'FedEx Express 12 digit'),
    _rule(r'^\d{14}$', FEDEX, 'FedEx Express 14 digit'),
    _rule(r'^\d{15}$', FEDEX, 'FedEx Ground 15 digit'),
    _rule(r'^\d{16}$', FEDEX, 'FedEx Ground 16 digit'),
    _rule(r'^\d{18}$', FEDEX, 'FedEx Ground 18 digit'),
    _rule(r'^96\d{20}$', FEDEX, 'FedEx SmartPost'),
    _rule(r'^\d{4}\s?\d{4}\s?\d{4}$', FEDEX, 'FedEx Express display form'),

    _rule(r'^9\d{19,21}$', USPS, 'generic USPS'),
    _rule(r'^(?!9)\d{20}$', FEDEX, 'generic FedEx'),
]

def normalize(tracking_number):
    """Strip all whitespace and uppercase, returns None for anything that
    isn't a string
    """
    if not isinstance(tracking_number, str):
        return None
    return _WHITESPACE.sub('', tracking_number).upper()

def classify(tracking_number):
    """Return USPS, FEDEX or None if no rule matches. Never raises.
    """
    clean = normalize(tracking_number)
    if not clean:
        return None

    for pattern, label, description in RULES:
        if pattern.match(clean):
            logger.debug('%s matched %s rule: %s', clean, label, description)
            return label

    logger.debug('no carrier rule matched %s', clean)
    return None

def parse_tracking_numbers(text):
    """Split free-form text on commas, whitespace and newlines into a list of
    tracking numbers, keeping the input order and any duplicates.
    """
    if not text:
        return []
    return [token.strip() for token in _SEPARATORS.split(text) if token.strip()]

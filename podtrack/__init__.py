"""Work out which carrier a tracking number belongs to, and get delivery
status and proof of delivery for it in one common shape.

Supported carriers:
    U.S. Postal Service, Federal Express

Basic usage:

    >>> from podtrack import Package, build_url, parse_tracking_numbers
    >>> parse_tracking_numbers('9405511206213334271430, 123456789012')
    ['9405511206213334271430', '123456789012']
    # Identify packages
    >>> package = Package('9405511206213334271430')
    >>> str(package.carrier)
    'USPS'
    # Delivery status, live if configured, simulated otherwise. The output
    # below is with no USPS userid set.
    >>> status = package.status()
    >>> status.is_delivered, status.source
    (False, 'simulated')
    # Get tracking URLs, for one package or many
    >>> package.url
    'https://tools.usps.com/go/TrackConfirmAction?tLabels=9405511206213334271430'
    >>> build_url(['A', 'B'], 'USPS')
    'https://tools.usps.com/go/TrackConfirmAction?tLabels=A,B'

Configuration:

Live tracking needs API credentials. Values are read from the environment
first (FEDEX_API_KEY, FEDEX_API_SECRET, FEDEX_API_BASE_URL, USPS_USER_ID)
and then from ~/.podtrack, which looks like this:

    [FedEx]
    key = XXXXXXXXXXXXXXXX
    secret = XXXXXXXXXXXXXXXXXXXXXXXXX
    base_url = https://apis.fedex.com

    [USPS]
    userid = XXXXXXXXXXXX

Without a USPS userid, USPS results are simulated. Without FedEx
credentials, FedEx queries raise ConfigError.

You can specify an alternate location for the config file like so:

    >>> from podtrack.configuration import DotFileConfig
    >>> cfg = DotFileConfig('/path/to/file')
    >>> podtrack.auto_register_carriers(cfg)

Alternatively, you can provide a different type of config like the
DictConfig, or write another one (like one that pulls values from a database).
"""

__credits__     = ['Scott Torborg', 'Michael Stella', 'Alex Headley']
__authors__     = ', '.join(__credits__)
__license__     = 'GPL'
__maintainer__  = __credits__[2]
__status__      = 'Development'
__version__     = '0.5'

from .configuration import ConfigError, ChainConfig, DotFileConfig, EnvConfig
from .tracking_numbers import classify, parse_tracking_numbers, USPS, FEDEX
from .data import Package, DeliveryStatus, ProofOfDelivery, TrackingEvent
from .carriers import auto_register_carriers, build_url, get_carrier

try:
    config = ChainConfig(EnvConfig(), DotFileConfig())
except ConfigError:
    config = EnvConfig()

auto_register_carriers(config)

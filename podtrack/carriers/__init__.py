import importlib
import logging
import os

import requests

from ..configuration import NullConfig, ConfigKeyError
from ..tracking_numbers import classify
from .errors import (TrackingApiFailure, TrackingNetworkFailure,
    UnsupportedTrackingNumber)

logger = logging.getLogger(__name__)

_carriers = {}

def register_carrier(carrier_iface, config):
    """Register a carrier class, making it available to new Packages

    The new carrier instance will replace an older one with the same string
    representation
    """

    carrier = carrier_iface(config)
    _carriers[str(carrier)] = carrier
    return carrier

def get_carrier(carrier):
    """Return the registered carrier for a label like 'USPS' or 'FedEx',
    carrier instances are passed straight through
    """

    if isinstance(carrier, BaseInterface):
        return carrier
    try:
        return _carriers[carrier]
    except KeyError:
        raise UnsupportedTrackingNumber('No carrier registered as {0!r}'.format(carrier))

def identify_tracking_number(tracking_number):
    """Return the carrier matching the given tracking number, raises
    UnsupportedTrackingNumber if no match is found
    """

    label = classify(tracking_number)
    if label is None:
        raise UnsupportedTrackingNumber(tracking_number)
    return get_carrier(label)

def build_url(tracking_numbers, carrier):
    """Return the carrier's tracking page URL for one tracking number or a
    list of them
    """

    return get_carrier(carrier).url(tracking_numbers)

def auto_register_carriers(config):
    """Look through the python files in this submodule, registering any classes
    in them that are subclasses of BaseInterface
    """
    carrier_modules = [importlib.import_module(__name__ + '.' + f.rsplit('.', 1)[0])
        for f in sorted(os.listdir(os.path.dirname(__file__)))
            if f.endswith('_interface.py')]
    carrier_ifaces = [getattr(m, c) for m in carrier_modules
        for c in dir(m)
            if c.endswith('Interface') and
                issubclass(getattr(m, c), BaseInterface) and
                getattr(m, c) is not BaseInterface]
    for carrier_iface in carrier_ifaces:
        register_carrier(carrier_iface, config)

class BaseInterface(object):
    """The basic interface for carriers. All registered carriers should inherit
    from this class.

    fetch_delivery_status, fetch_tracking_history and fetch_pod may block on
    network I/O but only raise for configuration problems, every other
    failure is logged and turned into a degraded result.
    """
    DEFAULT_CFG = NullConfig()

    _url_template = None
    _status_map = {}

    def __init__(self, config):
        self._config = config

    def __str__(self):
        return self.SHORT_NAME

    def identify(self, tracking_number):
        return classify(tracking_number) == self.SHORT_NAME

    def fetch_delivery_status(self, tracking_number):
        raise NotImplementedError()

    def fetch_tracking_history(self, tracking_number):
        raise NotImplementedError()

    def fetch_pod(self, tracking_number, customer=None):
        raise NotImplementedError()

    def simulate_delivery(self, tracking_number, customer=None):
        raise NotImplementedError()

    def url(self, tracking_numbers):
        """Tracking page URL for one tracking number or several, several are
        comma-joined into the same query parameter
        """
        if isinstance(tracking_numbers, str):
            tracking_numbers = [tracking_numbers]
        return self._url_template.format(tracking_numbers=','.join(
            ''.join(tn.split()) for tn in tracking_numbers))

    def map_status(self, status):
        """Map the carrier's status text onto Delivered, Out for Delivery or
        In Transit
        """
        return self._status_map.get(status, 'In Transit')

    def _request(self, method, url, **kwargs):
        """Send an HTTP request with the configured timeout, transport errors
        come back as TrackingNetworkFailure and error statuses as
        TrackingApiFailure
        """
        logger.debug('%s %s %s', self, method.upper(), url)
        try:
            rsp = requests.request(method, url,
                timeout=float(self._cfg_value('timeout')), **kwargs)
            rsp.raise_for_status()
        except (requests.ConnectionError, requests.Timeout) as err:
            raise TrackingNetworkFailure(err)
        except requests.RequestException as err:
            raise TrackingApiFailure(err)
        return rsp

    def _cfg_value(self, *keys):
        """Return the config value from this carrier, looked up with {keys}.
        If the value is not found, the DEFAULT_CFG is fallen back to, then
        a ConfigKeyError is raised if still not found.
        """
        try:
            value = self._config.get_value(self.CONFIG_NS, *keys)
        except ConfigKeyError as err:
            try:
                value = self.DEFAULT_CFG.get_value(self.CONFIG_NS, *keys)
            except ConfigKeyError:
                raise err
        return value

    def _cfg_optional(self, *keys, **kwargs):
        try:
            return self._cfg_value(*keys)
        except ConfigKeyError:
            return kwargs.get('default')

    def _cfg_flag(self, *keys):
        value = self._cfg_optional(*keys, default=False)
        if isinstance(value, str):
            return value.strip().lower() in ('1', 'true', 'yes', 'on')
        return bool(value)

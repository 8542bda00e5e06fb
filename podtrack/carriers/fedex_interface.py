import datetime
import logging
import threading
import time
from collections import namedtuple

import pytz

from ..configuration import ConfigError, ConfigKeyError, DictConfig
from ..data import DeliveryStatus, TrackingEvent, utcnow, DEGRADED
from ..carriers import BaseInterface
from ..pod import fedex_pod, join_parts
from ..simulation import placeholder_pod, simulate_delivery, simulate_pod
from ..xml_dict import ParseError, as_list, dict_to_xml, find, xml_to_dict
from .errors import TrackingApiFailure, TrackingFailure, TrackingNumberFailure

logger = logging.getLogger(__name__)

AuthToken = namedtuple('AuthToken', ['value', 'expiry'])

class TokenCache(object):
    """Holds one bearer token and refreshes it once it has expired.

    A token is handed out only while clock() < expiry. Refreshing happens
    under a lock, so callers that find the token expired at the same time
    wait for a single refresh instead of each authenticating. A failed
    refresh leaves the old token in place.
    """

    def __init__(self, clock=time.time):
        self._clock = clock
        self._lock = threading.Lock()
        self._token = None

    @property
    def token(self):
        return self._token

    def is_valid(self):
        token = self._token
        return token is not None and self._clock() < token.expiry

    def get(self, fetch):
        """Return a valid token value, calling fetch() for a new one if
        needed. fetch returns (value, lifetime in seconds).
        """
        if self.is_valid():
            return self._token.value

        with self._lock:
            # refreshed by another thread while we waited
            if self.is_valid():
                return self._token.value
            value, lifetime = fetch()
            self._token = AuthToken(value, self._clock() + lifetime)
            return value

def parse_timestamp(value):
    """Parse a FedEx ISO 8601 timestamp, naive values are taken as UTC.
    Returns None for anything unparseable.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        stamp = datetime.datetime.fromisoformat(value)
    except ValueError:
        return None
    if stamp.tzinfo is None:
        stamp = pytz.utc.localize(stamp)
    return stamp

class FedexInterface(BaseInterface):
    SHORT_NAME = 'FedEx'
    LONG_NAME = 'Federal Express'
    CONFIG_NS = SHORT_NAME
    DEFAULT_CFG = DictConfig({CONFIG_NS: {
        'base_url': 'https://apis.fedex.com',
        'timeout': 10,
        'simulate': False,
    }})

    _url_template = 'https://www.fedex.com/fedextrack/?trknbr={tracking_numbers}'
    _token_path = '/oauth/token'
    _track_path = '/track/v1/xml'
    _namespace = 'http://fedex.com/ws/track/v19'
    _status_map = {
        'Delivered': 'Delivered',
        'Delivered to recipient': 'Delivered',
        'Out for Delivery': 'Out for Delivery',
        'On FedEx vehicle for delivery': 'Out for Delivery',
        'In Transit': 'In Transit',
        'Picked Up': 'In Transit',
        'Arrived at FedEx location': 'In Transit',
        'Departed FedEx location': 'In Transit',
        'At FedEx destination facility': 'In Transit',
    }

    def __init__(self, config, token_cache=None):
        super(FedexInterface, self).__init__(config)
        self.token_cache = token_cache if token_cache is not None else TokenCache()

    def authenticate(self):
        """Return a bearer token, reusing the cached one while it's valid.

        Raises ConfigError if the API key or secret isn't configured, and
        TrackingFailure subclasses if FedEx can't be reached or refuses.
        """
        return self.token_cache.get(self._request_token)

    def fetch_delivery_status(self, tracking_number):
        if self._cfg_flag('simulate'):
            return self.simulate_delivery(tracking_number)

        try:
            detail = self._fetch_track_detail(tracking_number)
        except TrackingNumberFailure as err:
            logger.info('FedEx has no record of %s: %s', tracking_number, err)
            return DeliveryStatus(tracking_number, False, carrier=self.SHORT_NAME)
        except TrackingFailure as err:
            logger.warning('FedEx status check failed for %s, treating it as '
                'in transit: %s', tracking_number, err)
            return DeliveryStatus(tracking_number, False,
                carrier=self.SHORT_NAME, source=DEGRADED)

        return self._parse_status(detail, tracking_number)

    def fetch_tracking_history(self, tracking_number):
        try:
            detail = self._fetch_track_detail(tracking_number)
        except TrackingFailure as err:
            logger.warning('FedEx history lookup failed for %s: %s',
                tracking_number, err)
            return []

        return [self._parse_event(e) for e in as_list(find(detail, 'Events'))
            if isinstance(e, dict)]

    def fetch_pod(self, tracking_number, customer=None):
        """Get the proof of delivery for a package. If FedEx can't be asked,
        a placeholder POD is returned instead of raising.
        """
        if self._cfg_flag('simulate'):
            return simulate_pod(self.SHORT_NAME, tracking_number, customer)

        try:
            detail = self._fetch_track_detail(tracking_number, include_pod=True)
        except TrackingFailure as err:
            logger.warning('Could not fetch FedEx POD for %s, using a '
                'placeholder: %s', tracking_number, err)
            return placeholder_pod(self.SHORT_NAME, tracking_number)

        return fedex_pod(detail, tracking_number)

    def simulate_delivery(self, tracking_number, customer=None):
        return simulate_delivery(self.SHORT_NAME, tracking_number, customer)

    def _api_url(self, path):
        return self._cfg_value('base_url').rstrip('/') + path

    def _credentials(self):
        try:
            return self._cfg_value('key'), self._cfg_value('secret')
        except ConfigKeyError:
            raise ConfigError('FedEx API credentials not configured, set the '
                'FedEx key and secret (FEDEX_API_KEY and FEDEX_API_SECRET)')

    def _request_token(self):
        key, secret = self._credentials()
        logger.debug('Requesting a FedEx access token')
        rsp = self._request('post', self._api_url(self._token_path),
            data={
                'grant_type': 'client_credentials',
                'client_id': key,
                'client_secret': secret,
            },
            headers={'Content-Type': 'application/x-www-form-urlencoded'})
        try:
            body = rsp.json()
            token, lifetime = body['access_token'], float(body['expires_in'])
        except (ValueError, KeyError, TypeError) as err:
            raise TrackingApiFailure('Malformed FedEx token response: {0!r}'.format(err))
        logger.info('Obtained FedEx access token, valid for %d seconds', lifetime)
        return token, lifetime

    def _build_track_request(self, tracking_number, include_pod=False):
        request = {
            'Version': {
                'ServiceId': 'trck',
                'Major': 19,
                'Intermediate': 0,
                'Minor': 0,
            },
            'SelectionDetails': {
                'PackageIdentifier': {
                    'Type': 'TRACKING_NUMBER_OR_DOORTAG',
                    'Value': tracking_number,
                },
            },
            'IncludeDetailedScans': True,
        }
        account_number = self._cfg_optional('account_number')
        if account_number:
            request['ClientDetail'] = {'AccountNumber': account_number}
        if include_pod:
            request['IncludeSignatureProofOfDelivery'] = True
        return dict_to_xml({'TrackRequest': request}, {'xmlns': self._namespace})

    def _fetch_track_detail(self, tracking_number, include_pod=False):
        token = self.authenticate()
        logger.debug('FedEx track request for %s', tracking_number)
        rsp = self._request('post', self._api_url(self._track_path),
            data=self._build_track_request(tracking_number, include_pod).encode('utf-8'),
            headers={
                'Authorization': 'Bearer ' + token,
                'Content-Type': 'text/xml; charset=utf-8',
                'X-locale': 'en_US',
            })
        return self._parse_reply(rsp.text, tracking_number)

    def _parse_reply(self, raw, tracking_number):
        """Decode the reply and return the TrackDetails node for the package
        """
        try:
            doc = xml_to_dict(raw)
        except ParseError as err:
            raise TrackingApiFailure('Malformed FedEx reply: {0}'.format(err))

        reply = find(doc, 'Envelope', 'Body', 'TrackReply') or find(doc, 'TrackReply')
        if not isinstance(reply, dict):
            raise TrackingApiFailure('Unexpected FedEx reply: {0!r}'.format(raw[:200]))

        if reply.get('HighestSeverity') in ('ERROR', 'FAILURE'):
            raise TrackingApiFailure('{0}: {1}'.format(
                find(reply, 'Notifications', 0, 'Code'),
                find(reply, 'Notifications', 0, 'Message')))

        detail = find(reply, 'CompletedTrackDetails', 0, 'TrackDetails', 0)
        if not isinstance(detail, dict):
            raise TrackingNumberFailure(tracking_number)

        # "this tracking number cannot be found" comes back as a detail-level
        # notification on an otherwise successful reply
        for notification in as_list(find(detail, 'Notification')):
            if find(notification, 'Severity') in ('ERROR', 'FAILURE'):
                raise TrackingNumberFailure('{0}: {1}'.format(
                    find(notification, 'Code'), find(notification, 'Message')))
        return detail

    def _delivery_event(self, detail):
        for event in as_list(find(detail, 'Events')):
            description = find(event, 'EventDescription')
            if find(event, 'EventType') == 'DL' or (
                    isinstance(description, str) and 'delivered' in description.lower()):
                return event
        return None

    def _parse_status(self, detail, tracking_number):
        status_code = find(detail, 'StatusDetail', 'Code') or find(detail, 'StatusCode')
        delivered_event = self._delivery_event(detail)
        is_delivered = status_code == 'DL' or \
            bool(find(detail, 'ActualDeliveryTimestamp')) or \
            delivered_event is not None

        delivery_date = None
        pod = None
        if is_delivered:
            delivery_date = parse_timestamp(find(detail, 'ActualDeliveryTimestamp')) or \
                parse_timestamp(find(delivered_event, 'Timestamp'))
            pod = fedex_pod(detail, tracking_number)

        logger.debug('FedEx status for %s: code=%s delivered=%s', tracking_number,
            status_code, is_delivered)

        return DeliveryStatus(
            tracking_number,
            is_delivered=is_delivered,
            delivery_date=delivery_date,
            pod=pod,
            carrier=self.SHORT_NAME,
            service=find(detail, 'Service', 'Description'),
        )

    def _parse_event(self, event):
        description = find(event, 'EventDescription')
        return TrackingEvent(
            date=parse_timestamp(find(event, 'Timestamp')) or utcnow(),
            status=find(event, 'EventType') or 'Unknown',
            location=join_parts(
                find(event, 'Address', 'City'),
                find(event, 'Address', 'StateOrProvinceCode'),
                find(event, 'Address', 'CountryCode'),
            ),
            description=description if isinstance(description, str) and description else None,
        )

import datetime
import logging
from xml.sax.saxutils import quoteattr

import pytz

from ..configuration import DictConfig
from ..data import (DeliveryStatus, ProofOfDelivery, TrackingEvent, utcnow,
    DEGRADED, SIMULATED)
from ..carriers import BaseInterface
from ..pod import (USPS_POD_URL, usps_delivered_event, usps_event_text,
    usps_location, usps_pod)
from ..simulation import (placeholder_pod, simulate_delivery, simulate_pod,
    simulate_usps_history, simulate_usps_status, simulated_usps_delivered)
from ..xml_dict import ParseError, as_list, find, xml_to_dict
from .errors import TrackingApiFailure, TrackingFailure, TrackingNumberFailure

logger = logging.getLogger(__name__)

class USPSInterface(BaseInterface):
    SHORT_NAME = 'USPS'
    LONG_NAME = 'U.S. Postal Service'
    CONFIG_NS = SHORT_NAME
    DEFAULT_CFG = DictConfig({CONFIG_NS: {
        'server': 'secure',
        'timeout': 10,
        'timezone': 'America/New_York',
    }})

    _api_urls = {
        'secure_test': 'https://secure.shippingapis.com/ShippingAPITest.dll',
        'test':        'http://testing.shippingapis.com/ShippingAPITest.dll',
        'production':  'http://production.shippingapis.com/ShippingAPI.dll',
        'secure':      'https://secure.shippingapis.com/ShippingAPI.dll',
    }
    _service_types = {
        'EA': 'Priority Mail Express',
        'EC': 'Priority Mail Express International',
        'CP': 'Priority Mail International',
        'RA': 'Registered Mail Domestic',
        'RF': 'Registered Mail Foreign',
    }
    _status_map = {
        'Delivered': 'Delivered',
        'Delivered to Recipient': 'Delivered',
        'Out for Delivery': 'Out for Delivery',
        'In Transit': 'In Transit',
        'Processed': 'In Transit',
        'Departed': 'In Transit',
        'Arrived': 'In Transit',
        'Acceptance': 'In Transit',
    }
    _url_template = 'https://tools.usps.com/go/TrackConfirmAction?tLabels={tracking_numbers}'
    _request_xml = '<TrackFieldRequest USERID={userid}>' \
        '<TrackID ID={tracking_number}/></TrackFieldRequest>'

    def fetch_delivery_status(self, tracking_number):
        userid = self._userid()
        if userid is None:
            logger.warning('USPS userid not configured, simulating status for %s',
                tracking_number)
            return simulate_usps_status(tracking_number)

        try:
            info = self._fetch_track_info(userid, tracking_number)
        except TrackingNumberFailure as err:
            logger.info('USPS has no record of %s: %s', tracking_number, err)
            return DeliveryStatus(tracking_number, False, carrier=self.SHORT_NAME)
        except TrackingFailure as err:
            logger.warning('USPS status check failed for %s, falling back to '
                'simulation: %s', tracking_number, err)
            return simulate_usps_status(tracking_number, source=DEGRADED)

        return self._parse_status(info, tracking_number)

    def fetch_tracking_history(self, tracking_number):
        userid = self._userid()
        if userid is None:
            logger.warning('USPS userid not configured, simulating history for %s',
                tracking_number)
            return simulate_usps_history(tracking_number)

        try:
            info = self._fetch_track_info(userid, tracking_number)
        except TrackingFailure as err:
            logger.warning('USPS history lookup failed for %s: %s',
                tracking_number, err)
            return []

        # the summary is the latest event, USPS doesn't repeat it in the
        # detail list but we want it there
        events = [info['TrackSummary']] if isinstance(info.get('TrackSummary'), dict) else []
        events.extend(as_list(info.get('TrackDetail')))
        return [self._parse_event(e) for e in events]

    def fetch_pod(self, tracking_number, customer=None):
        userid = self._userid()
        if userid is None:
            logger.warning('USPS userid not configured, simulating POD for %s',
                tracking_number)
            if simulated_usps_delivered(tracking_number):
                return simulate_pod(self.SHORT_NAME, tracking_number, customer)
            # in transit as far as the simulation goes, nothing delivered to show
            return ProofOfDelivery(
                proof_of_delivery_url=USPS_POD_URL.format(tracking_number=tracking_number),
                source=SIMULATED)

        try:
            info = self._fetch_track_info(userid, tracking_number)
        except TrackingFailure as err:
            logger.warning('Could not fetch USPS POD for %s, using a '
                'placeholder: %s', tracking_number, err)
            return placeholder_pod(self.SHORT_NAME, tracking_number)

        return usps_pod(info, tracking_number)

    def simulate_delivery(self, tracking_number, customer=None):
        return simulate_delivery(self.SHORT_NAME, tracking_number, customer)

    def _userid(self):
        return self._cfg_optional('userid') or None

    def _build_request(self, userid, tracking_number):
        return self._request_xml.format(
            userid=quoteattr(userid),
            tracking_number=quoteattr(tracking_number))

    def _fetch_track_info(self, userid, tracking_number):
        rsp = self._request('get', self._api_urls[self._cfg_value('server')],
            params={
                'API': 'TrackV2',
                'XML': self._build_request(userid, tracking_number),
            })
        return self._parse_response(rsp.text, tracking_number)

    def _parse_response(self, raw, tracking_number):
        try:
            rsp = xml_to_dict(raw)
        except ParseError as err:
            raise TrackingApiFailure('Malformed USPS reply: {0}'.format(err))

        # this is a system error
        if 'Error' in rsp:
            raise TrackingApiFailure(find(rsp, 'Error', 'Description'))
        if find(rsp, 'TrackResponse', 'Error') is not None:
            raise TrackingApiFailure(find(rsp, 'TrackResponse', 'Error', 'Description'))

        info = find(rsp, 'TrackResponse', 'TrackInfo')
        if not isinstance(info, dict):
            raise TrackingApiFailure('Unexpected USPS reply: {0!r}'.format(raw[:200]))

        # this is a result with an error, like "no such package"
        if 'Error' in info:
            raise TrackingNumberFailure(find(info, 'Error', 'Description'))
        return info

    def _parse_status(self, info, tracking_number):
        summary = info.get('TrackSummary')
        is_delivered = 'delivered' in usps_event_text(summary).lower()

        delivered_event = usps_delivered_event(info)
        delivery_date = self._event_date(delivered_event)
        if delivery_date is None and is_delivered:
            delivery_date = self._event_date(summary)

        return DeliveryStatus(
            tracking_number,
            is_delivered=is_delivered,
            delivery_date=delivery_date,
            pod=usps_pod(info, tracking_number) if is_delivered else None,
            carrier=self.SHORT_NAME,
            # USPS doesn't return this, so we work it out from the tracking number
            service=self._service_types.get(tracking_number[0:2].upper(), 'USPS'),
        )

    def _parse_event(self, node):
        text = usps_event_text(node)
        return TrackingEvent(
            date=self._event_date(node) or utcnow(),
            status=text or 'Unknown',
            location=usps_location(node),
            description=text or None,
        )

    def _event_date(self, node):
        """Returns an aware datetime for the given node's <EventDate> and
        <EventTime> elements, or None if there's no usable date
        """
        if not isinstance(node, dict) or not node.get('EventDate'):
            return None
        try:
            date = datetime.datetime.strptime(node['EventDate'], '%B %d, %Y').date()
            time = datetime.datetime.strptime(node['EventTime'], '%I:%M %p').time() \
                if node.get('EventTime') else datetime.time(0, 0, 0)
        except ValueError:
            logger.debug('Unparseable USPS event date %r %r', node.get('EventDate'),
                node.get('EventTime'))
            return None
        zone = pytz.timezone(self._cfg_value('timezone'))
        return zone.localize(datetime.datetime.combine(date, time))

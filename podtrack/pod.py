"""Mapping decoded carrier responses onto the canonical ProofOfDelivery.

These functions only ever see the nested dicts produced by xml_dict, never
raw XML, and only copy what is there: a missing node at any depth leaves the
matching field empty. They don't raise on partial or odd documents.
"""

from .data import ProofOfDelivery
from .xml_dict import as_list, find

FEDEX_POD_URL = 'https://www.fedex.com/en-us/tracking.html?tracknumbers={tracking_number}'
FEDEX_SPOD_URL = 'https://www.fedex.com/spod/{tracking_number}.pdf'
FEDEX_PPOD_URL = 'https://www.fedex.com/ppod/{tracking_number}.jpg'
USPS_POD_URL = 'https://tools.usps.com/go/TrackConfirmAction?tLabels={tracking_number}'

SIGNATURE_OPTIONS = (
    'ADULT_SIGNATURE_REQUIRED',
    'DIRECT_SIGNATURE_REQUIRED',
    'INDIRECT_SIGNATURE_REQUIRED',
)

def _text(value):
    """Decoded leaf text or None, nodes that turned out to have children
    don't count as text
    """
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None

def join_parts(*parts):
    """Join the non-empty parts of an address or location with ', '
    """
    clean = []
    for part in parts:
        for item in as_list(part):
            if _text(item):
                clean.append(_text(item))
    return ', '.join(clean) or None

def _fedex_signature_required(track_detail):
    for handling in as_list(find(track_detail, 'SpecialHandlings')):
        if find(handling, 'Type') in SIGNATURE_OPTIONS:
            return True
    return False

def _fedex_image_available(track_detail, image_type):
    return any(find(image, 'Type') == image_type
        for image in as_list(find(track_detail, 'AvailableImages')))

def fedex_pod(track_detail, tracking_number):
    """Build a ProofOfDelivery from one decoded FedEx TrackDetails node

    Events are ordered newest first, so the first event's description is the
    most recent scan.
    """
    address = find(track_detail, 'ActualDeliveryAddress')
    signed_by = _text(find(track_detail, 'DeliverySignatureName'))

    pod = ProofOfDelivery(
        delivered_to=_text(find(track_detail, 'Recipient', 'Contact', 'PersonName')) or
            _text(find(track_detail, 'DeliveryLocationDescription')),
        delivery_location=join_parts(
            find(address, 'StreetLines'),
            find(address, 'City'),
            find(address, 'StateOrProvinceCode'),
            find(address, 'PostalCode'),
            find(address, 'CountryCode'),
        ),
        signed_by=signed_by,
        signature_obtained=bool(signed_by),
        signature_required=_fedex_signature_required(track_detail),
        delivery_instructions=_text(find(track_detail, 'Events', 0, 'EventDescription')),
        proof_of_delivery_url=FEDEX_POD_URL.format(tracking_number=tracking_number),
    )
    if _fedex_image_available(track_detail, 'SIGNATURE_PROOF_OF_DELIVERY'):
        pod.spod_pdf_url = FEDEX_SPOD_URL.format(tracking_number=tracking_number)
    if _fedex_image_available(track_detail, 'PHOTO_PROOF_OF_DELIVERY'):
        pod.delivery_photo = FEDEX_PPOD_URL.format(tracking_number=tracking_number)
    return pod

def usps_event_text(node):
    """USPS gives either a TrackFieldRequest style node with an Event element
    or, for plain TrackRequest, just a sentence
    """
    if isinstance(node, dict):
        return _text(node.get('Event')) or ''
    return _text(node) or ''

def usps_delivered_event(track_info):
    """First TrackDetail whose event text mentions delivery, or None
    """
    for detail in as_list(find(track_info, 'TrackDetail')):
        if 'delivered' in usps_event_text(detail).lower():
            return detail
    return None

def usps_location(node):
    if not isinstance(node, dict):
        return None
    return join_parts(
        node.get('EventCity'),
        node.get('EventState'),
        node.get('EventZIPCode'),
        node.get('EventCountry'),
    )

def usps_pod(track_info, tracking_number):
    """Build a ProofOfDelivery from a decoded USPS TrackInfo node, USPS
    tracking carries no recipient or signature details
    """
    summary = find(track_info, 'TrackSummary')
    if isinstance(summary, dict) and 'delivered' in usps_event_text(summary).lower():
        delivered = summary
    else:
        delivered = usps_delivered_event(track_info)

    return ProofOfDelivery(
        delivery_location=usps_location(delivered),
        delivery_instructions=usps_event_text(summary) or None,
        proof_of_delivery_url=USPS_POD_URL.format(tracking_number=tracking_number),
    )

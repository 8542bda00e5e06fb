"""Stand-in results for when a carrier integration can't give a real answer.

Everything here returns the same shape as a live response, so callers never
have to tell simulated data apart from real data (the source flag on the
result is the only difference). Whether a simulated USPS package counts as
delivered is a pure function of the tracking number, so demo and test runs
against the same number are stable; dates and POD details may vary.
"""

import datetime
import logging
import random

from .data import (DeliveryStatus, ProofOfDelivery, TrackingEvent, utcnow,
    SIMULATED, DEGRADED)
from .tracking_numbers import FEDEX, USPS

logger = logging.getLogger(__name__)

PHOTO_URL = 'https://example.com/delivery-photo.jpg'

# carrier: (signature required above, delivery photo above), draws are
# rng.random() compared against these
_THRESHOLDS = {
    FEDEX: (0.5, None),
    USPS: (0.7, 0.6),
}
SIGNATURE_OBTAINED_ABOVE = 0.3

_USPS_HISTORY = (
    ('Accepted at USPS Origin Facility', 'Origin City, ST', 3),
    ('Arrived at USPS Facility', 'Transit City, ST', 2),
    ('Out for Delivery', 'Delivery City, ST', 1),
)

def _pod_url(carrier, tracking_number):
    return 'https://{0}.com/proof-of-delivery/{1}'.format(
        carrier.lower(), tracking_number)

def simulate_pod(carrier, tracking_number, customer=None, rng=random,
        source=SIMULATED):
    """Build a plausible ProofOfDelivery, signature and photo presence are
    weighted coin flips that depend on the carrier
    """
    signature_above, photo_above = _THRESHOLDS.get(carrier, (0.5, None))

    signature_required = rng.random() > signature_above
    photo = ''
    if photo_above is not None and rng.random() > photo_above:
        photo = PHOTO_URL

    signature_obtained = False
    signed_by = ''
    if signature_required and rng.random() > SIGNATURE_OBTAINED_ABOVE:
        signature_obtained = True
        signed_by = (customer or '').split(' ')[0] or 'J.DOE'

    return ProofOfDelivery(
        delivered_to='Recipient',
        delivery_location='Front Door',
        signature_required=signature_required,
        signature_obtained=signature_obtained,
        signed_by=signed_by,
        delivery_photo=photo,
        delivery_instructions='Left at front door',
        proof_of_delivery_url=_pod_url(carrier, tracking_number),
        source=source,
    )

def placeholder_pod(carrier, tracking_number):
    """Generic POD handed back when the carrier couldn't be asked, clearly
    not describing a real delivery
    """
    return ProofOfDelivery(
        delivered_to='Recipient',
        delivery_location='Delivery Address',
        signed_by='',
        delivery_photo='',
        delivery_instructions='',
        proof_of_delivery_url=_pod_url(carrier, tracking_number),
        source=DEGRADED,
    )

def simulated_usps_delivered(tracking_number):
    """Odd last digit means delivered, anything else (including a non-digit)
    means in transit
    """
    last = (tracking_number or '').strip()[-1:]
    return last.isdigit() and int(last) % 2 == 1

def simulate_usps_status(tracking_number, rng=random, source=SIMULATED):
    if simulated_usps_delivered(tracking_number):
        delivery_date = utcnow() - datetime.timedelta(days=rng.randrange(5))
        logger.info('Simulated USPS delivery for %s on %s', tracking_number,
            delivery_date.isoformat())
        return DeliveryStatus(tracking_number, True, delivery_date,
            pod=simulate_pod(USPS, tracking_number, rng=rng, source=source),
            carrier=USPS, source=source)

    logger.info('Simulated USPS in-transit status for %s', tracking_number)
    return DeliveryStatus(tracking_number, False, carrier=USPS, source=source)

def simulate_usps_history(tracking_number):
    events = list(_USPS_HISTORY)
    if simulated_usps_delivered(tracking_number):
        events.append(('Delivered', 'Delivery Address', 0))

    now = utcnow()
    history = [TrackingEvent(
                    date=now - datetime.timedelta(days=days_ago),
                    status=status,
                    location=location,
                    description=status,
                ) for status, location, days_ago in events]
    logger.info('Simulated USPS tracking history for %s: %d events',
        tracking_number, len(history))
    return history

def simulate_delivery(carrier, tracking_number, customer=None, rng=random):
    """Mark a package delivered right now, with a simulated POD. Used by the
    demo/testing trigger.
    """
    logger.warning('Simulating %s delivery for %s', carrier, tracking_number)
    return DeliveryStatus(
        tracking_number,
        is_delivered=True,
        delivery_date=utcnow(),
        pod=simulate_pod(carrier, tracking_number, customer, rng),
        carrier=carrier,
        source=SIMULATED,
    )

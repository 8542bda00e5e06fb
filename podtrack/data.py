import datetime

import pytz

from .carriers import identify_tracking_number, get_carrier

LIVE = 'live'
SIMULATED = 'simulated'
DEGRADED = 'degraded'

DELIVERED = 'Delivered'
OUT_FOR_DELIVERY = 'Out for Delivery'
IN_TRANSIT = 'In Transit'

def utcnow():
    return datetime.datetime.now(pytz.utc)

class Package(object):
    """A package to be tracked."""

    _carrier = None

    def __init__(self, tracking_number, carrier=None, customer=None):
        self.tracking_number = tracking_number
        self.customer = customer
        if carrier is not None:
            self._carrier = get_carrier(carrier)

    def __repr__(self):
        return '<Package({p.tracking_number!r}, carrier={c})>'.format(
            p=self, c=self._carrier)

    @property
    def carrier(self):
        """Get this package's carrier, identifying it from the tracking
        number the first time
        """

        if self._carrier is None:
            self._carrier = identify_tracking_number(
                self.tracking_number)
        return self._carrier

    def status(self):
        """Get the delivery status for this package, returns a DeliveryStatus
        object
        """

        return self.carrier.fetch_delivery_status(self.tracking_number)

    def history(self):
        """Get the list of TrackingEvents the carrier has for this package
        """

        return self.carrier.fetch_tracking_history(self.tracking_number)

    def proof_of_delivery(self):
        return self.carrier.fetch_pod(self.tracking_number, self.customer)

    def simulate_delivery(self):
        return self.carrier.simulate_delivery(self.tracking_number, self.customer)

    @property
    def url(self):
        """Returns a URL that can be used to go to the carrier's
        tracking website, to track this package.
        """

        return self.carrier.url(self.tracking_number)

class _AttrDict(dict):

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name, val):
        self[name] = val

class DeliveryStatus(_AttrDict):
    """Result of a delivery status query

    is_delivered, delivery_date, pod, status and source are always present.
    source says where the answer came from: LIVE for a real carrier
    response, SIMULATED when the integration isn't configured (or is in demo
    mode) and DEGRADED when a live call failed and a fallback was used.
    """

    _repr_template = '<DeliveryStatus(tracking_number={i.tracking_number!r}, is_delivered={i.is_delivered!r}, delivery_date={i.delivery_date!r}, source={i.source!r})>'

    def __init__(self, tracking_number, is_delivered=False, delivery_date=None,
            pod=None, source=LIVE, **kwargs):
        self.tracking_number = tracking_number
        self.is_delivered = bool(is_delivered)
        self.delivery_date = delivery_date
        self.pod = pod
        self.source = source
        self.status = DELIVERED if self.is_delivered else IN_TRANSIT
        self.update(kwargs)

    def __repr__(self):
        return self._repr_template.format(i=self)

class ProofOfDelivery(_AttrDict):
    """Canonical proof of delivery record

    Every field is optional except last_updated, different carriers (and
    different shipments) expose different subsets. A signature can't have
    been obtained without one being required, so signature_required is raised
    whenever signature_obtained is set.
    """

    FIELDS = (
        'delivered_to',
        'delivery_location',
        'signature_required',
        'signature_obtained',
        'signed_by',
        'delivery_photo',
        'delivery_instructions',
        'proof_of_delivery_url',
        'spod_pdf_url',
        'last_updated',
    )

    _repr_template = '<ProofOfDelivery(delivered_to={p.delivered_to!r}, signed_by={p.signed_by!r}, source={p.source!r})>'

    def __init__(self, signature_required=False, signature_obtained=False,
            last_updated=None, source=LIVE, **kwargs):
        for field in self.FIELDS:
            self[field] = None
        self.update(kwargs)
        self.signature_obtained = bool(signature_obtained)
        self.signature_required = bool(signature_required) or self.signature_obtained
        self.last_updated = last_updated or utcnow()
        self.source = source

    def __repr__(self):
        return self._repr_template.format(p=self)

class TrackingEvent(_AttrDict):
    """An individual scan event in a package's history

    date and status are always set, location and description only when the
    carrier provided them.
    """
    _repr_template = '<TrackingEvent(date={ts}, status={e.status!r}, location={e.location!r})>'

    def __init__(self, date, status, location=None, description=None, **kwargs):
        self.date = date
        self.status = status
        self.location = location
        self.description = description
        self.update(kwargs)

    def __repr__(self):
        return self._repr_template.format(e=self, ts=self.date.isoformat())

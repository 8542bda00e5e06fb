from podtrack.pod import fedex_pod, join_parts, usps_pod
from podtrack.xml_dict import xml_to_dict


FEDEX_DETAIL = {
    'StatusDetail': {'Code': 'DL'},
    'Recipient': {'Contact': {'PersonName': 'Jane Smith'}},
    'DeliveryLocationDescription': 'Front desk',
    'ActualDeliveryAddress': {
        'StreetLines': ['1 Main St', 'Suite 2'],
        'City': 'Memphis',
        'StateOrProvinceCode': 'TN',
        'PostalCode': '38116',
        'CountryCode': 'US',
    },
    'DeliverySignatureName': 'J.SMITH',
    'SpecialHandlings': [
        {'Type': 'DELIVER_WEEKDAY'},
        {'Type': 'DIRECT_SIGNATURE_REQUIRED'},
    ],
    'AvailableImages': {'Type': 'SIGNATURE_PROOF_OF_DELIVERY'},
    'Events': [
        {'EventType': 'DL', 'EventDescription': 'Delivered'},
        {'EventType': 'OD', 'EventDescription': 'On FedEx vehicle for delivery'},
    ],
}


class TestFedexPod:

    def test_full_detail(self):
        pod = fedex_pod(FEDEX_DETAIL, '123456789012')
        assert pod.delivered_to == 'Jane Smith'
        assert pod.delivery_location == '1 Main St, Suite 2, Memphis, TN, 38116, US'
        assert pod.signed_by == 'J.SMITH'
        assert pod.signature_obtained
        assert pod.signature_required
        assert pod.delivery_instructions == 'Delivered'
        assert pod.proof_of_delivery_url == \
            'https://www.fedex.com/en-us/tracking.html?tracknumbers=123456789012'
        assert pod.spod_pdf_url == 'https://www.fedex.com/spod/123456789012.pdf'
        assert pod.source == 'live'

    def test_location_description_fallback(self):
        detail = dict(FEDEX_DETAIL, Recipient={})
        assert fedex_pod(detail, '123456789012').delivered_to == 'Front desk'

    def test_empty_detail(self):
        for detail in ({}, None):
            pod = fedex_pod(detail, '123456789012')
            assert pod.delivered_to is None
            assert pod.delivery_location is None
            assert pod.signed_by is None
            assert not pod.signature_required
            assert not pod.signature_obtained
            assert pod.spod_pdf_url is None
            assert pod.last_updated is not None

    def test_photo_proof_of_delivery(self):
        detail = dict(FEDEX_DETAIL, AvailableImages=[
            {'Type': 'SIGNATURE_PROOF_OF_DELIVERY'},
            {'Type': 'PHOTO_PROOF_OF_DELIVERY'},
        ])
        pod = fedex_pod(detail, '123456789012')
        assert pod.delivery_photo == 'https://www.fedex.com/ppod/123456789012.jpg'
        assert pod.spod_pdf_url == 'https://www.fedex.com/spod/123456789012.pdf'

    def test_no_photo_without_image(self):
        assert fedex_pod(FEDEX_DETAIL, '123456789012').delivery_photo is None

    def test_signature_obtained_without_special_handling(self):
        pod = fedex_pod({'DeliverySignatureName': 'X.Y'}, '123456789012')
        assert pod.signature_obtained
        assert pod.signature_required


USPS_DELIVERED = '''<TrackResponse><TrackInfo ID="9405511206213334271430">
  <TrackSummary>
    <EventTime>9:24 am</EventTime>
    <EventDate>May 21, 2024</EventDate>
    <Event>Delivered, In/At Mailbox</Event>
    <EventCity>AUSTIN</EventCity>
    <EventState>TX</EventState>
    <EventZIPCode>78701</EventZIPCode>
    <EventCountry/>
  </TrackSummary>
  <TrackDetail>
    <EventDate>May 21, 2024</EventDate>
    <Event>Out for Delivery</Event>
    <EventCity>AUSTIN</EventCity>
  </TrackDetail>
</TrackInfo></TrackResponse>'''


class TestUSPSPod:

    def test_summary_delivered(self):
        info = xml_to_dict(USPS_DELIVERED)['TrackResponse']['TrackInfo']
        pod = usps_pod(info, '9405511206213334271430')
        assert pod.delivery_location == 'AUSTIN, TX, 78701'
        assert pod.delivery_instructions == 'Delivered, In/At Mailbox'
        assert pod.signed_by is None
        assert not pod.signature_required
        assert pod.proof_of_delivery_url == \
            'https://tools.usps.com/go/TrackConfirmAction?tLabels=9405511206213334271430'

    def test_plain_text_summary(self):
        info = {
            'TrackSummary': 'Your item was picked up at the post office.',
            'TrackDetail': [
                {'Event': 'Delivered', 'EventCity': 'BOSTON', 'EventState': 'MA'},
                'Arrival at Post Office',
            ],
        }
        pod = usps_pod(info, 'EA123456789US')
        assert pod.delivery_location == 'BOSTON, MA'
        assert pod.delivery_instructions == 'Your item was picked up at the post office.'

    def test_empty(self):
        pod = usps_pod({}, 'EA123456789US')
        assert pod.delivery_location is None
        assert pod.delivery_instructions is None


def test_join_parts():
    assert join_parts(['1 Main St', ''], None, ' Austin ', 'TX') == '1 Main St, Austin, TX'
    assert join_parts(None, '') is None

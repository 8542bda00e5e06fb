class TrackingFailure(Exception):
    """Generic tracking failure, subclassed by more specific
    exceptions.
    """
    pass

class TrackingApiFailure(TrackingFailure):
    """Raised in the event of a failure with the carrier's API. For
    example, a protocol fault or authentication failure. The request was
    valid but the carrier API returned an error.
    """
    pass

class TrackingNetworkFailure(TrackingFailure):
    """Raised for network communication failure when talking to the
    carrier API. For example, a network timeout or DNS resolution
    failure.
    """
    pass

class TrackingNumberFailure(TrackingFailure):
    """Raised when the request to the carrier API was successful, but
    the carrier didn't recognize the tracking number. For example the
    tracking number wasn't in the carrier database, even though it looks like
    a valid tracking number for the carrier.
    """
    pass

class UnsupportedTrackingNumber(TrackingFailure):
    """Raised when a tracking number cannot be matched to a carrier.
    """
    pass

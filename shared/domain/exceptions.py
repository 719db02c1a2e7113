"""
Domain Exceptions

Business rejections (property unavailable, zero refund) are returned as
data; these exceptions cover inputs that are invalid and transitions that
are not allowed.
"""


class DomainError(Exception):
    """Root of all domain errors"""


class InvalidArgumentError(DomainError, ValueError):
    """A precondition on an input value does not hold"""


class BookingStateError(DomainError):
    """The requested booking status transition is not allowed"""


class PropertyNotFoundError(DomainError, LookupError):
    """No property with the given id"""

    def __init__(self, property_id):
        super().__init__(f"Property {property_id} not found")
        self.property_id = property_id


class BookingNotFoundError(DomainError, LookupError):
    """No booking with the given id"""

    def __init__(self, booking_id):
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id

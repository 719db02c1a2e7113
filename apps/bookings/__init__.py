"""Bookings app package.

Short-stay bookings: pricing, cancellation refunds, availability checks
against bookings, leases and blocked periods, and the booking status
lifecycle. Double booking is prevented by locking the property row
inside the create transaction.
"""

"""Tenants app package.

Long-term tenancies: lease terms, expiry and the lease periods that
block a property in the availability checker.
"""

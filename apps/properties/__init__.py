"""Properties app package.

Property listings with their rental type, rates and cancellation policy,
plus owner-declared blocked periods and maintenance windows.
"""

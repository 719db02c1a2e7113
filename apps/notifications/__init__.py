"""Notification delivery (e-mail) used by booking and tenant tasks."""

"""Notification core of the franchise intranet."""

"""Promotional Offers Service."""

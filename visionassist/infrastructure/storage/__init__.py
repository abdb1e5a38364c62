"""Descriptor store backends."""

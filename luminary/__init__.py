"""Animated color shows for addressable lights, with debounced device writes."""

__version__ = "0.1.0"

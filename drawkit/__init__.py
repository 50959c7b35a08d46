"""Waveform generation, colouring, view geometry and linked zoom models for image viewers."""

__version__ = "0.1.0"

__all__ = [
    "canvas",
    "geometry",
    "view_link",
    "view_settings",
    "waveform",
    "waveform_generator",
    "waveform_view",
]
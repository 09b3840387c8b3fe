"""fano: Shannon-Fano file compressor."""

__version__ = "0.1.0"

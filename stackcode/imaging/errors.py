"""Errors raised while building barcode images."""


class BarcodeError(Exception):
    """Base class for barcode image generation errors."""


class EncodingError(BarcodeError):
    """Text contains characters Code128 cannot encode."""


class CompositionError(BarcodeError):
    """A symbol bitmap could not be placed on the canvas."""


class SerializationError(BarcodeError):
    """The composed canvas could not be written as PNG."""

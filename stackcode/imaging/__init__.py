"""Imaging module for barcode pair generation."""

from .code128 import BARCODE_HEIGHT, code128_codewords, code128_modules, encode
from .errors import BarcodeError, CompositionError, EncodingError, SerializationError
from .markers import CODE_A_MARKER, CODE_C_MARKER, MARKERS, basic_marker, numeric_aware_marker
from .pairs import compose, compose_unrotated, render_pair, render_pair_png, serialize

__all__ = [
    'BARCODE_HEIGHT', 'code128_codewords', 'code128_modules', 'encode',
    'BarcodeError', 'CompositionError', 'EncodingError', 'SerializationError',
    'CODE_A_MARKER', 'CODE_C_MARKER', 'MARKERS', 'basic_marker', 'numeric_aware_marker',
    'compose', 'compose_unrotated', 'render_pair', 'render_pair_png', 'serialize',
]

"""占位符识别器包."""

from docfill.data.placeholder_detector.base_detector import PlaceholderDetector
from docfill.data.placeholder_detector.bracket_detector import BracketDetector
from docfill.data.placeholder_detector.dollar_detector import DollarDetector
from docfill.data.placeholder_detector.signature_detector import SignatureDetector

__all__ = [
    'PlaceholderDetector',
    'BracketDetector',
    'DollarDetector',
    'SignatureDetector',
]

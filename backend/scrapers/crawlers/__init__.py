"""Browser session, document and anti-detection helpers."""

from .document import SoupDocument
from .fingerprint import EvasionProfileGenerator
from .scroll import ScrollStabilizer
from .stealth import StealthBrowser

__all__ = ['SoupDocument', 'EvasionProfileGenerator', 'ScrollStabilizer', 'StealthBrowser']

# This file makes the models directory a Python package
from .bible import BibleVerse

__all__ = [
    'BibleVerse',
]

"""Per-format stylesheet emitters."""

from .base import BaseStylesheetEmitter
from .xml_emitter import XmlEmitter
from .json_emitter import JsonEmitter
from .flat_emitter import FlatEmitter

__all__ = [
    'BaseStylesheetEmitter',
    'XmlEmitter',
    'JsonEmitter',
    'FlatEmitter',
]

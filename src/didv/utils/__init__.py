"""Utility modules for DIDV."""

from . import canonical_json
from . import hashing
from . import time
from . import log

__all__ = ['canonical_json', 'hashing', 'time', 'log']

"""
Runtime support for the AXVM client: the error hierarchy.
"""

from .errors import *  # noqa: F401,F403
from .errors import __all__

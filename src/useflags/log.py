"""Logging utilities.

Currently just contains useflags' root logger.
"""

__all__ = ("logger",)

import logging

# Make sure something handles messages sent to our non-root logger; this is a
# noop if the root logger already has handlers.
logging.basicConfig()

# Our main logger.
logger = logging.getLogger('useflags')

"""
Platform-specific clients.
"""

from .instagram import InstagramOAuth
from .threads import ThreadsPublisher

__all__ = [
    'InstagramOAuth',
    'ThreadsPublisher'
]

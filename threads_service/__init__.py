"""
Threads Service
---------------
Instagram login and two-phase Threads publishing behind a small HTTP API.
"""

__version__ = "1.0.0"

from .platforms import InstagramOAuth, ThreadsPublisher

__all__ = [
    'InstagramOAuth',
    'ThreadsPublisher',
]

from fastapi import Depends
from ..config import Settings, get_settings
from ..platforms.instagram import InstagramOAuth
from ..platforms.threads import ThreadsPublisher

def get_instagram_handler(settings: Settings = Depends(get_settings)) -> InstagramOAuth:
    """Build the Instagram OAuth handler from configuration."""
    return InstagramOAuth(
        client_id=settings.INSTAGRAM_CLIENT_ID,
        client_secret=settings.INSTAGRAM_CLIENT_SECRET,
        callback_url=settings.INSTAGRAM_CALLBACK_URL,
        auth_url=settings.INSTAGRAM_AUTH_URL,
        api_url=settings.INSTAGRAM_API_URL,
        graph_url=settings.INSTAGRAM_GRAPH_URL,
        scopes=settings.scopes,
        timeout=settings.HTTP_TIMEOUT
    )

def get_threads_publisher(settings: Settings = Depends(get_settings)) -> ThreadsPublisher:
    """Build the Threads publisher from configuration."""
    return ThreadsPublisher(
        graph_url=settings.THREADS_GRAPH_URL,
        timeout=settings.HTTP_TIMEOUT
    )

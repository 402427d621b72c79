"""
Example of the Instagram login and Threads publishing flow.
"""

import asyncio
import os
from dotenv import load_dotenv
from threads_service import InstagramOAuth, ThreadsPublisher
from threads_service.core import CredentialContext, Err

async def main():
    # Load environment variables
    load_dotenv()

    # Initialize OAuth handler
    oauth = InstagramOAuth(
        client_id=os.getenv("INSTAGRAM_CLIENT_ID"),
        client_secret=os.getenv("INSTAGRAM_CLIENT_SECRET"),
        callback_url=os.getenv("INSTAGRAM_CALLBACK_URL")
    )

    # Get authorization URL
    print("\nAuthorization URL:")
    print(oauth.get_authorization_url(state=oauth.generate_state()))

    # In a real app, user would be redirected to this URL
    # For this example, manually input the code
    code = input("\nEnter the authorization code: ")

    login = await oauth.get_access_token(code)
    if isinstance(login, Err):
        print(f"Login failed: {login.error.message}")
        return
    print("\nLogged in as:", login.value["user"])

    profile = await oauth.get_user_profile(login.value["access_token"])
    if not isinstance(profile, Err):
        print("\nUser profile:", profile.value)

    # Publish a text-only thread
    credentials = CredentialContext(
        bearer_token=login.value["access_token"],
        user_id=os.getenv("THREADS_USER_ID", "me")
    )
    published = await ThreadsPublisher().create_post(credentials, caption="Hello from Threads Service!")
    if isinstance(published, Err):
        print(f"Publishing failed: {published.error.message}")
    else:
        print("\nThread published:", published.value)

if __name__ == "__main__":
    asyncio.run(main())

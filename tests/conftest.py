import asyncio
import os

os.environ.setdefault('INSTAGRAM_CLIENT_ID', 'test_client_id')
os.environ.setdefault('INSTAGRAM_CLIENT_SECRET', 'test_client_secret')
os.environ.setdefault('INSTAGRAM_CALLBACK_URL', 'http://localhost/callback')
os.environ['ENVIRONMENT'] = 'testing'
os.environ['LOG_FILE'] = ''
os.environ['LOG_LEVEL'] = 'DEBUG'

import pytest
import pytest_asyncio
import httpx
from aiohttp import web
from aiohttp.test_utils import TestServer
from threads_service.config import Settings, get_settings
from threads_service.main import app


class FakeGraphAPI:
    """Records every upstream call and answers like the Instagram/Threads Graph API."""

    def __init__(self):
        self.calls = []
        self.failures = {}
        self.delays = {}
        self.raw_failures = {}
        self.token_response = {"access_token": "test_access_token", "user_id": 4242}
        self.users = {"4242": {"id": "4242", "username": "test_user"}}
        self.profile = {
            "id": "4242",
            "username": "test_user",
            "account_type": "BUSINESS",
            "media_count": 7
        }
        self.container_id = "container-1"
        self.publish_id = "thread-99"

    def calls_to(self, name):
        return [call for call in self.calls if call["name"] == name]

    def build_app(self) -> web.Application:
        application = web.Application(client_max_size=16 * 1024 * 1024)
        application.router.add_post("/api/oauth/access_token", self._handler("token"))
        application.router.add_get("/graph/me", self._handler("profile"))
        application.router.add_get("/graph/refresh_access_token", self._handler("refresh"))
        application.router.add_get("/graph/{user_id}", self._handler("user"))
        application.router.add_post("/threads/{user_id}/threads", self._handler("container"))
        application.router.add_post("/threads/{user_id}/threads_publish", self._handler("publish"))
        return application

    def _handler(self, name):
        async def handle(request: web.Request) -> web.Response:
            call = {
                "name": name,
                "path": request.path,
                "query": dict(request.query),
                "form": {},
                "files": {},
                "body": b"",
            }
            if request.content_type == "multipart/form-data":
                form = await request.post()
                for key, value in form.items():
                    if isinstance(value, web.FileField):
                        call["files"][key] = {
                            "filename": value.filename,
                            "content_type": value.content_type,
                            "data": value.file.read(),
                        }
                    else:
                        call["form"][key] = value
            elif request.content_type == "application/x-www-form-urlencoded":
                call["form"] = dict(await request.post())
            else:
                call["body"] = await request.read()
            self.calls.append(call)

            if name in self.delays:
                await asyncio.sleep(self.delays[name])

            if name in self.raw_failures:
                return web.Response(
                    body=self.raw_failures[name],
                    status=400,
                    content_type="text/plain",
                    charset="utf-8"
                )

            if name in self.failures:
                return web.json_response(
                    {"error": {"message": f"{name} rejected", "code": 190}},
                    status=self.failures[name]
                )
            return getattr(self, f"_{name}")(request, call)
        return handle

    def _token(self, request, call):
        return web.json_response(self.token_response)

    def _user(self, request, call):
        user = self.users.get(request.match_info["user_id"])
        if user is None:
            return web.json_response({"error": {"message": "unknown user"}}, status=404)
        return web.json_response(user)

    def _profile(self, request, call):
        return web.json_response(self.profile)

    def _refresh(self, request, call):
        return web.json_response({
            "access_token": f"refreshed-{request.query.get('access_token')}",
            "token_type": "bearer",
            "expires_in": 5184000
        })

    def _container(self, request, call):
        return web.json_response({"id": self.container_id})

    def _publish(self, request, call):
        return web.json_response({"id": self.publish_id})


@pytest.fixture
def fake_graph():
    return FakeGraphAPI()


@pytest_asyncio.fixture
async def graph_server(fake_graph):
    server = TestServer(fake_graph.build_app())
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(graph_server, upload_dir):
    base_url = str(graph_server.make_url("/")).rstrip("/")
    return Settings(
        INSTAGRAM_CLIENT_ID="test_client_id",
        INSTAGRAM_CLIENT_SECRET="test_client_secret",
        INSTAGRAM_CALLBACK_URL="http://localhost/callback",
        ENVIRONMENT="testing",
        THREADS_USER_ID="555",
        INSTAGRAM_AUTH_URL="https://api.instagram.com/oauth/authorize",
        INSTAGRAM_API_URL=f"{base_url}/api",
        INSTAGRAM_GRAPH_URL=f"{base_url}/graph",
        THREADS_GRAPH_URL=f"{base_url}/threads",
        HTTP_TIMEOUT=5.0,
        UPLOAD_DIR=str(upload_dir),
        LOG_FILE=""
    )


@pytest_asyncio.fixture
async def client(test_settings):
    app.dependency_overrides[get_settings] = lambda: test_settings
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
    app.dependency_overrides.clear()

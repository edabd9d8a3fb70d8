"""Pytest fixtures for b2upload tests."""
import datetime
import hashlib
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
from urllib.parse import unquote

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from b2upload import APIConfig, Session, UploaderConfig, UploadCredential

ACCOUNT_TOKEN = 'acct-token'
UPLOAD_TOKEN = 'upload-token'
BUCKET_ID = 'bucket-id-1'
DOWNLOAD_URL = 'https://f000.example.com'


class FakeB2:
    """
    In-process stand-in for the B2 native API.
    
    Implements b2_authorize_account, b2_get_upload_url, b2_list_file_names
    and the upload endpoint, storing uploaded objects in memory.
    """
    
    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.requests: Dict[str, int] = {}
        self.upload_headers = []
        self.auth_headers = []
        self.auth_status = 200
        self.auth_body: Optional[Dict[str, Any]] = None
        self.upload_url_status = 200
        self.list_status = 200
        self.upload_status = 200
        self.listing_override = None
    
    def _count(self, name: str):
        self.requests[name] = self.requests.get(name, 0) + 1
    
    @staticmethod
    def _error(status: int, code: str = 'bad_request', message: str = 'failure') -> web.Response:
        return web.json_response({'status': status, 'code': code, 'message': message}, status=status)
    
    async def authorize(self, request: web.Request) -> web.Response:
        self._count('authorize')
        self.auth_headers.append(request.headers.get('Authorization', ''))
        if self.auth_status != 200:
            return self._error(self.auth_status, 'unauthorized', 'bad credentials')
        if self.auth_body is not None:
            return web.json_response(self.auth_body)
        origin = str(request.url.origin())
        return web.json_response({
            'accountId': 'acct-1',
            'authorizationToken': ACCOUNT_TOKEN,
            'apiInfo': {
                'storageApi': {
                    'apiUrl': origin,
                    'downloadUrl': DOWNLOAD_URL,
                    'bucketId': BUCKET_ID,
                    'bucketName': 'mybucket',
                }
            }
        })
    
    async def get_upload_url(self, request: web.Request) -> web.Response:
        self._count('get_upload_url')
        if request.headers.get('Authorization') != ACCOUNT_TOKEN:
            return self._error(401, 'unauthorized')
        if self.upload_url_status != 200:
            return self._error(self.upload_url_status, 'service_unavailable')
        body = await request.json()
        if body.get('bucketId') != BUCKET_ID:
            return self._error(400)
        origin = str(request.url.origin())
        return web.json_response({
            'bucketId': BUCKET_ID,
            'uploadUrl': f"{origin}/upload/{BUCKET_ID}",
            'authorizationToken': UPLOAD_TOKEN,
        })
    
    async def list_file_names(self, request: web.Request) -> web.Response:
        self._count('list_file_names')
        if self.list_status != 200:
            return self._error(self.list_status, 'internal_error')
        body = await request.json()
        if self.listing_override is not None:
            return web.json_response(self.listing_override)
        start = body.get('startFileName', '')
        limit = body.get('maxFileCount', 100)
        names = sorted(name for name in self.files if name >= start)
        return web.json_response({
            'files': [{'fileName': name} for name in names[:limit]],
            'nextFileName': names[limit] if len(names) > limit else None,
        })
    
    async def upload(self, request: web.Request) -> web.Response:
        self._count('upload')
        self.upload_headers.append(dict(request.headers))
        if request.headers.get('Authorization') != UPLOAD_TOKEN:
            return self._error(401, 'bad_auth_token')
        if self.upload_status != 200:
            return self._error(self.upload_status, 'upload_rejected', 'rejected')
        data = await request.read()
        if hashlib.md5(data).hexdigest() != request.headers.get('X-Bz-Content-Md5'):
            return self._error(400, 'bad_request', 'checksum mismatch')
        name = unquote(request.headers['X-Bz-File-Name'])
        self.files[name] = data
        return web.json_response({'fileName': name, 'contentLength': len(data)})
    
    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get('/b2api/v3/b2_authorize_account', self.authorize)
        app.router.add_post('/b2api/v3/b2_get_upload_url', self.get_upload_url)
        app.router.add_post('/b2api/v3/b2_list_file_names', self.list_file_names)
        app.router.add_post('/upload/{bucket}', self.upload)
        return app
    
    @asynccontextmanager
    async def serve(self):
        """Run the fake service and yield an APIConfig pointing at it."""
        server = TestServer(self.make_app())
        await server.start_server()
        try:
            yield APIConfig(authorize_url=str(server.make_url('/b2api/v3/b2_authorize_account')))
        finally:
            await server.close()


@pytest.fixture
def fake_b2():
    """Returns a fresh fake B2 service."""
    return FakeB2()


@pytest.fixture
def fixed_day():
    """Returns a fixed date used for remote keys."""
    return datetime.date(2024, 1, 1)


@pytest.fixture
def config():
    """Returns a config without a custom public URL."""
    return UploaderConfig(owner='alice', token='keyId:appKey', bucket='mybucket')


@pytest.fixture
def custom_domain_config():
    """Returns a config with a custom public domain."""
    return UploaderConfig(
        owner='alice',
        token='keyId:appKey',
        bucket='mybucket',
        public_url='https://img.example.com'
    )


@pytest.fixture
def session():
    """Returns a session for tests that do not hit the network."""
    return Session(
        api_url='https://api000.example.com',
        download_url=DOWNLOAD_URL,
        bucket_id=BUCKET_ID,
        auth_token=ACCOUNT_TOKEN,
        account_id='acct-1'
    )


@pytest.fixture
def credential():
    """Returns an upload credential."""
    return UploadCredential(upload_url='https://pod-000.example.com/upload', upload_token=UPLOAD_TOKEN)


@pytest.fixture
def sample_files(tmp_path):
    """Creates a few small files with distinct content."""
    paths = []
    for i, ext in enumerate(['png', 'jpg', 'txt', 'gif', 'png', 'webp', 'bin']):
        path = tmp_path / f"file_{i}.{ext}"
        path.write_bytes(f"content {i}".encode() * (i + 1))
        paths.append(path)
    return paths

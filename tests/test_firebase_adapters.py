# Test the Firebase and backend adapters against a fake HTTP session
import asyncio

import pytest
import requests

from data.api_client import BackendClient, BackendError
from data.firebase_auth import FirebaseAuthProvider, rest_error_code
from data.remote_store import FirebaseRealtimeStore, RemoteStoreError
from core.identity import AuthProviderError
from fakes import FakeHTTPSession, FakeResponse


class TestFirebaseRealtimeStore:

    def test_get_reads_json_document(self):
        session = FakeHTTPSession(FakeResponse(200, [{'id': 1, 'quantity': 2}]))
        store = FirebaseRealtimeStore('https://db.example/', token_provider=lambda: 'tok', session=session)

        assert asyncio.run(store.get('carts/user1')) == [{'id': 1, 'quantity': 2}]
        method, url, kwargs = session.calls[0]
        assert (method, url) == ('GET', 'https://db.example/carts/user1.json')
        assert kwargs['params'] == {'auth': 'tok'}

    def test_set_puts_document(self):
        session = FakeHTTPSession(FakeResponse(200, []))
        store = FirebaseRealtimeStore('https://db.example', session=session)

        asyncio.run(store.set('carts/user1', []))
        method, url, kwargs = session.calls[0]
        assert method == 'PUT'
        assert kwargs['json'] == []
        assert kwargs['params'] == {}

    @pytest.mark.parametrize('response', [
        requests.ConnectionError('offline'),
        FakeResponse(401, {'error': 'Permission denied'}),
        FakeResponse(200, text='oops'),
    ])
    def test_errors_become_remote_store_errors(self, response):
        store = FirebaseRealtimeStore('https://db.example', session=FakeHTTPSession(response))
        with pytest.raises(RemoteStoreError) as exc:
            asyncio.run(store.get('carts/user1'))
        assert exc.value.path == 'carts/user1'


class TestFirebaseAuthProvider:

    def test_sign_in_sets_current_user(self):
        session = FakeHTTPSession(FakeResponse(200, {
            'localId': 'u1', 'email': 'a@b.com', 'idToken': 'id-token', 'displayName': ''
        }))
        provider = FirebaseAuthProvider('key', session=session)
        seen = []
        provider.on_auth_state_changed(seen.append)

        identity = asyncio.run(provider.sign_in_with_password('a@b.com', 'secret1'))

        assert identity.uid == 'u1'
        assert identity.display_name is None
        assert provider.id_token == 'id-token'
        assert seen == [None, identity]

        method, url, kwargs = session.calls[0]
        assert url.endswith('/accounts:signInWithPassword')
        assert kwargs['params'] == {'key': 'key'}

    def test_rest_error_is_mapped(self):
        session = FakeHTTPSession(FakeResponse(400, {'error': {'message': 'INVALID_PASSWORD'}}))
        provider = FirebaseAuthProvider('key', session=session)

        with pytest.raises(AuthProviderError) as exc:
            asyncio.run(provider.sign_in_with_password('a@b.com', 'bad'))
        assert exc.value.code == 'auth/wrong-password'
        assert provider.current_user is None

    def test_network_failure(self):
        provider = FirebaseAuthProvider('key', session=FakeHTTPSession(requests.ConnectionError('down')))
        with pytest.raises(AuthProviderError) as exc:
            asyncio.run(provider.send_password_reset_email('a@b.com'))
        assert exc.value.code == 'auth/network-request-failed'

    def test_popup_not_supported(self):
        provider = FirebaseAuthProvider('key', session=FakeHTTPSession())
        with pytest.raises(AuthProviderError):
            asyncio.run(provider.sign_in_with_popup('google'))

    def test_sign_out_clears_token(self):
        session = FakeHTTPSession(FakeResponse(200, {'localId': 'u1', 'email': 'a@b.com', 'idToken': 't'}))
        provider = FirebaseAuthProvider('key', session=session)
        asyncio.run(provider.sign_up_with_password('a@b.com', 'secret1'))
        asyncio.run(provider.sign_out())

        assert provider.id_token is None
        assert provider.current_user is None


@pytest.mark.parametrize('message, code', [
    ('WEAK_PASSWORD : Password should be at least 6 characters', 'auth/weak-password'),
    ('EMAIL_EXISTS', 'auth/email-already-in-use'),
    ('SOMETHING_ELSE', 'auth/something-else'),
    ('', 'auth/internal-error'),
])
def test_rest_error_code(message, code):
    assert rest_error_code(message) == code


class TestBackendClient:

    def test_verify_payment_posts_reference(self):
        session = FakeHTTPSession(FakeResponse(200, {'success': True, 'data': {'amount': 450000}}))
        client = BackendClient('https://backend.example/', session=session)

        data = asyncio.run(client.verify_payment('FB_1_abc'))
        assert data['success'] is True

        method, url, kwargs = session.calls[0]
        assert (method, url) == ('POST', 'https://backend.example/verify-payment')
        assert kwargs['json'] == {'reference': 'FB_1_abc'}

    def test_unreachable_backend(self):
        client = BackendClient('https://backend.example', session=FakeHTTPSession(requests.Timeout('slow')))
        with pytest.raises(BackendError):
            asyncio.run(client.verify_payment('FB_1_abc'))

    def test_non_json_reply(self):
        client = BackendClient('https://backend.example', session=FakeHTTPSession(FakeResponse(502, text='Bad gateway')))
        with pytest.raises(BackendError):
            asyncio.run(client.health())

    def test_paystack_probe(self):
        session = FakeHTTPSession(FakeResponse(200, {'success': False}))
        client = BackendClient('https://backend.example', session=session)
        assert asyncio.run(client.test_paystack()) is False

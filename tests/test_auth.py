# Test account flows and their notifications
import asyncio

from core.auth import AuthService
from core.identity import AUTH_ERROR_MESSAGES, DEFAULT_AUTH_ERROR, POPUP_CLOSED, auth_error_message
from core.notifications import ERROR, INFO, SUCCESS, Notifier
from core.session import SessionAuthority
from fakes import ADMIN_EMAIL, USER1, FakeIdentityProvider, MemoryDocumentStore


class TestAuthService:

    def setup_method(self):
        self.notes = []
        notifier = Notifier()
        notifier.subscribe(self.notes.append)

        self.provider = FakeIdentityProvider()
        self.provider.accounts['a@b.com'] = ('secret1', USER1)
        self.remote = MemoryDocumentStore()
        self.authority = SessionAuthority(ADMIN_EMAIL, notifier)
        self.authority.attach(self.provider)
        self.auth = AuthService(self.provider, self.authority, self.remote, notifier)

    def test_sign_in_updates_session(self):
        assert asyncio.run(self.auth.sign_in('a@b.com', 'secret1')) is True
        assert self.authority.current_user == USER1

    def test_sign_in_wrong_password(self):
        assert asyncio.run(self.auth.sign_in('a@b.com', 'nope')) is False
        assert not self.authority.is_authenticated
        assert self.notes[-1].message == 'Incorrect password'
        assert self.notes[-1].level == ERROR

    def test_sign_up_writes_profile(self):
        ok = asyncio.run(self.auth.sign_up('Ada', 'new@b.com', 'secret1', 'secret1'))

        assert ok is True
        uid = self.authority.session.user_id
        profile = self.remote.docs[f'users/{uid}']
        assert profile['name'] == 'Ada'
        assert profile['email'] == 'new@b.com'
        assert isinstance(profile['createdAt'], int)
        assert self.notes[-1].message == 'Account created successfully!'

    def test_sign_up_password_mismatch(self):
        assert asyncio.run(self.auth.sign_up('Ada', 'new@b.com', 'secret1', 'secret2')) is False
        assert self.notes[-1].message == 'Passwords do not match!'
        assert 'new@b.com' not in self.provider.accounts

    def test_sign_up_short_password(self):
        assert asyncio.run(self.auth.sign_up('Ada', 'new@b.com', 'abc', 'abc')) is False
        assert self.notes[-1].message == 'Password must be at least 6 characters!'

    def test_sign_up_existing_email(self):
        assert asyncio.run(self.auth.sign_up('Ada', 'a@b.com', 'secret1', 'secret1')) is False
        assert self.notes[-1].message == 'Email already in use'

    def test_sign_up_profile_failure_still_signs_in(self):
        self.remote.fail_set = True
        assert asyncio.run(self.auth.sign_up('Ada', 'new@b.com', 'secret1', 'secret1')) is True
        assert self.authority.is_authenticated
        assert self.notes[-1].level == SUCCESS

    def test_google_popup_closed_is_not_an_error(self):
        self.provider.popup_error = POPUP_CLOSED
        assert asyncio.run(self.auth.sign_in_with_google()) is False
        assert self.notes[-1].message == 'Google login was cancelled'
        assert self.notes[-1].level == INFO

    def test_google_sign_in(self):
        assert asyncio.run(self.auth.sign_in_with_google()) is True
        assert self.authority.current_user.email == 'g@gmail.com'

    def test_password_reset(self):
        assert asyncio.run(self.auth.send_password_reset('a@b.com')) is True
        assert self.provider.reset_requests == ['a@b.com']

    def test_password_reset_invalid_email(self):
        assert asyncio.run(self.auth.send_password_reset('not-an-email')) is False
        assert self.notes[-1].message == 'Please enter a valid email address'
        assert self.provider.reset_requests == []

    def test_sign_out(self):
        self.provider.login(USER1)
        assert asyncio.run(self.auth.sign_out()) is True
        assert not self.authority.is_authenticated
        assert self.notes[-1].message == 'Successfully logged out!'

    def test_sign_out_without_provider(self):
        self.authority.detach()
        assert asyncio.run(self.auth.sign_out()) is False
        assert self.notes[-1].message == 'Error during logout'


def test_auth_error_messages():
    assert auth_error_message('auth/too-many-requests') == 'Too many attempts. Please try again later'
    assert auth_error_message('auth/something-new') == DEFAULT_AUTH_ERROR
    assert len(AUTH_ERROR_MESSAGES) == 10

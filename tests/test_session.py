# Test session authority state and guards
import asyncio

import pytest

from core.notifications import ADMIN_DENIED, LOGIN_REQUIRED, Notifier
from core.session import SessionAuthority, is_admin_email
from fakes import ADMIN, ADMIN_EMAIL, USER1, FakeIdentityProvider


class TestSessionAuthority:

    def setup_method(self):
        """Fresh authority attached to a signed-out provider"""
        self.notes = []
        self.notifier = Notifier()
        self.notifier.subscribe(self.notes.append)
        self.provider = FakeIdentityProvider()
        self.authority = SessionAuthority(ADMIN_EMAIL, self.notifier)
        self.sessions = []
        self.authority.subscribe(self.sessions.append)
        self.authority.attach(self.provider)

    def test_initial_state_is_signed_out(self):
        assert self.authority.session.user is None
        assert not self.authority.is_authenticated
        assert not self.authority.is_admin
        # The provider replays its current state once on attach
        assert len(self.sessions) == 1

    def test_admin_flag_is_case_insensitive(self):
        """Admin email compared case-insensitively"""
        self.provider.login(ADMIN)
        assert self.authority.is_authenticated
        assert self.authority.is_admin

    def test_admin_flag_follows_user(self):
        self.provider.login(ADMIN)
        self.provider.login(USER1)
        assert not self.authority.is_admin

        self.provider.logout()
        assert self.authority.current_user is None
        assert not self.authority.is_admin
        assert all(s.is_admin == is_admin_email(s.user.email if s.user else None, ADMIN_EMAIL)
                   for s in self.sessions)

    def test_one_notification_per_provider_event(self):
        self.provider.login(USER1)
        self.provider.logout()
        self.provider.login(USER1)
        assert len(self.sessions) == 4
        assert [s.user_id for s in self.sessions] == [None, 'user1', None, 'user1']

    def test_subscribers_called_in_order(self):
        order = []
        self.authority.subscribe(lambda s: order.append('first'))
        self.authority.subscribe(lambda s: order.append('second'))
        self.provider.login(USER1)
        assert order == ['first', 'second']

    def test_unsubscribe_stops_delivery(self):
        seen = []
        unsubscribe = self.authority.subscribe(seen.append)
        self.provider.login(USER1)
        unsubscribe()
        unsubscribe()
        self.provider.logout()
        assert len(seen) == 1

    def test_require_auth_prompts_each_time(self):
        assert self.authority.require_auth('add items to cart') is False
        assert self.authority.require_auth('add items to cart') is False

        prompts = [n for n in self.notes if n.kind == LOGIN_REQUIRED]
        assert len(prompts) == 2
        assert prompts[0].message == '🔐 Please log in to add items to cart'

    def test_require_auth_passes_when_signed_in(self):
        self.provider.login(USER1)
        assert self.authority.require_auth('checkout') is True
        assert self.notes == []

    def test_require_admin_rejects_non_admin(self):
        self.provider.login(USER1)
        assert self.authority.require_admin('add items') is False
        assert self.notes[-1].kind == ADMIN_DENIED

    def test_require_admin_when_signed_out_asks_for_login(self):
        assert self.authority.require_admin('add items') is False
        assert self.notes[-1].kind == LOGIN_REQUIRED

    def test_require_admin_accepts_admin(self):
        self.provider.login(ADMIN)
        assert self.authority.require_admin('add items') is True

    def test_sign_out_waits_for_provider_callback(self):
        """sign_out() alone does not clear the session"""
        provider = FakeIdentityProvider(emit_on_sign_out=False)
        authority = SessionAuthority(ADMIN_EMAIL, self.notifier)
        authority.attach(provider)
        provider.login(USER1)

        asyncio.run(authority.sign_out())
        assert provider.sign_out_calls == 1
        assert authority.is_authenticated

        provider.logout()
        assert not authority.is_authenticated

    def test_sign_out_without_provider(self):
        authority = SessionAuthority(ADMIN_EMAIL)
        with pytest.raises(RuntimeError):
            asyncio.run(authority.sign_out())

    def test_detach_stops_following_provider(self):
        self.authority.detach()
        self.provider.login(USER1)
        assert not self.authority.is_authenticated


@pytest.mark.parametrize('email, admin_email, expected', [
    ('admin@x.com', 'admin@x.com', True),
    ('Admin@X.com', 'admin@x.com', True),
    (' admin@x.com ', 'ADMIN@X.COM', True),
    ('a@b.com', 'admin@x.com', False),
    (None, 'admin@x.com', False),
    ('admin@x.com', None, False),
    ('', '', False),
])
def test_is_admin_email(email, admin_email, expected):
    assert is_admin_email(email, admin_email) is expected

"""Tests for the account lifecycle manager."""

from uuid import uuid4

import pytest

from src.domain.errors import (
    DuplicateEmailError,
    InvalidTokenError,
    MailDeliveryError,
    NotActivatedError,
    PasswordMismatchError,
    UserNotFoundError,
)
from src.domain.services.accounts import (
    AccountLifecycleManager,
    ActivationOutcome,
    split_reset_string,
)
from src.storage.repositories import AccountStore


async def register_and_activate(manager, mailer, email="a@example.com", password="pw1"):
    await manager.register(email, password, password)
    await manager.activate(mailer.last.token)
    return (await manager.accounts.find_by_email(email))[0]


class TestRegister:

    async def test_creates_pending_account(self, account_manager, mailer):
        result = await account_manager.register("a@example.com", "pw1", "pw1")
        assert result.status == "success"

        [account] = await account_manager.accounts.find_by_email("a@example.com")
        assert account.is_activated is False
        assert account.activation_token == mailer.last.token
        assert account.password_hash != "pw1"
        assert account.reset_token == ""

    async def test_sends_activation_link(self, account_manager, mailer):
        await account_manager.register("a@example.com", "pw1", "pw1")
        assert mailer.last.recipient == "a@example.com"
        assert mailer.last.link_base == "http://test/activate?activation_string"
        assert mailer.last.extra is None

    async def test_duplicate_email(self, account_manager):
        await account_manager.register("a@example.com", "pw1", "pw1")
        with pytest.raises(DuplicateEmailError):
            await account_manager.register("a@example.com", "pw2", "pw2")
        assert len(await account_manager.accounts.find_by_email("a@example.com")) == 1

    async def test_password_mismatch_creates_nothing(self, account_manager, mailer):
        with pytest.raises(PasswordMismatchError):
            await account_manager.register("a@example.com", "pw1", "pw2")
        assert await account_manager.accounts.find_by_email("a@example.com") == []
        assert mailer.sent == []

    async def test_mail_failure_creates_nothing(self, db_session, issuer, settings):
        class FailingMailer:
            async def send_and_generate(self, *args, **kwargs):
                raise MailDeliveryError()

        manager = AccountLifecycleManager(AccountStore(db_session), FailingMailer(), issuer, settings)
        with pytest.raises(MailDeliveryError):
            await manager.register("a@example.com", "pw1", "pw1")
        assert await manager.accounts.find_by_email("a@example.com") == []


class TestActivate:

    async def test_activation_is_single_use(self, account_manager, mailer):
        await account_manager.register("a@example.com", "pw1", "pw1")
        token = mailer.last.token

        assert await account_manager.activate(token) is ActivationOutcome.ACTIVATED
        assert await account_manager.activate(token) is ActivationOutcome.EXPIRED

        [account] = await account_manager.accounts.find_by_email("a@example.com")
        assert account.is_activated is True
        assert account.activation_token == ""

    async def test_unknown_token(self, account_manager):
        assert await account_manager.activate("nope") is ActivationOutcome.EXPIRED

    async def test_empty_token_never_matches(self, account_manager, mailer):
        """An activated account's cleared token must not match an empty string."""
        await register_and_activate(account_manager, mailer)
        assert await account_manager.activate("") is ActivationOutcome.EXPIRED


class TestLogin:

    async def test_not_activated_rejected_with_correct_password(self, account_manager):
        await account_manager.register("a@example.com", "pw1", "pw1")
        with pytest.raises(NotActivatedError):
            await account_manager.login("a@example.com", "pw1")

    async def test_not_activated_checked_before_password(self, account_manager):
        await account_manager.register("a@example.com", "pw1", "pw1")
        with pytest.raises(NotActivatedError):
            await account_manager.login("a@example.com", "wrong")

    async def test_success_returns_verifiable_token(self, account_manager, mailer, issuer):
        account = await register_and_activate(account_manager, mailer)

        result = await account_manager.login("a@example.com", "pw1")
        assert result.status == "success"
        assert result.account_id == account.id
        assert issuer.verify(result.token).account_id == account.id

    async def test_wrong_password_is_failed_result(self, account_manager, mailer):
        await register_and_activate(account_manager, mailer)

        result = await account_manager.login("a@example.com", "wrong")
        assert result.status == "failed"
        assert result.token is None

    async def test_unknown_email(self, account_manager):
        with pytest.raises(UserNotFoundError):
            await account_manager.login("nobody@example.com", "pw1")


class TestVerifyIdentity:

    async def test_matching_account(self, account_manager, mailer):
        account = await register_and_activate(account_manager, mailer)
        token = (await account_manager.login("a@example.com", "pw1")).token
        assert await account_manager.verify_identity(token, account.id) is True

    async def test_other_account(self, account_manager, mailer):
        await register_and_activate(account_manager, mailer)
        token = (await account_manager.login("a@example.com", "pw1")).token
        assert await account_manager.verify_identity(token, uuid4()) is False

    async def test_garbage_token_fails_closed(self, account_manager, mailer):
        account = await register_and_activate(account_manager, mailer)
        assert await account_manager.verify_identity("garbage", account.id) is False

    async def test_deleted_account(self, account_manager, issuer):
        """A validly signed token for an unknown account is not logged in."""
        account_id = uuid4()
        assert await account_manager.verify_identity(issuer.issue(account_id), account_id) is False


class TestPasswordReset:

    async def test_request_stores_token_and_mails_id(self, account_manager, mailer):
        account = await register_and_activate(account_manager, mailer)

        result = await account_manager.request_password_reset("a@example.com")
        assert result.status == "success"
        assert mailer.last.extra == str(account.id)
        assert mailer.last.link_base == "http://test/password/check/token?reset_string"
        assert account.reset_token == mailer.last.token

    async def test_request_unknown_email(self, account_manager):
        with pytest.raises(UserNotFoundError):
            await account_manager.request_password_reset("nobody@example.com")

    async def test_check_valid(self, account_manager, mailer):
        account = await register_and_activate(account_manager, mailer)
        await account_manager.request_password_reset("a@example.com")

        check = await account_manager.check_reset_token(mailer.last.link_value)
        assert check.valid is True
        assert check.account_id == account.id

    @pytest.mark.parametrize("combined", ["", "garbage", "tok_._not-a-uuid", "_._"])
    async def test_check_malformed(self, account_manager, combined):
        check = await account_manager.check_reset_token(combined)
        assert check.valid is False

    async def test_check_token_bound_to_account(self, account_manager, mailer):
        await register_and_activate(account_manager, mailer)
        await account_manager.request_password_reset("a@example.com")

        check = await account_manager.check_reset_token(f"{mailer.last.token}_._{uuid4()}")
        assert check.valid is False

    async def test_check_empty_token_part(self, account_manager, mailer):
        """No pending reset (empty token) never validates."""
        account = await register_and_activate(account_manager, mailer)
        check = await account_manager.check_reset_token(f"_._{account.id}")
        assert check.valid is False

    async def test_newer_request_supersedes(self, account_manager, mailer):
        await register_and_activate(account_manager, mailer)
        await account_manager.request_password_reset("a@example.com")
        first = mailer.last.link_value
        await account_manager.request_password_reset("a@example.com")
        second = mailer.last.link_value

        assert (await account_manager.check_reset_token(first)).valid is False
        assert (await account_manager.check_reset_token(second)).valid is True

    async def test_reset_is_single_use(self, account_manager, mailer):
        account = await register_and_activate(account_manager, mailer)
        await account_manager.request_password_reset("a@example.com")
        combined = mailer.last.link_value

        result = await account_manager.reset_password(account.id, "pw9", "pw9", combined)
        assert result.status == "success"
        assert account.reset_token == ""
        assert (await account_manager.check_reset_token(combined)).valid is False

        with pytest.raises(InvalidTokenError):
            await account_manager.reset_password(account.id, "pw8", "pw8", combined)

        assert (await account_manager.login("a@example.com", "pw9")).status == "success"
        assert (await account_manager.login("a@example.com", "pw1")).status == "failed"

    async def test_reset_requires_matching_account(self, account_manager, mailer):
        await register_and_activate(account_manager, mailer, email="a@example.com")
        other = await register_and_activate(account_manager, mailer, email="b@example.com")
        await account_manager.request_password_reset("a@example.com")

        with pytest.raises(InvalidTokenError):
            await account_manager.reset_password(other.id, "pw9", "pw9", mailer.last.link_value)

    async def test_reset_unknown_account(self, account_manager):
        with pytest.raises(UserNotFoundError):
            await account_manager.reset_password(uuid4(), "pw9", "pw9", "tok_._x")

    async def test_reset_password_mismatch(self, account_manager, mailer):
        account = await register_and_activate(account_manager, mailer)
        await account_manager.request_password_reset("a@example.com")
        with pytest.raises(PasswordMismatchError):
            await account_manager.reset_password(account.id, "pw9", "pw8", mailer.last.link_value)


class TestSplitResetString:

    def test_splits_on_last_delimiter(self):
        account_id = uuid4()
        assert split_reset_string(f"abc_._{account_id}") == ("abc", account_id)

    def test_missing_delimiter(self):
        assert split_reset_string("abc") is None

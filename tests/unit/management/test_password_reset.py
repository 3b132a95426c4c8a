from __future__ import annotations

import json
from dataclasses import replace

import pytest

from rms.application.dto.requests import ForgotPasswordRequest, ResetPasswordRequest
from rms.application.errors import InvalidResetTokenError
from rms.application.mappers.event_envelope import AUTH_EVENTS_CHANNEL
from rms.application.use_cases.authenticate import (
    RequestPasswordReset,
    ResetPassword,
    password_fingerprint,
)
from rms.infrastructure.security.tokens import JwtTokenService


@pytest.fixture
def tokens() -> JwtTokenService:
    return JwtTokenService(secret="unit-secret", expires_minutes=5)


def _request_reset(uow, tokens, publisher, trace_ctx, email: str) -> None:
    RequestPasswordReset(uow, tokens, publisher).execute(
        ForgotPasswordRequest(email=email), trace_ctx=trace_ctx
    )


def _issued_token(publisher) -> str:
    channel, message = publisher.messages[-1]
    assert channel == AUTH_EVENTS_CHANNEL
    return json.loads(message)["payload"]["resetToken"]


def test_reset_request_publishes_a_token_for_the_mailer(uow, tokens, publisher, trace_ctx) -> None:
    response = RequestPasswordReset(uow, tokens, publisher).execute(
        ForgotPasswordRequest(email=" Cook@RMS.test "), trace_ctx=trace_ctx
    )

    assert "reset instructions" in response.message
    envelope = json.loads(publisher.messages[0][1])
    assert envelope["event_type"] == "password_reset.requested"
    assert envelope["request_id"] == "req-test"
    assert envelope["payload"]["userId"] == "usr_cook"
    assert envelope["payload"]["email"] == "cook@rms.test"
    assert tokens.decode_password_reset(envelope["payload"]["resetToken"]).user_id == "usr_cook"


@pytest.mark.parametrize("email", ["nobody@rms.test", "waiter@rms.test"])
def test_unknown_or_inactive_accounts_get_the_same_answer(
    uow, state, tokens, publisher, trace_ctx, email: str
) -> None:
    state.users["usr_waiter"] = replace(state.users["usr_waiter"], is_active=False)

    response = RequestPasswordReset(uow, tokens, publisher).execute(
        ForgotPasswordRequest(email=email), trace_ctx=trace_ctx
    )

    assert "reset instructions" in response.message
    assert publisher.messages == []


def test_broker_outage_does_not_fail_the_request(
    uow, tokens, failing_publisher, trace_ctx
) -> None:
    response = RequestPasswordReset(uow, tokens, failing_publisher).execute(
        ForgotPasswordRequest(email="cook@rms.test"), trace_ctx=trace_ctx
    )

    assert "reset instructions" in response.message


def test_reset_replaces_the_password_hash(uow, state, hasher, tokens, publisher, trace_ctx) -> None:
    _request_reset(uow, tokens, publisher, trace_ctx, "cook@rms.test")

    ResetPassword(uow, hasher, tokens).execute(
        ResetPasswordRequest(token=_issued_token(publisher), newPassword="brand-new-pass")
    )

    assert state.users["usr_cook"].password_hash == "plain$brand-new-pass"


def test_reset_token_works_only_once(uow, state, hasher, tokens, publisher, trace_ctx) -> None:
    _request_reset(uow, tokens, publisher, trace_ctx, "cook@rms.test")
    token = _issued_token(publisher)
    ResetPassword(uow, hasher, tokens).execute(
        ResetPasswordRequest(token=token, newPassword="brand-new-pass")
    )

    with pytest.raises(InvalidResetTokenError):
        ResetPassword(uow, hasher, tokens).execute(
            ResetPasswordRequest(token=token, newPassword="another-pass")
        )
    assert state.users["usr_cook"].password_hash == "plain$brand-new-pass"


def test_access_token_is_not_a_reset_token(uow, state, hasher, tokens) -> None:
    access_token = tokens.issue(state.users["usr_cook"])

    with pytest.raises(InvalidResetTokenError):
        ResetPassword(uow, hasher, tokens).execute(
            ResetPasswordRequest(token=access_token, newPassword="brand-new-pass")
        )


def test_reset_is_refused_for_deactivated_accounts(uow, state, hasher, tokens) -> None:
    cook = state.users["usr_cook"]
    token = tokens.issue_password_reset(cook.user_id, password_fingerprint(cook.password_hash))
    state.users["usr_cook"] = replace(cook, is_active=False)

    with pytest.raises(InvalidResetTokenError, match="invalid or expired"):
        ResetPassword(uow, hasher, tokens).execute(
            ResetPasswordRequest(token=token, newPassword="brand-new-pass")
        )
    assert state.users["usr_cook"].password_hash == cook.password_hash

"""Error taxonomy — status, code and message of each AppError."""

import pytest

from acikkuran.errors import (
    InvalidToken,
    MissingToken,
    ServerMisconfigured,
    StoreFailure,
)


@pytest.mark.parametrize(
    "cls, status, code",
    [
        (MissingToken, 401, "missing-token"),
        (InvalidToken, 401, "invalid-token"),
        (ServerMisconfigured, 500, "server-misconfigured"),
        (StoreFailure, 500, "store-failure"),
    ],
)
def test_class_defaults(cls, status, code):
    err = cls()
    assert err.status_code == status
    assert err.code == code
    assert str(err) == code


def test_code_override_is_the_message_when_none_given():
    err = StoreFailure(code="user-translation-get-failed")
    assert err.code == "user-translation-get-failed"
    assert str(err) == "user-translation-get-failed"


def test_explicit_message_wins_over_code():
    err = StoreFailure("read failed", code="user-translation-get-failed")
    assert err.code == "user-translation-get-failed"
    assert str(err) == "read failed"


def test_override_does_not_leak_to_the_class():
    StoreFailure(code="user-translation-upsert-failed")
    assert StoreFailure().code == "store-failure"

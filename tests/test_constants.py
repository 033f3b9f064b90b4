import pytest

from chatgate.constants import ErrorCode


@pytest.mark.parametrize(
    "code, value",
    [
        (ErrorCode.SUCCESS, 0),
        (ErrorCode.ERROR_JSON, 1001),
        (ErrorCode.RPC_FAILED, 1002),
        (ErrorCode.VARIFY_EXPIRED, 1003),
        (ErrorCode.VARIFY_CODE_ERR, 1004),
        (ErrorCode.USER_EXIST, 1005),
        (ErrorCode.PASSWD_ERR, 1006),
        (ErrorCode.EMAIL_NOT_MATCH, 1007),
        (ErrorCode.PASSWD_UP_FAILED, 1008),
        (ErrorCode.PASSWD_INVALID, 1009),
        (ErrorCode.TOKEN_INVALID, 1010),
        (ErrorCode.UID_INVALID, 1011),
    ],
)
def test_error_code_values(code, value):
    assert int(code) == value
    assert ErrorCode(value) is code


def test_error_codes_round_trip_uniquely():
    looked_up = [ErrorCode(int(code)) for code in ErrorCode]
    assert looked_up == list(ErrorCode)
    assert len({int(code) for code in looked_up}) == 12


def test_unknown_error_code_rejected():
    with pytest.raises(ValueError):
        ErrorCode(999)
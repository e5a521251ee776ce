from pubkit.core.errors import ErrorCode


def test_ok_is_zero() -> None:
    assert int(ErrorCode.OK) == 0
    assert str(ErrorCode.OK) == "ok"

import pytest

from minirel.errors import MinirelError, Status, describe


def test_ok_is_zero_and_first_error_follows_filler():
    assert describe(0) == "no error"
    assert Status.NOTUSED1 == -999
    assert Status(Status.NOTUSED1 + 1) is Status.BADFILEPTR
    assert describe(int(Status.NOTUSED1) + 1) == "bad file pointer"


def test_codes_are_consecutive_after_filler():
    codes = [s for s in Status if s is not Status.OK]
    values = [int(s) for s in codes]
    assert values == list(range(values[0], values[0] + len(values)))
    assert codes[-1] is Status.NOTUSED2
    assert describe(values[1]) == "bad file pointer"
    assert describe(values[-2]) == "temp result already exists"


@pytest.mark.parametrize(
    "status, message",
    [
        (Status.OK, "no error"),
        (Status.FILEEOF, "end of file encountered"),
        (Status.BUFFEREXCEEDED, "buffer pool full"),
        (Status.INVALIDRECLEN, "specified record length <= 0"),
        (Status.FILEHDRFULL, "heapfile hdear page is full"),
        (Status.TMP_RES_EXISTS, "temp result already exists"),
        (Status.RELNOTFOUND, "relation not in catalog"),
    ],
)
def test_describe_known_messages(status, message):
    assert describe(status) == message


def test_describe_accepts_plain_int():
    assert describe(int(Status.PAGEPINNED)) == "page still pinned"


def test_describe_status_without_message():
    assert describe(Status.BADSCANID) == f"undefined error status: {int(Status.BADSCANID)}"


def test_describe_unknown_integer():
    assert describe(12345) == "undefined error status: 12345"


def test_error_carries_status_and_message():
    err = MinirelError(Status.DUPLATTR)
    assert err.status is Status.DUPLATTR
    assert str(err) == "duplicate attribute names"
    with pytest.raises(MinirelError) as info:
        raise err
    assert info.value.status is Status.DUPLATTR


def test_error_from_int_converts_to_status():
    err = MinirelError(int(Status.HASHNOTFOUND))
    assert err.status is Status.HASHNOTFOUND
    assert err.message == describe(Status.HASHNOTFOUND)


def test_error_with_unknown_code_keeps_number():
    err = MinirelError(777)
    assert err.status == 777
    assert str(err) == "undefined error status: 777"
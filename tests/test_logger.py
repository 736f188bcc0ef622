import io

import pytest

from pixelminer.logger import LoggedError, Logger


def test_error_raises_with_prefix():
    with pytest.raises(LoggedError, match=r"^\[ Engine \] -> ERROR: boom$"):
        Logger("Engine").error("boom")


def test_error_without_raise_writes_stderr(capsys):
    Logger("Net").error("oops", raise_error=False)
    assert capsys.readouterr().err == "[ Net ] -> ERROR: oops\n"


def test_info_writes_stderr(capsys):
    Logger("Net").info("hi")
    captured = capsys.readouterr()
    assert captured.err == "[ Net ] -> INFO: hi\n"
    assert captured.out == ""


def test_custom_stream():
    stream = io.StringIO()
    logger = Logger("Server", stream=stream)
    logger.info("up")
    logger.error("down", raise_error=False)
    assert stream.getvalue() == "[ Server ] -> INFO: up\n[ Server ] -> ERROR: down\n"


def test_logged_error_is_runtime_error():
    with pytest.raises(RuntimeError, match="fatal"):
        Logger("X").error("fatal", True)
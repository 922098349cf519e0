import pytest

from core.exceptions import ConfigurationError
from core.utils import env_float, env_int, get_env, parse_bool


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("TRUE", True), (" yes ", True), ("on", True), ("0", False), ("off", False), ("", False)],
)
def test_parse_bool(raw, expected) -> None:
    assert parse_bool(raw) is expected


def test_parse_bool_falls_back_to_default() -> None:
    assert parse_bool(None, default=True) is True
    assert parse_bool("maybe", default=True) is True


def test_env_int_reads_and_validates(monkeypatch) -> None:
    monkeypatch.setenv("VIDEO_TEST_INT", "2500")
    assert env_int("VIDEO_TEST_INT", 10) == 2500

    monkeypatch.setenv("VIDEO_TEST_INT", "soon")
    with pytest.raises(ConfigurationError) as exc:
        env_int("VIDEO_TEST_INT", 10)
    assert exc.value.key == "VIDEO_TEST_INT"

    monkeypatch.setenv("VIDEO_TEST_INT", "0")
    with pytest.raises(ConfigurationError):
        env_int("VIDEO_TEST_INT", 10, minimum=1)


def test_env_defaults_when_unset(monkeypatch) -> None:
    monkeypatch.delenv("VIDEO_TEST_FLOAT", raising=False)
    assert env_float("VIDEO_TEST_FLOAT", 30.0) == 30.0
    assert env_int("VIDEO_TEST_FLOAT", 7) == 7


def test_required_env_raises_configuration_error(monkeypatch) -> None:
    monkeypatch.delenv("VIDEO_TEST_REQUIRED", raising=False)

    with pytest.raises(ConfigurationError) as exc:
        get_env("VIDEO_TEST_REQUIRED", required=True)

    assert exc.value.key == "VIDEO_TEST_REQUIRED"

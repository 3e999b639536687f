"""Unit tests for pnch.config — the preference record."""
from __future__ import annotations

import pytest

from pnch.clock import Period
from pnch.config import CONFIG_FILE_NAME, Config
from pnch.errors import FormatError, InvalidConfigKeyError, WrongByteLengthError
from pnch.storage import MemoryStorage


class TestDefaults:
    def test_empty_storage_gives_defaults(self) -> None:
        config = Config.load(MemoryStorage())
        assert config.print_color is True
        assert config.ls_default_period == Period.days(14)
        assert config.ls_default_period.as_days() == 14

    def test_loading_defaults_writes_nothing(self) -> None:
        storage = MemoryStorage()
        Config.load(storage)
        assert storage.blobs == {}


class TestRecord:
    def test_layout(self) -> None:
        assert Config().to_bytes() == b"\x01\x0e\x00\x00\x00"

    @pytest.mark.parametrize(
        "config",
        [Config(), Config(print_color=False, ls_default_period=Period.days(28)), Config(True, Period.days(0))],
    )
    def test_round_trip(self, config: Config) -> None:
        assert Config.from_bytes(config.to_bytes()) == config

    def test_period_is_stored_in_days(self) -> None:
        config = Config(ls_default_period=Period.weeks(3))
        assert Config.from_bytes(config.to_bytes()).ls_default_period == Period.days(21)

    @pytest.mark.parametrize("blob", [b"\x01", b"\x01\x02\x03\x04\x05\x06"])
    def test_wrong_length(self, blob: bytes) -> None:
        with pytest.raises(WrongByteLengthError) as exc_info:
            Config.load(MemoryStorage({CONFIG_FILE_NAME: blob}))
        assert exc_info.value.entity == "config"
        assert exc_info.value.expected == 5


class TestTrySet:
    def test_print_color(self) -> None:
        config = Config()
        config.try_set("print-color", "false")
        assert config.print_color is False
        assert config.dirty is True

    def test_print_color_rejects_other_values(self) -> None:
        config = Config()
        with pytest.raises(FormatError) as exc_info:
            config.try_set("print-color", "maybe")
        assert exc_info.value.kind == "bool"
        assert config.dirty is False

    def test_ls_default_period(self) -> None:
        config = Config()
        config.try_set("ls-default-period", "2 weeks")
        assert config.ls_default_period == Period.days(14)

    @pytest.mark.parametrize("value", ["2 weeks", "month", "3 years", "0 days"])
    def test_set_period_survives_encoding(self, value: str) -> None:
        config = Config()
        config.try_set("ls-default-period", value)
        assert Config.from_bytes(config.to_bytes()) == config

    @pytest.mark.parametrize("value", ["TRUE", "False", " false ", "true\n"])
    def test_print_color_is_exact(self, value: str) -> None:
        with pytest.raises(FormatError):
            Config().try_set("print-color", value)

    def test_ls_default_period_rejects_bad_grammar(self) -> None:
        with pytest.raises(FormatError):
            Config().try_set("ls-default-period", "fortnight")

    def test_ls_default_period_must_fit_the_record(self) -> None:
        with pytest.raises(FormatError):
            Config().try_set("ls-default-period", "99999999 years")

    def test_unknown_key(self) -> None:
        with pytest.raises(InvalidConfigKeyError) as exc_info:
            Config().try_set("colour", "true")
        assert exc_info.value.key == "colour"
        assert "print-color" in (exc_info.value.hint or "")

    def test_set_save_load(self) -> None:
        storage = MemoryStorage()
        config = Config.load(storage)
        config.try_set("ls-default-period", "month")
        config.try_set("print-color", "false")
        config.save(storage)
        reloaded = Config.load(storage)
        assert reloaded == Config(print_color=False, ls_default_period=Period.days(30))

"""Tests for host adapters, config loading and the CLI."""

import io
import json
import logging

import pytest
import structlog

from card_sanitizer import (
    CardNumberFilter,
    SanitizeStatus,
    create_sanitizer,
    load_config,
    load_from_yaml,
    parameter_filter,
    sanitize_event_dict,
)
from card_sanitizer.cli import main


# ── Parameter filter ─────────────────────────────────────────────────

def test_parameter_filter_sanitizes_second_argument():
    filter_param = parameter_filter()
    assert filter_param("key", "Hello 4111 1111 1111 1111 there") == "Hello 4111 11▇▇ ▇▇▇▇ 1111 there"


def test_parameter_filter_passes_through_other_values():
    filter_param = parameter_filter()
    assert filter_param("key", 1) == 1
    assert filter_param("key", None) is None
    assert filter_param("key", "no card here") == "no card here"


def test_parameter_filter_options():
    filter_param = parameter_filter(replacement_token="#", return_changes=True)
    assert filter_param("key", "4111111111111111") == "411111######1111"


def test_parameter_filter_returns_text_for_bytes():
    filter_param = parameter_filter()
    assert filter_param("key", b"hello") == "hello"
    assert filter_param("key", b"4111111111111111") == "411111▇▇▇▇▇▇1111"


# ── logging.Filter ───────────────────────────────────────────────────

def test_logging_filter_rewrites_message():
    record = logging.LogRecord(
        "payments", logging.INFO, __file__, 1, "charged %s", ("4111 1111 1111 1111",), None,
    )
    assert CardNumberFilter().filter(record)
    assert record.getMessage() == "charged 4111 11▇▇ ▇▇▇▇ 1111"


def test_logging_filter_leaves_clean_records():
    record = logging.LogRecord("payments", logging.INFO, __file__, 1, "order %d", (42,), None)
    CardNumberFilter().filter(record)
    assert record.msg == "order %d"
    assert record.args == (42,)


# ── structlog processor ──────────────────────────────────────────────

def test_structlog_processor_redacts_string_fields():
    event = sanitize_event_dict(None, "info", {
        "event": "payment.accepted",
        "note": "card 4111 1111 1111 1111",
        "amount": 10,
    })
    assert event == {
        "event": "payment.accepted",
        "note": "card 4111 11▇▇ ▇▇▇▇ 1111",
        "amount": 10,
    }


# ── Config ───────────────────────────────────────────────────────────

def test_load_config_nested_and_flat():
    nested = load_config({"card_sanitizer": {"expose_first": 0, "use_groupings": True}})
    flat = load_config({"expose_first": 0, "use_groupings": True})
    assert nested == flat == {"enabled": True, "expose_first": 0, "use_groupings": True}


def test_load_config_rejects_unknown_keys():
    with pytest.raises(ValueError, match="expose_middle"):
        load_config({"expose_middle": 3})


def test_create_sanitizer_applies_options():
    sanitizer = create_sanitizer({"replacement_token": "*", "expose_first": 0})
    assert sanitizer.sanitize("4111111111111111") == "************1111"


def test_create_sanitizer_disabled():
    sanitizer = create_sanitizer({"card_sanitizer": {"enabled": False}})
    assert sanitizer.sanitize("4111111111111111") is None


def test_disabled_sanitizer_keeps_full_api():
    sanitizer = create_sanitizer({"enabled": False})
    result = sanitizer.sanitize_result(b"4111111111111111 \xff")
    assert result.status == SanitizeStatus.CLEAN
    assert result.text == "4111111111111111 \ufffd"
    assert result.changes == []
    assert sanitizer.find_cards("4111111111111111") == []


def test_disabled_sanitizer_rejects_unknown_options():
    sanitizer = create_sanitizer({"enabled": False})
    with pytest.raises(TypeError):
        sanitizer.sanitize("x", bogus=True)
    with pytest.raises(TypeError):
        sanitizer.find_cards("x", {"bogus": True})


def test_load_from_yaml(tmp_path):
    path = tmp_path / "sanitizer.yaml"
    path.write_text(
        "card_sanitizer:\n"
        "  replacement_token: '#'\n"
        "  parse_flanking: true\n",
        encoding="utf-8",
    )
    cfg = load_from_yaml(path)
    assert cfg == {"enabled": True, "replacement_token": "#", "parse_flanking": True}
    sanitizer = create_sanitizer(cfg)
    assert sanitizer.sanitize("a4111111111111111b") is None
    assert sanitizer.sanitize("cc 4111111111111111") == "cc 411111######1111"


# ── CLI ──────────────────────────────────────────────────────────────

@pytest.fixture
def stdin(monkeypatch):
    def _feed(text: str) -> None:
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(text.encode("utf-8"))))
    yield _feed
    structlog.reset_defaults()


def test_cli_sanitize(stdin, capsys, monkeypatch):
    monkeypatch.delenv("CARD_SANITIZER_CONFIG", raising=False)
    stdin("paid with 4111 1111 1111 1111\n")
    assert main(["--token", "*", "sanitize"]) == 0
    assert capsys.readouterr().out == "paid with 4111 11** **** 1111\n"


def test_cli_sanitize_clean_text_is_echoed(stdin, capsys, monkeypatch):
    monkeypatch.delenv("CARD_SANITIZER_CONFIG", raising=False)
    stdin("nothing to hide\n")
    assert main(["sanitize"]) == 0
    assert capsys.readouterr().out == "nothing to hide\n"


def test_cli_changes(stdin, capsys, monkeypatch):
    monkeypatch.delenv("CARD_SANITIZER_CONFIG", raising=False)
    stdin("a 4111111111111111 b 5555555555554444")
    assert main(["changes"]) == 0
    assert json.loads(capsys.readouterr().out) == [
        ["4111111111111111", "411111▇▇▇▇▇▇1111"],
        ["5555555555554444", "555555▇▇▇▇▇▇4444"],
    ]


def test_cli_reads_yaml_config(stdin, capsys, monkeypatch, tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("expose_first: 0\nexpose_last: 0\n", encoding="utf-8")
    monkeypatch.setenv("CARD_SANITIZER_CONFIG", str(path))
    stdin("4111111111111111")
    assert main(["--expose-last", "4", "sanitize"]) == 0
    assert capsys.readouterr().out == "▇▇▇▇▇▇▇▇▇▇▇▇1111"


def test_cli_flag_turns_off_yaml_option(stdin, capsys, monkeypatch, tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("parse_flanking: true\n", encoding="utf-8")
    monkeypatch.setenv("CARD_SANITIZER_CONFIG", str(path))
    stdin("id4111111111111111x")
    assert main(["--no-parse-flanking", "sanitize"]) == 0
    assert capsys.readouterr().out == "id411111▇▇▇▇▇▇1111x"


def test_cli_bad_config_exits_nonzero(stdin, capsys, monkeypatch, tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("expose_middle: 3\n", encoding="utf-8")
    monkeypatch.setenv("CARD_SANITIZER_CONFIG", str(path))
    stdin("4111111111111111")
    assert main(["sanitize"]) == 2
    assert "expose_middle" in capsys.readouterr().err

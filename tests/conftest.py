# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared fixtures: an importable target module with well-known callables."""

import logging
import sys
from pathlib import Path

import pytest

FAKE_MODULE = "regcheck_fake_cases"

FAKE_SOURCE = '''
class Cases:
    @staticmethod
    def invalidateLow(value):
        return value

    @staticmethod
    def returnsSeven(value):
        return 7

    def needsSelf(self, value):
        return value


def identity(value):
    return value


def returns_seven(value):
    return 7


def returns_str(value):
    return "42"


def returns_bool(value):
    return True


def returns_float(value):
    return 42.0


def returns_wide(value):
    return 2**40


def two_args(a, b):
    return a + b


def boom(value):
    raise RuntimeError("boom")


def lookup_bug(value):
    return {}["missing"]


def type_bug(value):
    return value + "x"


CALLS = []


def counting(value):
    CALLS.append(value)
    return value


def _private(value):
    return value


not_callable = 5
'''


@pytest.fixture
def fake_target(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Write a target module to tmp_path and make it importable.

    Returns:
        The module name to use as a dotted target.
    """
    (tmp_path / f"{FAKE_MODULE}.py").write_text(FAKE_SOURCE, encoding="utf-8")
    monkeypatch.delitem(sys.modules, FAKE_MODULE, raising=False)
    monkeypatch.syspath_prepend(str(tmp_path))
    return FAKE_MODULE


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest left it."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)

# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared fixtures for integration tests.

Provides a throwaway project holding a fixed and a regressed build of the
wide-store cases, plus the environment needed to run `python -m regcheck`
as a separate process.
"""

import os
from pathlib import Path
from typing import Dict

import pytest

SRC_DIR = Path(__file__).resolve().parents[2] / "src"

CASES_SOURCE = '''
from regcheck.cases.wide_store import RegisterFrame, long_to_int


def _invalidate_low(value, eager):
    frame = RegisterFrame(4, eager_low_invalidation=eager)
    frame.store(0, long_to_int(value))
    frame.store_wide(1, 0)
    # A wiped register reads back as zero, like an uninitialised slot
    return frame.load(0) if frame.kind(0) is not None else 0


class Fixed:
    @staticmethod
    def invalidateLow(value):
        return _invalidate_low(value, eager=False)


class Regressed:
    @staticmethod
    def invalidateLow(value):
        return _invalidate_low(value, eager=True)

    @staticmethod
    def crash(value):
        raise RuntimeError("miscompiled")
'''


@pytest.fixture
def regression_project(tmp_path: Path) -> Path:
    """Create a project directory with an importable `builds` module.

    Returns:
        Path to the project root directory
    """
    project_root = tmp_path / "project"
    project_root.mkdir()
    (project_root / "builds.py").write_text(CASES_SOURCE, encoding="utf-8")
    return project_root


@pytest.fixture
def subprocess_env(regression_project: Path) -> Dict[str, str]:
    """Environment for running the harness in a child interpreter."""
    env = dict(os.environ)
    paths = [str(SRC_DIR), str(regression_project)]
    if env.get("PYTHONPATH"):
        paths.append(env["PYTHONPATH"])
    env["PYTHONPATH"] = os.pathsep.join(paths)
    env["HOME"] = str(regression_project)
    return env

# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Callables exercised by regression scenarios."""

from .wide_store import InvalidRegisterError, RegisterFrame, TestCase, long_to_int

__all__ = ["InvalidRegisterError", "RegisterFrame", "TestCase", "long_to_int"]

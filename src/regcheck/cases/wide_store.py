# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Wide-store register invalidation cases.

A method frame holds numbered virtual registers. A 32-bit ("narrow") value
occupies one register; a 64-bit ("wide") value occupies a pair vN/vN+1.
Storing into a register destroys any wide value overlapping it, i.e. the
pair starting at that register or the pair whose high half it is.

The regression being guarded: a store into vN also wiped vN-1 even when
vN-1 held an unrelated narrow value. `eager_low_invalidation=True`
reproduces that behaviour so tests can observe it.
"""

import logging
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class SlotKind:
    """Contents of a register slot."""

    NARROW = "narrow"
    WIDE_LOW = "wide_low"
    WIDE_HIGH = "wide_high"


class InvalidRegisterError(RuntimeError):
    """Raised when reading a register that holds no valid value of the requested width."""

    pass


def long_to_int(value: int) -> int:
    """Truncate a 64-bit integer to its low 32 bits, sign-extended."""
    return ((value + 2**31) % 2**32) - 2**31


class RegisterFrame:
    """Fixed-size frame of virtual registers with wide-pair tracking."""

    def __init__(self, size: int, eager_low_invalidation: bool = False) -> None:
        if size <= 0:
            raise ValueError(f"Frame size must be positive, got {size}")
        self._slots: List[Optional[Tuple[str, Optional[int]]]] = [None] * size
        self._eager_low_invalidation = eager_low_invalidation

    @property
    def size(self) -> int:
        return len(self._slots)

    def _check_index(self, reg: int) -> None:
        if not 0 <= reg < len(self._slots):
            raise InvalidRegisterError(f"Register v{reg} outside frame of size {self.size}")

    def _drop(self, reg: int) -> None:
        slot = self._slots[reg]
        if slot is not None:
            kind = slot[0]
            if kind == SlotKind.WIDE_LOW:
                self._slots[reg + 1] = None
            elif kind == SlotKind.WIDE_HIGH:
                self._slots[reg - 1] = None
        self._slots[reg] = None

    def _invalidate(self, reg: int) -> None:
        self._drop(reg)
        if self._eager_low_invalidation and reg > 0 and self._slots[reg - 1] is not None:
            logger.debug(f"Eagerly invalidating v{reg - 1} on store into v{reg}")
            self._drop(reg - 1)

    def store(self, reg: int, value: int) -> None:
        """Store a narrow (32-bit) value into vreg."""
        self._check_index(reg)
        if not -(2**31) <= value < 2**31:
            raise OverflowError(f"Value {value} does not fit in a narrow register")
        self._invalidate(reg)
        self._slots[reg] = (SlotKind.NARROW, value)

    def store_wide(self, reg: int, value: int) -> None:
        """Store a wide (64-bit) value into the pair vreg/vreg+1."""
        self._check_index(reg)
        self._check_index(reg + 1)
        if not -(2**63) <= value < 2**63:
            raise OverflowError(f"Value {value} does not fit in a wide register pair")
        self._invalidate(reg)
        self._invalidate(reg + 1)
        self._slots[reg] = (SlotKind.WIDE_LOW, value)
        self._slots[reg + 1] = (SlotKind.WIDE_HIGH, None)

    def load(self, reg: int) -> int:
        """Read a narrow value from vreg."""
        self._check_index(reg)
        slot = self._slots[reg]
        if slot is None or slot[0] != SlotKind.NARROW:
            raise InvalidRegisterError(f"v{reg} does not hold a narrow value")
        value = slot[1]
        assert value is not None
        return value

    def load_wide(self, reg: int) -> int:
        """Read a wide value whose low half is vreg."""
        self._check_index(reg)
        slot = self._slots[reg]
        if slot is None or slot[0] != SlotKind.WIDE_LOW:
            raise InvalidRegisterError(f"v{reg} is not the low half of a wide value")
        value = slot[1]
        assert value is not None
        return value

    def kind(self, reg: int) -> Optional[str]:
        """Return the SlotKind held by vreg, or None when it is invalid."""
        self._check_index(reg)
        slot = self._slots[reg]
        return slot[0] if slot is not None else None


class TestCase:
    """Callables looked up by name from the wide-store scenarios."""

    __test__ = False  # not a pytest class

    FRAME_SIZE = 4

    @staticmethod
    def invalidateLow(value: int) -> int:  # noqa: N802
        """Narrow-store long-to-int(value) in v0, wide-store 0 into v1/v2, return v0."""
        frame = RegisterFrame(TestCase.FRAME_SIZE)
        frame.store(0, long_to_int(value))
        frame.store_wide(1, 0)
        return frame.load(0)

    @staticmethod
    def invalidateHigh(value: int) -> int:  # noqa: N802
        """Wide-store value in v0/v1, narrow-store into v1, return whether v0 survived."""
        frame = RegisterFrame(TestCase.FRAME_SIZE)
        frame.store_wide(0, value)
        frame.store(1, 0)
        return 1 if frame.kind(0) is not None else 0

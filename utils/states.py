# utils/states.py
# Fixed state space of the WXYZ model.  Rows and columns of every matrix,
# trace and weight vector follow this order.

from __future__ import annotations
from enum import IntEnum
from typing import Final

__all__ = ["State", "N_STATES", "STATE_NAMES", "STRATEGIES"]


class State(IntEnum):
    W            = 0
    X            = 1
    Y_TRANSITION = 2     # one-cycle entry state into Y
    Y            = 3
    Z_TRANSITION = 4     # one-cycle entry state into Z
    Z            = 5


N_STATES: Final = len(State)

STATE_NAMES: Final = ("W", "X", "Ytransition", "Y", "Ztransition", "Z")

# order of rows in every CEA table
STRATEGIES: Final = ("no treatment", "treatment")

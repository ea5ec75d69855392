# whmapping/constants/movement_action.py

from enum import Enum


class MovementAction(str, Enum):
    PUTAWAY = "PUTAWAY"
    MOVE = "MOVE"
    ADJUST = "ADJUST"

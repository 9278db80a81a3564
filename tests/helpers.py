# tests/helpers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Shared test states and transition tables.
"""

from enum import Enum

from tsm.core.transitions import TransitionTable


class Light(Enum):
    Red = "red"
    Green = "green"
    Yellow = "yellow"

    @property
    def persistence_key(self) -> str:
        return "traffic_light"


class Step(Enum):
    """Ten states visited in a cycle, S0 -> S1 -> ... -> S9 -> S0."""

    S0 = 0
    S1 = 1
    S2 = 2
    S3 = 3
    S4 = 4
    S5 = 5
    S6 = 6
    S7 = 7
    S8 = 8
    S9 = 9

    @property
    def next(self) -> "Step":
        return Step((self.value + 1) % 10)


LIGHT_TABLE = TransitionTable(
    {
        Light.Red: {Light.Green},
        Light.Green: {Light.Yellow},
        Light.Yellow: {Light.Red},
    }
)

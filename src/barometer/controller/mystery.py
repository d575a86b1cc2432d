"""
Mystery Puzzles
===============
Self-assessment: the user measures an unknown liquid density or altitude with
the simulator and submits a guess.

Targets are whole multiples of a quantum drawn uniformly from a fixed range.
A guess is rounded to the nearest quantum and compared with the target at a
fixed number of significant figures. The random source is injected so a
seeded generator gives reproducible puzzles.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional
import logging
import math

import numpy as np

from barometer import config
from barometer.utils import round_significant, round_to_quantum

logger = logging.getLogger(__name__)


class InvalidGuessError(ValueError):
    """Raised when a submitted guess is not a non-negative number."""
    pass


@dataclass(frozen=True)
class MysteryQuantity:
    """What is being guessed and over which quantised range."""
    name: str
    unit: str
    quantum: float
    min_multiple: int
    max_multiple: int


DENSITY = MysteryQuantity(
    name="density", unit="kg/m^3",
    quantum=config.QUANTA_DENSITY,
    min_multiple=config.MIN_DENSITY,
    max_multiple=config.MAX_DENSITY,
)

ALTITUDE = MysteryQuantity(
    name="altitude", unit="m",
    quantum=config.QUANTA_ALTITUDE,
    min_multiple=config.MIN_ALTITUDE,
    max_multiple=config.MAX_ALTITUDE,
)


class GuessStatus(StrEnum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    INVALID = "invalid"


@dataclass(frozen=True)
class GuessResult:
    status: GuessStatus
    message: str
    answer: Optional[float] = None  # revealed only on a correct guess

    @property
    def accepted(self) -> bool:
        return self.status == GuessStatus.CORRECT


def parse_guess(text: str, quantity: MysteryQuantity) -> float:
    """Parse user input into a non-negative float."""
    try:
        value = float(str(text).strip())
    except ValueError:
        raise InvalidGuessError(f"Invalid {quantity.name}!")
    if not math.isfinite(value) or value < 0.0:
        raise InvalidGuessError(f"Invalid {quantity.name}!")
    return value


class MysteryPuzzle:
    """
    Holds the current hidden target for one quantity.
    The target only changes after a correct guess (or an explicit redraw).
    """
    def __init__(
        self,
        quantity: MysteryQuantity,
        rng: Optional[np.random.Generator] = None,
        precision: int = config.PRECISION,
    ) -> None:
        self.quantity = quantity
        self.rng = rng if rng is not None else np.random.default_rng()
        self.precision = precision
        self.target: float = self.draw()

    def draw(self) -> float:
        """Pick a new target, uniformly over the quantised range."""
        multiple = int(self.rng.integers(self.quantity.min_multiple, self.quantity.max_multiple, endpoint=True))
        self.target = multiple * self.quantity.quantum
        logger.debug(f"New mystery {self.quantity.name} drawn")
        return self.target

    def matches(self, guess: float) -> bool:
        rounded = round_to_quantum(guess, self.quantity.quantum)
        return round_significant(rounded, self.precision) == round_significant(self.target, self.precision)

    def submit(self, text: str) -> GuessResult:
        try:
            guess = parse_guess(text, self.quantity)
        except InvalidGuessError as e:
            logger.info(f"Rejected {self.quantity.name} guess {text!r}")
            return GuessResult(status=GuessStatus.INVALID, message=str(e))

        if not self.matches(guess):
            return GuessResult(status=GuessStatus.INCORRECT, message=f"Incorrect {self.quantity.name}!")

        answer = self.target
        self.draw()
        logger.info(f"Mystery {self.quantity.name} solved: {answer:.0f} {self.quantity.unit}")
        return GuessResult(
            status=GuessStatus.CORRECT,
            message=f"That's correct! Answer: {answer:.0f} {self.quantity.unit}",
            answer=answer,
        )

"""Dice rolling, quantity parsing and weighted selection behind an injectable RNG."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import Callable, Protocol, Sequence, TypeVar

T = TypeVar("T")

# "3", " 12 "
_FIXED_RE = re.compile(r"^\s*(\d+)\s*$")
# "d6", "2d6", "10D4"
_DICE_RE = re.compile(r"^\s*(\d*)d(\d+)\s*$", re.IGNORECASE)

DEFAULT_QUANTITY = 1
MAX_QUANTITY_DICE = 100


class RandomSource(Protocol):
    """Anything that looks like ``random.Random`` for the two calls we make."""

    def random(self) -> float:
        """Return a float in [0.0, 1.0)."""

    def randint(self, a: int, b: int) -> int:
        """Return an int in [a, b]."""


@dataclass(frozen=True)
class QuantitySpec:
    """Parsed quantity: either a fixed count or ``num_dice`` d ``sides``."""

    fixed: int | None = None
    num_dice: int = 0
    sides: int = 0


def parse_quantity(text: str) -> QuantitySpec:
    """Parse a quantity string, falling back to a fixed quantity of 1."""
    fixed_match = _FIXED_RE.match(text or "")
    if fixed_match:
        return QuantitySpec(fixed=int(fixed_match.group(1)))

    dice_match = _DICE_RE.match(text or "")
    if dice_match:
        n_str, sides_str = dice_match.groups()
        sides = int(sides_str)
        if sides > 0:
            num_dice = 1 if n_str == "" else int(n_str)
            if num_dice <= MAX_QUANTITY_DICE:
                return QuantitySpec(num_dice=num_dice, sides=sides)

    return QuantitySpec(fixed=DEFAULT_QUANTITY)


@dataclass
class Dice:
    """Thin roller around a ``RandomSource`` so tests can script every draw."""

    rng: RandomSource = field(default_factory=random.Random)

    @classmethod
    def seeded(cls, seed: int | None) -> "Dice":
        return cls(rng=random.Random(seed))

    def roll_die(self, sides: int) -> int:
        if sides <= 0:
            raise ValueError("sides must be > 0")
        return self.rng.randint(1, sides)

    def roll_dice(self, num_dice: int, sides: int) -> int:
        return sum(self.roll_die(sides) for _ in range(num_dice))

    def roll_2d6(self) -> int:
        return self.roll_die(6) + self.roll_die(6)

    def resolve_quantity(self, text: str) -> int:
        spec = parse_quantity(text)
        if spec.fixed is not None:
            return spec.fixed
        return self.roll_dice(spec.num_dice, spec.sides)

    def weighted_choice(self, items: Sequence[T], weight: Callable[[T], float]) -> T:
        """Pick one item by walking cumulative weights in order.

        Draws ``u`` in [0, total) and subtracts each weight until the
        remainder drops to zero or below.
        """
        if not items:
            raise ValueError("cannot choose from an empty sequence")
        total = sum(weight(item) for item in items)
        if total <= 0:
            raise ValueError("total weight must be > 0")

        remainder = self.rng.random() * total
        for item in items:
            remainder -= weight(item)
            if remainder <= 0:
                return item
        # Float rounding can leave a tiny positive remainder.
        return items[-1]

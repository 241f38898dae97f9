import re
import random
import logging
from typing import Callable

from bsh.models import DiceResult
from bsh.core.exceptions import DiceRollError, InvalidFormulaError

logger = logging.getLogger(__name__)

# ============================================================
# DICE ROLLER
# ============================================================

class DiceRoller:
    """
    The randomness engine. Draws uniform die values and evaluates the
    formulas the rules produce (1d20, 2d20kl, 2d8kh+8, 1d20 + 2, 1).
    """

    # Group 1: Num Dice, Group 2: Die Sides, Group 3: keep highest/lowest,
    # Group 4: modifier sign, Group 5: modifier value
    DICE_PATTERN = re.compile(r"(\d*)d(\d+)(kh|kl)?(?:([+-])(\d+))?")
    CONSTANT_PATTERN = re.compile(r"\d+")

    def __init__(
        self,
        rng: random.Random | None = None,
        on_roll: Callable[[DiceResult], None] | None = None,
    ):
        """
        Args:
            rng: Source of randomness. Inject a seeded or scripted Random for tests.
            on_roll: Visualization side channel. Called after the value is fixed.
        """
        self._rng = rng or random.Random()
        self._on_roll = on_roll

    def roll_die(self, sides: int = 20) -> int:
        """Draw one uniform integer in [1, sides]."""
        if sides < 1:
            raise InvalidFormulaError(f"A die needs at least one side, got {sides}")
        try:
            return self._rng.randint(1, sides)
        except Exception as e:
            raise DiceRollError(f"Unable to draw a d{sides}: {e}") from e

    def roll(self, formula: str) -> DiceResult:
        """
        Evaluates a dice formula.

        Raises:
            InvalidFormulaError: The formula is not understood.
            DiceRollError: The randomness source failed.
        """
        expression = formula.lower().replace(' ', '')

        if self.CONSTANT_PATTERN.fullmatch(expression):
            result = DiceResult(formula=formula, total=int(expression))
            self._show(result)
            return result

        match = self.DICE_PATTERN.fullmatch(expression)
        if not match:
            raise InvalidFormulaError(f"Invalid dice formula format: {formula}")

        num_dice = int(match.group(1)) if match.group(1) else 1
        die_sides = int(match.group(2))
        keep = match.group(3)
        modifier = int(match.group(5)) if match.group(5) else 0
        if match.group(4) == '-':
            modifier = -modifier

        if num_dice < 1:
            raise InvalidFormulaError(f"Invalid dice formula format: {formula}")

        # 1. Roll the dice
        results = [self.roll_die(die_sides) for _ in range(num_dice)]

        # 2. Keep highest/lowest
        if keep == "kh":
            kept = [max(results)]
        elif keep == "kl":
            kept = [min(results)]
        else:
            kept = list(results)

        result = DiceResult(
            formula=formula,
            total=sum(kept) + modifier,
            results=results,
            kept=kept,
            modifier=modifier,
        )
        logger.debug(f"Rolled {formula}: {results} -> {result.total}")
        self._show(result)
        return result

    def _show(self, result: DiceResult) -> None:
        """Fire-and-forget hand-off to the visualization hook."""
        if self._on_roll is None:
            return
        try:
            self._on_roll(result)
        except Exception as e:
            logger.warning("Dice visualization failed for %s: %s", result.formula, e)

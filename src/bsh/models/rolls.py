from typing import List

from pydantic import BaseModel

from bsh.models.schemas import Attribute

# ============================================================
# ROLL STRUCTURES
# ============================================================
class DiceResult(BaseModel):
    """Result of evaluating a dice formula"""
    formula: str
    total: int
    results: List[int] = []                 # Every die drawn, in order
    kept: List[int] = []                    # Dice counted toward the total
    modifier: int = 0

    @property
    def natural(self) -> int:
        """The first die drawn, or the total for constant formulas."""
        return self.results[0] if self.results else self.total

class CheckResult(BaseModel):
    """Outcome of a roll-under test against an attribute value."""
    formula: str
    total: int
    target: int
    success: bool
    critical_success: bool = False
    critical_failure: bool = False
    label: str = ""

class AttackResult(BaseModel):
    check: CheckResult
    attribute: Attribute
    threat_bonus: int = 0
    damage_formula: str | None = None       # Only set on a hit

    @property
    def hit(self) -> bool:
        return self.check.success

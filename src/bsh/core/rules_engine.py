import logging

from bsh.models import (
    Attribute,
    AttackResult,
    Character,
    CheckResult,
    DiceResult,
    Entity,
    EntityKind,
    RulesConfiguration,
    Weapon,
    WeaponType,
)
from bsh.core import formulas
from bsh.core.attributes import calculate_attribute_values
from bsh.core.dice import DiceRoller

logger = logging.getLogger(__name__)

CRITICAL_SUCCESS_ROLL = 1
CRITICAL_FAILURE_ROLL = 20

# ============================================================
# RULES ENGINE
# ============================================================

class RulesEngine:
    """
    Central logic for roll-under tests: picks the formula, rolls it and
    classifies the outcome against the character's derived attribute.
    """

    def __init__(self, dice: DiceRoller | None = None, rules: RulesConfiguration | None = None):
        self.dice = dice or DiceRoller()
        self.rules = rules or RulesConfiguration()

    def attribute_value(self, character: Character, attribute: Attribute) -> int:
        return calculate_attribute_values(character, self.rules)[attribute.value]

    def attribute_test(
        self,
        character: Character,
        attribute: Attribute,
        advantage: bool = False,
        disadvantage: bool = False,
        adjustment: int = 0,
    ) -> CheckResult:
        """
        Tests an attribute. Criticals are read from the first die drawn, so an
        adjustment can turn a natural 20 into an ordinary success.
        """
        formula = formulas.attribute_test_formula(character.doomed, advantage, disadvantage, adjustment)
        roll = self.dice.roll(formula)
        return self._classify(roll, self.attribute_value(character, attribute), roll.natural)

    def initiative_test(self, character: Character, advantage: bool = False, disadvantage: bool = False) -> CheckResult:
        """A single character's initiative check, rolled outside of a combat."""
        formula = formulas.saving_test_formula(character.doomed, advantage, disadvantage)
        return self._saving_test(character, Attribute.WISDOM, formula)

    def perception_test(self, character: Character, advantage: bool = False, disadvantage: bool = False) -> CheckResult:
        formula = formulas.saving_test_formula(character.doomed, advantage, disadvantage)
        return self._saving_test(character, Attribute.INTELLIGENCE, formula)

    def dodge_test(self, character: Character, advantage: bool = False, disadvantage: bool = False) -> CheckResult:
        formula = formulas.dodge_formula(character.doomed, character.armour.shield, advantage, disadvantage)
        return self._saving_test(character, Attribute.DEXTERITY, formula)

    def parry_test(self, character: Character, advantage: bool = False, disadvantage: bool = False) -> CheckResult:
        formula = formulas.parry_formula(character.doomed, character.armour.shield, advantage, disadvantage)
        return self._saving_test(character, Attribute.STRENGTH, formula)

    def attack_roll(
        self,
        character: Character,
        weapon: Weapon,
        target: Entity | None = None,
        advantage: bool = False,
        disadvantage: bool = False,
    ) -> AttackResult:
        """
        Makes a weapon attack. Attacking a higher level creature adds the
        level difference to the roll (the threat bonus).
        """
        threat_bonus = self.threat_bonus(character, target)
        attribute = Attribute.DEXTERITY if weapon.type == WeaponType.RANGED else Attribute.STRENGTH
        doomed = character.doomed

        formula = formulas.attack_formula(doomed, advantage, disadvantage, threat_bonus)
        roll = self.dice.roll(formula)
        value = self.attribute_value(character, attribute)

        critical_success = roll.natural == CRITICAL_SUCCESS_ROLL
        critical_failure = roll.natural == CRITICAL_FAILURE_ROLL
        success = not critical_failure and value > roll.total

        if critical_success:
            label = "Critical Hit"
        elif critical_failure:
            label = "Critical Miss"
        else:
            label = "Hit" if success else "Miss"

        check = CheckResult(
            formula=roll.formula,
            total=roll.total,
            target=value,
            success=success,
            critical_success=critical_success,
            critical_failure=critical_failure,
            label=label,
        )
        damage_formula = None
        if success:
            damage_formula = formulas.generate_damage_roll_formula(
                character, weapon, critical=critical_success, doomed=doomed
            )

        logger.debug(f"{character.name} attacks with {weapon.name}: {roll.total} vs {value} ({label})")
        return AttackResult(
            check=check,
            attribute=attribute,
            threat_bonus=threat_bonus,
            damage_formula=damage_formula,
        )

    def roll_die(self, character: Character, die: str, advantage: bool = False, disadvantage: bool = False) -> DiceResult:
        """An untested roll of one die type for a character."""
        return self.dice.roll(formulas.die_roll_formula(die, character.doomed, advantage, disadvantage))

    @staticmethod
    def threat_bonus(character: Entity, target: Entity | None) -> int:
        if target is None:
            return 0
        if character.kind != EntityKind.CHARACTER or target.kind == EntityKind.CHARACTER:
            return 0
        return max(target.level - character.level, 0)

    def _saving_test(self, character: Character, attribute: Attribute, formula: str) -> CheckResult:
        # Saving tests read criticals from the roll total, not the first die.
        roll = self.dice.roll(formula)
        return self._classify(roll, self.attribute_value(character, attribute), roll.total)

    @staticmethod
    def _classify(roll: DiceResult, target: int, natural: int) -> CheckResult:
        critical_success = natural == CRITICAL_SUCCESS_ROLL
        critical_failure = natural == CRITICAL_FAILURE_ROLL
        success = critical_success or roll.total < target

        if success:
            label = "Critical Success" if critical_success else "Success"
        else:
            label = "Critical Failure" if critical_failure else "Failure"

        return CheckResult(
            formula=roll.formula,
            total=roll.total,
            target=target,
            success=success,
            critical_success=critical_success,
            critical_failure=critical_failure,
            label=label,
        )

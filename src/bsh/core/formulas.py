"""
Dice formula construction.

Black Sword Hack tests are roll-under, so advantage keeps the lowest of two
dice and disadvantage keeps the highest. A doomed character (doom die
exhausted) rolls with an extra disadvantage step.
"""

from bsh.models import Character, Die, RollKind, Weapon, WeaponType
from bsh.core.exceptions import InvalidFormulaError


def generate_die_roll_formula(die_type: str = "d20", kind: RollKind = RollKind.STANDARD) -> str:
    """
    Formula for a single die. The 'one' die type is the constant 1
    (2 with advantage).
    """
    if die_type == "one":
        return "2" if kind == RollKind.ADVANTAGE else "1"
    if die_type not in {die.value for die in Die if die != Die.EXHAUSTED}:
        raise InvalidFormulaError(f"Unknown die type: {die_type}")

    if kind == RollKind.ADVANTAGE:
        return f"2{die_type}kl"
    if kind == RollKind.DISADVANTAGE:
        return f"2{die_type}kh"
    return f"1{die_type}"


def generate_damage_roll_formula(
    character: Character,
    weapon: Weapon,
    critical: bool = False,
    doomed: bool = False,
) -> str:
    """
    Damage formula for a weapon. Two-handed weapons roll two dice and keep
    the highest. A critical adds the die's maximum.
    """
    if weapon.type != WeaponType.UNARMED:
        die = character.damage_dice.armed.value
    else:
        die = character.damage_dice.unarmed.value

    if weapon.hands > 1:
        formula = f"1{die}" if doomed else f"2{die}kh"
    else:
        formula = f"2{die}kl" if doomed else f"1{die}"

    if critical:
        formula = f"{formula}+{die.replace('d', '')}"
    return formula


def die_roll_formula(die: str, doomed: bool = False, advantage: bool = False, disadvantage: bool = False) -> str:
    """Formula for an untested die roll, where a high result is good."""
    if advantage:
        return f"1{die}" if doomed else f"2{die}kh"
    if disadvantage and not doomed:
        return f"2{die}kl"
    return f"2{die}kl" if doomed else f"1{die}"


def attribute_test_formula(
    doomed: bool = False,
    advantage: bool = False,
    disadvantage: bool = False,
    adjustment: int = 0,
) -> str:
    if advantage:
        formula = "1d20" if doomed else "2d20kl"
    elif disadvantage and not doomed:
        formula = "2d20kh"
    else:
        formula = "2d20kh" if doomed else "1d20"

    if adjustment < 0:
        formula = f"{formula}{adjustment}"
    elif adjustment > 0:
        formula = f"{formula}+{adjustment}"
    return formula


def saving_test_formula(doomed: bool = False, advantage: bool = False, disadvantage: bool = False) -> str:
    """Initiative and perception tests."""
    if doomed:
        return "1d20" if advantage else "2d20kh"
    if advantage:
        return "2d20kl"
    if disadvantage:
        return "2d20kh"
    return "1d20"


def dodge_formula(doomed: bool = False, shield: bool = False, advantage: bool = False, disadvantage: bool = False) -> str:
    if doomed:
        return "1d20" if advantage or shield else "2d20kh"
    return saving_test_formula(advantage=advantage, disadvantage=disadvantage)


def parry_formula(doomed: bool = False, shield: bool = False, advantage: bool = False, disadvantage: bool = False) -> str:
    """A shield grants advantage on parries unless the parry is at a disadvantage."""
    if doomed:
        return "1d20" if advantage or shield else "2d20kh"
    if disadvantage and not shield:
        return "2d20kh"
    if (advantage or shield) and not disadvantage:
        return "2d20kl"
    return "1d20"


def attack_formula(
    doomed: bool = False,
    advantage: bool = False,
    disadvantage: bool = False,
    threat_bonus: int = 0,
) -> str:
    if advantage:
        dice = "1d20" if doomed else "2d20kl"
    elif disadvantage:
        dice = "2d20kh"
    else:
        dice = "2d20kh" if doomed else "1d20"
    return f"{dice} + {threat_bonus}" if threat_bonus > 0 else dice

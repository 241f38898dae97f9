"""
Sample encounter for trying the rules out from the command line.
"""
from bsh.models import (
    Armour,
    AttributeChoice,
    AttributeImprovement,
    Backgrounds,
    Character,
    Combatant,
    Creature,
    DamageDice,
    Die,
    Story,
    StoryImprovements,
)
from bsh.storage import InMemoryCombatantStore


def create_sample_encounter() -> InMemoryCombatantStore:
    """
    Creates a sample encounter: two adventurers against a pair of ghouls
    and their sorcerer master in a ruined temple.

    Returns:
        InMemoryCombatantStore: Entities and combatants ready to roll initiative
    """

    # ==================== CHARACTERS ====================

    ysolde = Character(
        id="pc_ysolde",
        name="Ysolde of the Tattered Banner",
        attributes={
            "strength": 14,
            "dexterity": 12,
            "constitution": 13,
            "intelligence": 9,
            "wisdom": 11,
            "charisma": 10,
        },
        backgrounds=Backgrounds(first="Barbarian", second="Mercenary", third="Thief"),
        stories={
            "1": Story(
                title="The Fall of the Salt Tower",
                improvements=StoryImprovements(
                    attributes=AttributeImprovement(
                        granted=True,
                        first=AttributeChoice(choice="wisdom"),
                        second=AttributeChoice(choice="strength"),
                    )
                ),
            ),
        },
        doom=Die.D8,
        damage_dice=DamageDice(armed=Die.D8, unarmed=Die.D4),
        armour=Armour(shield=True),
    )

    mordecai = Character(
        id="pc_mordecai",
        name="Mordecai the Pale",
        attributes={
            "strength": 8,
            "dexterity": 13,
            "constitution": 10,
            "intelligence": 15,
            "wisdom": 14,
            "charisma": 12,
        },
        backgrounds=Backgrounds(first="Sorcerer", second="Scholar", third="Noble"),
        doom=Die.D4,
    )

    # ==================== CREATURES ====================

    ghoul = Creature(id="npc_ghoul", name="Temple Ghoul", level=2, attributes={"wisdom": 7})
    sorcerer = Creature(id="npc_sorcerer", name="Sorcerer of the Black Lotus", level=4)

    # ==================== COMBATANTS ====================

    combatants = [
        Combatant(id="cmb_ysolde", entity_id=ysolde.id),
        Combatant(id="cmb_mordecai", entity_id=mordecai.id),
        Combatant(id="cmb_ghoul_1", entity_id=ghoul.id),
        Combatant(id="cmb_ghoul_2", entity_id=ghoul.id),
        Combatant(id="cmb_sorcerer", entity_id=sorcerer.id),
    ]

    return InMemoryCombatantStore(
        entities=[ysolde, mordecai, ghoul, sorcerer],
        combatants=combatants,
    )

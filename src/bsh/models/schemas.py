from enum import Enum
from typing import Dict

# Enum Classes
class Attribute(str, Enum):         # The six Black Sword Hack attributes.
    CONSTITUTION = 'constitution'
    CHARISMA = 'charisma'
    DEXTERITY = 'dexterity'
    INTELLIGENCE = 'intelligence'
    WISDOM = 'wisdom'
    STRENGTH = 'strength'
class EntityKind(str, Enum):        # Who controls an entity.
    CHARACTER = 'character'             # --PlayerCharacter
    CREATURE = 'creature'               # --NonPlayerEntity (monsters, NPCs)
class CriticalFlag(str, Enum):      # Stored on a combatant after initiative. Absent means no critical.
    CRITICAL_SUCCESS = 'critSuccess'
    CRITICAL_FAILURE = 'critFailure'
class Die(str, Enum):               # Dice, including the usage/doom die terminal state.
    D4 = 'd4'
    D6 = 'd6'
    D8 = 'd8'
    D10 = 'd10'
    D12 = 'd12'
    D20 = 'd20'
    EXHAUSTED = 'exhausted'
class RollKind(str, Enum):          # Roll-under: advantage keeps the lowest die.
    STANDARD = 'standard'
    ADVANTAGE = 'advantage'
    DISADVANTAGE = 'disadvantage'
class WeaponType(str, Enum):
    MELEE = 'melee'
    RANGED = 'ranged'
    UNARMED = 'unarmed'

# Set of attribute values for an entity, keyed by Attribute value.
Attributes = Dict[str, int]

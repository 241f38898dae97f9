from .schemas import (
    Attribute,
    Attributes,
    EntityKind,
    CriticalFlag,
    Die,
    RollKind,
    WeaponType,
)

from .entities import (
    Backgrounds,
    AttributeChoice,
    AttributeImprovement,
    StoryImprovements,
    Story,
    DamageDice,
    Armour,
    Character,
    Creature,
    Entity,
    Weapon,
)

from .combat import (
    Combatant,
    InitiativeUpdate,
)

from .rolls import (
    DiceResult,
    CheckResult,
    AttackResult,
)

from .rules import (
    Background,
    RulesConfiguration,
)

__all__ = [
    # Schemas
    "Attribute",
    "Attributes",
    "EntityKind",
    "CriticalFlag",
    "Die",
    "RollKind",
    "WeaponType",

    # Entities
    "Backgrounds",
    "AttributeChoice",
    "AttributeImprovement",
    "StoryImprovements",
    "Story",
    "DamageDice",
    "Armour",
    "Character",
    "Creature",
    "Entity",
    "Weapon",

    # Combat
    "Combatant",
    "InitiativeUpdate",

    # Rolls
    "DiceResult",
    "CheckResult",
    "AttackResult",

    # Rules
    "Background",
    "RulesConfiguration",
]

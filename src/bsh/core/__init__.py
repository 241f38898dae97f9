import random
from typing import TYPE_CHECKING

from bsh.models import RulesConfiguration
from bsh.core.exceptions import (
    RulesError,
    DiceRollError,
    InvalidFormulaError,
    StoreUpdateError,
    StoreLookupError,
)
from bsh.core.dice import DiceRoller
from bsh.core.attributes import (
    calculate_attribute_values,
    calculate_level,
    calculate_maximum_hit_points,
    calculate_character_data,
)
from bsh.core.rules_engine import RulesEngine
from bsh.core.initiative import (
    InitiativeBucket,
    InitiativeResolver,
    classify_initiative,
    initiative_rank,
    initiative_status,
)
from bsh.core.combat import Combat

if TYPE_CHECKING:
    from bsh.storage.store import CombatantStore

def initialize_combat(
    store: "CombatantStore",
    rules: RulesConfiguration | None = None,
    dice_seed: int | None = None,
) -> Combat:
    """Instantiate the dice, resolver and combat for an encounter store."""
    dice = DiceRoller(random.Random(dice_seed))
    resolver = InitiativeResolver(store=store, dice=dice, rules=rules)
    return Combat(store=store, resolver=resolver)

__all__ = [
    'RulesError',
    'DiceRollError',
    'InvalidFormulaError',
    'StoreUpdateError',
    'StoreLookupError',
    'DiceRoller',
    'calculate_attribute_values',
    'calculate_level',
    'calculate_maximum_hit_points',
    'calculate_character_data',
    'RulesEngine',
    'InitiativeBucket',
    'InitiativeResolver',
    'classify_initiative',
    'initiative_rank',
    'initiative_status',
    'Combat',
    'initialize_combat',
]

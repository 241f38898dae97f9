"""
Black Sword Hack initiative.

Each player character rolls 1d20 under their wisdom. Successful characters
act before every creature, creatures act next, failed characters act last:

    * bucket 3, fast characters: roll < wisdom, or a natural 1 (critical success)
    * bucket 2, creatures: no roll
    * bucket 1, slow characters: roll >= wisdom, or a natural 20 (critical failure)

The stored rank is ``bucket * 1000 - roll``. Fast characters therefore land
in 2981..2999, creatures on 2000 and slow characters in 981..999. Within a
bucket a lower roll ranks higher, and the die roll can be recovered from the
rank.
"""

import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Callable, Iterable, List

from bsh.models import (
    Attribute,
    Attributes,
    Character,
    Combatant,
    CriticalFlag,
    Entity,
    EntityKind,
    InitiativeUpdate,
    RulesConfiguration,
)
from bsh.core.attributes import calculate_attribute_values
from bsh.core.dice import DiceRoller
from bsh.core.exceptions import StoreLookupError, StoreUpdateError

if TYPE_CHECKING:
    from bsh.storage.store import CombatantStore

logger = logging.getLogger(__name__)

DEFAULT_WILLPOWER = 10
BUCKET_SIZE = 1000
INITIATIVE_DIE = 20


class InitiativeBucket(IntEnum):
    SLOW = 1
    MIDDLE = 2
    FAST = 3


CREATURE_RANK = InitiativeBucket.MIDDLE * BUCKET_SIZE


def classify_initiative(raw: int, willpower: float) -> tuple[InitiativeBucket, CriticalFlag | None]:
    """Buckets a character's raw d20. Natural 1 and 20 override the wisdom comparison."""
    if raw == 1:
        return InitiativeBucket.FAST, CriticalFlag.CRITICAL_SUCCESS
    if raw == INITIATIVE_DIE:
        return InitiativeBucket.SLOW, CriticalFlag.CRITICAL_FAILURE
    if raw < willpower:
        return InitiativeBucket.FAST, None
    return InitiativeBucket.SLOW, None


def initiative_rank(bucket: InitiativeBucket, raw: int = 0) -> int:
    return bucket * BUCKET_SIZE - raw


def initiative_status(kind: EntityKind, rank: int | None) -> str:
    """
    Turn order display text. Character ranks are never shown as numbers,
    only as Success or Failure. Creatures show nothing.
    """
    if kind != EntityKind.CHARACTER:
        return ""
    return "Success" if (rank or 0) > CREATURE_RANK else "Failure"


class InitiativeResolver:
    """
    Rolls initiative for a set of combatants and writes every rank and
    critical flag back in one batched update.

    The resolver keeps no state between calls. Previous ranks and flags are
    never read; each call overwrites them.
    """

    def __init__(
        self,
        store: "CombatantStore",
        dice: DiceRoller | None = None,
        rules: RulesConfiguration | None = None,
        derive_attributes: Callable[[Character, RulesConfiguration], Attributes] = calculate_attribute_values,
    ):
        self.store = store
        self.dice = dice or DiceRoller()
        self.rules = rules or RulesConfiguration()
        self.derive_attributes = derive_attributes

    def resolve_initiative(self, combatant_ids: Iterable[str]) -> List[InitiativeUpdate]:
        """
        Resolves initiative for the given combatant ids.

        Combatants that cannot be found, or whose entity cannot be found, are
        skipped. A repeated id is rolled once per occurrence and the last entry
        wins when the batch is applied.

        Raises:
            StoreLookupError: A combatant or its entity could not be read. Nothing is written.
            DiceRollError: A die could not be drawn. Nothing is written.
            StoreUpdateError: The store rejected the batch. Nothing is applied.
        """
        updates: List[InitiativeUpdate] = []

        for combatant_id in combatant_ids:
            try:
                combatant = self.store.find_combatant(combatant_id)
                entity = self.store.find_controlling_entity(combatant) if combatant is not None else None
            except Exception as e:
                raise StoreLookupError(f"Combatant {combatant_id} could not be read: {e}") from e

            if combatant is None:
                logger.debug(f"Skipping initiative for unknown combatant {combatant_id}")
                continue
            if entity is None:
                logger.debug(f"Skipping initiative for combatant {combatant_id}: no controlling entity")
                continue

            updates.append(self._initiative_for(combatant, entity))

        if not updates:
            return updates

        try:
            self.store.batch_update(updates)
        except StoreUpdateError:
            raise
        except Exception as e:
            raise StoreUpdateError(f"Initiative update rejected: {e}") from e

        logger.info(f"Initiative applied to {len(updates)} combatant(s)")
        return updates

    def _initiative_for(self, combatant: Combatant, entity: Entity) -> InitiativeUpdate:
        willpower = self.resolve_willpower(entity)

        if entity.kind != EntityKind.CHARACTER:
            # Creature wisdom is read but does not affect the fixed middle rank.
            logger.debug(f"{entity.name} (wisdom {willpower}) takes the creature rank")
            return InitiativeUpdate(id=combatant.id, rank=CREATURE_RANK, critical_flag=None)

        raw = self.dice.roll_die(INITIATIVE_DIE)
        bucket, critical_flag = classify_initiative(raw, willpower)
        rank = initiative_rank(bucket, raw)

        logger.debug(f"{entity.name} rolls {raw} vs wisdom {willpower}: bucket {bucket.name}, rank {rank}")
        return InitiativeUpdate(id=combatant.id, rank=rank, critical_flag=critical_flag)

    def resolve_willpower(self, entity: Entity) -> float:
        """
        The wisdom value initiative is rolled against. Characters use their
        cached calculation when present and derive it otherwise. Anything that
        is not a number falls back to 10.
        """
        wisdom = Attribute.WISDOM.value

        if entity.kind == EntityKind.CHARACTER:
            attributes = entity.calculated
            if attributes is None:
                attributes = self.derive_attributes(entity, self.rules)
            value = attributes.get(wisdom) if attributes else None
        else:
            value = entity.attributes.get(wisdom)

        if not _is_number(value):
            logger.debug(f"No usable wisdom for {entity.id}, using {DEFAULT_WILLPOWER}")
            return DEFAULT_WILLPOWER
        return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

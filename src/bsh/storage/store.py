import logging
from typing import Dict, Iterable, List, Protocol

from bsh.models import Combatant, Entity, InitiativeUpdate
from bsh.core.exceptions import StoreUpdateError

logger = logging.getLogger(__name__)

class CombatantStore(Protocol):
    """The host's combatant and entity documents, accessed by id."""

    def find_combatant(self, combatant_id: str) -> Combatant | None: ...

    def find_controlling_entity(self, combatant: Combatant) -> Entity | None: ...

    def list_combatants(self) -> List[Combatant]: ...

    def batch_update(self, updates: List[InitiativeUpdate]) -> None:
        """Apply every update as one operation, or none of them."""
        ...


class InMemoryCombatantStore:
    """
    Dict-backed store. Combatants keep their insertion order, which is the
    order the turn tracker falls back on for equal ranks.
    """
    def __init__(self, entities: Iterable[Entity] = (), combatants: Iterable[Combatant] = ()):
        self._entities: Dict[str, Entity] = {entity.id: entity for entity in entities}
        self._combatants: Dict[str, Combatant] = {combatant.id: combatant for combatant in combatants}

    def add_entity(self, entity: Entity) -> None:
        self._entities[entity.id] = entity

    def add_combatant(self, combatant: Combatant) -> None:
        self._combatants[combatant.id] = combatant

    def get_entity(self, entity_id: str) -> Entity | None:
        return self._entities.get(entity_id)

    def find_combatant(self, combatant_id: str) -> Combatant | None:
        return self._combatants.get(combatant_id)

    def find_controlling_entity(self, combatant: Combatant) -> Entity | None:
        if combatant.entity_id is None:
            return None
        return self._entities.get(combatant.entity_id)

    def list_combatants(self) -> List[Combatant]:
        return list(self._combatants.values())

    def batch_update(self, updates: List[InitiativeUpdate]) -> None:
        # Validate everything before touching any record.
        missing = [update.id for update in updates if update.id not in self._combatants]
        if missing:
            raise StoreUpdateError(f"Unknown combatant(s) in batch: {', '.join(missing)}")

        staged = dict(self._combatants)
        for update in updates:
            staged[update.id] = staged[update.id].model_copy(update={
                "initiative": update.rank,
                "critical_flag": update.critical_flag,
            })
        self._combatants = staged
        logger.info(f"State applied: initiative for {len(updates)} combatant(s)")

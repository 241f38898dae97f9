import logging
from typing import TYPE_CHECKING, Iterable, List

from bsh.models import Combatant, EntityKind, InitiativeUpdate
from bsh.core.exceptions import RulesError
from bsh.core.initiative import InitiativeResolver, initiative_status

if TYPE_CHECKING:
    from bsh.storage.store import CombatantStore

logger = logging.getLogger(__name__)


class Combat:
    """
    Turn order coordinator for one encounter.
    Rolls initiative through the resolver and presents the resulting order.
    """

    def __init__(self, store: "CombatantStore", resolver: InitiativeResolver | None = None):
        self.store = store
        self.resolver = resolver or InitiativeResolver(store)
        self.last_error: RulesError | None = None

    def roll_initiative(self, combatant_ids: Iterable[str]) -> List[InitiativeUpdate]:
        """
        Rolls initiative for the given combatants. A failure is reported once
        for the whole attempt and leaves the turn order untouched.
        """
        self.last_error = None
        try:
            return self.resolver.resolve_initiative(combatant_ids)
        except RulesError as e:
            self.last_error = e
            logger.error(f"Initiative could not be rolled: {e}")
            return []

    def roll_all(self) -> List[InitiativeUpdate]:
        return self.roll_initiative([combatant.id for combatant in self.store.list_combatants()])

    def turn_order(self) -> List[Combatant]:
        """Combatants by rank, highest first. Unrolled combatants come last, in store order."""
        combatants = self.store.list_combatants()
        rolled = [c for c in combatants if c.initiative is not None]
        unrolled = [c for c in combatants if c.initiative is None]
        return sorted(rolled, key=lambda c: c.initiative, reverse=True) + unrolled

    def initiative_display(self, combatant: Combatant) -> str:
        entity = self.store.find_controlling_entity(combatant)
        if entity is None:
            return ""
        return initiative_status(EntityKind(entity.kind), combatant.initiative)

    def summary(self) -> str:
        """Returns the turn order as text, one combatant per line."""
        lines = []
        for position, combatant in enumerate(self.turn_order(), start=1):
            entity = self.store.find_controlling_entity(combatant)
            name = entity.name if entity else combatant.id
            status = self.initiative_display(combatant)
            flag = f" ({combatant.critical_flag.value})" if combatant.critical_flag else ""
            lines.append(f"{position}. {name} {status}{flag}".rstrip())
        return "\n".join(lines)

"""
Tests for initiative: bucketing, ranks, critical flags, the batched write
and the turn order display.
"""

import random

import pytest

from bsh.core import (
    Combat,
    DiceRoller,
    DiceRollError,
    InitiativeResolver,
    StoreLookupError,
    StoreUpdateError,
)
from bsh.core.initiative import (
    CREATURE_RANK,
    InitiativeBucket,
    classify_initiative,
    initiative_rank,
    initiative_status,
)
from bsh.models import Character, Combatant, Creature, CriticalFlag, EntityKind
from bsh.storage import InMemoryCombatantStore


class ScriptedRandom(random.Random):
    """Returns queued die values instead of random ones."""

    def __init__(self, values=()):
        super().__init__(0)
        self.values = list(values)

    def randint(self, a, b):
        if not self.values:
            raise RuntimeError("no scripted rolls left")
        return self.values.pop(0)


class RecordingStore(InMemoryCombatantStore):
    """Keeps every batch it receives."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.batches = []

    def batch_update(self, updates):
        self.batches.append(list(updates))
        super().batch_update(updates)


def character(entity_id: str, wisdom: int = 10, **kwargs) -> Character:
    attributes = {"strength": 10, "dexterity": 10, "constitution": 10,
                  "intelligence": 10, "wisdom": wisdom, "charisma": 10}
    return Character(id=entity_id, name=entity_id.title(), attributes=attributes, **kwargs)


def make_resolver(store, rolls=(), **kwargs) -> InitiativeResolver:
    return InitiativeResolver(store, dice=DiceRoller(ScriptedRandom(rolls)), **kwargs)


# ============================================================
# BUCKETS AND RANKS
# ============================================================

def test_rank_for_every_wisdom_and_roll():
    """Every wisdom/roll pair lands in the documented rank interval."""
    for wisdom in range(3, 19):
        for raw in range(1, 21):
            bucket, flag = classify_initiative(raw, wisdom)
            rank = initiative_rank(bucket, raw)
            if raw == 1:
                assert 2981 <= rank <= 2999
                assert flag == CriticalFlag.CRITICAL_SUCCESS
            elif raw == 20:
                assert 981 <= rank <= 999
                assert flag == CriticalFlag.CRITICAL_FAILURE
            elif raw < wisdom:
                assert rank == 3000 - raw
                assert flag is None
            else:
                assert rank == 1000 - raw
                assert flag is None


def test_criticals_override_wisdom():
    """A natural 1 succeeds against wisdom 3 and a natural 20 fails against 18."""
    assert classify_initiative(1, 1) == (InitiativeBucket.FAST, CriticalFlag.CRITICAL_SUCCESS)
    assert classify_initiative(20, 25) == (InitiativeBucket.SLOW, CriticalFlag.CRITICAL_FAILURE)


def test_roll_equal_to_wisdom_fails():
    assert classify_initiative(10, 10) == (InitiativeBucket.SLOW, None)
    assert classify_initiative(9, 10) == (InitiativeBucket.FAST, None)


def test_creature_rank_is_middle_bucket():
    assert CREATURE_RANK == 2000
    assert initiative_rank(InitiativeBucket.MIDDLE) == 2000


# ============================================================
# RESOLVER
# ============================================================

def test_fast_character_acts_before_slow_character():
    store = RecordingStore(
        entities=[character("a", wisdom=10), character("b", wisdom=10)],
        combatants=[Combatant(id="A", entity_id="a"), Combatant(id="B", entity_id="b")],
    )
    updates = make_resolver(store, rolls=[5, 15]).resolve_initiative(["A", "B"])

    ranks = {update.id: update.rank for update in updates}
    assert ranks == {"A": 2995, "B": 985}
    order = sorted(store.list_combatants(), key=lambda c: c.initiative, reverse=True)
    assert [c.id for c in order] == ["A", "B"]


def test_critical_success_outranks_ordinary_success():
    store = RecordingStore(
        entities=[character("a"), character("b", wisdom=10)],
        combatants=[Combatant(id="A", entity_id="a"), Combatant(id="B", entity_id="b")],
    )
    updates = make_resolver(store, rolls=[1, 8]).resolve_initiative(["A", "B"])

    assert updates[0].rank == 2999
    assert updates[0].critical_flag == CriticalFlag.CRITICAL_SUCCESS
    assert updates[1].rank == 2992
    assert updates[1].critical_flag is None


def test_creatures_never_roll():
    """Creatures take rank 2000 whatever their wisdom, without drawing a die."""
    store = RecordingStore(
        entities=[
            Creature(id="wise", name="Wise Sphinx", attributes={"wisdom": 18}),
            Creature(id="dull", name="Dull Ooze", attributes={"wisdom": 3}),
            Creature(id="plain", name="Plain Rat"),
        ],
        combatants=[
            Combatant(id="1", entity_id="wise", initiative=2999, critical_flag=CriticalFlag.CRITICAL_SUCCESS),
            Combatant(id="2", entity_id="dull"),
            Combatant(id="3", entity_id="plain"),
        ],
    )
    # No scripted rolls: drawing a die would raise.
    updates = make_resolver(store).resolve_initiative(["1", "2", "3"])

    assert [(u.rank, u.critical_flag) for u in updates] == [(2000, None)] * 3
    assert store.find_combatant("1").critical_flag is None


def test_reroll_overwrites_previous_rank_and_clears_flag():
    store = RecordingStore(
        entities=[character("a", wisdom=12)],
        combatants=[Combatant(id="A", entity_id="a")],
    )
    resolver = make_resolver(store, rolls=[20, 4])

    resolver.resolve_initiative(["A"])
    first = store.find_combatant("A")
    assert (first.initiative, first.critical_flag) == (980, CriticalFlag.CRITICAL_FAILURE)

    resolver.resolve_initiative(["A"])
    second = store.find_combatant("A")
    assert (second.initiative, second.critical_flag) == (2996, None)


def test_unresolvable_combatants_are_skipped():
    store = RecordingStore(
        entities=[character("a")],
        combatants=[
            Combatant(id="A", entity_id="a"),
            Combatant(id="ghost", entity_id="missing"),
            Combatant(id="nobody"),
        ],
    )
    updates = make_resolver(store, rolls=[3]).resolve_initiative(["A", "ghost", "nobody", "unknown"])

    assert [u.id for u in updates] == ["A"]
    assert len(store.batches) == 1
    assert [u.id for u in store.batches[0]] == ["A"]
    assert store.find_combatant("ghost").initiative is None


def test_no_write_when_nothing_resolves():
    store = RecordingStore(combatants=[Combatant(id="ghost", entity_id="missing")])
    assert make_resolver(store).resolve_initiative(["ghost"]) == []
    assert make_resolver(store).resolve_initiative([]) == []
    assert store.batches == []


def test_input_order_does_not_change_ranks():
    def ranks_for(ids, rolls):
        store = InMemoryCombatantStore(
            entities=[character("a", wisdom=14), Creature(id="m", name="Monster")],
            combatants=[Combatant(id="A", entity_id="a"), Combatant(id="M", entity_id="m")],
        )
        return {u.id: u.rank for u in make_resolver(store, rolls=rolls).resolve_initiative(ids)}

    assert ranks_for(["A", "M"], [7]) == ranks_for(["M", "A"], [7]) == {"A": 2993, "M": 2000}


def test_repeated_id_rolls_each_time_and_last_wins():
    store = RecordingStore(
        entities=[character("a", wisdom=10)],
        combatants=[Combatant(id="A", entity_id="a")],
    )
    updates = make_resolver(store, rolls=[2, 17]).resolve_initiative(["A", "A"])

    assert [u.rank for u in updates] == [2998, 983]
    assert len(store.batches) == 1
    assert store.find_combatant("A").initiative == 983


# ============================================================
# WISDOM RESOLUTION
# ============================================================

def test_cached_calculation_is_used_before_deriving():
    calls = []

    def derive(entity, rules):
        calls.append(entity.id)
        return {"wisdom": 3}

    cached = character("cached", wisdom=3, calculated={"wisdom": 15})
    raw = character("raw", wisdom=3)
    store = InMemoryCombatantStore(
        entities=[cached, raw],
        combatants=[Combatant(id="C", entity_id="cached"), Combatant(id="R", entity_id="raw")],
    )
    updates = make_resolver(store, rolls=[12, 12], derive_attributes=derive).resolve_initiative(["C", "R"])

    assert calls == ["raw"]
    assert updates[0].rank == 2988     # 12 < 15
    assert updates[1].rank == 988      # 12 >= 3


def test_derivation_applies_background_bonuses():
    from bsh.models import Background, Backgrounds, RulesConfiguration

    rules = RulesConfiguration(backgrounds={"Priest": Background(attributes={"wisdom": 4})})
    pc = character("pc", wisdom=8, backgrounds=Backgrounds(first="Priest"))
    store = InMemoryCombatantStore(entities=[pc], combatants=[Combatant(id="P", entity_id="pc")])

    updates = make_resolver(store, rolls=[10], rules=rules).resolve_initiative(["P"])
    assert updates[0].rank == 2990     # 10 < 8 + 4


def test_empty_cached_calculation_is_kept():
    calls = []

    def derive(entity, rules):
        calls.append(entity.id)
        return {"wisdom": 18}

    pc = character("pc", wisdom=18, calculated={})
    store = InMemoryCombatantStore(entities=[pc], combatants=[Combatant(id="P", entity_id="pc")])
    updates = make_resolver(store, rolls=[12], derive_attributes=derive).resolve_initiative(["P"])

    assert calls == []
    assert updates[0].rank == 988      # 12 >= 10


@pytest.mark.parametrize("derived", [{}, {"wisdom": None}, {"wisdom": "wise"}, {"wisdom": True}])
def test_missing_wisdom_defaults_to_ten(derived):
    store = InMemoryCombatantStore(
        entities=[character("a")],
        combatants=[Combatant(id="A", entity_id="a")],
    )
    resolver = make_resolver(store, rolls=[9, 10], derive_attributes=lambda entity, rules: derived)

    assert resolver.resolve_initiative(["A"])[0].rank == 2991
    assert resolver.resolve_initiative(["A"])[0].rank == 990


def test_creature_wisdom_defaults_to_ten():
    resolver = make_resolver(InMemoryCombatantStore())
    assert resolver.resolve_willpower(Creature(id="m", name="Monster")) == 10
    assert resolver.resolve_willpower(Creature(id="m", name="Monster", attributes={"wisdom": 6})) == 6


# ============================================================
# FAILURES
# ============================================================

def test_dice_failure_aborts_whole_call():
    store = RecordingStore(
        entities=[character("a"), character("b")],
        combatants=[Combatant(id="A", entity_id="a"), Combatant(id="B", entity_id="b")],
    )
    with pytest.raises(DiceRollError):
        make_resolver(store, rolls=[5]).resolve_initiative(["A", "B"])

    assert store.batches == []
    assert all(c.initiative is None for c in store.list_combatants())


def test_store_rejection_surfaces_once():
    class BrokenStore(InMemoryCombatantStore):
        def batch_update(self, updates):
            raise ConnectionError("document store offline")

    store = BrokenStore(entities=[character("a")], combatants=[Combatant(id="A", entity_id="a")])
    with pytest.raises(StoreUpdateError, match="document store offline"):
        make_resolver(store, rolls=[5]).resolve_initiative(["A"])


def test_store_lookup_failure_surfaces_once():
    class UnreadableStore(InMemoryCombatantStore):
        def find_controlling_entity(self, combatant):
            raise ConnectionError("document store offline")

    store = UnreadableStore(entities=[character("a")], combatants=[Combatant(id="A", entity_id="a")])
    with pytest.raises(StoreLookupError, match="document store offline"):
        make_resolver(store, rolls=[5]).resolve_initiative(["A"])

    combat = Combat(store, make_resolver(store, rolls=[5]))
    assert combat.roll_initiative(["A"]) == []
    assert isinstance(combat.last_error, StoreLookupError)
    assert store.find_combatant("A").initiative is None


def test_in_memory_batch_is_all_or_nothing():
    from bsh.models import InitiativeUpdate

    store = InMemoryCombatantStore(combatants=[Combatant(id="A")])
    with pytest.raises(StoreUpdateError):
        store.batch_update([InitiativeUpdate(id="A", rank=2995), InitiativeUpdate(id="Z", rank=985)])
    assert store.find_combatant("A").initiative is None


def test_combat_reports_failure_without_raising():
    store = RecordingStore(entities=[character("a")], combatants=[Combatant(id="A", entity_id="a")])
    combat = Combat(store, make_resolver(store))

    assert combat.roll_initiative(["A"]) == []
    assert isinstance(combat.last_error, DiceRollError)
    assert store.find_combatant("A").initiative is None


# ============================================================
# DISPLAY AND TURN ORDER
# ============================================================

def test_display_rule():
    assert initiative_status(EntityKind.CHARACTER, 2995) == "Success"
    assert initiative_status(EntityKind.CHARACTER, 995) == "Failure"
    assert initiative_status(EntityKind.CHARACTER, 2000) == "Failure"
    assert initiative_status(EntityKind.CHARACTER, None) == "Failure"
    assert initiative_status(EntityKind.CREATURE, 2000) == ""


def test_turn_order_mixes_buckets():
    store = InMemoryCombatantStore(
        entities=[character("slow", wisdom=9), character("fast", wisdom=16), Creature(id="orc", name="Orc")],
        combatants=[
            Combatant(id="S", entity_id="slow"),
            Combatant(id="O1", entity_id="orc"),
            Combatant(id="F", entity_id="fast"),
            Combatant(id="O2", entity_id="orc"),
            Combatant(id="late", entity_id="missing"),
        ],
    )
    combat = Combat(store, make_resolver(store, rolls=[11, 6]))
    combat.roll_all()

    order = combat.turn_order()
    assert [c.id for c in order] == ["F", "O1", "O2", "S", "late"]
    assert [combat.initiative_display(c) for c in order] == ["Success", "", "", "Failure", ""]
    print(combat.summary())
    assert combat.summary().splitlines()[0] == "1. Fast Success"

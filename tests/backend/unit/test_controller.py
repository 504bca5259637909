import asyncio
from dataclasses import replace

from skirmish.backend.content import InMemoryContentStore
from skirmish.backend.controller import EncounterController, parse_hp_change
from skirmish.backend.dice import Dice
from skirmish.backend.models import (
    Creature,
    CreatureAttributes,
    EncounterDefinition,
    Monster,
    MonsterGroup,
    Player,
)

ATTRIBUTES = CreatureAttributes(hp=20, speed=5, initiative=10, accuracy=14, guard=12, resist=12, roll_bonus=4, dmg="d6")


def _monster(monster_id: str = "M", initiative: int = 10, template: str = "Normal") -> Monster:
    return Monster(
        id=monster_id,
        name=monster_id,
        monster_id="creature",
        level=1,
        role="Enforcer",
        template=template,
        tr=10,
        attributes=ATTRIBUTES,
        initiative=initiative,
        current_hp=20,
        max_hp=20,
    )


def _controller(*combatants) -> EncounterController:
    return EncounterController.from_roster(combatants, dice=Dice.seeded(42))


def _player(controller: EncounterController, player_id: str = "A") -> Player:
    found = controller.find(player_id)
    assert isinstance(found, Player)
    return found


def test_initial_state_rolls_round_one_peril() -> None:
    controller = _controller(Player(id="A", name="Aria"), _monster())

    assert controller.round == 1
    assert controller.turn_index == 0
    assert controller.peril().round == 1
    assert 2 <= controller.peril().roll <= 12


def test_next_turn_is_blocked_until_players_have_initiative() -> None:
    controller = _controller(Player(id="A", name="Aria"), _monster())

    controller.next_turn()

    assert (controller.round, controller.turn_index) == (1, 0)
    assert controller.active_turn() is None
    assert [p.id for p in controller.untracked_players()] == ["A"]

    controller.update_combatant(Player(id="A", name="Aria", initiative=15))
    controller.next_turn()

    assert controller.all_players_ready() is True
    assert controller.turn_index == 1
    assert controller.active_turn().turn_id == "M"


def test_end_of_round_creates_next_round_with_players_reset() -> None:
    controller = _controller(Player(id="A", name="Aria", initiative=15, nat20=True), _monster())

    for _ in range(3):
        controller.next_turn()

    assert controller.round == 2
    assert controller.turn_index == 0
    assert _player(controller).initiative == 0
    assert _player(controller).nat20 is False
    assert controller.all_players_ready() is False
    assert controller.peril().round == 2
    assert controller.rounds.get(1)[0].initiative == 15


def test_rounds_are_independent_after_advancement() -> None:
    controller = _controller(_monster())
    controller.next_turn()

    controller.adjust_hp("M", "-5")
    controller.add_state("M", "Guarded", intensity=2)

    round_one_monster = controller.rounds.get(1)[0]
    round_two_monster = controller.rounds.get(2)[0]
    assert round_one_monster.current_hp == 20
    assert round_one_monster.states == ()
    assert round_two_monster.current_hp == 15
    assert [s.name for s in round_two_monster.states] == ["Guarded"]


def test_monster_hp_and_states_carry_into_new_round() -> None:
    controller = _controller(_monster())
    controller.adjust_hp("M", "7")
    controller.add_state("M", "Slow", intensity=1)

    controller.next_turn()

    monster = controller.find("M")
    assert controller.round == 2
    assert monster.current_hp == 7
    assert [s.name for s in monster.states] == ["Slow"]


def test_prev_turn_steps_back_then_to_start_of_previous_round() -> None:
    controller = _controller(_monster("M1", 12), _monster("M2", 8))
    controller.next_turn()
    controller.next_turn()
    controller.next_turn()
    assert (controller.round, controller.turn_index) == (2, 1)

    controller.prev_turn()
    assert (controller.round, controller.turn_index) == (2, 0)

    controller.prev_turn()
    assert (controller.round, controller.turn_index) == (1, 0)

    controller.prev_turn()
    assert (controller.round, controller.turn_index) == (1, 0)


def test_revisiting_an_existing_round_does_not_recreate_it() -> None:
    controller = _controller(_monster())
    controller.next_turn()
    controller.adjust_hp("M", "-3")
    peril_two = controller.peril()

    controller.prev_turn()
    controller.next_turn()

    assert controller.round == 2
    assert controller.find("M").current_hp == 17
    assert controller.peril() is peril_two


def test_player_update_propagates_to_future_rounds_only() -> None:
    controller = _controller(Player(id="A", name="Aria", initiative=9), _monster())
    controller.next_turn()
    controller.next_turn()
    controller.update_combatant(Player(id="A", name="Aria", initiative=5))
    controller.next_turn()
    controller.next_turn()
    assert controller.round == 3

    controller.prev_turn()
    controller.prev_turn()
    assert controller.round == 1

    controller.update_combatant(Player(id="A", name="Aria", initiative=18, nat20=True))

    assert controller.rounds.get(1)[0].initiative == 18
    for number in (2, 3):
        carried = controller.rounds.get(number)[0]
        assert carried.initiative == 18
        assert carried.nat20 is True


def test_monster_update_stays_in_active_round() -> None:
    controller = _controller(_monster())
    controller.next_turn()
    controller.prev_turn()

    controller.update_combatant(replace(_monster(), current_hp=2))

    assert controller.rounds.get(1)[0].current_hp == 2
    assert controller.rounds.get(2)[0].current_hp == 20


def test_update_for_unknown_combatant_is_ignored() -> None:
    controller = _controller(_monster())

    controller.update_combatant(Player(id="ghost", name="Ghost", initiative=3))

    assert controller.roster() == (_monster(),)


def test_add_player_joins_current_and_future_rounds() -> None:
    controller = _controller(_monster())
    controller.next_turn()
    controller.next_turn()
    controller.prev_turn()
    assert controller.round == 2

    newcomer = controller.add_player("Cass")

    assert newcomer.initiative == 0 and newcomer.nat20 is False
    assert newcomer in controller.rounds.get(2)
    assert newcomer in controller.rounds.get(3)
    assert newcomer not in controller.rounds.get(1)
    assert controller.untracked_players() == (newcomer,)


def test_peril_is_not_rerolled_when_roster_changes() -> None:
    controller = _controller(_monster())
    before = controller.peril()

    controller.add_player("Cass")
    controller.update_combatant(replace(_monster(), template="Tyrant"))

    assert controller.peril() is before


def test_empty_roster_advances_round_each_turn() -> None:
    controller = _controller()

    controller.next_turn()
    controller.next_turn()

    assert controller.round == 3
    assert controller.active_turn() is None


def test_effective_attributes_reflect_states() -> None:
    controller = _controller(_monster())
    controller.add_state("M", "Guarded", intensity=3)
    state = controller.add_state("M", "Unguarded", intensity=1)

    assert controller.effective_attributes("M").guard == 14

    controller.set_state_intensity("M", state.id, 5)
    assert controller.effective_attributes("M").guard == 10

    controller.remove_state("M", state.id)
    assert controller.effective_attributes("M").guard == 15
    assert controller.find("M").attributes.guard == 12


def test_add_state_uses_catalog_or_custom_name() -> None:
    controller = _controller(_monster(), Player(id="A", name="Aria"))

    known = controller.add_state("M", "hastened", intensity=2)
    custom = controller.add_state("M", "Marked", intensity=-4)

    assert known.name == "Hastened"
    assert known.effect.attribute == "Initiative"
    assert known.description
    assert custom.effect is None
    assert custom.intensity == 0
    assert controller.add_state("A", "Slow") is None


def test_adjust_hp_accepts_relative_and_absolute_values() -> None:
    controller = _controller(_monster())

    controller.adjust_hp("M", "+5")
    assert controller.find("M").current_hp == 25
    controller.adjust_hp("M", "-30")
    assert controller.find("M").current_hp == -5
    controller.adjust_hp("M", "12")
    assert controller.find("M").current_hp == 12
    controller.adjust_hp("M", "lots")
    assert controller.find("M").current_hp == 12


def test_parse_hp_change() -> None:
    assert parse_hp_change("+3", 10) == 13
    assert parse_hp_change(" - 4 ", 10) == 6
    assert parse_hp_change("8", 10) == 8
    assert parse_hp_change("", 10) is None


def test_start_builds_roster_from_content() -> None:
    creature = Creature(
        id="ogre",
        name="Ogre",
        level=2,
        role="Enforcer",
        template="Paragon",
        tr=40,
        attributes=ATTRIBUTES,
    )
    content = InMemoryContentStore(creatures={"ogre": creature}, deeds={}, encounter_tables={})
    definition = EncounterDefinition(
        id="enc",
        name="Gate",
        monster_groups=(MonsterGroup("ogre", 1),),
        player_names=("Aria",),
    )

    controller = asyncio.run(EncounterController.start(definition, content, dice=Dice.seeded(5)))

    assert controller.round == 1
    assert len(controller.roster()) == 2
    assert controller.all_players_ready() is False
    assert [entry.turn_id.endswith("-extra") for entry in controller.turn_order()] == [False, True]

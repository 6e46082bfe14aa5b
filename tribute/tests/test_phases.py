"""
Tests for the phase state machine.

Tests:
- Phase order and side swap
- Draw phase and the first-turn skip
- Battle phase advancement gate
- End phase hand limit and discard
"""

from ..engine_core.action import Action, ActionKind, ErrorCode
from ..engine_core.phases import NEXT_PHASE, PhaseManager
from ..engine_core.state import Phase, Side, Stance, ZoneType


PHASE_ORDER = [
    Phase.DRAW, Phase.STANDBY, Phase.MAIN_1, Phase.BATTLE, Phase.MAIN_2, Phase.END,
]


class TestPhaseOrder:
    """Tests for advancement order."""

    def test_next_phase_table(self):
        for current, following in zip(PHASE_ORDER, PHASE_ORDER[1:] + [Phase.DRAW]):
            assert NEXT_PHASE[current] == following

    def test_full_turn_cycle(self, engine):
        """Advancing six times returns to draw with the other side to act."""
        seen = []
        for _ in range(6):
            result = engine.process_action(Action.advance_phase(engine.state.current_side))
            assert result.success
            seen.append(engine.state.phase)

        assert seen == PHASE_ORDER[1:] + [Phase.DRAW]
        assert engine.state.current_side == Side.PLAYER_2
        assert engine.state.turn_number == 2

    def test_turn_increments_on_every_swap(self, engine, advance_to):
        for expected_turn, side in [(2, Side.PLAYER_2), (3, Side.PLAYER_1), (4, Side.PLAYER_2)]:
            advance_to(engine, Phase.END)
            engine.process_action(Action.advance_phase(engine.state.current_side))
            assert engine.state.turn_number == expected_turn
            assert engine.state.current_side == side

    def test_advance_result_detail(self, engine):
        result = engine.process_action(Action.advance_phase(Side.PLAYER_1))
        assert result.detail["previous_phase"] == "draw"
        assert result.detail["phase"] == "standby"
        assert result.detail["current_side"] == "player1"

    def test_swap_resets_per_turn_flags(self, new_engine, advance_to):
        engine = new_engine(p2_hand=["kuriboh"])
        state = engine.state
        state.sides[Side.PLAYER_2].normal_summoned = True
        state.sides[Side.PLAYER_2].may_draw = False

        advance_to(engine, Phase.END)
        engine.process_action(Action.advance_phase(Side.PLAYER_1))

        p2 = state.sides[Side.PLAYER_2]
        assert p2.normal_summoned is False
        # The draw already happened on entering the draw phase
        assert p2.may_draw is False
        assert len(p2.hand) == 6

    def test_swap_resets_creature_flags(self, engine, place_creature, advance_to):
        state = engine.state
        creature = place_creature(state, Side.PLAYER_2, "dark_elf")
        creature.has_attacked = True
        creature.can_change_stance = False
        creature.can_attack = False

        advance_to(engine, Phase.END)
        engine.process_action(Action.advance_phase(Side.PLAYER_1))

        assert creature.has_attacked is False
        assert creature.can_change_stance is True
        assert creature.can_attack is True


class TestDrawPhase:
    """Tests for the automatic draw."""

    def test_second_side_draws_on_turn_two(self, new_engine, advance_to):
        engine = new_engine(p2_draws=["jinzo"])
        advance_to(engine, Phase.END)
        result = engine.process_action(Action.advance_phase(Side.PLAYER_1))

        p2 = engine.state.sides[Side.PLAYER_2]
        drawn = engine.state.instances[p2.hand[-1]]
        assert drawn.card_id == "jinzo"
        assert drawn.zone == ZoneType.HAND
        assert len(p2.hand) == 6
        assert len(p2.deck) == 6
        assert "drew a card" in result.detail["changes"][0]
        assert engine.state.action_log[-1].kind == "draw_card"

    def test_empty_deck_skips_draw(self, engine, advance_to):
        state = engine.state
        p2 = state.sides[Side.PLAYER_2]
        for instance_id in p2.deck:
            del state.instances[instance_id]
        p2.deck.clear()

        advance_to(engine, Phase.END)
        result = engine.process_action(Action.advance_phase(Side.PLAYER_1))

        assert result.success
        assert len(p2.hand) == 5
        assert state.is_active
        assert "no cards left" in result.detail["changes"][0]

    def test_first_turn_detection(self, engine):
        phases = PhaseManager(engine.state)
        assert phases.is_first_turn_of_starting_side()

        engine.state.turn_number = 3
        assert not phases.is_first_turn_of_starting_side()


class TestBattleGate:
    """Tests for leaving the battle phase."""

    def test_pending_attack_blocks_advance(self, engine, place_creature, advance_to):
        place_creature(engine.state, Side.PLAYER_1, "dark_elf")
        advance_to(engine, Phase.BATTLE)

        result = engine.process_action(Action.advance_phase(Side.PLAYER_1))

        assert not result.success
        assert result.error_code == ErrorCode.CANNOT_ADVANCE
        assert engine.state.phase == Phase.BATTLE

    def test_advance_after_attacking(self, engine, place_creature, advance_to):
        creature = place_creature(engine.state, Side.PLAYER_1, "dark_elf")
        advance_to(engine, Phase.BATTLE)

        engine.process_action(Action.declare_attack(Side.PLAYER_1, creature.instance_id))
        result = engine.process_action(Action.advance_phase(Side.PLAYER_1))

        assert result.success
        assert engine.state.phase == Phase.MAIN_2

    def test_defense_and_fresh_creatures_do_not_block(self, engine, place_creature, advance_to):
        state = engine.state
        place_creature(state, Side.PLAYER_1, "mystical_elf", Stance.DEFENSE)
        place_creature(state, Side.PLAYER_1, "kuriboh", Stance.FACE_DOWN_DEFENSE)
        place_creature(state, Side.PLAYER_1, "dark_elf", turn_placed=1)

        advance_to(engine, Phase.BATTLE)
        assert PhaseManager(state).can_advance()
        assert engine.process_action(Action.advance_phase(Side.PLAYER_1)).success

    def test_pending_effects_block_advance(self, engine):
        engine.state.chain_stack.append("pending_effect")
        result = engine.process_action(Action.advance_phase(Side.PLAYER_1))

        assert not result.success
        assert result.error_code == ErrorCode.CANNOT_ADVANCE
        assert engine.state.phase == Phase.DRAW


class TestAvailableKinds:
    """Tests for per-phase action kinds."""

    def test_kinds_by_phase(self, engine, advance_to):
        assert engine.available_action_kinds() == [ActionKind.ADVANCE_PHASE]

        advance_to(engine, Phase.MAIN_1)
        kinds = engine.available_action_kinds()
        assert ActionKind.NORMAL_SUMMON in kinds
        assert ActionKind.DECLARE_ATTACK not in kinds

        advance_to(engine, Phase.BATTLE)
        assert engine.available_action_kinds() == [
            ActionKind.DECLARE_ATTACK, ActionKind.ADVANCE_PHASE,
        ]

    def test_summon_outside_main_phase_rejected(self, new_engine):
        engine = new_engine(p1_hand=["kuriboh"])
        result = engine.process_action(Action.normal_summon(Side.PLAYER_1, "kuriboh"))

        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_TIMING

    def test_finished_duel_has_no_kinds(self, engine):
        from ..engine_core.state import DuelStatus
        engine.state.set_status(DuelStatus.FINISHED)
        assert engine.available_action_kinds() == []


class TestHandLimit:
    """Tests for the end phase discard obligation."""

    def _overfull(self, new_engine, advance_to):
        # Seven cards in hand at the end of player1's turn
        engine = new_engine(p1_hand=["kuriboh"])
        state = engine.state
        p1 = state.sides[Side.PLAYER_1]
        for _ in range(2):
            instance_id = p1.deck.pop(0)
            state.instances[instance_id].zone = ZoneType.HAND
            p1.hand.append(instance_id)
        advance_to(engine, Phase.END)
        return engine

    def test_entering_end_sets_obligation(self, new_engine, advance_to):
        engine = self._overfull(new_engine, advance_to)
        p1 = engine.state.sides[Side.PLAYER_1]

        assert p1.discard_required == 1
        assert engine.state.action_log[-1].kind == "hand_limit"
        assert ActionKind.DISCARD in engine.available_action_kinds()

    def test_discard_resolves_obligation(self, new_engine, advance_to):
        engine = self._overfull(new_engine, advance_to)
        p1 = engine.state.sides[Side.PLAYER_1]

        result = engine.process_action(Action.discard(Side.PLAYER_1, "kuriboh"))

        assert result.success
        assert result.detail["discard_required"] == 0
        assert len(p1.hand) == 6
        assert engine.state.instances[p1.discard[0]].card_id == "kuriboh"
        assert engine.state.instances[p1.discard[0]].zone == ZoneType.DISCARD
        assert ActionKind.DISCARD not in engine.available_action_kinds()

    def test_discard_without_obligation_rejected(self, engine, advance_to):
        advance_to(engine, Phase.END)
        result = PhaseManager(engine.state).discard(Side.PLAYER_1, "pot_of_greed")

        assert not result.success
        assert result.error_code == ErrorCode.ILLEGAL_TIMING

    def test_discard_card_not_in_hand(self, new_engine, advance_to):
        engine = self._overfull(new_engine, advance_to)
        result = engine.process_action(Action.discard(Side.PLAYER_1, "jinzo"))

        assert not result.success
        assert result.error_code == ErrorCode.NOT_IN_HAND

    def test_obligation_cleared_on_swap(self, new_engine, advance_to):
        engine = self._overfull(new_engine, advance_to)
        engine.process_action(Action.advance_phase(Side.PLAYER_1))

        assert engine.state.sides[Side.PLAYER_1].discard_required == 0
        assert len(engine.state.sides[Side.PLAYER_1].hand) == 7

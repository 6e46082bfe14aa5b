"""
Tests for the DuelEngine facade.

Tests:
- A duel played through several turns
- Raw dict actions and contract errors
- State loading and summaries
- Rollback when a handler fails
- Card instances stay in exactly one zone
"""

import logging
import random

import pytest

from ..engine_core.action import Action, ErrorCode
from ..engine_core.engine import DuelEngine
from ..engine_core.state import DuelStatus, Phase, Side, ZoneType


def advance_until(engine, turn, phase, limit=40):
    """Advance the side to act until a given turn and phase."""
    for _ in range(limit):
        if engine.state.turn_number == turn and engine.state.phase == phase:
            return
        result = engine.process_action(Action.advance_phase(engine.state.current_side))
        assert result.success, result.message
    raise AssertionError(f"Did not reach turn {turn} {phase.value}")


def assert_zones_partition(state):
    """Every instance sits in exactly one zone list of its controller."""
    seen = {}
    for side in Side:
        s = state.sides[side]
        zones = {
            ZoneType.DECK: s.deck,
            ZoneType.HAND: s.hand,
            ZoneType.FIELD: s.field_instance_ids(),
            ZoneType.DISCARD: s.discard,
        }
        for zone, ids in zones.items():
            for instance_id in ids:
                assert instance_id not in seen, f"{instance_id} listed twice"
                seen[instance_id] = zone
                assert state.instances[instance_id].zone == zone

    assert set(seen) == set(state.instances)

    for side in Side:
        for slot, instance_id in state.sides[side].field_slots.items():
            if instance_id is not None:
                assert state.instances[instance_id].field_slot == slot


class TestFullDuel:
    """A short duel from the opening draw to a direct hit."""

    def test_summon_then_attack_next_own_turn(self, new_engine):
        engine = new_engine(p1_hand=["ember_lancer", "kuriboh"])
        state = engine.state

        advance_until(engine, 1, Phase.MAIN_1)
        summoned = engine.process_action(Action.normal_summon(Side.PLAYER_1, "ember_lancer"))
        assert summoned.success
        lancer_id = summoned.detail["instance_id"]

        again = engine.process_action(Action.normal_summon(Side.PLAYER_1, "kuriboh"))
        assert again.error_code == ErrorCode.ALREADY_SUMMONED

        advance_until(engine, 1, Phase.BATTLE)
        too_soon = engine.process_action(Action.declare_attack(Side.PLAYER_1, lancer_id))
        assert too_soon.error_code == ErrorCode.ILLEGAL_TIMING

        advance_until(engine, 3, Phase.BATTLE)
        hit = engine.process_action(Action.declare_attack(Side.PLAYER_1, lancer_id))

        assert hit.success
        assert hit.detail["damage"] == 1600
        assert state.sides[Side.PLAYER_2].life_points == 6400
        assert state.sides[Side.PLAYER_1].life_points == 8000
        assert state.status == DuelStatus.ACTIVE
        assert state.action_log[-1].kind == "direct_attack"

    def test_action_log_is_append_only(self, new_engine):
        engine = new_engine(p1_hand=["ember_lancer"])
        advance_until(engine, 1, Phase.MAIN_1)
        before = [e.to_dict() for e in engine.state.action_log]

        engine.process_action(Action.normal_summon(Side.PLAYER_1, "ember_lancer"))
        engine.process_action(Action.normal_summon(Side.PLAYER_1, "kuriboh"))

        after = [e.to_dict() for e in engine.state.action_log]
        assert after[:len(before)] == before
        assert len(after) == len(before) + 1
        assert [e["entry_id"] for e in after] == list(range(1, len(after) + 1))


class TestRawActions:
    """Tests for dict-shaped actions."""

    def test_dict_action_applied(self, new_engine):
        engine = new_engine(p1_hand=["dark_elf"])
        advance_until(engine, 1, Phase.MAIN_1)

        result = engine.process_action({
            "side": "player1",
            "kind": "normal_summon",
            "card_id": "dark_elf",
            "stance": "defense",
        })

        assert result.success
        assert engine.state.instances[result.detail["instance_id"]].stance.value == "defense"

    def test_unknown_kind(self, engine):
        result = engine.process_action({"side": "player1", "kind": "cast_spell"})

        assert not result.success
        assert result.error_code == ErrorCode.UNKNOWN_ACTION

    @pytest.mark.parametrize("record", [
        {"kind": "advance_phase"},
        {"kind": "advance_phase", "side": "player3"},
        {"kind": "change_stance", "side": "player1", "stance": "sideways"},
        {"kind": ["advance_phase"], "side": "player1"},
        {"kind": "advance_phase", "side": "player1", "params": [1]},
        {"kind": "advance_phase", "side": ["player1"]},
        {"kind": "normal_summon", "side": "player1", "card_id": ["dark_elf"]},
    ])
    def test_malformed_record(self, engine, record):
        result = engine.process_action(record)

        assert not result.success
        assert result.error_code == ErrorCode.MALFORMED_ACTION

    def test_missing_card_id(self, engine, advance_to):
        advance_to(engine, Phase.MAIN_1)
        result = engine.process_action({"side": "player1", "kind": "normal_summon"})

        assert result.error_code == ErrorCode.MALFORMED_ACTION

    def test_result_to_dict(self, engine):
        result = engine.process_action({"side": "player2", "kind": "advance_phase"})
        data = result.to_dict()

        assert data["success"] is False
        assert data["error_code"] == "NOT_YOUR_TURN"
        assert data["detail"] is None


class TestRejectionLogging:
    """Rejections are logged at DEBUG by the facade."""

    def test_rule_rejection_logged(self, engine, caplog):
        caplog.set_level(logging.DEBUG, logger="tribute.engine_core.engine")

        engine.process_action(Action.advance_phase(Side.PLAYER_2))

        records = [r for r in caplog.records if r.name == "tribute.engine_core.engine"]
        assert [r.levelno for r in records] == [logging.DEBUG]
        assert "advance_phase" in records[0].getMessage()

    def test_raw_record_rejection_logged(self, engine, caplog):
        caplog.set_level(logging.DEBUG, logger="tribute.engine_core.engine")

        engine.process_action({"side": "player1", "kind": "cast_spell"})

        records = [r for r in caplog.records if r.name == "tribute.engine_core.engine"]
        assert [r.levelno for r in records] == [logging.DEBUG]
        assert "cast_spell" in records[0].getMessage()

    def test_accepted_action_not_logged_as_rejection(self, engine, caplog):
        caplog.set_level(logging.DEBUG, logger="tribute.engine_core.engine")

        assert engine.process_action(Action.advance_phase(Side.PLAYER_1)).success

        assert not [r for r in caplog.records if "Rejected" in r.getMessage()]


class TestStateHandling:
    """Tests for load_state and summaries."""

    def test_new_engine_from_seed(self):
        engine = DuelEngine(seed=4)
        assert engine.state.status == DuelStatus.ACTIVE
        assert not engine.is_game_over
        assert engine.winner is None

    def test_load_state_from_dict(self, new_engine, catalog, advance_to):
        source = new_engine(p1_hand=["dark_elf"])
        advance_to(source, Phase.MAIN_1)
        data = source.state.to_dict()

        engine = DuelEngine(state=data, catalog=catalog)
        result = engine.process_action(Action.normal_summon(Side.PLAYER_1, "dark_elf"))

        assert result.success
        assert engine.summoning.state is engine.state
        assert engine.battle.state is engine.state
        # The source engine is untouched
        assert source.state.field_creatures(Side.PLAYER_1) == []

    def test_load_malformed_state(self, engine):
        state = engine.state
        with pytest.raises(ValueError):
            engine.load_state({"sides": {}})
        assert engine.state is state

    def test_summary(self, engine):
        summary = engine.summary()
        data = summary.to_dict()

        assert data["game_id"] == "test_duel"
        assert data["status"] == "active"
        assert data["phase"] == "draw"
        assert data["current_side"] == "player1"
        assert data["sides"]["player1"]["life_points"] == 8000
        assert data["sides"]["player2"]["hand_size"] == 5
        assert data["sides"]["player2"]["deck_size"] == 7

    def test_get_state_is_live(self, engine):
        assert engine.get_state() is engine.state


class TestHandlerFailure:
    """An unexpected handler error leaves the state as it was."""

    def test_rollback_on_exception(self, engine, monkeypatch):
        before = engine.state.to_dict()

        def explode(action):
            engine.state.sides[Side.PLAYER_1].life_points = 1
            engine.state.log(Side.PLAYER_1, "partial", "half done")
            raise RuntimeError("boom")

        monkeypatch.setattr(engine, "_handle_advance_phase", explode)
        result = engine.process_action(Action.advance_phase(Side.PLAYER_1))

        assert not result.success
        assert result.error_code == ErrorCode.HANDLER_ERROR
        assert engine.state.to_dict() == before
        assert engine.phases.state is engine.state


class TestZonePartition:
    """Instances never end up in two zones."""

    def test_after_setup(self, engine):
        assert_zones_partition(engine.state)

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_random_legal_play(self, seed):
        engine = DuelEngine(seed=seed)
        rng = random.Random(seed)

        for _ in range(300):
            if engine.is_game_over:
                break
            actions = engine.legal_actions()
            assert actions
            action = rng.choice(actions)
            result = engine.process_action(action)
            assert result.success, f"{action.to_dict()} -> {result.message}"
            assert_zones_partition(engine.state)
            for side in Side:
                assert engine.state.sides[side].life_points >= 0

"""
Tests for legal action generation.
"""

from ..engine_core.action import Action, ActionKind
from ..engine_core.action_generator import ActionGenerator, is_legal, legal_actions
from ..engine_core.engine import DuelEngine
from ..engine_core.state import DuelStatus, Phase, Side, Stance


def kinds(actions):
    return [a.kind for a in actions]


def all_succeed(engine, actions):
    """Each action succeeds when applied to its own copy of the duel."""
    for action in actions:
        copy = DuelEngine(state=engine.state.clone(), catalog=engine.catalog)
        result = copy.process_action(action)
        assert result.success, f"{action.to_dict()} -> {result.message}"


class TestGenerate:
    """Tests for ActionGenerator.generate."""

    def test_draw_phase_only_advances(self, engine):
        actions = engine.legal_actions()
        assert kinds(actions) == [ActionKind.ADVANCE_PHASE]

    def test_main_phase_summons(self, new_engine, advance_to):
        engine = new_engine(p1_hand=["dark_elf", "dark_elf", "blue_eyes_white_dragon"])
        advance_to(engine, Phase.MAIN_1)

        actions = engine.legal_actions()
        summons = [a for a in actions if a.kind == ActionKind.NORMAL_SUMMON]
        sets = [a for a in actions if a.kind == ActionKind.SET_CREATURE]

        # Duplicate copies produce one action per stance; no tributes for blue eyes
        assert [(a.payload.card_id, a.payload.stance) for a in summons] == [
            ("dark_elf", Stance.ATTACK), ("dark_elf", Stance.DEFENSE),
        ]
        assert [a.payload.card_id for a in sets] == ["dark_elf", "blue_eyes_white_dragon"]
        assert actions[-1].kind == ActionKind.ADVANCE_PHASE
        all_succeed(engine, actions)

    def test_tribute_summon_offered_with_fodder(self, new_engine, place_creature, advance_to):
        engine = new_engine(p1_hand=["jinzo"])
        advance_to(engine, Phase.MAIN_1)
        place_creature(engine.state, Side.PLAYER_1, "kuriboh")

        summons = [a for a in engine.legal_actions() if a.kind == ActionKind.NORMAL_SUMMON]

        assert {a.payload.card_id for a in summons} == {"jinzo"}
        all_succeed(engine, summons)

    def test_no_summons_after_normal_summon(self, new_engine, advance_to):
        engine = new_engine(p1_hand=["dark_elf", "kuriboh"])
        advance_to(engine, Phase.MAIN_1)
        engine.process_action(Action.normal_summon(Side.PLAYER_1, "dark_elf"))

        actions = engine.legal_actions()

        assert ActionKind.NORMAL_SUMMON not in kinds(actions)
        assert ActionKind.SET_CREATURE not in kinds(actions)

    def test_flip_and_stance_actions(self, engine, place_creature, advance_to):
        advance_to(engine, Phase.MAIN_1)
        hidden = place_creature(engine.state, Side.PLAYER_1, "mystical_elf", Stance.FACE_DOWN_DEFENSE)
        shown = place_creature(engine.state, Side.PLAYER_1, "dark_elf")

        actions = engine.legal_actions()
        flips = [a for a in actions if a.kind == ActionKind.FLIP_SUMMON]
        changes = [a for a in actions if a.kind == ActionKind.CHANGE_STANCE]

        assert [a.payload.target_instance_id for a in flips] == [hidden.instance_id]
        assert [(a.payload.target_instance_id, a.payload.stance) for a in changes] == [
            (shown.instance_id, Stance.DEFENSE),
        ]
        all_succeed(engine, actions)

    def test_attacks_target_each_defender(self, engine, place_creature, advance_to):
        attacker = place_creature(engine.state, Side.PLAYER_1, "dark_elf")
        place_creature(engine.state, Side.PLAYER_1, "kuriboh", Stance.DEFENSE)
        first = place_creature(engine.state, Side.PLAYER_2, "silver_fang")
        second = place_creature(engine.state, Side.PLAYER_2, "mystical_elf", Stance.FACE_DOWN_DEFENSE)
        advance_to(engine, Phase.BATTLE)

        actions = engine.legal_actions()

        assert [(a.payload.card_id, a.payload.target_instance_id) for a in actions] == [
            (attacker.instance_id, first.instance_id),
            (attacker.instance_id, second.instance_id),
        ]
        # Advancing waits until the attacker has attacked
        assert ActionKind.ADVANCE_PHASE not in kinds(actions)
        all_succeed(engine, actions)

    def test_direct_attack_on_empty_field(self, engine, place_creature, advance_to):
        attacker = place_creature(engine.state, Side.PLAYER_1, "dark_elf")
        advance_to(engine, Phase.BATTLE)

        actions = engine.legal_actions()

        assert len(actions) == 1
        assert actions[0].payload.card_id == attacker.instance_id
        assert actions[0].payload.target_instance_id is None

    def test_finished_duel_has_no_actions(self, engine):
        engine.state.set_status(DuelStatus.FINISHED)
        assert ActionGenerator(engine.catalog).generate(engine.state) == []


class TestModuleHelpers:
    """Tests for legal_actions() and is_legal()."""

    def test_legal_actions_matches_engine(self, engine):
        assert [a.to_dict() for a in legal_actions(engine.state)] == [
            a.to_dict() for a in engine.legal_actions()
        ]

    def test_is_legal(self, new_engine, advance_to):
        engine = new_engine(p1_hand=["dark_elf"])
        advance_to(engine, Phase.MAIN_1)

        assert is_legal(engine.state, Action.normal_summon(Side.PLAYER_1, "dark_elf"))
        assert is_legal(engine.state, Action.advance_phase(Side.PLAYER_1))
        assert not is_legal(engine.state, Action.normal_summon(Side.PLAYER_1, "jinzo"))
        assert not is_legal(engine.state, Action.advance_phase(Side.PLAYER_2))

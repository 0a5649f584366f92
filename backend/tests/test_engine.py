"""
Engine Tests

Tests for the host simulation:
- Map layout generation
- Snapshot validation
- Applying joint moves
- Victory conditions
- AI vs AI games
"""

import pytest

from skirmish.core import (
    SkirmishEngine, GameConfig, GameEventType, MapLayoutGenerator,
    StateSnapshot, UnitSnapshot, Position, Player, Direction,
    Difficulty, MapLayout, VictoryCondition, create_game, play_ai_game
)


def make_snapshot(footmen, archers, obstacles=(), size=(10, 10), to_move=Player.MAX):
    """Footmen get ids 0.., archers follow"""
    units = []
    for x, y in footmen:
        units.append(UnitSnapshot(id=len(units), player=Player.MAX, x=x, y=y,
                                  health=160, attack_range=1))
    for x, y in archers:
        units.append(UnitSnapshot(id=len(units), player=Player.MIN, x=x, y=y,
                                  health=50, attack_range=8))
    return StateSnapshot(
        x_extent=size[0],
        y_extent=size[1],
        units=units,
        obstacles=[Position(*p) for p in obstacles],
        player_to_move=to_move,
    )


def start(snapshot, **config):
    engine = SkirmishEngine(GameConfig(**config))
    engine.initialize_game(snapshot)
    return engine


# =============================================================================
# Map Layout Tests
# =============================================================================

def test_layout_places_teams_in_opposite_quadrants():
    config = GameConfig.from_difficulty(Difficulty.EASY, seed=3)
    snapshot = MapLayoutGenerator(seed=3).generate(config)
    snapshot.validate()

    footmen = snapshot.units_of(Player.MAX)
    archers = snapshot.units_of(Player.MIN)
    assert [u.id for u in footmen] == [0, 1]
    assert [u.id for u in archers] == [2, 3]
    assert all(u.x < 4 and u.y < 4 for u in footmen)
    assert all(u.x >= 4 and u.y >= 4 for u in archers)
    assert all(u.health == 160 and u.attack_range == 1 for u in footmen)
    assert all(u.health == 50 and u.attack_range == 8 for u in archers)
    assert Position(7, 7) not in {u.position for u in archers}
    print("✓ Teams placed in opposite quadrants")


def test_layout_is_reproducible_with_seed():
    config = GameConfig.from_difficulty(Difficulty.HARD, seed=42)
    first = MapLayoutGenerator(seed=42).generate(config)
    second = MapLayoutGenerator(seed=42).generate(config)
    assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize("layout", list(MapLayout))
def test_obstacles_keep_clear_of_units(layout):
    config = GameConfig(width=12, height=12, layout=layout, obstacle_density=0.1, seed=7)
    snapshot = MapLayoutGenerator(seed=7).generate(config)
    snapshot.validate()

    if layout == MapLayout.OPEN:
        assert snapshot.obstacles == []
    else:
        assert snapshot.obstacles
    for obstacle in snapshot.obstacles:
        for unit in snapshot.units:
            assert unit.position.chebyshev(obstacle) > 1
    print(f"✓ {layout} layout: {len(snapshot.obstacles)} obstacles")


def test_tiny_map_rejected():
    with pytest.raises(ValueError):
        MapLayoutGenerator().generate(GameConfig(width=3, height=8))


# =============================================================================
# Snapshot Validation Tests
# =============================================================================

def test_validate_rejects_bad_snapshots():
    with pytest.raises(ValueError):
        make_snapshot([(1, 1)], [(10, 3)]).validate()
    with pytest.raises(ValueError):
        make_snapshot([(1, 1)], [(1, 1)]).validate()
    with pytest.raises(ValueError):
        make_snapshot([(1, 1)], [(5, 5)], obstacles=[(5, 5)]).validate()
    with pytest.raises(ValueError):
        make_snapshot([(1, 1)], [(5, 5)], size=(0, 5)).validate()

    duplicate = make_snapshot([(1, 1)], [(5, 5)])
    duplicate.units[1].id = 0
    with pytest.raises(ValueError):
        duplicate.validate()
    print("✓ Bad snapshots rejected")


def test_snapshot_dict_roundtrip():
    snapshot = make_snapshot([(1, 1)], [(5, 5)], obstacles=[(3, 3)], to_move=Player.MIN)
    restored = StateSnapshot.from_dict(snapshot.to_dict())
    assert restored == snapshot


# =============================================================================
# Move Tests
# =============================================================================

def test_perform_moves_advances_turn():
    engine = start(make_snapshot([(1, 1)], [(8, 8)]))
    result = engine.perform_moves({0: Direction.EAST})

    assert result.success
    assert result.applied == {0: Direction.EAST}
    assert result.turn_number == 1
    assert engine.current_player == Player.MIN
    assert engine.get_snapshot().units[0].position == Position(2, 1)
    print(f"✓ {result.message}")


def test_moves_apply_sequentially_by_id():
    """A unit may step into a cell vacated earlier in the same turn"""
    engine = start(make_snapshot([(3, 2), (2, 2)], [(8, 8)]))
    result = engine.perform_moves({1: Direction.EAST, 0: Direction.EAST})

    assert result.applied == {0: Direction.EAST, 1: Direction.EAST}
    positions = {u.id: u.position for u in engine.get_snapshot().units}
    assert positions[0] == Position(4, 2)
    assert positions[1] == Position(3, 2)


def test_colliding_move_rejected():
    engine = start(make_snapshot([(2, 2), (4, 2)], [(8, 8)]))
    result = engine.perform_moves({0: Direction.EAST, 1: Direction.WEST})

    assert result.applied == {0: Direction.EAST}
    assert "blocked" in result.rejected[1]
    positions = {u.id: u.position for u in engine.get_snapshot().units}
    assert positions[1] == Position(4, 2)
    print("✓ Collision rejected")


def test_foreign_and_off_map_moves_rejected():
    engine = start(make_snapshot([(0, 0)], [(8, 8)]))
    result = engine.perform_moves({0: Direction.NORTH, 1: Direction.WEST})

    assert result.applied == {}
    assert set(result.rejected) == {0, 1}
    assert not result.success
    assert engine.turn_number == 1


def test_hold_is_a_successful_move():
    engine = start(make_snapshot([(1, 1)], [(8, 8)]))
    result = engine.perform_moves({})
    assert result.success
    assert "held" in result.message


def test_get_snapshot_is_a_copy():
    engine = start(make_snapshot([(1, 1)], [(8, 8)]))
    snapshot = engine.get_snapshot()
    snapshot.units[0].x = 5
    assert engine.get_snapshot().units[0].x == 1


def test_uninitialized_engine_raises():
    engine = SkirmishEngine()
    with pytest.raises(RuntimeError):
        engine.get_snapshot()


# =============================================================================
# Victory Tests
# =============================================================================

def test_footman_in_range_wins():
    engine = start(make_snapshot([(2, 2)], [(4, 2)]))
    assert not engine.is_game_over()

    engine.perform_moves({0: Direction.EAST})

    assert engine.is_game_over()
    assert engine.get_winner() == Player.MAX
    assert engine.victory_condition == VictoryCondition.TARGET_ENGAGED
    with pytest.raises(RuntimeError):
        engine.perform_moves({})
    print("✓ Footmen win on contact")


def test_archers_survive_time_limit():
    engine = start(make_snapshot([(1, 1)], [(8, 8)]), max_turns=2)
    engine.perform_moves({})
    assert not engine.is_game_over()
    engine.perform_moves({})

    assert engine.get_winner() == Player.MIN
    assert engine.victory_condition == VictoryCondition.SURVIVED_TIME_LIMIT
    assert engine.victory_condition.winner == Player.MIN
    assert engine.to_dict()["winner"] == "MIN"
    print("✓ Archers win on time")


def test_events_and_history():
    engine = SkirmishEngine(GameConfig())
    seen = []
    engine.add_event_listener(GameEventType.MOVES_APPLIED, seen.append)
    engine.initialize_game(make_snapshot([(1, 1)], [(8, 8)]))

    engine.perform_moves({0: Direction.SOUTH})
    engine.perform_moves({1: Direction.NORTH})

    assert len(seen) == 2
    assert seen[0].player == Player.MAX
    history = engine.get_history()
    assert [h["player"] for h in history] == ["MAX", "MIN"]
    assert history[1]["applied"] == {"1": "NORTH"}


# =============================================================================
# Full Game Tests
# =============================================================================

def test_create_game_uses_difficulty():
    engine = create_game(difficulty=Difficulty.EASY, seed=1)
    snapshot = engine.get_snapshot()
    assert (snapshot.x_extent, snapshot.y_extent) == Difficulty.EASY.map_size
    assert engine.config.max_turns == Difficulty.EASY.max_turns
    assert engine.current_player == Player.MAX


def test_ai_game_runs_to_completion():
    config = GameConfig.from_difficulty(Difficulty.EASY, seed=5)
    config.max_turns = 8
    turns = []

    result = play_ai_game(config, max_depth=1, min_depth=1,
                          on_turn=lambda engine, r: turns.append(r.turn_number))

    assert result["winner"] in ("MAX", "MIN")
    assert result["turns"] <= 8
    assert turns == list(range(1, result["turns"] + 1))
    assert len(result["moves"]) == result["turns"]
    print(f"✓ AI game: {result['winner']} wins after {result['turns']} turns")

# =============================================================================
# Grid Skirmish - Command Line Interface
# =============================================================================
"""
Simple CLI for watching and playing the game.
"""

from typing import Dict

from .core import (
    SkirmishEngine, GameState, SearchTreeNode, MoveGenerator,
    create_game, play_ai_game, GameConfig,
    Difficulty, Direction, Player
)
from .core.game_state import CELL_FOOTMAN, CELL_ARCHER, CELL_OBSTACLE
from .ai import MinMaxAgent, AlphaBetaSearch, MoveOrderer


def print_header():
    """Print game header"""
    print("\n" + "=" * 60)
    print("   GRID SKIRMISH")
    print("   Turn-based Footmen vs Archers")
    print("=" * 60 + "\n")


def print_state(engine: SkirmishEngine):
    """Print current game state"""
    state = engine.get_state()

    print(f"\n{'='*50}")
    print(f"Turn {state.turn_number}/{engine.config.max_turns} | {state.player.name}'s Turn")
    print(f"{'='*50}")

    print_board(state)

    grid = state.to_array()
    print(f"\nFootmen: {int((grid == CELL_FOOTMAN).sum())} | "
          f"Archers: {int((grid == CELL_ARCHER).sum())} | "
          f"Obstacles: {int((grid == CELL_OBSTACLE).sum())}")
    print(f"Utility: {state.utility():.3f}")


def print_board(state: GameState):
    """Print the board with column and row indices"""
    header = "    " + " ".join(str(x % 10) for x in range(state.x_extent))
    print(header)
    for y, row in enumerate(state.render().split("\n")):
        print(f"{y:>3} {row}")


def print_units(engine: SkirmishEngine, player: Player):
    """Print one side's units"""
    print(f"\nYour {player.unit_name}s:")
    for unit in engine.get_snapshot().units_of(player):
        print(f"  [{unit.id}] at ({unit.x}, {unit.y})  hp {unit.health}")


def select_difficulty() -> Difficulty:
    """Prompt for a difficulty preset"""
    print("Select Difficulty:")
    print("  1. Easy")
    print("  2. Medium")
    print("  3. Hard")
    print("  4. Expert")

    choice = input("\nChoice [1-4]: ").strip()
    difficulty_map = {"1": Difficulty.EASY, "2": Difficulty.MEDIUM,
                      "3": Difficulty.HARD, "4": Difficulty.EXPERT}
    return difficulty_map.get(choice, Difficulty.MEDIUM)


def parse_move_line(line: str) -> Dict[int, Direction]:
    """
    Parse 'id:dir id:dir ...' into a joint move.
    Directions may be written as n/e/w/s or in full.

    Raises:
        ValueError: on malformed input
    """
    short = {"n": Direction.NORTH, "e": Direction.EAST,
             "w": Direction.WEST, "s": Direction.SOUTH}
    moves = {}
    for token in line.split():
        unit_id, _, name = token.partition(":")
        name = name.lower()
        if name in short:
            direction = short[name]
        elif name.upper() in Direction.__members__:
            direction = Direction[name.upper()]
        else:
            raise ValueError(f"Unknown direction in '{token}'")
        moves[int(unit_id)] = direction
    return moves


def interactive_game():
    """Play the archers against the MinMax footmen"""
    print_header()

    difficulty = select_difficulty()
    engine = create_game(difficulty=difficulty)
    footmen = MinMaxAgent(Player.MAX, max_depth=difficulty.search_depth)

    print(f"\nSurvive {engine.config.max_turns} turns without letting a footman reach you.")

    # Game loop
    first_turn = True
    while not engine.is_game_over():
        if engine.current_player == Player.MAX:
            snapshot = engine.get_snapshot()
            moves = footmen.initial_step(snapshot) if first_turn else footmen.middle_step(snapshot)
            first_turn = False
            result = engine.perform_moves(moves)
            print(f"\n→ {result.message}")
            continue

        print_state(engine)
        print_units(engine, Player.MIN)

        line = input("\nMoves as id:dir (e.g. '2:n 3:w'), blank to hold, 'q' to quit: ").strip()
        if line.lower() == 'q':
            print("Game ended by player.")
            break

        try:
            moves = parse_move_line(line)
        except ValueError as e:
            print(f"Invalid input: {e}")
            continue

        result = engine.perform_moves(moves)
        print(f"\n→ {result.message}")
        for unit_id, reason in result.rejected.items():
            print(f"  Unit {unit_id} stayed put: {reason}")

    # Game over
    if engine.is_game_over():
        footmen.terminal_step(engine.get_snapshot())
        print_state(engine)
        print(f"\n{'='*60}")
        print("GAME OVER!")
        print(f"{'='*60}")
        winner = engine.get_winner()
        print(f"Winner: {winner.name} ({winner.unit_name}s)")
        print(f"Victory: {engine.victory_condition}")


def demo_game():
    """Watch MinMax footmen play MinMax archers"""
    print_header()
    print("Running AI vs AI demo...")

    def on_turn(engine: SkirmishEngine, result):
        print(f"Turn {engine.turn_number:>3}: {result.message}")

    result = play_ai_game(GameConfig.from_difficulty(Difficulty.EASY), on_turn=on_turn)

    print(f"\n{'='*50}")
    print("Demo Game Results:")
    print(f"{'='*50}")
    print(f"Winner: {result['winner']}")
    print(f"Victory: {result['victory_condition']}")
    print(f"Turns: {result['turns']}")


def inspect_search():
    """Show how one search ranks the moves available on a fresh map"""
    print_header()

    difficulty = select_difficulty()
    engine = create_game(difficulty=difficulty)
    state = engine.get_state()
    print_board(state)

    children = MoveOrderer().order_children(MoveGenerator().generate(state))
    print(f"\n{len(children)} joint moves for {state.player.name}, by utility:")
    for child in children[:10]:
        print(f"  {child.describe_move():<24} {child.utility():10.3f}")
    if len(children) > 10:
        print(f"  ... and {len(children) - 10} more")

    searcher = AlphaBetaSearch()
    best, value = searcher.search_with_value(SearchTreeNode.root(state), difficulty.search_depth)
    print(f"\nDepth {difficulty.search_depth} choice: {best.describe_move()} (value {value:.3f})")
    print(f"Nodes searched: {searcher.nodes_searched} | Cutoffs: {searcher.nodes_pruned}")


def main():
    """Main entry point"""
    print_header()

    print("Options:")
    print("  1. Play Interactive Game (as the archers)")
    print("  2. Run Demo (AI vs AI)")
    print("  3. Inspect a Search")
    print("  4. Exit")

    choice = input("\nChoice [1-4]: ").strip()

    if choice == "1":
        interactive_game()
    elif choice == "2":
        demo_game()
    elif choice == "3":
        inspect_search()
    elif choice == "4":
        print("Goodbye!")
    else:
        print("Invalid choice")


if __name__ == "__main__":
    main()

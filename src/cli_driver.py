# cli_driver.py
# This file is intended to be run to play the 2048 game on the CLI

import logging

from config import configure_logging, get_settings
from engine import Direction
from session import GameProgressState, Session

logger = logging.getLogger(__name__)

DIRECTION_KEYS = {'W': Direction.UP, 'A': Direction.LEFT, 'S': Direction.DOWN, 'D': Direction.RIGHT}


def main():
    settings = get_settings()
    configure_logging(settings)

    # 1. Initialize game
    session = Session()
    display_session(session)

    # 2. Game Loop; playing on after reaching 2048 is allowed
    while not session.over:
        move_input = input("Enter move (W/A/S/D for Up/Left/Down/Right, Q to quit): ").strip().upper()

        if move_input == 'Q':
            print("Quitting game.")
            break

        chosen_direction = DIRECTION_KEYS.get(move_input)
        if chosen_direction is None:
            print("Invalid input. Use W, A, S, D.")
            continue

        # 3. Process the move; the session spawns the new tile and updates its flags
        if not session.submit_move(chosen_direction):
            print("Move did not change the board. Try a different direction.")

        display_session(session)

    # 4. Game Ended
    print("\n--- Final Board State ---")
    display_session(session)
    if session.over:
        print(session.outcome_message())
        print(session.share_text(settings.share_url))


# --- Display Function ---
def display_session(session: Session):
    """Prints the board, score, and game status to the console."""
    print(render_session(session))


def render_session(session: Session) -> str:
    status_message = {
        GameProgressState.IN_PROGRESS: "Status: IN_PROGRESS",
        GameProgressState.GAME_WON: "YOU REACHED 2048! Keep going.",
        GameProgressState.GAME_OVER: "GAME OVER!",
    }
    grid = session.grid
    lines = [f"\nScore: {session.score}", status_message[session.status]]
    for row in grid:
        lines.append("\t".join(str(value) if value else "." for value in row))
    lines.append("-" * (len(grid) * 6))
    return "\n".join(lines)


if __name__ == "__main__":
    main()

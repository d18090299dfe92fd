# board_cli.py
# Terminal driver for the board engine: reads keys, draws the board.

import logging

from board_engine import (
    Board,
    Direction,
    new_game,
    play_turn,
)

KEY_TO_DIRECTION = {'W': Direction.UP, 'A': Direction.LEFT, 'S': Direction.DOWN, 'D': Direction.RIGHT}
RESTART_KEY = 'R'
QUIT_KEY = 'Q'


def main(rng=None):
    logging.basicConfig(level=logging.WARNING)

    # 1. Initialize game
    current_board = new_game(rng)
    game_over = False
    display_board_state(current_board, game_over)

    # 2. Game Loop
    while True:
        prompt = "Enter move (W/A/S/D for Up/Left/Down/Right, R to restart, Q to quit): "
        try:
            command = input(prompt).strip().upper()
        except (EOFError, KeyboardInterrupt):
            # Closed stdin or Ctrl-C ends the game like Q.
            print()
            command = QUIT_KEY

        if command == QUIT_KEY:
            print("Quitting game.")
            break

        if command == RESTART_KEY:
            current_board = new_game(rng)
            game_over = False
            display_board_state(current_board, game_over)
            continue

        chosen_direction = KEY_TO_DIRECTION.get(command)
        if chosen_direction is None:
            print("Invalid input. Use W, A, S, D, R or Q.")
            continue

        if game_over:
            print("The game is over. Press R to restart or Q to quit.")
            continue

        # 3. Move, spawn and re-check only when the board changed
        result = play_turn(current_board, chosen_direction, rng)
        if not result.moved:
            print("Move did not change the board. Try a different direction.")
            continue

        current_board = result.board
        game_over = result.game_over
        display_board_state(current_board, game_over)


def render_board(board: Board, game_over: bool) -> str:
    """Formats the board as tab-separated rows, with a banner once the game is over."""
    lines = ["GAME OVER!" if game_over else "Status: IN_PROGRESS"]
    for row in board:
        lines.append("\t".join(str(value) if value else "." for value in row))
    lines.append("-" * (len(board) * 6))
    return "\n".join(lines)


def display_board_state(board: Board, game_over: bool):
    """Prints the board and game status to the console."""
    print()
    print(render_board(board, game_over))


if __name__ == "__main__":
    main()

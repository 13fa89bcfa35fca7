# -*- coding: utf-8 -*-
"""
Play 2048 Game
"""
import logging
from typing import Any

from merge2048 import GameEngine, JsonFileStore
from merge2048.core import parse_direction
from merge2048.utils import WindowBoard

UNDO_KEYS = ("u", "backspace")


def redraw(engine: GameEngine, window: WindowBoard, message: str = ""):
    """
    Redraw the game board.

    Parameters
    ----------
    engine: GameEngine
        The game engine

    window: WindowBoard
        Class to draw the game board

    message: str
        Notice displayed next to the score
    """
    window.show_image(engine.board, engine.get_stats(), message)


def status_message(engine: GameEngine) -> str:
    """
    Notice shown next to the score.

    Parameters
    ----------
    engine: GameEngine
        The game engine
    """
    if engine.game_over:
        return "Game over"
    if engine.won:
        return "You win!"
    return ""


def key_handler(engine: GameEngine, window: WindowBoard, event: Any):
    """
    Handle the keyboard.

    Parameters
    ----------
    engine: GameEngine
        The game engine

    window: WindowBoard
        Class to draw the game board

    event: Any
        event to handle
    """
    if event.key == "escape":
        engine.save_game()
        window.close()
        return None

    if event.key == "n":
        engine.new_game()
        redraw(engine, window)
        return None

    if event.key in UNDO_KEYS:
        if engine.undo():
            redraw(engine, window, status_message(engine))
        return None

    if parse_direction(event.key) is not None:
        result = engine.move(event.key)
        if result.moved:
            redraw(engine, window, status_message(engine))
        return None


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    env = GameEngine(store=JsonFileStore("2048-save.json"))
    env.resume_or_new_game()

    window_board = WindowBoard(title="2048 Game", size=env.size)
    window_board.register_key_handler(lambda event: key_handler(env, window_board, event))

    redraw(env, window_board, status_message(env))

    # Blocking event loop
    window_board.show(block=True)

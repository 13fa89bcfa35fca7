# -*- coding: utf-8 -*-
"""
Graphical window for playing 2048 by hand.

This module draws the board of a `GameEngine` with Matplotlib and forwards key presses to a handler.
It only reads engine state; every change goes through the engine's own operations.
"""
from typing import Callable, Optional

from matplotlib import pyplot as plt
from matplotlib.backend_bases import Event
from numpy import ndarray

from merge2048.addons.types import GameStats


class WindowBoard:
    """
    A class for rendering the 2048 board and a status line using Matplotlib.

    Methods
    -------
    show_image(board: np.ndarray, stats: GameStats, message: str)
        Update the display with the current board and statistics.
    register_key_handler(key_handler: Callable)
        Register a function to handle keyboard events.
    show(block: bool = True)
        Display the game window.
    close()
        Close the game window.
    """

    # ##: Colors mapping for different tile values.
    COLORS = {
        0: "#CCC0B3",
        2: "#EEE4DA",
        4: "#ECE0C8",
        8: "#ECB280",
        16: "#EC8D53",
        32: "#F57C5F",
        64: "#E95937",
        128: "#F3D96B",
        256: "#F2D04A",
        512: "#E5BF2E",
        1024: "#E2B814",
        2048: "#EBC502",
        4096: "#00A2D8",
    }

    # ##: Values above this one are drawn in light text.
    DARK_TEXT_LIMIT = 4

    def __init__(self, title: str, size: int):
        """
        Initialize the game board window.

        Parameters
        ----------
        title : str
            The title of the window.
        size : int
            The size of the game board (e.g., 4 for a 4x4 board).
        """
        self.fig, self.axes = plt.subplots(size, size, figsize=(size, size + 0.6))
        self.fig.canvas.manager.set_window_title(title)
        self.fig.patch.set_facecolor("#BBADA0")
        self.fig.subplots_adjust(left=0.02, bottom=0.02, right=0.98, top=0.88, wspace=0.05, hspace=0.05)
        self.status = self.fig.suptitle("", fontsize="medium")

        self.texts = []
        for ax in self.axes.flat:
            ax.set_xticks([])
            ax.set_yticks([])
            self.texts.append(ax.text(0.5, 0.5, "", ha="center", va="center", fontsize="x-large", fontweight="bold"))

        self.closed = False
        self.fig.canvas.mpl_connect("close_event", self._close_handler)

    def _close_handler(self, event: Optional[Event] = None):
        self.closed = True

    def show_image(self, board: ndarray, stats: Optional[GameStats] = None, message: str = ""):
        """
        Show or update the game board.

        Parameters
        ----------
        board : ndarray
            The board to display.
        stats : GameStats, optional
            Score, best score and move count shown above the board.
        message : str, optional
            Extra text appended to the status line, such as a win or game-over notice.
        """
        for ax, text, value in zip(self.axes.flat, self.texts, board.flat):
            value = int(value)
            text.set_text(str(value) if value != 0 else "")
            text.set_color("#776E65" if value <= self.DARK_TEXT_LIMIT else "#F9F6F2")
            ax.set_facecolor(self.COLORS.get(value, "#3C3A32"))

        status = ""
        if stats is not None:
            status = f"Score {stats.score}   Best {stats.best_score}   Moves {stats.moves}"
        if message:
            status = f"{status}   {message}" if status else message
        self.status.set_text(status)

        self.fig.canvas.draw_idle()
        self.fig.canvas.flush_events()
        plt.pause(0.001)

    def register_key_handler(self, key_handler: Callable):
        """Register a function called with every key press event."""
        self.fig.canvas.mpl_connect("key_press_event", key_handler)

    @classmethod
    def show(cls, block: bool = True):
        """
        Show the window and start the Matplotlib event loop.

        Parameters
        ----------
        block : bool, optional
            If True, the event loop is blocking; otherwise, it's non-blocking (default is True).
        """
        if not block:
            plt.ion()
        plt.show()

    def close(self):
        plt.close(self.fig)
        self.closed = True

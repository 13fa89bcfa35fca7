# -*- coding: utf-8 -*-
"""
Play random games with the engine and report the maximum tiles reached.
"""
import logging
from collections import Counter
from typing import Dict, Optional

import numpy as np
from tqdm import trange

from merge2048 import EngineConfiguration, GameEngine
from merge2048.core import legal_actions


def evaluate(length: int = 10, seed: Optional[int] = None) -> Dict[int, int]:
    """
    Play games choosing uniformly among the effective moves.

    Parameters
    ----------
    length : int, optional
        The number of games to play (default is 10).
    seed : int, optional
        Seed shared by move selection and tile spawning.

    Returns
    -------
    Dict[int, int]
        How many games ended on each maximum tile.
    """
    rng = np.random.default_rng(seed)
    engine = GameEngine(config=EngineConfiguration(seed=seed))
    score = []

    with trange(length) as period:
        for num in period:
            engine.new_game()

            # ##: Play a game.
            while not engine.game_over:
                actions = legal_actions(engine.board)
                engine.move(actions[rng.integers(len(actions))])

                # ##: Log.
                period.set_description(f"Evaluation: {num + 1}")
                period.set_postfix(score=engine.score, max=int(np.max(engine.board)))

            # ##: Save max cells.
            score.append(int(np.max(engine.board)))

    # ##: Final log.
    frequency = Counter(score)
    return dict(sorted(frequency.items()))


if __name__ == "__main__":
    from argparse import ArgumentParser

    parser = ArgumentParser()
    parser.add_argument("--games", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    result = evaluate(length=args.games, seed=args.seed)
    print(f"Random play over {args.games} games, max tiles: {result}")

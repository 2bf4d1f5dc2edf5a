import logging
import os

import gymnasium as gym
import numpy as np

from . import events as ev
from .config import GameConfig
from .geometry import Direction, world_to_grid
from .maze import WALL
from .session import GamePhase, GameSession

logger = logging.getLogger(__name__)

# Observation layers
CELL_PATH = 0
CELL_WALL = 1
CELL_EXIT = 2
CELL_ITEM = 3
CELL_PURSUER = 4
CELL_PLAYER = 5

# 0-4: none/up/down/left/right
ACTION_TO_DIRECTION = {
    1: Direction.UP,
    2: Direction.DOWN,
    3: Direction.LEFT,
    4: Direction.RIGHT,
}
DIRECTION_TO_ACTION = {d: a for a, d in ACTION_TO_DIRECTION.items()}


class MazeEscapeEnv(gym.Env):
    """Gymnasium driver around a GameSession: one ``step`` is one tick."""

    metadata = {"render_modes": []}

    user_guide = (
        "Controls: tap an arrow to run in that direction until a wall. "
        "Reach the exit before time runs out and don't get caught."
    )

    game_description = (
        "Escape a procedurally generated maze before the timer expires while "
        "a ghost and a rolling ball hunt you down. Crystals and chests score points."
    )

    auto_advance = True

    FPS = 30
    MAX_STEPS = 6000
    STEP_PENALTY = 0.01
    WIN_REWARD = 100.0
    LOSS_PENALTY = 100.0

    def __init__(self, config=None, render_mode=None):
        super().__init__()
        self.config = config or GameConfig()
        self.render_mode = render_mode

        self.observation_space = gym.spaces.Box(
            low=CELL_PATH, high=CELL_PLAYER,
            shape=(self.config.maze_height, self.config.maze_width), dtype=np.int8,
        )
        self.action_space = gym.spaces.Discrete(5)

        self.session = None
        self.steps = 0
        self._step_reward = 0.0

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        self.session = GameSession(self.config, rng=self.np_random)
        self.session.on(ev.COLLECT, self._on_collect)
        self.session.start_game()
        self.steps = 0

        return self._get_observation(), self._get_info()

    def _on_collect(self, value, **_):
        self._step_reward += value / 1000.0

    def step(self, action):
        if self.session is None:
            raise RuntimeError("call reset() before step()")
        if self.session.is_over:
            return self._get_observation(), 0.0, True, False, self._get_info()

        self.steps += 1
        self._step_reward = -self.STEP_PENALTY

        direction = ACTION_TO_DIRECTION.get(int(action))
        if direction is not None:
            self.session.on_player_intent(direction)

        self.session.tick(1.0 / self.FPS)

        phase = self.session.phase
        if phase == GamePhase.WON:
            self._step_reward += self.WIN_REWARD
        elif phase in (GamePhase.LOST, GamePhase.CAUGHT):
            self._step_reward -= self.LOSS_PENALTY

        terminated = self.session.is_over
        truncated = not terminated and self.steps >= self.MAX_STEPS

        return (
            self._get_observation(),
            self._step_reward,
            terminated,
            truncated,
            self._get_info(),
        )

    def _get_observation(self):
        maze = self.session.maze
        obs = np.where(maze.grid == WALL, CELL_WALL, CELL_PATH).astype(np.int8)
        obs[maze.exit.y, maze.exit.x] = CELL_EXIT

        cell_size = self.config.cell_size
        for item in self.session.collectibles:
            if item.visible and not item.collected:
                obs[item.cell[1], item.cell[0]] = CELL_ITEM
        for pursuer in self.session.pursuers:
            x, y = world_to_grid(pursuer.position.x, pursuer.position.y, maze, cell_size)
            obs[y, x] = CELL_PURSUER
        px, py = world_to_grid(self.session.player.position.x, self.session.player.position.y, maze, cell_size)
        obs[py, px] = CELL_PLAYER
        return obs

    def _get_info(self):
        state = self.session.get_state()
        return {
            "score": state.score,
            "steps": self.steps,
            "phase": state.phase.value,
            "time_remaining": state.time_remaining,
            "coins_collected": state.coins_collected,
            "chests_collected": state.chests_collected,
        }

    def close(self):
        self.session = None


# Example usage for testing
if __name__ == '__main__':
    from .policy import policy

    logging.basicConfig(level=os.environ.get("LOGLEVEL", "INFO"))

    env = MazeEscapeEnv()
    obs, info = env.reset(seed=42)
    done = False
    total_reward = 0.0

    while not done:
        obs, reward, terminated, truncated, info = env.step(policy(env))
        total_reward += reward
        done = terminated or truncated

    print(f"Steps: {info['steps']}, Phase: {info['phase']}, Score: {info['score']}, Reward: {total_reward:.2f}")
    env.close()

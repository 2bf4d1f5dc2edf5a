"""Top-level game state machine.

One ``GameSession`` owns the maze, the authoritative entity positions, the
timer and the score. An external driver calls ``tick(dt)`` once per
simulation step; renderers read ``get_state()`` and never write back.
"""
import enum
import logging
from collections import deque
from dataclasses import dataclass

import numpy as np

from . import events as ev
from .collectibles import CHEST, CollectibleRegistry, place_collectibles
from .collision import CollisionField
from .config import GameConfig
from .geometry import grid_to_world
from .maze import generate_maze
from .player import ContinuousMotionController, PlayerMotionController
from .pursuit import PursuitAgent

logger = logging.getLogger(__name__)

# Absorbs float error when summing many small deltas into whole seconds
TIME_EPSILON = 1e-6


class GamePhase(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"
    CAUGHT = "caught"


TERMINAL_PHASES = frozenset({GamePhase.WON, GamePhase.LOST, GamePhase.CAUGHT})


@dataclass(frozen=True)
class CollectibleView:
    id: int
    position: tuple
    value: int
    kind: str
    collected: bool
    visible: bool


@dataclass(frozen=True)
class SessionState:
    phase: GamePhase
    time_remaining: int
    score: int
    player_position: tuple
    player_facing: object
    pursuer_positions: tuple
    trail: tuple
    collectibles: tuple
    time_taken: float
    coins_collected: int
    chests_collected: int
    maze: object


class GameSession:
    def __init__(self, config=None, rng=None):
        self.config = config or GameConfig()
        self.rng = np.random.default_rng(rng)
        self.events = ev.EventBus()
        self._intents = deque()
        self._clear()

    def _clear(self):
        self.phase = GamePhase.MENU
        self.maze = None
        self.collision = None
        self.player = None
        self.pursuers = []
        self.collectibles = CollectibleRegistry()
        self.time_remaining = self.config.duration
        self.elapsed = 0.0
        self.time_taken = 0.0
        self.score = 0
        self.coins_collected = 0
        self.chests_collected = 0
        self.trail = deque(maxlen=self.config.trail_capacity)
        self.exit_position = None
        self._second_accum = 0.0
        self._chest_revealed = False
        self._intents.clear()

    def on(self, name, handler):
        """Registers an event handler (see ``maze_escape.events``)."""
        return self.events.on(name, handler)

    # --- Transitions ---

    def start_game(self, maze=None):
        """Starts a fresh game from any phase. A new maze is generated unless
        one is supplied; everything from the previous game is discarded.
        """
        cfg = self.config
        self._clear()

        self.maze = maze or generate_maze(cfg.maze_width, cfg.maze_height, self.rng)
        self.collision = CollisionField.from_maze(self.maze, cfg.cell_size, cfg.player_radius)
        self.exit_position = grid_to_world(self.maze.exit.x, self.maze.exit.y, self.maze, cfg.cell_size)

        if cfg.control_scheme == "continuous":
            self.player = ContinuousMotionController(
                self.maze, self.collision, self.maze.start,
                speed=cfg.continuous_player_speed, cell_size=cfg.cell_size, events=self.events,
            )
        else:
            self.player = PlayerMotionController(
                self.maze, self.collision, self.maze.start,
                speed=cfg.player_speed, cell_size=cfg.cell_size, events=self.events,
            )

        self.pursuers = []
        for spec in cfg.pursuers:
            start = self.maze.exit if spec.start == "exit" else spec.start
            self.pursuers.append(PursuitAgent(
                spec.name, self.maze, start, spec.speed,
                catch_distance=spec.catch_distance,
                cell_size=cfg.cell_size,
                path_interval=cfg.path_update_interval,
                waypoint_epsilon=cfg.waypoint_epsilon,
            ))

        items = place_collectibles(self.maze, self.rng, cfg.coin_table, cfg.cell_size) if cfg.collectibles else []
        self.collectibles = CollectibleRegistry(items, cfg.pickup_radius)

        self.trail.append((self.player.position.x, self.player.position.y))
        self.phase = GamePhase.PLAYING
        logger.info(
            "Game started: %dx%d maze, %d pursuers, %d collectibles",
            self.maze.width, self.maze.height, len(self.pursuers), len(self.collectibles),
        )
        return self.get_state()

    def reset_game(self):
        """Back to the menu, dropping the current game."""
        self._clear()
        return self.get_state()

    def _win(self):
        bonus = self.time_remaining * self.config.time_bonus_per_second
        self.score += bonus
        self.time_taken = self.elapsed
        self.phase = GamePhase.WON
        logger.info("Won in %.1fs, score %d (time bonus %d)", self.time_taken, self.score, bonus)
        self.events.emit(ev.WIN, time_taken=self.time_taken, bonus=bonus, score=self.score)

    def _lose(self):
        self.time_taken = self.config.duration
        self.phase = GamePhase.LOST
        logger.info("Time is up, score %d", self.score)
        self.events.emit(ev.LOSE, reason="time")

    def _caught(self, pursuer):
        self.time_taken = self.elapsed
        self.phase = GamePhase.CAUGHT
        logger.info("Caught by %s after %.1fs", pursuer.name, self.elapsed)
        self.events.emit(ev.CAUGHT, pursuer=pursuer.name)

    # --- Input ---

    def on_player_intent(self, direction):
        """Queues a discrete move intent; it is applied on the next tick."""
        self._queue_input(direction, None)

    def set_held(self, direction, pressed):
        """Press/release for the continuous control scheme."""
        self._queue_input(direction, bool(pressed))

    def _queue_input(self, direction, pressed):
        if self.phase is not GamePhase.PLAYING:
            logger.debug("Ignoring input %s in phase %s", direction, self.phase.value)
            return
        self._intents.append((direction, pressed))

    def _drain_intents(self):
        while self._intents:
            direction, pressed = self._intents.popleft()
            # None marks a tap, which replaces any held keys
            if pressed is None:
                self.player.on_intent(direction)
            elif isinstance(self.player, ContinuousMotionController):
                self.player.set_held(direction, pressed)
            elif pressed:
                self.player.on_intent(direction)

    # --- Simulation ---

    def tick(self, dt):
        """Advances the simulation by ``dt`` seconds. Outside PLAYING this is
        a no-op that just returns the current state.
        """
        if dt < 0:
            raise ValueError("dt must be non-negative")
        if self.phase is not GamePhase.PLAYING:
            return self.get_state()

        self.elapsed += dt

        # 1. Player
        self._drain_intents()
        if self.player.update(dt):
            self._check_player_position()
        self._record_trail()
        if self.phase is not GamePhase.PLAYING:
            return self.get_state()

        # 2. Pursuers
        for pursuer in self.pursuers:
            if pursuer.tick(dt, self.player.position):
                self._caught(pursuer)
                return self.get_state()

        # 3. Timer, counted in whole seconds
        self._second_accum += dt
        while self._second_accum >= 1.0 - TIME_EPSILON and self.time_remaining > 0:
            self._second_accum -= 1.0
            self.time_remaining -= 1
        if self.time_remaining <= 0:
            self.time_remaining = 0
            self._lose()

        return self.get_state()

    advance = tick

    def _check_player_position(self):
        pos = self.player.position

        for item in self.collectibles.check_pickups(pos):
            self._award(item)

        if not self._chest_revealed and pos.distance_to(self.exit_position) <= self.config.chest_reveal_distance:
            self._chest_revealed = True
            for item in self.collectibles.reveal_hidden():
                self.events.emit(ev.CHEST_REVEALED, id=item.id)

        if self._at_exit(pos):
            self._win()

    def _at_exit(self, pos):
        half = self.config.cell_size / 2
        return abs(pos.x - self.exit_position.x) < half and abs(pos.y - self.exit_position.y) < half

    def _record_trail(self):
        pos = self.player.position
        last = self.trail[-1] if self.trail else None
        if last is None or pos.distance_to(last) > self.config.trail_min_distance:
            self.trail.append((pos.x, pos.y))

    def collect(self, item_id):
        """Collects an item by id. Repeated calls add nothing."""
        if self.phase is not GamePhase.PLAYING:
            return 0
        value = self.collectibles.collect(item_id)
        if value:
            self._award(self.collectibles.items[item_id])
        return value

    def _award(self, item):
        self.score += item.value
        if item.kind == CHEST:
            self.chests_collected += 1
        else:
            self.coins_collected += 1
        logger.debug("Collected %s #%d worth %d", item.kind, item.id, item.value)
        self.events.emit(ev.COLLECT, id=item.id, value=item.value, kind=item.kind,
                         position=(item.position.x, item.position.y))

    # --- Read-only view ---

    def get_state(self):
        player = self.player
        return SessionState(
            phase=self.phase,
            time_remaining=self.time_remaining,
            score=self.score,
            player_position=(player.position.x, player.position.y) if player else None,
            player_facing=player.facing if player else None,
            pursuer_positions=tuple((p.position.x, p.position.y) for p in self.pursuers),
            trail=tuple(self.trail),
            collectibles=tuple(
                CollectibleView(i.id, (i.position.x, i.position.y), i.value, i.kind, i.collected, i.visible)
                for i in self.collectibles
            ),
            time_taken=self.time_taken,
            coins_collected=self.coins_collected,
            chests_collected=self.chests_collected,
            maze=self.maze,
        )

    @property
    def is_over(self):
        return self.phase in TERMINAL_PHASES

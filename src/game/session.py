# src/game/session.py
from __future__ import annotations
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List, Optional, Union

from .config import COMMAND_QUEUE_SIZE, VariantConfig
from .obstacles import Obstacle, Spawner
from .player import LanePlayer, PhysicsPlayer
from .storage import BestScoreStore

logger = logging.getLogger(__name__)


class GameState(Enum):
    START = "start"
    PLAYING = "playing"
    GAME_OVER = "gameOver"


class Command(Enum):
    START = "start"
    JUMP = "jump"
    DOUBLE_JUMP = "doubleJump"
    MOVE_LEFT = "moveLeft"
    MOVE_RIGHT = "moveRight"


Player = Union[PhysicsPlayer, LanePlayer]


def make_player(cfg: VariantConfig) -> Player:
    return LanePlayer.spawn(cfg) if cfg.is_lane else PhysicsPlayer.spawn(cfg)


@dataclass
class Session:
    """Everything one game instance owns. Subsystems get it passed in; nothing is global."""
    config: VariantConfig
    player: Player
    spawner: Spawner
    store: BestScoreStore
    state: GameState = GameState.START
    elapsed_ms: float = 0.0
    score: int = 0
    best_score: int = 0
    difficulty: float = 1.0
    scroll_speed: float = 0.0
    spawn_interval_ms: float = 0.0
    last_spawn_ms: float = 0.0
    obstacles: List[Obstacle] = field(default_factory=list)
    commands: Deque[Command] = field(default_factory=lambda: deque(maxlen=COMMAND_QUEUE_SIZE))

    @property
    def playing(self) -> bool:
        return self.state is GameState.PLAYING


def new_session(cfg: VariantConfig, store: Optional[BestScoreStore] = None,
                seed: Optional[int] = None) -> Session:
    if store is None:
        store = BestScoreStore(None)
    session = Session(
        config=cfg,
        player=make_player(cfg),
        spawner=Spawner(cfg, seed),
        store=store,
        best_score=store.load(),
        scroll_speed=cfg.base_speed,
        spawn_interval_ms=cfg.max_spawn_ms,
    )
    logger.debug("session %s seed=%s best=%d", cfg.name, session.spawner.seed, session.best_score)
    return session


def push_command(session: Session, command: Command):
    """Queue an input command; it is applied at the start of the next step. Oldest dropped when full."""
    session.commands.append(command)


def commit_best_score(session: Session) -> bool:
    if session.score <= session.best_score:
        return False
    session.best_score = session.score
    session.store.save(session.best_score)
    logger.info("new best score %d (%s)", session.best_score, session.config.name)
    return True


def start(session: Session, now_ms: float) -> bool:
    """START/GAME_OVER -> PLAYING with a full reset. No-op while already playing."""
    if session.state is GameState.PLAYING:
        return False
    commit_best_score(session)

    cfg = session.config
    session.state = GameState.PLAYING
    session.elapsed_ms = 0.0
    session.score = 0
    session.difficulty = 1.0
    session.scroll_speed = cfg.base_speed
    session.spawn_interval_ms = cfg.max_spawn_ms
    session.obstacles = []
    session.last_spawn_ms = now_ms
    session.player = make_player(cfg)
    logger.info("run started (%s)", cfg.name)
    return True


def end_game(session: Session) -> bool:
    """PLAYING -> GAME_OVER; the run's score is final."""
    if session.state is not GameState.PLAYING:
        return False
    session.state = GameState.GAME_OVER
    commit_best_score(session)
    logger.info("game over: score=%d best=%d", session.score, session.best_score)
    return True

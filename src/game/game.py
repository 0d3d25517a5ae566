# src/game/game.py
import argparse
import logging
import sys
from pathlib import Path

import pygame
from pygame import K_ESCAPE, K_s

from .config import FPS, MAX_FRAME_MS, VARIANTS, get_variant
from .controls import InputMapper
from .render import Renderer
from .session import GameState, Session, commit_best_score, new_session, push_command
from .share import share_text
from .simulation import step
from .storage import BestScoreStore, best_score_path

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def shutdown(session: Session):
    """Keep a best score reached in the unfinished run, then close pygame."""
    commit_best_score(session)
    pygame.quit()


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Infinite Runner")
    p.add_argument("--variant", choices=sorted(VARIANTS), default="jumper",
                   help="jumper (side view), runner3d (perspective lanes), dodger (top-down lanes)")
    p.add_argument("--seed", type=int, default=None,
                   help="Spawner seed. Omit for a random run.")
    p.add_argument("--data-dir", type=str, default=None,
                   help="Where the best score is stored (default: ~/.infinite_runner)")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def run(argv=None):
    args = parse_args(argv)
    setup_logging(args.debug)

    cfg = get_variant(args.variant)
    base = Path(args.data_dir) if args.data_dir else None
    store = BestScoreStore(best_score_path(cfg.name, base))
    session = new_session(cfg, store=store, seed=args.seed)

    pygame.init()
    pygame.display.set_caption(cfg.title)
    screen = pygame.display.set_mode((cfg.width, cfg.height))
    clock = pygame.time.Clock()
    controls = InputMapper(cfg, cfg.width)
    renderer = Renderer(cfg)

    while True:
        dt_ms = float(clock.tick(FPS))
        if dt_ms > MAX_FRAME_MS:  # clamp stalls
            dt_ms = MAX_FRAME_MS
        now_ms = float(pygame.time.get_ticks())

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                shutdown(session); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    shutdown(session); sys.exit()
                if event.key == K_s and session.state is GameState.GAME_OVER:
                    text = share_text(session.score)
                    print(text)
                    logger.info("share text printed to stdout")
                    continue
            for cmd in controls.handle_event(event, session.state, now_ms):
                push_command(session, cmd)

        step(session, dt_ms, now_ms)

        renderer.draw(screen, session)
        pygame.display.flip()


if __name__ == "__main__":
    run()

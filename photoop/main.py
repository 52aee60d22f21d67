#!/usr/bin/env python3
"""
Photo Op - Standalone entry point.

Usage:
    python -m photoop
    python -m photoop --fullscreen
    python -m photoop --width 1920 --height 1080 --seed 42
"""

import argparse
import sys
from typing import List, Optional

import pygame

from photoop import config
from photoop.game_mode import PhotoOpMode
from photoop.game_state import LifecycleState
from photoop.input import MouseInputSource
from photoop.logging import (
    close_all_sinks,
    configure_logging,
    create_sink_for_environment,
    get_logger,
    register_sink,
)

log = get_logger('main')


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser from the game's declared arguments."""
    parser = argparse.ArgumentParser(description=PhotoOpMode.DESCRIPTION)
    for arg in PhotoOpMode.get_arguments():
        kwargs = {k: v for k, v in arg.items() if k != 'name'}
        parser.add_argument(arg['name'], **kwargs)
    return parser


def _open_display(args: argparse.Namespace) -> pygame.Surface:
    """Open the game window (fullscreen or sized from CLI/config)."""
    if args.fullscreen or config.FULLSCREEN:
        return pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    width = args.width or config.SCREEN_WIDTH
    height = args.height or config.SCREEN_HEIGHT
    return pygame.display.set_mode((width, height))


def main(argv: Optional[List[str]] = None) -> int:
    """Run Photo Op."""
    args = build_parser().parse_args(argv)

    if args.log_level:
        configure_logging(level=args.log_level)
    register_sink('session', create_sink_for_environment('session'))

    pygame.init()

    try:
        screen = _open_display(args)
    except pygame.error as e:
        log.error("Could not open display: %s", e)
        close_all_sinks()
        pygame.quit()
        return 1
    width, height = screen.get_size()

    pygame.display.set_caption(PhotoOpMode.NAME)

    seed = args.seed if args.seed is not None else config.SEED
    fps = args.fps or config.FPS

    mouse = MouseInputSource()
    game = PhotoOpMode(screen_width=width, screen_height=height, seed=seed)

    log.info("Photo Op %s (%dx%d, %d fps, seed=%s)", PhotoOpMode.VERSION, width, height, fps, seed)
    log.info("Move the mouse to walk, click to flash. SPACE starts, R restarts, ESC quits.")

    clock = pygame.time.Clock()
    running = True
    last_state = game.state

    try:
        while running:
            dt = clock.tick(fps) / 1000.0

            mouse.collect()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE and game.state == LifecycleState.NOT_STARTED:
                        game.press_start()
                    elif event.key == pygame.K_r and game.state == LifecycleState.GAME_OVER:
                        game.press_start()

            game.handle_input(mouse.poll_events())
            game.update(dt)
            game.render(screen)
            pygame.display.flip()

            if game.state != last_state:
                if game.state == LifecycleState.GAME_OVER:
                    log.info("GAME OVER! Score: %d", game.get_score())
                last_state = game.state
    finally:
        game.close()
        close_all_sinks()
        pygame.quit()

    return 0


if __name__ == "__main__":
    sys.exit(main())

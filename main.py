# main.py
import argparse
import logging

import pygame

from board import EMPTY
from bot import PLAYER_KINDS, make_player
from game import HexGame, Human, check_size
from ui import WINDOW_SIZE, AppUI, fits_window

log = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Hex: соединить свои края доски")
    parser.add_argument("--size", type=int, default=11,
                        help="Side length of the board (odd, 5..12345; the window fits up to 65)")
    parser.add_argument("--player1", choices=PLAYER_KINDS, default="human",
                        help="Who plays first (X, top-bottom)")
    parser.add_argument("--player2", choices=PLAYER_KINDS, default="reactive",
                        help="Who plays second (O, left-right)")
    parser.add_argument("--headless", action="store_true",
                        help="Play bot against bot without a window and log the final board")
    parser.add_argument("--log-level", type=str.upper, default="INFO", choices=LOG_LEVELS,
                        help="Logging level")
    args = parser.parse_args(argv)
    try:
        check_size(args.size)
    except ValueError as e:
        parser.error(str(e))
    if args.headless and "human" in (args.player1, args.player2):
        parser.error("--headless needs two bots")
    if not args.headless and not fits_window(args.size):
        parser.error(f"board {args.size} does not fit the window, use --headless")
    return args


def play_headless(game: HexGame) -> int:
    """Run automated players until someone wins. Returns the winning side."""
    while game.winner == EMPTY:
        if isinstance(game.player_to_move(), Human):
            raise ValueError("headless play needs automated players on both sides")
        game.step_automated()
    log.info("final board:\n%s", game.board)
    return game.winner


def create_icon():
    """Создаёт иконку с буквой H на тёмном фоне"""
    size = 64
    icon = pygame.Surface((size, size), pygame.SRCALPHA)
    icon.fill((30, 30, 35, 255))

    font = pygame.font.SysFont("Arial", size - 20, bold=True)
    text_surface = font.render("H", True, (255, 255, 255))
    text_rect = text_surface.get_rect()
    text_rect.center = (size // 2, size // 2)
    icon.blit(text_surface, text_rect)

    return icon


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    players = (make_player(args.player1, "Игрок 1"), make_player(args.player2, "Игрок 2"))

    if args.headless:
        play_headless(HexGame(args.size, players))
        return

    pygame.init()
    screen = pygame.display.set_mode(WINDOW_SIZE)
    pygame.display.set_caption("Hex")
    pygame.display.set_icon(create_icon())

    AppUI(screen, size=args.size, kinds=(args.player1, args.player2)).run()


if __name__ == "__main__":
    main()

# ui.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pygame
import pygame_gui

from board import BLUE, EMPTY, RED, WINNING
from game import Automated, HexGame, Human
from bot import PLAYER_KINDS, make_player

log = logging.getLogger(__name__)

SIZES = [5, 7, 9, 11, 13]
KIND_LABELS = {"human": "Человек", "reactive": "Реактивный бот", "planner": "Планировщик"}
BOT_DELAY_MS = 350
WINDOW_SIZE = (800, 600)
HUD_H = 140
MIN_RADIUS, MAX_RADIUS = 4.0, 28.0


# ---------------- geometry helpers ----------------
def hex_corners(center, radius: float):
    cx, cy = center
    pts = []
    for i in range(6):
        ang = math.radians(60 * i - 30)  # pointy-top
        pts.append((cx + radius * math.cos(ang), cy + radius * math.sin(ang)))
    return pts


def axial_to_pixel(col: int, row: int, origin, radius: float):
    ox, oy = origin
    dx = math.sqrt(3.0) * radius
    dy = 1.5 * radius
    x = ox + col * dx + row * (dx * 0.5)
    y = oy + row * dy
    return (x, y)


def fit_radius(n: int, width: float, height: float) -> float:
    """Largest radius at which an n x n rhombus fits into width x height."""
    by_w = width / (math.sqrt(3.0) * (n + (n - 1) * 0.5))
    by_h = height / (1.5 * (n - 1) + 2.0)
    return max(MIN_RADIUS, min(by_w, by_h, MAX_RADIUS))


def board_area(width: int, height: int):
    """Part of the window left for the board below the HUD."""
    return width - 80, height - HUD_H - 60


def fits_window(n: int, window=WINDOW_SIZE) -> bool:
    # at MIN_RADIUS the rhombus no longer shrinks and runs off the screen
    return fit_radius(n, *board_area(*window)) > MIN_RADIUS


def point_in_poly(p, poly):
    x, y = p
    inside = False
    n = len(poly)
    for i in range(n):
        x1, y1 = poly[i]
        x2, y2 = poly[(i + 1) % n]
        cond = ((y1 > y) != (y2 > y)) and (x < (x2 - x1) * (y - y1) / (y2 - y1 + 1e-12) + x1)
        if cond:
            inside = not inside
    return inside


@dataclass
class Theme:
    bg: Tuple[int, int, int] = (30, 30, 35)
    panel: Tuple[int, int, int] = (24, 24, 28)
    panel_border: Tuple[int, int, int] = (60, 60, 70)

    empty: Tuple[int, int, int] = (210, 210, 210)
    grid: Tuple[int, int, int] = (70, 70, 80)

    red: Tuple[int, int, int] = (220, 70, 70)
    blue: Tuple[int, int, int] = (70, 120, 220)
    winning: Tuple[int, int, int] = (245, 200, 60)

    side_red: Tuple[int, int, int] = (160, 40, 40)
    side_blue: Tuple[int, int, int] = (40, 80, 160)

    text: Tuple[int, int, int] = (235, 235, 235)
    muted: Tuple[int, int, int] = (180, 180, 190)


class AppUI:
    def __init__(self, screen: pygame.Surface, size: int = 11,
                 kinds: Tuple[str, str] = ("human", "reactive")):
        self.screen = screen
        self.clock = pygame.time.Clock()

        self.manager = pygame_gui.UIManager(screen.get_size())
        self.ui_elems = []

        self.font = pygame.font.SysFont("consolas", 18)
        self.big_font = pygame.font.SysFont("consolas", 30)

        self.theme = Theme()
        self.size = size
        self.kinds = list(kinds)

        self.state = "menu"  # menu/how/settings/game
        self.game = self._new_game()

        self.radius = 22.0
        self.origin = (40.0, HUD_H + 30.0)
        self.cells: List[tuple] = []  # (col,row,poly,bbox)
        self.bot_due_ms: Optional[int] = None

        self._build_cells()
        self._build_menu()

    def _new_game(self) -> HexGame:
        players = (make_player(self.kinds[0], "Игрок 1"), make_player(self.kinds[1], "Игрок 2"))
        return HexGame(self.size, players)

    # ---------- UI build ----------
    def _clear_ui(self):
        for el in self.ui_elems:
            el.kill()
        self.ui_elems.clear()

    def _button(self, rect: pygame.Rect, text: str, oid: str):
        btn = pygame_gui.elements.UIButton(
            relative_rect=rect, text=text, manager=self.manager, object_id=oid,
        )
        self.ui_elems.append(btn)
        return btn

    def _build_menu(self):
        self._clear_ui()
        w, _ = self.screen.get_size()
        for i, (text, oid) in enumerate([
            ("Играть", "#btn_play"),
            ("Как играть", "#btn_how"),
            ("Настройки", "#btn_settings"),
            ("Выход", "#btn_exit"),
        ]):
            self._button(pygame.Rect((w // 2 - 140, 190 + 70 * i), (280, 55)), text, oid)

    def _build_how(self):
        self._clear_ui()
        self._button(pygame.Rect((20, 20), (120, 40)), "Назад", "#btn_back")

    def _build_settings(self):
        self._clear_ui()
        self._button(pygame.Rect((20, 20), (120, 40)), "Назад", "#btn_back")
        self.ui_elems.append(pygame_gui.elements.UILabel(
            pygame.Rect((160, 25), (460, 30)), "Настройки (игроки + доска)", self.manager
        ))
        self._button(pygame.Rect((20, 90), (360, 45)),
                     f"Игрок 1: {KIND_LABELS[self.kinds[0]]}", "#kind_p1")
        self._button(pygame.Rect((20, 145), (360, 45)),
                     f"Игрок 2: {KIND_LABELS[self.kinds[1]]}", "#kind_p2")
        self._button(pygame.Rect((20, 200), (360, 45)),
                     f"Размер доски: {self.size}", "#cycle_size")

    def _build_game(self):
        self._clear_ui()

        w, _ = self.screen.get_size()
        pad = 20
        btn_w, btn_h = 160, 40
        x = w - pad - btn_w
        x2 = x - btn_w - 10
        y0 = 20
        gap = 10

        self._button(pygame.Rect((x, y0), (btn_w, btn_h)), "Меню", "#btn_menu")
        self._button(pygame.Rect((x, y0 + btn_h + gap), (btn_w, btn_h)), "Новая игра", "#btn_new")
        self.swap_btn = self._button(pygame.Rect((x2, y0), (btn_w, btn_h)), "Обмен", "#btn_swap")
        self.path_btn = self._button(pygame.Rect((x2, y0 + btn_h + gap), (btn_w, btn_h)), "Путь", "#btn_path")
        self._sync_buttons()

    def _sync_buttons(self):
        if self.state != "game":
            return
        human_turn = isinstance(self.game.player_to_move(), Human)
        if self.game.can_swap() and human_turn:
            self.swap_btn.enable()
        else:
            self.swap_btn.disable()
        if self.game.winner != EMPTY:
            self.path_btn.enable()
        else:
            self.path_btn.disable()

    # ---------- geometry ----------
    def _build_cells(self):
        self.cells.clear()
        n = self.game.size
        w, h = self.screen.get_size()
        self.radius = fit_radius(n, *board_area(w, h))
        self.origin = (40.0 + self.radius, HUD_H + 30.0 + self.radius)
        for r in range(n):
            for c in range(n):
                center = axial_to_pixel(c, r, self.origin, self.radius)
                poly = hex_corners(center, self.radius)
                xs = [p[0] for p in poly]
                ys = [p[1] for p in poly]
                bbox = pygame.Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
                self.cells.append((c, r, poly, bbox))

    def _pick_cell(self, pos) -> Optional[Tuple[int, int]]:
        mx, my = pos
        for c, r, poly, bbox in self.cells:
            if not bbox.collidepoint(mx, my):
                continue
            if point_in_poly((mx, my), poly):
                return c, r
        return None

    # ---------- turns ----------
    def _after_move(self):
        if self.game.winner != EMPTY:
            self.game.show_winning_path(True)
            self.bot_due_ms = None
        elif isinstance(self.game.player_to_move(), Automated):
            self.bot_due_ms = pygame.time.get_ticks() + BOT_DELAY_MS
        else:
            self.bot_due_ms = None
        self._sync_buttons()

    def _start_game(self):
        self.game = self._new_game()
        log.info("new game %dx%d: %s vs %s", self.size, self.size, *self.kinds)
        self._build_cells()
        self._after_move()

    # ---------- main loop ----------
    def run(self):
        running = True
        while running:
            dt = self.clock.tick(60) / 1000.0

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    break

                self.manager.process_events(event)

                if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    if self.state == "game" and isinstance(self.game.player_to_move(), Human):
                        pos = self._pick_cell(event.pos)
                        if pos and self.game.play(*pos):
                            self._after_move()

                if event.type == pygame_gui.UI_BUTTON_PRESSED:
                    oid = event.ui_object_id

                    if oid.endswith("#btn_exit"):
                        running = False

                    elif oid.endswith("#btn_play"):
                        self.state = "game"
                        self._build_game()
                        self._start_game()

                    elif oid.endswith("#btn_how"):
                        self.state = "how"
                        self._build_how()

                    elif oid.endswith("#btn_settings"):
                        self.state = "settings"
                        self._build_settings()

                    elif oid.endswith("#btn_back") or oid.endswith("#btn_menu"):
                        self.state = "menu"
                        self._build_menu()

                    elif oid.endswith("#btn_new"):
                        self._start_game()

                    elif oid.endswith("#btn_swap"):
                        if self.game.swap():
                            self._after_move()

                    elif oid.endswith("#btn_path"):
                        self.game.show_winning_path(not self.game.path_shown)

                    elif oid.endswith("#kind_p1") or oid.endswith("#kind_p2"):
                        i = 0 if oid.endswith("#kind_p1") else 1
                        self.kinds[i] = PLAYER_KINDS[(PLAYER_KINDS.index(self.kinds[i]) + 1) % len(PLAYER_KINDS)]
                        self._build_settings()

                    elif oid.endswith("#cycle_size"):
                        self.size = SIZES[(SIZES.index(self.size) + 1) % len(SIZES)] if self.size in SIZES else SIZES[0]
                        self._build_settings()

            self.manager.update(dt)

            if self.state == "game" and self.bot_due_ms is not None and pygame.time.get_ticks() >= self.bot_due_ms:
                self.bot_due_ms = None
                if self.game.step_automated() is not None:
                    self._after_move()

            self._render()

        pygame.quit()

    # ---------- rendering ----------
    def _render(self):
        self.screen.fill(self.theme.bg)

        if self.state == "menu":
            title = self.big_font.render("HEX", True, self.theme.text)
            self.screen.blit(title, (self.screen.get_width() // 2 - title.get_width() // 2, 120))

        elif self.state == "how":
            lines = [
                "Цель игры Hex:",
                "Игрок 1 (X) соединяет ВЕРХ и НИЗ.",
                "Игрок 2 (O) соединяет ЛЕВО и ПРАВО.",
                "Игроки по очереди занимают клетки.",
                "Вторым ходом можно сделать обмен: забрать первый камень себе.",
                "Ничьи в Hex не бывает.",
            ]
            y = 80
            for s in lines:
                txt = self.font.render(s, True, self.theme.text)
                self.screen.blit(txt, (20, y))
                y += 26

        elif self.state == "settings":
            note = self.font.render("Бот ходит сам, человек кликает по клетке.", True, self.theme.muted)
            self.screen.blit(note, (20, 270))

        elif self.state == "game":
            self._draw_top_panel()
            self._draw_board()
            self._draw_game_hud()

        self.manager.draw_ui(self.screen)
        pygame.display.flip()

    def _draw_top_panel(self):
        panel = pygame.Rect(0, 0, self.screen.get_width(), HUD_H)
        pygame.draw.rect(self.screen, self.theme.panel, panel)
        pygame.draw.rect(self.screen, self.theme.panel_border, panel, 1)

    def _draw_board(self):
        colors = {EMPTY: self.theme.empty, RED: self.theme.red,
                  BLUE: self.theme.blue, WINNING: self.theme.winning}
        board = self.game.board
        for c, r, poly, _ in self.cells:
            pygame.draw.polygon(self.screen, colors[board.get(c, r)], poly)
            pygame.draw.polygon(self.screen, self.theme.grid, poly, width=1)

        # края: ВЕРХ/НИЗ у X, ЛЕВО/ПРАВО у O
        n = self.game.size
        for c, r, poly, _ in self.cells:
            if r == 0 or r == n - 1:
                pygame.draw.polygon(self.screen, self.theme.side_red, poly, width=3)
            if c == 0 or c == n - 1:
                pygame.draw.polygon(self.screen, self.theme.side_blue, poly, width=3)

        mv = self.game.last_move
        if mv:
            for c, r, poly, _ in self.cells:
                if c == mv.col and r == mv.row:
                    pygame.draw.polygon(self.screen, (245, 245, 245), poly, width=3)
                    break

    def _draw_game_hud(self):
        x = 20
        y = 70

        def pname(side: int) -> str:
            p = self.game.player_for(side)
            label = "X" if side == RED else "O"
            return f"{p.name} ({label})"

        if self.game.winner != EMPTY:
            msg = f"Победил: {pname(self.game.winner)}"
        else:
            msg = f"Ход: {pname(self.game.current)}"

        self.screen.blit(self.big_font.render(msg, True, self.theme.text), (x, 18))

        legend1 = self.font.render("X: соединить ВЕРХ ↔ НИЗ", True, self.theme.red)
        legend2 = self.font.render("O: соединить ЛЕВО ↔ ПРАВО", True, self.theme.blue)
        self.screen.blit(legend1, (x, y))
        self.screen.blit(legend2, (x, y + 24))

        info = f"Ходов: {self.game.moves_played}"
        if self.game.swapped:
            info += "  (был обмен)"
        if isinstance(self.game.player_to_move(), Automated) and self.game.winner == EMPTY:
            info += "  Бот думает..."
        self.screen.blit(self.font.render(info, True, self.theme.text), (x, y + 52))

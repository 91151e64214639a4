"""
Interactive Pygame Viewer for the Adaptive Gray-Scott Simulation

Shows the V, U, dt or energy field of an RDSimulator, scaled with
nearest-neighbour to the window, with a one-line HUD.

Controls:
  SPACE       Pause / Resume (paused: energy and dt keep refreshing)
  N           Advance one frame while paused
  R / Alt+Z   Reseed (central square)
  C           Clear
  V           Cycle view: V -> U -> dt -> E
  E           Cycle energy metric: react -> time -> grad -> mix
  T           Toggle 8x4 tile mode
  B           Cycle brush: V -> U -> UV -> erase
  [ / ]       Brush radius -/+
  - / +       Steps per frame -/+
  S / Alt+S   Save settings + screenshot
  L           Load settings
  H           Toggle HUD overlay
  1-9         Presets
  Q / ESC     Quit
  Mouse L     Paint with the current brush
  Mouse R     Erase
"""

import os
import time
import numpy as np
import pygame

from .config import (
    ENERGY_ORDER, VIEW_ORDER, BRUSH_ORDER, BrushMode, TILE_COLS, TILE_ROWS,
    BRUSH_RADIUS_MAX,
)
from .presets import PRESET_ORDER, get_preset
from .settings import DEFAULT_SETTINGS_PATH
from .simulator import RDSimulator


BG = (18, 18, 24)


def _cycle(order, current):
    value = getattr(current, "value", current)
    return order[(order.index(value) + 1) % len(order)]


class Viewer:
    def __init__(self, width=880, height=880, grid_w=220, grid_h=220,
                 start_preset=None, settings_path=DEFAULT_SETTINGS_PATH,
                 autoload=True):
        self.canvas_w = width
        self.canvas_h = height
        self.settings_path = settings_path
        self.sim = RDSimulator(grid_w, grid_h, preset=start_preset)

        if autoload and start_preset is None and os.path.exists(settings_path):
            try:
                self.sim.load_settings(settings_path)
                print(f"[RD] Loaded settings from {settings_path}")
            except (OSError, ValueError) as e:
                print(f"[RD] Failed to load settings: {e}")

        self.running = True
        self.show_hud = True
        self.fps_history = []

    # --- Coordinates ---

    def _view_rect(self):
        """(ox, oy, w, h) of the field image inside the canvas, aspect-fit."""
        g = self.sim.grid
        img_w, img_h = g.width, g.height
        if self.sim.session.tile_mode:
            img_w, img_h = img_w * TILE_COLS, img_h * TILE_ROWS
        scale = min(self.canvas_w / img_w, self.canvas_h / img_h)
        w, h = int(img_w * scale), int(img_h * scale)
        return (self.canvas_w - w) // 2, (self.canvas_h - h) // 2, w, h

    def canvas_to_grid(self, mx, my):
        """Window pixel -> grid cell, or None outside the field (or tiled)."""
        if self.sim.session.tile_mode:
            return None
        ox, oy, w, h = self._view_rect()
        g = self.sim.grid
        gx = int((mx - ox) * g.width / max(w, 1))
        gy = int((my - oy) * g.height / max(h, 1))
        if gx < 0 or gx >= g.width or gy < 0 or gy >= g.height:
            return None
        return gx, gy

    # --- Drawing ---

    def _render_frame(self):
        rgb = self.sim.render()
        return pygame.surfarray.make_surface(rgb.swapaxes(0, 1).copy())

    def _draw_hud(self, screen, font, fps):
        if not self.show_hud:
            return
        sim = self.sim
        stats = sim.stats
        p = sim.params
        s = sim.session
        line = (f"Gen: {stats['generation']:,}  |  E: {p.energy_mode.value}  |  "
                f"View: {s.view_mode.value}  |  "
                f"dt: {stats['dt_min']:.3f}-{stats['dt_max']:.3f}  |  "
                f"Brush: {s.brush_mode.value} r={s.brush_radius}  |  "
                f"SPF: {s.steps_per_frame}  |  FPS: {fps:.0f}")
        if sim.preset_key:
            line = f"{get_preset(sim.preset_key)['name']}  |  " + line
        if sim.paused:
            line = "[PAUSED]  " + line

        bg_surface = pygame.Surface((self.canvas_w, 24), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, 0))
        text_surface = font.render(line, True, (210, 215, 225))
        screen.blit(text_surface, (10, 6))

    # --- Input ---

    def _handle_mouse(self):
        buttons = pygame.mouse.get_pressed()
        if not (buttons[0] or buttons[2]):
            return
        cell = self.canvas_to_grid(*pygame.mouse.get_pos())
        if cell is None:
            return
        gx, gy = cell
        if buttons[0]:
            self.sim.paint(gx, gy)
        else:
            self.sim.paint(gx, gy, mode=BrushMode.erase)

    def _save(self):
        path = self.sim.save_settings(self.settings_path)
        stem = time.strftime("%Y%m%d_%H%M%S")
        shot = os.path.join(os.path.dirname(str(path)), f"gray_scott_{stem}.png")
        self.sim.snapshot(shot)
        print(f"[RD] Settings saved: {path}")
        print(f"[RD] Screenshot saved: {shot}")

    def _load(self):
        try:
            self.sim.load_settings(self.settings_path)
            print(f"[RD] Loaded settings from {self.settings_path}")
        except (OSError, ValueError) as e:
            print(f"[RD] Failed to load settings: {e}")

    def _handle_keydown(self, event):
        key = event.key
        alt = bool(event.mod & pygame.KMOD_ALT)
        sim = self.sim
        s = sim.session

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            sim.paused = not sim.paused

        elif key == pygame.K_n:
            if sim.paused:
                sim.run(s.steps_per_frame)

        elif key == pygame.K_r or (alt and key == pygame.K_z):
            sim.seed()

        elif key == pygame.K_c:
            sim.clear()

        elif key == pygame.K_v:
            sim.update_session(view_mode=_cycle(VIEW_ORDER, s.view_mode))

        elif key == pygame.K_e:
            sim.update_params(energy_mode=_cycle(ENERGY_ORDER, sim.params.energy_mode))

        elif key == pygame.K_t:
            sim.update_session(tile_mode=not s.tile_mode)

        elif key == pygame.K_b:
            sim.update_session(brush_mode=_cycle(BRUSH_ORDER, s.brush_mode))

        elif key == pygame.K_LEFTBRACKET:
            sim.update_session(brush_radius=max(0, s.brush_radius - 1))

        elif key == pygame.K_RIGHTBRACKET:
            sim.update_session(
                brush_radius=min(BRUSH_RADIUS_MAX, s.brush_radius + 1))

        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            sim.update_session(steps_per_frame=max(1, s.steps_per_frame - 1))

        elif key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
            sim.update_session(steps_per_frame=s.steps_per_frame + 1)

        elif key == pygame.K_s:
            self._save()

        elif key == pygame.K_l:
            self._load()

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                sim.apply_preset(PRESET_ORDER[idx])

    def run(self):
        """Main viewer loop."""
        pygame.init()
        screen = pygame.display.set_mode((self.canvas_w, self.canvas_h),
                                         pygame.RESIZABLE)
        pygame.display.set_caption("Gray-Scott (adaptive dt)")
        clock = pygame.time.Clock()
        font = pygame.font.SysFont("menlo", 13)

        while self.running:
            frame_start = time.time()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.VIDEORESIZE:
                    self.canvas_w, self.canvas_h = event.w, event.h
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event)

            # Painting only between ticks
            self._handle_mouse()
            self.sim.frame()

            screen.fill(BG)
            ox, oy, w, h = self._view_rect()
            scaled = pygame.transform.scale(self._render_frame(), (w, h))
            screen.blit(scaled, (ox, oy))

            frame_time = time.time() - frame_start
            self.fps_history.append(frame_time)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)
            self._draw_hud(screen, font, avg_fps)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()

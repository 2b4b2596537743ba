import pygame
import time
from typing import Optional

from .logger import get_logger
from .note_types import PollResult
from .scales import KEYS
from .session import ScaleClimberSession
from .tower_layout import block_at, block_rect, indicator_center_fraction
from .audio.tone_player import play_tone

# Get logger for this module
logger = get_logger(__name__)


class PygameTowerUI:
    """Pygame-based tower display for Scale Climber"""

    # Fraction of the remaining distance the indicator covers per frame
    EASING = 0.25

    def __init__(self, session: ScaleClimberSession):
        """Initialize the Pygame UI

        Args:
            session: The listening session to display and control
        """
        self.session = session
        self.screen = None
        self.width = 640
        self.height = 560
        self.bg_color = (248, 250, 252)
        self.text_color = (30, 41, 59)
        self.accent_color = (37, 99, 235)
        self.stop_color = (239, 68, 68)
        self.indicator_color = (30, 41, 59)
        self.initialized = False
        self.clock = None

        # Tower box
        self.tower_left = 380
        self.tower_top = 80
        self.tower_width = 200
        self.tower_height = 400

        # Fonts
        self.title_font = None
        self.medium_font = None
        self.small_font = None

        self.error: Optional[str] = None
        self.last_result: Optional[PollResult] = None
        self._drawn_position: Optional[float] = None
        self._last_poll = 0.0

        session.events.on_position_updated(self._on_result)
        session.events.on_error(self._on_error)

        logger.debug("Initializing PygameTowerUI")

    def init_screen(self):
        """Initialize the Pygame screen and resources"""
        try:
            pygame.init()
            self.screen = pygame.display.set_mode((self.width, self.height))
            pygame.display.set_caption("Scale Climber")

            self.title_font = pygame.font.SysFont("Arial", 36, bold=True)
            self.medium_font = pygame.font.SysFont("Arial", 24, bold=True)
            self.small_font = pygame.font.SysFont("Arial", 16)

            self.clock = pygame.time.Clock()
            self.initialized = True
            logger.info("Pygame UI initialized successfully")
            return self.screen

        except pygame.error as e:
            logger.error(f"Failed to initialize Pygame: {e}")
            self.cleanup()
            raise

    def _on_result(self, result: PollResult) -> None:
        self.last_result = result

    def _on_error(self, message: str) -> None:
        self.error = message

    def toggle_listening(self) -> None:
        if self.session.is_listening():
            self.session.stop()
            self.last_result = None
            self._drawn_position = None
        else:
            self.error = None
            if self.session.start():
                self.session.poll()
                self._last_poll = time.perf_counter()

    def next_key(self) -> None:
        current = self.session.scale_data.root_key
        index = KEYS.index(current) if current in KEYS else -1
        self.session.set_key(KEYS[(index + 1) % len(KEYS)])

    def handle_click(self, x: int, y: int) -> None:
        """Play the block under the cursor, if any."""
        if not self.tower_left <= x < self.tower_left + self.tower_width:
            return
        index = block_at(y, self.tower_top, self.tower_height)
        if index is None:
            return
        level = self.session.scale_data.levels[index]
        logger.debug(f"Playing {level.solfege}: {level.play_frequencies}")
        play_tone(level.play_frequencies)

    def _ease_indicator(self) -> Optional[float]:
        target = self.last_result.render_position if self.last_result else None
        if target is None:
            self._drawn_position = None
        elif self._drawn_position is None:
            self._drawn_position = target
        else:
            self._drawn_position += (target - self._drawn_position) * self.EASING
        return self._drawn_position

    def update_display(self):
        """Redraw the whole window"""
        if not self.initialized or not self.screen:
            return

        self.screen.fill(self.bg_color)
        listening = self.session.is_listening()
        scale_data = self.session.scale_data

        title_surface = self.title_font.render("Scale Climber", True, self.text_color)
        self.screen.blit(title_surface, (40, 100))

        hints = [
            "SPACE: start / stop singing",
            "Click a block to hear the note",
            f"K: change key (now {scale_data.root_key})",
            "ESC: quit",
        ]
        for i, hint in enumerate(hints):
            hint_surface = self.small_font.render(hint, True, (100, 116, 139))
            self.screen.blit(hint_surface, (40, 160 + i * 24))

        status = "Stop Singing" if listening else "Start Singing"
        status_color = self.stop_color if listening else self.accent_color
        status_surface = self.medium_font.render(status, True, status_color)
        self.screen.blit(status_surface, (40, 280))

        if self.error:
            error_surface = self.small_font.render(self.error, True, self.stop_color)
            self.screen.blit(error_surface, (40, 330))

        # Blocks, Do at the bottom
        for index, level in enumerate(scale_data.levels):
            rect = pygame.Rect(
                *block_rect(
                    index,
                    self.tower_left,
                    self.tower_top,
                    self.tower_width,
                    self.tower_height,
                )
            )
            pygame.draw.rect(self.screen, level.color, rect)
            label_surface = self.medium_font.render(level.solfege, True, level.text_color)
            self.screen.blit(label_surface, label_surface.get_rect(center=rect.center))

        frequency = self.last_result.frequency if self.last_result else None
        if frequency:
            hz_surface = self.small_font.render(
                f"{round(frequency)} Hz", True, self.text_color
            )
            self.screen.blit(
                hz_surface,
                hz_surface.get_rect(
                    midbottom=(
                        self.tower_left + self.tower_width // 2,
                        self.tower_top - 8,
                    )
                ),
            )

        center = indicator_center_fraction(self._ease_indicator())
        if center is not None:
            center_y = self.tower_top + self.tower_height * (1 - center)
            box = pygame.Rect(0, 0, 72, 40)
            box.midright = (self.tower_left - 14, int(center_y))
            pygame.draw.rect(self.screen, self.indicator_color, box, border_radius=6)
            pygame.draw.polygon(
                self.screen,
                self.indicator_color,
                [
                    (box.right, box.centery - 10),
                    (box.right + 12, box.centery),
                    (box.right, box.centery + 10),
                ],
            )
            label = self.last_result.label if self.last_result else ""
            if label:
                note_surface = self.medium_font.render(label, True, (255, 255, 255))
                self.screen.blit(note_surface, note_surface.get_rect(center=box.center))

        pygame.display.flip()

    def run(self):
        """Run the main loop until the window is closed."""
        if not self.initialized:
            self.init_screen()

        logger.info("Starting tower loop")
        running = True
        try:
            while running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif event.type == pygame.KEYDOWN:
                        if event.key == pygame.K_ESCAPE:
                            running = False
                        elif event.key == pygame.K_SPACE:
                            self.toggle_listening()
                        elif event.key == pygame.K_k:
                            self.next_key()
                    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                        self.handle_click(*event.pos)

                now = time.perf_counter()
                if (
                    self.session.is_listening()
                    and now - self._last_poll >= self.session.poll_interval
                ):
                    self.session.poll()
                    self._last_poll = now

                self.update_display()
                self.clock.tick(30)
        finally:
            logger.info("Tower loop ended")
            self.session.stop()
            self.cleanup()

    def cleanup(self):
        """Clean up Pygame resources"""
        if self.initialized:
            logger.debug("Cleaning up Pygame resources")
            pygame.quit()
            self.initialized = False

# FOLDER: /

# sky_viewer.py

import pygame
import json
import logging
import sys

from cloud_generator.runtime import CloudSky

# --- Application Constants (Rule 1) ---
WINDOW_SCALE = 4
TARGET_FPS = 30
SKY_COLOR = (70, 130, 180)
CYCLE_PERIOD_TICKS = 300
CONFIG_PATH = "sky_config.json"

# Keyboard shortcuts for the weather states.
WEATHER_KEYS = {
    pygame.K_1: "clear",
    pygame.K_2: "cloudy",
    pygame.K_3: "stormy",
}


class ViewerApp:
    """The main application class for the cloud sky viewer."""
    def __init__(self, config: dict):
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
        self.logger = logging.getLogger(__name__)

        self.logger.info("Initializing Pygame...")
        pygame.init()

        self.sky = CloudSky(config, logger=self.logger)
        self.sky.populate()

        self.canvas = pygame.Surface((self.sky.settings['screen_width'], self.sky.settings['screen_height']))
        self.screen = pygame.display.set_mode(
            (self.canvas.get_width() * WINDOW_SCALE, self.canvas.get_height() * WINDOW_SCALE)
        )
        pygame.display.set_caption("Cloud Sky Viewer")

        self.clock = pygame.time.Clock()
        self.is_day = True
        self.is_running = True

    def run(self):
        """The main application loop."""
        while self.is_running:
            self.handle_events()
            self.sky.update()
            self.draw()
            self.clock.tick(TARGET_FPS)

        self.logger.info("Exiting viewer.")
        pygame.quit()
        sys.exit()

    def handle_events(self):
        """Processes user input and other events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.is_running = False
                elif event.key in WEATHER_KEYS:
                    self.sky.set_weather(WEATHER_KEYS[event.key])
                elif event.key == pygame.K_n:
                    self.is_day = not self.is_day
                    self.sky.set_daytime(self.is_day)
                elif event.key == pygame.K_c:
                    self.sky.toggle_day_night_cycle(CYCLE_PERIOD_TICKS)

    def draw(self):
        """Handles all rendering for the application."""
        self.canvas.fill(SKY_COLOR)
        self.sky.draw(self.canvas)
        pygame.transform.scale(self.canvas, self.screen.get_size(), self.screen)

        appearance = self.sky.appearance
        pygame.display.set_caption(
            f"Cloud Sky Viewer | {appearance.weather.value} | "
            f"Transition: {appearance.transition:.2f} | Brightness: {self.sky.current_brightness:.0f}"
        )
        pygame.display.flip()


if __name__ == '__main__':
    try:
        with open(CONFIG_PATH, 'r') as f:
            sky_config = json.load(f)
    except FileNotFoundError:
        sky_config = {}

    app = ViewerApp(config=sky_config)
    app.run()

# cloud_generator/runtime/sky.py

"""
================================================================================
SKY RUNTIME
================================================================================
This module provides the user-facing `CloudSky` class, a reference host for
the cloud generator. It owns the drifting cloud entities, advances the
appearance state once per frame, regenerates tiles when the appearance
changes, and draws everything with Pygame.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Overrides for the defaults in cloud_generator.config.
    - rng (np.random.Generator, optional): Source for spawn positions and
      lightning. Seeded from the config seed when omitted.
    - actuator (BrightnessActuator, optional): Receives the brightness each frame.
- Public Methods:
    - populate(count, layers), update(), draw(screen), set_weather(name),
      set_daytime(is_day), toggle_day_night_cycle(period_ticks).
- Side Effects: Logs messages; writes brightness to the actuator.
================================================================================
"""
import logging
from dataclasses import dataclass
from typing import Protocol

import numpy as np
# This module requires Pygame for rendering, as it is the runtime component.
import pygame

from .. import config as DEFAULTS
from ..noise import NoiseEngine
from ..palette import ARCADE_PALETTE, image_to_rgba
from ..synthesizer import TextureSynthesizer
from ..weather import Weather
from .appearance import AppearanceState

# Strongest white wash drawn over the screen at the peak of a lightning flash.
FLASH_OVERLAY_MAX_ALPHA = 160


class BrightnessActuator(Protocol):
    """
    A protocol for whatever applies brightness to the display. Any object with
    a `set_brightness` method can be used.
    """
    def set_brightness(self, value: float) -> None: ...


@dataclass
class Cloud:
    """One drifting cloud. `x` and `y` are the centre of its tile in screen pixels."""
    x: float
    y: float
    vx: float
    layer: int
    image: np.ndarray
    surface: pygame.Surface = None


def image_to_surface(image: np.ndarray, palette: np.ndarray = ARCADE_PALETTE) -> pygame.Surface:
    """Converts a tile of palette indices to a per-pixel-alpha Pygame surface."""
    rgba = np.ascontiguousarray(image_to_rgba(image, palette))
    height, width = image.shape
    return pygame.image.frombytes(rgba.tobytes(), (width, height), 'RGBA')


class CloudSky:
    """
    The main runtime class for a layer of procedural clouds.
    """
    def __init__(self, config: dict = None, logger: logging.Logger = None,
                 rng: np.random.Generator = None, actuator: BrightnessActuator = None):
        self.logger = logger or logging.getLogger(__name__)
        self.user_config = config or {}

        # --- 1. Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'cloud_count': self.user_config.get('cloud_count', DEFAULTS.DEFAULT_CLOUD_COUNT),
            'layer_count': self.user_config.get('layer_count', DEFAULTS.DEFAULT_LAYER_COUNT),
            'transition_speed': self.user_config.get('transition_speed', DEFAULTS.TRANSITION_SPEED),
            'day_brightness': self.user_config.get('day_brightness', DEFAULTS.DAY_BRIGHTNESS),
            'night_brightness': self.user_config.get('night_brightness', DEFAULTS.NIGHT_BRIGHTNESS),
            'flash_brightness': self.user_config.get('flash_brightness', DEFAULTS.FLASH_BRIGHTNESS),
            'flash_chance': self.user_config.get('flash_chance', DEFAULTS.FLASH_CHANCE),
            'flash_duration_ticks': self.user_config.get('flash_duration_ticks', DEFAULTS.FLASH_DURATION_TICKS),
            'screen_width': self.user_config.get('screen_width', DEFAULTS.SCREEN_WIDTH),
            'screen_height': self.user_config.get('screen_height', DEFAULTS.SCREEN_HEIGHT),
            'texture_cache_size': self.user_config.get('texture_cache_size', DEFAULTS.TEXTURE_CACHE_SIZE),
        }

        # --- 2. Initialize Core Components (Rule 7 - Composition) ---
        self.engine = NoiseEngine(logger=self.logger)
        self.synthesizer = TextureSynthesizer(
            self.engine,
            logger=self.logger,
            layer_count=self.settings['layer_count'],
            cache_size=self.settings['texture_cache_size'],
        )
        self.appearance = AppearanceState(
            speed=self.settings['transition_speed'],
            day_brightness=self.settings['day_brightness'],
            night_brightness=self.settings['night_brightness'],
            logger=self.logger,
        )
        self.rng = rng if rng is not None else np.random.default_rng(self.settings['seed'])
        self.actuator = actuator

        # --- 3. Runtime State ---
        self.clouds = []
        self.current_brightness = self.appearance.brightness
        self._rendered_revision = self.appearance.revision
        self._flash_ticks_remaining = 0
        self._overlay_surface = None

    # --- Setup ---
    def populate(self, count: int = None, layers: int = None):
        """
        Initializes the noise table and spawns `count` clouds spread over
        `layers` depth bands. Any previous clouds are discarded.
        """
        count = self.settings['cloud_count'] if count is None else count
        layers = self.settings['layer_count'] if layers is None else layers
        if layers < 1:
            raise ValueError("layers must be at least 1")

        self.engine.init(self.settings['seed'])
        self.synthesizer.layer_count = layers
        self.synthesizer.clear_cache()

        self.clouds = []
        for i in range(count):
            layer = i % layers
            self.clouds.append(Cloud(
                x=float(self._random_range(0, self.settings['screen_width'])),
                y=float(self._random_range(
                    DEFAULTS.SPAWN_Y_MIN + layer * DEFAULTS.LAYER_SPAWN_STEP,
                    DEFAULTS.SPAWN_Y_MAX + layer * DEFAULTS.LAYER_SPAWN_STEP,
                )),
                vx=-(layer + 1) * DEFAULTS.BASE_DRIFT_SPEED,
                layer=layer,
                image=self._synthesize(layer),
            ))

        self._rendered_revision = self.appearance.revision
        self.logger.info(f"Populated sky with {count} clouds across {layers} layers.")

    # --- Per-Frame Update ---
    def update(self):
        """
        Advances the sky by one tick. Should be called once per frame.
        """
        self.appearance.tick()
        self._refresh_images()

        stormy = self.appearance.weather is Weather.STORMY
        recycle_at = -DEFAULTS.RECYCLE_MARGIN
        for cloud in self.clouds:
            cloud.x += cloud.vx
            if stormy:
                cloud.x -= DEFAULTS.STORM_EXTRA_DRIFT

            if cloud.x < recycle_at:
                cloud.x = float(self.settings['screen_width'] + DEFAULTS.RECYCLE_MARGIN)
                cloud.y = float(self._random_range(DEFAULTS.RESPAWN_Y_MIN, DEFAULTS.RESPAWN_Y_MAX))
                self._set_image(cloud, self._synthesize(cloud.layer))

        self._update_brightness(stormy)

    def _update_brightness(self, stormy: bool):
        if stormy and self._flash_ticks_remaining == 0 and self.rng.random() < self.settings['flash_chance']:
            self._flash_ticks_remaining = self.settings['flash_duration_ticks']
            self.logger.debug("Lightning flash.")

        if self._flash_ticks_remaining > 0:
            self._flash_ticks_remaining -= 1
            self.current_brightness = self.settings['flash_brightness']
        else:
            self.current_brightness = self.appearance.brightness

        if self.actuator is not None:
            self.actuator.set_brightness(self.current_brightness)

    def _refresh_images(self):
        """Regenerates every cloud tile if the appearance changed since the last refresh."""
        if self.appearance.revision == self._rendered_revision:
            return
        self._rendered_revision = self.appearance.revision
        if not self.engine.is_initialized:
            return
        for cloud in self.clouds:
            self._set_image(cloud, self._synthesize(cloud.layer))

    def _synthesize(self, layer: int) -> np.ndarray:
        return self.synthesizer.generate(layer, self.appearance.weather, self.appearance.transition)

    @staticmethod
    def _set_image(cloud: Cloud, image: np.ndarray):
        cloud.image = image
        cloud.surface = None

    def _random_range(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both ends inclusive."""
        return int(self.rng.integers(low, high + 1))

    # --- Rendering ---
    def draw(self, screen: pygame.Surface):
        """
        Renders the clouds, back layers first, then the lighting overlay.

        Args:
            screen (pygame.Surface): The surface to draw on.
        """
        for cloud in sorted(self.clouds, key=lambda c: c.layer):
            if cloud.surface is None:
                cloud.surface = image_to_surface(cloud.image)
            width, height = cloud.surface.get_size()
            screen.blit(cloud.surface, (round(cloud.x - width / 2), round(cloud.y - height / 2)))

        self._draw_lighting_overlay(screen)

    def _draw_lighting_overlay(self, screen: pygame.Surface):
        """Darkens the screen at night and washes it white during a flash."""
        screen_size = screen.get_size()
        if self._overlay_surface is None or self._overlay_surface.get_size() != screen_size:
            self._overlay_surface = pygame.Surface(screen_size, pygame.SRCALPHA)

        brightness = self.current_brightness
        day = self.settings['day_brightness']
        flash = self.settings['flash_brightness']

        if brightness > day:
            span = max(flash - day, 1)
            alpha = min((brightness - day) / span, 1.0) * FLASH_OVERLAY_MAX_ALPHA
            color = (255, 255, 255)
        else:
            # The brightness is how much light is PRESENT; alpha is how much is BLOCKED.
            alpha = (1.0 - max(brightness, 0.0) / day) * 255 if day > 0 else 255
            color = (0, 0, 0)

        self._overlay_surface.fill((color[0], color[1], color[2], int(alpha)))
        screen.blit(self._overlay_surface, (0, 0))

    # --- Public API for User Control ---
    def set_weather(self, name: str):
        """Sets the weather by name; unknown names are ignored."""
        self.appearance.set_weather(name)
        self._refresh_images()

    def set_daytime(self, is_day: bool):
        """Snaps to full day or full night and redraws every tile."""
        self.appearance.set_daytime(is_day)
        self._refresh_images()
        self.current_brightness = self.appearance.brightness

    def toggle_day_night_cycle(self, period_ticks: int):
        """Starts the perpetual day/night oscillation."""
        self.appearance.enable_cycle(period_ticks)

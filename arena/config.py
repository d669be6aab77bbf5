"""Shared constants for the arena. All game-wide configuration lives here."""

import math

# --- Display ---
SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
FPS = 60

# --- Simulation ---
SIM_DT = 1 / FPS  # seconds per simulation tick

# --- Arena bounds (owned by the physics collaborator) ---
WALL_LEFT = 0
WALL_RIGHT = 1280
GROUND_Y = 620  # y of the ground surface, y grows downward

# --- Combat ---
HIT_FLASH_DURATION = 0.25  # seconds a damaged target flashes

# --- Lightning ---
LIGHTNING_DAMAGE = 20
STRIKE_RADIUS = 50              # horizontal pixels from strike x that deal damage
MIN_INTERVAL = 4                # seconds between strikes, lower bound
MAX_INTERVAL = 10               # seconds between strikes, upper bound
FLASH_DURATION = 0.5            # how long the bolt stays visible
WARNING_DURATION = 1.0          # telegraph time before the bolt lands
STRIKE_WALL_INSET = 60          # keep strikes this far from either wall
DEFAULT_NEXT_STRIKE_TIMER = 5.0  # countdown when a snapshot omits it
BOLT_STEP = 30                  # min vertical pixels per bolt segment
BOLT_STEP_JITTER = 20           # extra random vertical pixels per segment
BOLT_HORIZONTAL_JITTER = 60     # full width of horizontal wander per segment

# --- Fireballs ---
FIREBALL_DAMAGE = 30
FIREBALL_WILL_COST = 10
FIREBALL_SPEED = 600     # px/s, horizontal only
FIREBALL_RADIUS = 12
FIREBALL_SPAWN_GAP = 10  # px between caster edge and fireball center

# Fireballs are dropped once they leave this margin around the arena
OFFSCREEN_MARGIN_X = 60
OFFSCREEN_MARGIN_BELOW = 60
OFFSCREEN_MARGIN_ABOVE = 200

TRAIL_DRIFT = 0.05           # fraction of projectile velocity trails drift backward
HIT_EFFECT_DURATION = 0.6    # seconds, independent of spark lifetimes
HIT_EFFECT_SPARKS = 16
SPARK_GRAVITY = 300          # px/s^2 pulling sparks down

# --- Terrain ---
PLATFORM_ANIMATION_SPEED = 0.5      # radians per second
PLATFORM_ANIMATION_AMPLITUDE = 40   # max horizontal displacement in pixels

# (base_x, y, width, height, phase, direction); positions are centers
PLATFORM_LAYOUT = (
    (300, 450, 200, 20, 0.0, 1),          # left elevated, moves right first
    (980, 450, 200, 20, math.pi, 1),      # right elevated, mirrors the left one
    (640, 300, 300, 20, math.pi / 2, 1),  # center high
    (640, 550, 150, 20, 0.0, 0),          # lower center, stationary
)

# --- Networking ---
SNAPSHOT_VERSION = 1

# --- Fighters (demo roster) ---
FIGHTER_WIDTH = 40
FIGHTER_HEIGHT = 60
FIGHTER_LIFE = 100
FIGHTER_WILL = 100

# --- Colors ---
COLOR_BG = (18, 16, 28)
COLOR_GROUND = (60, 50, 70)
COLOR_PLATFORM = (102, 76, 128)
COLOR_PLATFORM_TOP = (153, 128, 178)
COLOR_FIGHTERS = ((220, 80, 60), (60, 120, 220), (90, 200, 110))
COLOR_DEBUG_TEXT = (200, 200, 200)

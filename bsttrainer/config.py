"""Configuration parameters for the BST/AVL trainer."""

from dataclasses import dataclass


@dataclass
class TrainerConfig:
    """Configuration for the animated tree engine."""

    # Step durations (seconds, auto mode only)
    step_duration: float = 0.5  # Default pause when no duration is given
    search_duration: float = 0.5  # Pause on each node of a search path
    visit_duration: float = 0.8  # Pause on each traversal visit
    traversal_hold_duration: float = 1.0  # Pause after a whole traversal
    rotation_duration: float = 1.5  # Pause while a rotation is announced
    frame_duration: float = 0.016  # One tick of the drop animation

    # Layout geometry (pixels)
    canvas_width: float = 1200.0  # Width of the drawing area
    root_y: float = 60.0  # Vertical position of the root slot
    level_height: float = 80.0  # Vertical distance between depth levels

    # Drop animation
    drop_start_y: float = -50.0  # Where a new key appears above the canvas
    drop_epsilon: float = 5.0  # Drop ends when this close to the target
    lerp_factor: float = 0.1  # Fraction of the remaining distance per tick

    # Random fill
    random_fill_count: int = 15  # Keys inserted by a random fill
    random_min: int = 1  # Smallest random key
    random_max: int = 100  # Largest random key
    random_fill_delay: float = 0.2  # Extra pause between random inserts

    def __post_init__(self):
        """Validate and adjust configuration."""
        # Durations never go negative
        self.step_duration = max(0.0, self.step_duration)
        self.search_duration = max(0.0, self.search_duration)
        self.visit_duration = max(0.0, self.visit_duration)
        self.traversal_hold_duration = max(0.0, self.traversal_hold_duration)
        self.rotation_duration = max(0.0, self.rotation_duration)
        self.frame_duration = max(0.0, self.frame_duration)
        self.random_fill_delay = max(0.0, self.random_fill_delay)

        # Geometry and animation must make progress
        self.canvas_width = max(1.0, self.canvas_width)
        self.level_height = max(1.0, self.level_height)
        self.drop_epsilon = max(0.01, self.drop_epsilon)
        self.lerp_factor = min(1.0, max(0.01, self.lerp_factor))

        self.random_fill_count = max(0, self.random_fill_count)
        if self.random_min > self.random_max:
            self.random_min, self.random_max = self.random_max, self.random_min

    @property
    def root_anchor(self):
        """Fixed position of the root slot."""
        return (self.canvas_width / 2, self.root_y)

    @property
    def initial_gap(self) -> float:
        """Horizontal offset between the root and its children."""
        return self.canvas_width / 4


def create_default_config(**overrides) -> TrainerConfig:
    """
    Create default configuration for interactive sessions.

    Args:
        **overrides: Field values replacing the defaults

    Returns:
        Default TrainerConfig
    """
    return TrainerConfig(**overrides)


def create_fast_config(**overrides) -> TrainerConfig:
    """
    Create configuration with every pause set to zero.

    Used by headless runs and tests, where nothing watches the animation.

    Args:
        **overrides: Field values replacing the fast defaults

    Returns:
        TrainerConfig without delays
    """
    values = dict(
        step_duration=0.0,
        search_duration=0.0,
        visit_duration=0.0,
        traversal_hold_duration=0.0,
        rotation_duration=0.0,
        frame_duration=0.0,
        random_fill_delay=0.0,
        lerp_factor=0.5,
    )
    values.update(overrides)
    return TrainerConfig(**values)

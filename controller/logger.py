from typing import Any
from bsttrainer.config import TrainerConfig


class Logger:
    """
    Interface for logging.
    """

    def __init__(self, log_visits: bool = True):
        self.log_visits = log_visits

    def log_config(self, config: TrainerConfig):
        print("\nConfiguration:")
        print(f"  Step duration: {config.step_duration}s")
        print(f"  Rotation duration: {config.rotation_duration}s")
        print(f"  Canvas width: {config.canvas_width}px")

    def log_event(self, event: str, payload: Any):
        """Log an engine event."""
        if event == "stats":
            print(f"Stats: height={payload.height} nodes={payload.count} leaves={payload.leaves}")
        elif event == "rotation":
            print(payload.message)
        elif event == "not_found":
            print(f"Value {payload} not found in tree")
        elif event == "visit":
            if self.log_visits:
                print(f"Visit: {payload}")
        elif event == "clear":
            print(f"Cleared ({payload.value})")
        else:
            print(f"{event.capitalize()}: {payload}")

    def log_final(self, engine):
        print("\n" + "=" * 60)
        print("Final Statistics:")
        print(f"  Discipline: {engine.discipline.value}")
        print(f"  Height: {engine.stats.height}")
        print(f"  Nodes: {engine.stats.count}")
        print(f"  Leaves: {engine.stats.leaves}")
        print(f"  Keys: {engine.keys()}")
        print("=" * 60)

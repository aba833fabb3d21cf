from .app import create_app
from .selector import pick_best_audio

__all__ = ["create_app", "pick_best_audio"]

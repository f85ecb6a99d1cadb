from src.ace_trail.runtime.cli import main

__all__ = ["main"]

from src.ace_trail.utils.settings import resolve_ace_dir

__all__ = ["resolve_ace_dir"]

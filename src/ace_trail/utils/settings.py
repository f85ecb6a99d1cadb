import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ACE_DIR_ENV_VAR = "ACE_TRAIL_DIR"
DEFAULT_ACE_SUBDIR = Path(".cursor") / "ace"

GIT_TIMEOUT_SECONDS = float(os.getenv("ACE_GIT_TIMEOUT_SECONDS", "5"))


def resolve_ace_dir(ace_dir: str | Path | None = None) -> Path:
    """Directory holding the hook logs and playbook state.

    Explicit argument, then ``ACE_TRAIL_DIR``, then ``<cwd>/.cursor/ace``.
    """
    if ace_dir:
        return Path(ace_dir)
    configured = os.getenv(ACE_DIR_ENV_VAR)
    if configured:
        return Path(configured)
    return Path.cwd() / DEFAULT_ACE_SUBDIR

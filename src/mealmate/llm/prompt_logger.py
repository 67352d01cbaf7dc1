"""
Meal Mate - Prompt Logger.

Logs every generation gateway call to a markdown file for debugging.
Enabled via MEALMATE_LOG_PROMPTS=1 or the --log-prompts CLI flag.
"""

import os
from datetime import datetime
from pathlib import Path

# Configuration
LOG_PROMPTS = os.getenv("MEALMATE_LOG_PROMPTS", "0") == "1"
LOG_DIR = Path("prompt_logs")

# Session tracking
_session_id: str | None = None
_call_counter: int = 0


def enable_prompt_logging(enabled: bool = True) -> None:
    """Enable or disable prompt logging."""
    global LOG_PROMPTS
    LOG_PROMPTS = enabled
    if enabled:
        _ensure_log_dir()


def is_prompt_logging_enabled() -> bool:
    return LOG_PROMPTS


def _ensure_log_dir() -> None:
    LOG_DIR.mkdir(exist_ok=True)


def _get_session_id() -> str:
    global _session_id
    if _session_id is None:
        _session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    return _session_id


def _get_session_dir() -> Path:
    session_dir = LOG_DIR / _get_session_id()
    session_dir.mkdir(parents=True, exist_ok=True)
    return session_dir


def log_prompt(
    *,
    verb: str,
    model: str,
    prompt: str,
    system_prompt: str | None = None,
    response: str | None = None,
    error: str | None = None,
    attachment: str | None = None,
) -> Path | None:
    """
    Log a gateway call to a file.

    Args:
        verb: Gateway verb that made the call (recipe_from_text, chat_reply, ...)
        model: The model used
        prompt: The user prompt text
        system_prompt: The system instruction, if any
        response: Raw response text (optional)
        error: Any error that occurred (optional)
        attachment: Short description of non-text input, e.g. "image/png, 20480 bytes"

    Returns:
        Path to the log file, or None if logging is disabled
    """
    if not LOG_PROMPTS:
        return None

    global _call_counter
    _call_counter += 1

    _ensure_log_dir()
    filepath = _get_session_dir() / f"{_call_counter:02d}_{verb}.md"

    attachment_str = f"\n**Attachment:** {attachment}" if attachment else ""
    content = f"""# Gateway Call: {verb}

**Time:** {datetime.now().isoformat()}
**Model:** {model}{attachment_str}

---

"""
    if system_prompt:
        content += f"## System Prompt\n\n```\n{system_prompt}\n```\n\n---\n\n"

    content += f"## Prompt\n\n```\n{prompt}\n```\n\n---\n\n## Response\n\n"

    if error:
        content += f"**ERROR:** {error}\n"
    elif response is not None:
        content += f"```\n{response}\n```\n"
    else:
        content += "(No response yet)\n"

    filepath.write_text(content, encoding="utf-8")
    return filepath


def get_session_log_dir() -> Path | None:
    """Get the current session's log directory, if logging is enabled."""
    if not LOG_PROMPTS:
        return None
    return _get_session_dir()


def reset_session() -> None:
    """Reset the session (for testing or new conversation)."""
    global _session_id, _call_counter
    _session_id = None
    _call_counter = 0

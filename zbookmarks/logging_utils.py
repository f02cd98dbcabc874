import logging
import os
import time
from typing import Optional, Sequence


def setup_logger(name: str = "zbookmarks", level: Optional[str] = None) -> logging.Logger:
    """Setup standardized logger for zbookmarks with UTF-8 support."""
    logger = logging.getLogger(name)

    if not logger.handlers:  # Avoid duplicate handlers
        handler = logging.StreamHandler()
        if hasattr(handler.stream, 'reconfigure'):
            handler.stream.reconfigure(encoding='utf-8')

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    level = level or os.getenv("ZBOOKMARKS_LOG_LEVEL", "INFO")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def log_transition(logger: logging.Logger,
                   session_id: str,
                   key: str,
                   mode: str,
                   filter_mode: str,
                   filter_text: str,
                   visible: int,
                   selection: int,
                   duration_ms: float,
                   effects: Optional[Sequence[object]] = None,
                   error: Optional[str] = None) -> None:
    """Log one handled key event in a structured format."""

    log_data = {
        "session_id": session_id,
        "key": key,
        "mode": mode,
        "filter_mode": filter_mode,
        "filter": filter_text,
        "visible": visible,
        "selection": selection,
        "duration_ms": round(duration_ms, 1)
    }

    if effects:
        log_data["effects"] = _summarize_effects(effects)

    if error:
        log_data["error"] = error
        logger.warning(f"❌ Key {key}: {log_data}")
    else:
        logger.debug(f"⌨️ Key {key}: {log_data}")


def _summarize_effects(effects: Sequence[object]) -> list:
    """Compact effect description for logging; command text is truncated."""
    summary = []
    for effect in effects:
        name = type(effect).__name__
        text = getattr(effect, "text", None)
        if isinstance(text, str):
            if len(text) > 80:
                text = text[:77] + "..."
            summary.append(f"{name}({text!r})")
        else:
            summary.append(name)
    return summary


def create_session_id() -> str:
    """Create unique session ID for tracking."""
    return f"session_{int(time.time() * 1000)}"


def measure_time(func):
    """Simple decorator to measure execution time."""
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        duration_ms = (time.time() - start_time) * 1000
        return result, duration_ms
    return wrapper

"""Prompt templates stored as one JSON file per prompt."""

import json
import logging
import re
from pathlib import Path
from typing import Dict

from .errors import PersistenceError, UserInputError

logger = logging.getLogger(__name__)

PROMPTS_DIRNAME = "prompts"
DEFAULT_PROMPT = "You are a helpful AI assistant."

_VALID_NAME = re.compile(r"^[A-Za-z0-9_.-]+$")


def load_prompts(directory: Path) -> Dict[str, str]:
    """Return ``name -> content`` for every ``*.json`` file in *directory*."""
    prompts: Dict[str, str] = {"default": DEFAULT_PROMPT}
    if not directory.is_dir():
        logger.debug("Prompt directory %s not found", directory)
        return prompts

    for path in sorted(directory.glob("*.json")):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Skipping prompt %s: %s", path.name, exc)
            continue
        content = data.get("content", "") if isinstance(data, dict) else ""
        prompts[path.stem] = content if isinstance(content, str) else ""
    return prompts


def save_prompt(directory: Path, name: str, content: str) -> Path:
    if not _VALID_NAME.match(name) or name.startswith("."):
        raise UserInputError(f"Invalid prompt name '{name}'.")
    path = directory / f"{name}.json"
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps({"role": "system", "content": content}, ensure_ascii=False, indent=4),
            encoding="utf-8",
        )
    except OSError as exc:
        raise PersistenceError(f"Unable to save prompt {path}: {exc}") from exc
    return path

"""Runtime settings.

Resolution order for every value: real environment variable > project
.env file > built-in default. Unknown keys in .env are ignored, as are
lines that don't parse.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional
from models import InsertPosition

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DOTENV_PATH = PROJECT_ROOT / '.env'
DEFAULT_DATA_FILE = PROJECT_ROOT / 'data' / 'todos.json'

KNOWN_KEYS = {
    'TODO_DATA_FILE', 'TODO_INSERT', 'TODO_LOG_LEVEL', 'TODO_ALT_SCREEN',
    'TODO_PRIMARY', 'TODO_ACTIVE', 'TODO_COMPLETED',
}
LOG_LEVELS = {'TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'}


def read_dotenv(path: Path = DOTENV_PATH) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if not path.exists():
        return overrides
    try:
        text = path.read_text()
    except OSError:
        return overrides
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        if k in KNOWN_KEYS:
            overrides[k] = v.strip().strip('"').strip("'")
    return overrides


def truthy(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    data_file: Path = DEFAULT_DATA_FILE
    insert_position: InsertPosition = InsertPosition.APPEND
    log_level: str = 'WARNING'
    alt_screen: bool = True


def load_settings(env: Optional[Mapping[str, str]] = None, dotenv_path: Path = DOTENV_PATH) -> Settings:
    env = os.environ if env is None else env
    dotenv = read_dotenv(dotenv_path)

    def get(key: str) -> Optional[str]:
        return env.get(key) or dotenv.get(key)

    data_file = Path(get('TODO_DATA_FILE') or DEFAULT_DATA_FILE).expanduser()

    insert_raw = (get('TODO_INSERT') or '').strip().lower()
    try:
        insert_position = InsertPosition(insert_raw) if insert_raw else InsertPosition.APPEND
    except ValueError:
        insert_position = InsertPosition.APPEND

    log_level = (get('TODO_LOG_LEVEL') or 'WARNING').strip().upper()
    if log_level not in LOG_LEVELS:
        log_level = 'WARNING'

    return Settings(
        data_file=data_file,
        insert_position=insert_position,
        log_level=log_level,
        alt_screen=truthy(get('TODO_ALT_SCREEN'), True),
    )

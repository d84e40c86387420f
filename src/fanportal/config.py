import yaml
from pathlib import Path
from appdirs import AppDirs
from sqlalchemy.orm import sessionmaker
from typing import Any, Callable, Dict, List, Optional
import logging

from fanportal.models import Setting

log = logging.getLogger(__name__)

# Define app-specific details
APP_NAME = "fanportal"
APP_AUTHOR = "fanportal"
_dirs = AppDirs(APP_NAME, APP_AUTHOR)

# key -> (value, type, description)
DEFAULT_SETTINGS = {
    "auth.bootstrap_admins": ("", "list", "Principals granted the admin role at bootstrap."),
    "auth.register_on_profile": ("true", "boolean", "Promote a guest to user when they save a profile."),
    "content.case_sensitive_filters": ("false", "boolean", "Match title and category filters case-sensitively."),
    "homepage.trending_limit": ("3", "integer", "How many resolved trending items the homepage shows."),
}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Loads a YAML configuration file.

    Raises:
        FileNotFoundError: if the file does not exist.
    """
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def get_user_config_path() -> Path:
    return Path(_dirs.user_config_dir) / "user_config.yml"


def _read_user_config() -> Dict[str, Any]:
    config_path = get_user_config_path()
    if not config_path.is_file():
        return {}
    try:
        return load_config(str(config_path))
    except (OSError, yaml.YAMLError) as e:
        log.error(f"Failed to read user config at {config_path}: {e}")
        return {}


def get_db_path() -> Path:
    """Portal database file: `database_path` from user_config.yml, else fanportal.db in the data dir."""
    configured = _read_user_config().get('database_path')
    if configured:
        return Path(configured).expanduser()
    return Path(_dirs.user_data_dir) / "fanportal.db"


def get_db_url() -> str:
    """
    Constructs the SQLAlchemy database URL from the DB path.
    """
    path = get_db_path()
    # Ensure the parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{path}"


def get_log_level(default: str = "WARNING") -> str:
    return str(_read_user_config().get('log_level', default)).upper()


def _to_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


# Setting.type -> parser for the stored string
CONVERTERS: Dict[str, Callable[[str], Any]] = {
    'string': str,
    'integer': int,
    'boolean': lambda value: value.strip().lower() in ('true', '1', 'yes'),
    'list': _to_list,
}


class SettingsManager:
    """
    Typed portal settings stored in the 'settings' table, keyed by dotted
    names such as 'auth.bootstrap_admins'.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._values: Dict[str, Any] = {}

    @staticmethod
    def _parse(value: str, type_str: str) -> Any:
        return CONVERTERS.get(type_str, str)(value)

    def ensure_defaults(self):
        """Inserts every default setting that is not stored yet."""
        with self._session_factory() as session:
            existing = {key for (key,) in session.query(Setting.key).all()}
            added = 0
            for key, (value, type_str, description) in DEFAULT_SETTINGS.items():
                if key not in existing:
                    session.add(Setting(key=key, value=value, type=type_str, description=description))
                    added += 1
            session.commit()
        if added:
            log.info(f"Seeded {added} default settings.")

    def load_settings(self):
        """Reads every stored setting; defaults fill keys missing from the table."""
        values = {key: self._parse(value, type_str) for key, (value, type_str, _) in DEFAULT_SETTINGS.items()}
        with self._session_factory() as session:
            rows = session.query(Setting).all()
            values.update((row.key, self._parse(row.value, row.type)) for row in rows)
        self._values = values
        log.info(f"Loaded {len(rows)} stored settings.")

    def set(self, key: str, value: str, type_str: str = 'string'):
        """Stores a setting and updates the loaded values."""
        with self._session_factory() as session:
            setting = session.get(Setting, key)
            if setting is None:
                session.add(Setting(key=key, value=value, type=type_str))
            else:
                setting.value = value
                setting.type = type_str
            session.commit()
        self._values[key] = self._parse(value, type_str)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._values.get(key, default)

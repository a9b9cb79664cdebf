"""
Settings Manager for unixdock
Manages client settings stored in JSON file
"""

import json
import logging
import os
import platform
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_SOCKET_PATH = '/var/run/docker.sock'

DEFAULT_SETTINGS: Dict[str, Any] = {
    'docker_socket_path': '',
    'timeout': None,
    'log_level': 'WARNING',
}


class Settings:
    """Manager for client settings"""

    @staticmethod
    def get_user_settings_path() -> str:
        """Get path to user settings file"""
        config_home = os.environ.get('XDG_CONFIG_HOME') or os.path.expanduser('~/.config')
        return os.path.join(config_home, 'unixdock', 'settings.json')

    def __init__(self, settings_file: Optional[str] = None):
        """
        Initialize settings

        Args:
            settings_file: Settings file path (default: user settings path)
        """
        self.settings_file = settings_file or self.get_user_settings_path()
        self.settings: Dict[str, Any] = {}

        self.load()

    def load(self):
        """Load settings from file, merged over defaults"""
        self.settings = DEFAULT_SETTINGS.copy()
        if not os.path.exists(self.settings_file):
            return

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                loaded_settings = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not load settings from {self.settings_file}: {e}")
            return

        if not isinstance(loaded_settings, dict):
            logger.warning(f"Ignoring settings file {self.settings_file}: not a JSON object")
            return

        self.settings.update(loaded_settings)
        logger.debug(f"Settings loaded from {self.settings_file}")

    def save(self):
        """Save settings to file"""
        directory = os.path.dirname(self.settings_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.settings_file, 'w', encoding='utf-8') as f:
            json.dump(self.settings, f, indent=4, ensure_ascii=False)

        logger.debug(f"Settings saved to {self.settings_file}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get setting value

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Setting value
        """
        return self.settings.get(key, default)

    def set(self, key: str, value: Any):
        """Set setting value (not saved until save() is called)"""
        self.settings[key] = value


def _strip_scheme(path: str) -> str:
    return path[len('unix://'):] if path.startswith('unix://') else path


def platform_socket_path() -> str:
    """Default Docker socket of this platform"""
    if platform.system() == 'Darwin':
        desktop_socket = os.path.expanduser('~/.docker/run/docker.sock')
        if os.path.exists(desktop_socket):
            return desktop_socket
    return DEFAULT_SOCKET_PATH


def resolve_socket_path(explicit: Optional[str] = None,
                        settings: Optional[Settings] = None) -> str:
    """
    Resolve the Docker socket path

    Precedence: explicit value, DOCKER_HOST (unix:// only), settings file,
    platform default.
    """
    if explicit:
        return _strip_scheme(explicit)

    docker_host = os.environ.get('DOCKER_HOST', '')
    if docker_host.startswith('unix://'):
        return _strip_scheme(docker_host)
    if docker_host:
        logger.warning(f"Ignoring DOCKER_HOST={docker_host}: only unix:// sockets are supported")

    if settings is not None and settings.get('docker_socket_path'):
        return _strip_scheme(settings.get('docker_socket_path'))

    return platform_socket_path()

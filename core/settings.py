import json
import logging
import os


class Settings:
    """Tunable defaults shared by the filter tools"""

    ENV_VAR = "RASTERFX_SETTINGS"

    DEFAULT_SETTINGS = {
        'log_level': 'INFO',
        'jpeg_quality': 92,
        'webp_quality': 90,
        'max_iterations': 10,
        'strict_convergence': False,
        'angle_correction': 0.0,
        'retinex_epsilon': 1e-4,
        'lookup_samples': 4096,
    }

    def __init__(self, settings_file=None):
        if settings_file is None:
            settings_file = os.environ.get(self.ENV_VAR)
        if settings_file is None:
            home = os.path.expanduser("~")
            self.settings_file = os.path.join(home, '.rasterfx_settings.json')
        else:
            self.settings_file = settings_file

        self.settings = self.DEFAULT_SETTINGS.copy()
        self.load()

    def load(self):
        """Overlay values from the settings file, if there is one"""
        if os.path.exists(self.settings_file):
            try:
                with open(self.settings_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                    if not isinstance(loaded, dict):
                        raise ValueError("top level must be an object")
                    self.settings.update(loaded)
            except (OSError, ValueError) as e:
                logging.warning("Failed to load settings from %s: %s", self.settings_file, e)

    def get(self, key, default=None):
        """Get a setting value"""
        return self.settings.get(key, default)

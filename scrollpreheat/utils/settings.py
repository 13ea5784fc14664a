from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    # Lookahead size as a multiple of the viewport extent along the scroll axis.
    'preheat_window_ratio': 1.0,
    # Fraction of the viewport extent the offset must move before recomputing.
    'preheat_update_threshold_ratio': 0.33,
    # Print flow traces for enable/disable/recompute decisions.
    'preheat_trace_logs': False,
}


class Settings(QSettings):
    """Preheat settings store.

    Uses the native per-user store by default. Passing ``path`` keeps the
    values in an INI file instead, which hosts use for portable setups.
    """

    # (key, value) after every write through `setValue` or `restore_default`.
    change = Signal(str, object, name='settingsChanged')

    def __init__(self, path=None, *, organization='scrollpreheat',
                 application='scrollpreheat'):
        if path is not None:
            super().__init__(str(path), QSettings.Format.IniFormat)
        else:
            super().__init__(organization, application)

    def setValue(self, key, value):
        super().setValue(key, value)
        self.change.emit(key, value)

    def preheat_value(self, key):
        """Read a known preheat key, falling back to its default and type."""
        default = DEFAULT_SETTINGS[key]
        return self.value(key, defaultValue=default, type=type(default))

    def restore_default(self, key):
        """Drop a stored override so readers see the default again."""
        default = DEFAULT_SETTINGS[key]
        self.remove(key)
        self.change.emit(key, default)


# Shared by every controller bound through `bind_settings`.
settings = Settings()

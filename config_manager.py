"""
Centralized configuration manager to avoid multiple Config instances.
"""
from core.config import Config, GridConfig

# Global config instance - loaded once
_config_instance = None

def get_config() -> Config:
    """Get the global config instance, creating it only once."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance

def refresh_config():
    """Force a refresh of the global config instance."""
    global _config_instance
    _config_instance = None
    return get_config()

def get_grid_config() -> GridConfig:
    """Get the grid protocol section of the main config."""
    return get_config().grid

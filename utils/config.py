"""
Configuration Management with JSON
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_DIR = Path.home() / ".config" / "menuboard"


def default_settings() -> Dict[str, Any]:
    """Fresh copy of the default configuration"""
    return {
        "version": 1,
        "server": {
            "host": "127.0.0.1",
            "port": 8720
        },
        "storage": {
            "db_name": "menuboard.db"
        },
        "editor": {
            "api_url": "http://127.0.0.1:8720",
            "request_timeout": 5,
            "max_depth": 2,
            "id_length": 11
        },
        "logging": {
            "file": None
        },
        "import_export": {
            "directory": "~/.config/menuboard/menus"
        }
    }


class ConfigManager:
    """Manages application configuration in JSON format"""
    
    def __init__(self, config_dir=None):
        """config_dir can be Path object or string"""
        if config_dir is None:
            config_dir = DEFAULT_CONFIG_DIR
        self.config_dir = Path(config_dir) if isinstance(config_dir, str) else config_dir
        self.config_dir.mkdir(parents=True, exist_ok=True)
        
        self.config_file = self.config_dir / "config.json"
        self.settings = self._load_config()
    
    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or defaults"""
        defaults = default_settings()
        
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not read {self.config_file}, using defaults: {e}")
                return defaults
            
            if isinstance(loaded, dict):
                return self._merge(defaults, loaded)
            logger.warning(f"Ignoring non-object config in {self.config_file}")
            return defaults
        
        self._save_config(defaults)
        return defaults
    
    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Overlay stored values on the defaults so new keys keep working"""
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                base[key] = self._merge(base[key], value)
            else:
                base[key] = value
        return base
    
    def _save_config(self, config: Dict):
        """Save configuration to file"""
        with open(self.config_file, 'w') as f:
            json.dump(config, f, indent=2)
    
    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        keys = key.split('.')
        value = self.settings
        
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        
        return value
    
    def set(self, key: str, value: Any):
        """Set configuration value using dot notation"""
        keys = key.split('.')
        config = self.settings
        
        # Navigate to the right level
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        
        config[keys[-1]] = value
        
        self._save_config(self.settings)
        
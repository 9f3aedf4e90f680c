# config.py
import copy

import yaml


def get_default_config():
    """
    Provide default configuration if file loading fails

    Returns:
        dict: Default configuration values
    """
    return {
        'blinks': {
            'smoothing_window': 3,
            'threshold': 0.3,
            'sync_tolerance': 0.15,
            'motion_tolerance': 0.05,
            'min_duration_ms': 50,
            'max_duration_ms': 500
        },
        'session': {'duration_s': 60},
        'face': {
            'model_path': 'models/face_landmarker.task',
            'min_detection_confidence': 0.5,
            'min_presence_confidence': 0.5,
            'min_tracking_confidence': 0.5
        },
        'camera': {'index': 0, 'width': 640, 'height': 480, 'fps': 30, 'mirror_effect': True},
        'display': {
            'dashboard_width': 320,
            'show_fps': True,
            'show_preview': True,
            'colors': {
                'background': [45, 45, 45],
                'text_primary': [255, 255, 255],
                'text_secondary': [200, 200, 200],
                'active': [0, 200, 0],
                'idle': [0, 200, 200],
                'error': [0, 0, 255],
                'separator': [100, 100, 100]
            }
        },
        'alerts': {'sound_file': None},
        'logging': {'echo': True}
    }


def _merge(base, override):
    """Recursively merge override into a copy of base"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path):
    """
    Load configuration from YAML file on top of the defaults

    Nested sections are merged key by key, so a file only needs the values it
    changes. A file that is missing, unreadable or not a mapping leaves the
    defaults in place.

    Args:
        config_path: Path to configuration file

    Returns:
        dict: Configuration dictionary
    """
    config = get_default_config()
    try:
        with open(config_path, 'r') as file:
            loaded = yaml.safe_load(file) or {}
    except FileNotFoundError:
        print(f"Config file {config_path} not found. Using defaults.")
        return config
    except (OSError, yaml.YAMLError) as e:
        print(f"Error loading config: {e}. Using defaults.")
        return config

    if not isinstance(loaded, dict):
        print(f"Error loading config: {config_path} is not a mapping. Using defaults.")
        return config

    print(f"Configuration loaded from {config_path}")
    return _merge(config, loaded)

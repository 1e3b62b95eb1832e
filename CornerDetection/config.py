"""
Configuration management for the corner detection system.

This module provides predefined configurations, validation, and
configuration management utilities.
"""

import copy
import json
import math
import os
from typing import Any, Dict, List

from .core_data_structures import CornerMetric
from .logger import get_logger

logger = get_logger("config")


# =============================================================================
# Default Configurations
# =============================================================================


DEFAULT_CONFIG = {
    'metric': 'harris',
    'quality_level': 0.01,
    'gradient_sigma': 1.0,
    'window_sigma': 2.0,
    'max_features': None,
    'visualize': False
}


PRESET_CONFIGS = {
    'fine': {
        'gradient_sigma': 0.7,
        'window_sigma': 1.2,
        'quality_level': 0.01
    },

    'balanced': {
        'gradient_sigma': 1.0,
        'window_sigma': 2.0,
        'quality_level': 0.01
    },

    'coarse': {
        'gradient_sigma': 2.0,
        'window_sigma': 4.0,
        'quality_level': 0.05
    },

    'shi_tomasi': {
        'metric': 'min_eigen',
        'gradient_sigma': 1.0,
        'window_sigma': 1.5,
        'quality_level': 0.01
    },

    'harmonic': {
        'metric': 'harmonic_mean',
        'gradient_sigma': 1.0,
        'window_sigma': 2.0,
        'quality_level': 0.05
    }
}


# =============================================================================
# Configuration Functions
# =============================================================================

def get_default_config() -> Dict[str, Any]:
    """Get a copy of the default configuration"""
    return copy.deepcopy(DEFAULT_CONFIG)


def create_config_from_preset(preset: str) -> Dict[str, Any]:
    """
    Create configuration from a preset

    Args:
        preset: Preset name ('fine', 'balanced', 'coarse', 'shi_tomasi', 'harmonic')

    Returns:
        Configuration dictionary

    Raises:
        ValueError: If preset is not available
    """
    if preset not in PRESET_CONFIGS:
        available = ', '.join(PRESET_CONFIGS.keys())
        raise ValueError(f"Unknown preset: {preset}. Available: {available}")

    return merge_configs(DEFAULT_CONFIG, PRESET_CONFIGS[preset])


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configuration dictionaries

    Args:
        base_config: Base configuration
        override_config: Configuration to override base with

    Returns:
        Merged configuration
    """
    merged = copy.deepcopy(base_config)

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)

    return merged


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> Dict[str, List[str]]:
    """
    Validate configuration and return any issues

    Args:
        config: Configuration to validate

    Returns:
        Dictionary with validation results:
        {
            'errors': [list of error messages],
            'warnings': [list of warning messages]
        }
    """
    errors = []
    warnings = []

    for key in config:
        if key not in DEFAULT_CONFIG:
            warnings.append(f"Unknown configuration key: {key}")

    if 'metric' in config:
        try:
            CornerMetric.parse(config['metric'])
        except ValueError as e:
            errors.append(str(e))

    for field in ('gradient_sigma', 'window_sigma'):
        if field in config:
            value = config[field]
            if not _is_number(value) or not math.isfinite(value) or value <= 0:
                errors.append(f"'{field}' must be a positive number")

    if 'quality_level' in config:
        value = config['quality_level']
        if not _is_number(value) or not 0.0 < value <= 1.0:
            errors.append("'quality_level' must be a number in (0, 1]")
        elif value == 1.0:
            warnings.append("'quality_level' of 1.0 never yields keypoints (threshold is strict)")

    if config.get('max_features') is not None:
        value = config['max_features']
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            errors.append("'max_features' must be a positive integer or null")

    if 'visualize' in config and not isinstance(config['visualize'], bool):
        errors.append("'visualize' must be a boolean")

    gradient_sigma = config.get('gradient_sigma')
    window_sigma = config.get('window_sigma')
    if _is_number(gradient_sigma) and _is_number(window_sigma) and 0 < window_sigma < gradient_sigma:
        warnings.append("'window_sigma' smaller than 'gradient_sigma' gives a poorly averaged tensor")

    return {'errors': errors, 'warnings': warnings}


def print_config(config: Dict[str, Any], title: str = "Configuration"):
    """
    Pretty print a configuration

    Args:
        config: Configuration to print
        title: Title for the printout
    """
    print(f"\n{title}")
    print("=" * len(title))
    for key, value in config.items():
        print(f"{key}: {value}")


def print_available_presets():
    """Print the available presets and what they change"""
    print("\nAvailable presets")
    print("=================")
    for name, preset in PRESET_CONFIGS.items():
        settings = ', '.join(f"{k}={v}" for k, v in preset.items())
        print(f"  {name:12s} {settings}")


def save_config(config: Dict[str, Any], filepath: str):
    """
    Save configuration to JSON file

    Args:
        config: Configuration to save
        filepath: Path to save file
    """
    with open(filepath, 'w') as f:
        json.dump(config, f, indent=2)
    logger.info(f"Configuration saved to: {filepath}")


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from JSON file

    Args:
        filepath: Path to configuration file

    Returns:
        Loaded configuration merged over the defaults

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    with open(filepath, 'r') as f:
        config = json.load(f)

    logger.info(f"Configuration loaded from: {filepath}")
    return merge_configs(DEFAULT_CONFIG, config)


def create_detector_from_config(config: Dict[str, Any], **overrides):
    """
    Build a CornerDetector from a configuration dictionary

    Args:
        config: Configuration (missing keys fall back to DEFAULT_CONFIG)
        **overrides: Detector keyword arguments that take precedence (e.g. debug_sink)

    Returns:
        Configured CornerDetector

    Raises:
        ValueError: If the configuration has errors
    """
    from .corner_detector import CornerDetector

    merged = merge_configs(DEFAULT_CONFIG, config)
    result = validate_config(merged)
    for warning in result['warnings']:
        logger.warning(warning)
    if result['errors']:
        raise ValueError("Invalid configuration: " + "; ".join(result['errors']))

    params = {key: merged[key] for key in DEFAULT_CONFIG}
    params.update(overrides)
    return CornerDetector(**params)

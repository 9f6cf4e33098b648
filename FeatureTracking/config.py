"""
Configuration management for the gyro feature tracker.

This module provides the tracker configuration dataclass, predefined presets,
validation, and JSON save/load helpers.
"""

import copy
import json
import os
from dataclasses import dataclass, asdict, fields
from typing import Dict, List, Any

from .logger import get_logger

logger = get_logger("config")


# =============================================================================
# Default Configurations
# =============================================================================

DEFAULT_CONFIG = {
    'small_search_distance': 10,
    'large_search_distance': 50,
    'matching_threshold_bits_ratio': 0.8,
    'emit_descriptor_score': False
}


PRESET_CONFIGS = {
    'default': {},

    # Low angular rates, keypoints move little between frames
    'slow_motion': {
        'small_search_distance': 5,
        'large_search_distance': 20
    },

    # High angular rates or low frame rate
    'fast_motion': {
        'small_search_distance': 20,
        'large_search_distance': 80
    },

    'strict': {
        'matching_threshold_bits_ratio': 0.85
    }
}


@dataclass(frozen=True)
class GyroTrackerConfig:
    """
    Tracker tuning constants

    Attributes:
        small_search_distance: Radius in pixels of the narrow search window
        large_search_distance: Radius in pixels of the wide search window
        matching_threshold_bits_ratio: Fraction of descriptor bits a match must exceed
        emit_descriptor_score: Report best_score / bits instead of 0.0 in matches
    """
    small_search_distance: int = DEFAULT_CONFIG['small_search_distance']
    large_search_distance: int = DEFAULT_CONFIG['large_search_distance']
    matching_threshold_bits_ratio: float = DEFAULT_CONFIG['matching_threshold_bits_ratio']
    emit_descriptor_score: bool = DEFAULT_CONFIG['emit_descriptor_score']

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'GyroTrackerConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**config)

    @classmethod
    def from_preset(cls, preset: str) -> 'GyroTrackerConfig':
        return cls.from_dict(create_config_from_preset(preset))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self):
        """
        Raise ValueError if the configuration has errors

        Warnings are logged but do not raise.
        """
        report = validate_config(self.to_dict())
        for warning in report['warnings']:
            logger.warning(warning)
        if report['errors']:
            raise ValueError("Invalid tracker configuration: " + "; ".join(report['errors']))


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
        preset: Preset name ('default', 'slow_motion', 'fast_motion', 'strict')

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

    for key in ('small_search_distance', 'large_search_distance', 'matching_threshold_bits_ratio'):
        if key not in config:
            errors.append(f"Missing required field: {key}")

    small = config.get('small_search_distance')
    large = config.get('large_search_distance')
    ratio = config.get('matching_threshold_bits_ratio')

    for key, value in (('small_search_distance', small), ('large_search_distance', large)):
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))
                                  or value <= 0):
            errors.append(f"'{key}' must be a positive number")

    if not errors and large <= small:
        errors.append("'large_search_distance' must be greater than 'small_search_distance'")

    if ratio is not None:
        if isinstance(ratio, bool) or not isinstance(ratio, (int, float)) or not 0.0 <= ratio < 1.0:
            errors.append("'matching_threshold_bits_ratio' must be in [0, 1)")
        elif ratio < 0.5:
            warnings.append(
                f"'matching_threshold_bits_ratio' of {ratio} accepts descriptors that are "
                f"closer to random than to a match")

    if 'emit_descriptor_score' in config and not isinstance(config['emit_descriptor_score'], bool):
        errors.append("'emit_descriptor_score' must be a boolean")

    return {'errors': errors, 'warnings': warnings}


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

    Missing keys are filled from the default configuration.

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

import json

import pytest

from FeatureTracking import (
    GyroTrackerConfig,
    create_config_from_preset,
    get_default_config,
    load_config,
    merge_configs,
    save_config,
    validate_config,
)
from FeatureTracking.config import PRESET_CONFIGS


def test_defaults():
    config = GyroTrackerConfig()
    assert config.small_search_distance == 10
    assert config.large_search_distance == 50
    assert config.matching_threshold_bits_ratio == pytest.approx(0.8)
    assert config.emit_descriptor_score is False
    assert config.to_dict() == get_default_config()


def test_default_config_is_a_copy():
    config = get_default_config()
    config['small_search_distance'] = 1
    assert get_default_config()['small_search_distance'] == 10


@pytest.mark.parametrize("preset", sorted(PRESET_CONFIGS))
def test_presets_are_valid(preset):
    config = create_config_from_preset(preset)
    assert validate_config(config)['errors'] == []
    GyroTrackerConfig.from_preset(preset).validate()


def test_unknown_preset_raises():
    with pytest.raises(ValueError, match="Unknown preset"):
        create_config_from_preset('turbo')


def test_merge_overrides_nested_values():
    merged = merge_configs({'a': 1, 'b': {'c': 2, 'd': 3}}, {'b': {'c': 5}})
    assert merged == {'a': 1, 'b': {'c': 5, 'd': 3}}


@pytest.mark.parametrize("override, message", [
    ({'large_search_distance': 10}, "greater than"),
    ({'small_search_distance': 0}, "positive"),
    ({'matching_threshold_bits_ratio': 1.2}, "[0, 1)"),
    ({'emit_descriptor_score': 'yes'}, "boolean"),
])
def test_validation_errors(override, message):
    report = validate_config(merge_configs(get_default_config(), override))
    assert any(message in error for error in report['errors'])


def test_missing_field_is_an_error():
    config = get_default_config()
    del config['large_search_distance']
    assert "Missing required field: large_search_distance" in validate_config(config)['errors']


def test_low_ratio_is_a_warning():
    report = validate_config(merge_configs(get_default_config(), {'matching_threshold_bits_ratio': 0.3}))
    assert report['errors'] == []
    assert len(report['warnings']) == 1


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="Unknown configuration keys"):
        GyroTrackerConfig.from_dict({'small_search_distance': 5, 'radius': 3})


def test_save_and_load(tmp_path):
    path = tmp_path / "tracker.json"
    save_config({'small_search_distance': 4, 'large_search_distance': 12}, str(path))

    assert json.loads(path.read_text())['small_search_distance'] == 4
    config = GyroTrackerConfig.from_dict(load_config(str(path)))
    assert config.small_search_distance == 4
    assert config.large_search_distance == 12
    assert config.matching_threshold_bits_ratio == pytest.approx(0.8)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))

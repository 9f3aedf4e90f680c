from pathlib import Path

from args import apply_overrides, get_args
from config import get_default_config, load_config
from metrics.blinks import BlinkDetector


def test_missing_file_uses_defaults(tmp_path, capsys):
    config = load_config(str(tmp_path / "missing.yaml"))
    assert config == get_default_config()
    assert "not found" in capsys.readouterr().out


def test_file_values_merged_over_defaults(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("blinks:\n  threshold: 0.4\nsession:\n  duration_s: 180\n")

    config = load_config(str(path))

    assert config['blinks']['threshold'] == 0.4
    assert config['blinks']['smoothing_window'] == 3
    assert config['session']['duration_s'] == 180
    assert config['camera']['mirror_effect'] is True


def test_invalid_yaml_uses_defaults(tmp_path, capsys):
    path = tmp_path / "broken.yaml"
    path.write_text("blinks: [unclosed\n")
    assert load_config(str(path)) == get_default_config()
    assert "Error loading config" in capsys.readouterr().out


def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(str(path)) == get_default_config()


def test_shipped_config_matches_defaults():
    config = load_config(str(Path(__file__).parent.parent / "configs" / "default.yaml"))
    assert config['blinks'] == get_default_config()['blinks']
    BlinkDetector(config)


def test_command_line_overrides():
    args = get_args(["--duration", "180", "--threshold", "0.35", "--smoothing-window", "5",
                     "--camera", "2", "--no-preview", "--quiet"])
    config = apply_overrides(get_default_config(), args)

    assert config['session']['duration_s'] == 180
    assert config['blinks']['threshold'] == 0.35
    assert config['blinks']['smoothing_window'] == 5
    assert config['camera']['index'] == 2
    assert config['display']['show_preview'] is False
    assert config['logging']['echo'] is False


def test_no_overrides_keeps_config():
    args = get_args([])
    assert args.config == "configs/default.yaml"
    assert apply_overrides(get_default_config(), args) == get_default_config()


def test_nested_values_merged_over_defaults(tmp_path):
    path = tmp_path / "colors.yaml"
    path.write_text("display:\n  colors:\n    active: [10, 20, 30]\n")

    config = load_config(str(path))
    defaults = get_default_config()

    assert config['display']['colors']['active'] == [10, 20, 30]
    assert config['display']['colors']['background'] == defaults['display']['colors']['background']
    assert config['display']['dashboard_width'] == defaults['display']['dashboard_width']


def test_non_mapping_file_uses_defaults(tmp_path, capsys):
    path = tmp_path / "list.yaml"
    path.write_text("- blinks\n- session\n")
    assert load_config(str(path)) == get_default_config()
    assert "not a mapping" in capsys.readouterr().out

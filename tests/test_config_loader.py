import textwrap
from pathlib import Path

import pytest

from dartsim.game import (
    AiConfig,
    MatchConfig,
    ModeCricket,
    ModeX01,
    PlayerProfile,
    build_match_config,
    load_match_config,
)


def test_load_match_config_missing_file(tmp_path: Path):
    """Missing YAML should fall back to defaults without error."""
    loaded = load_match_config(tmp_path / "no_config.yaml")
    default_config = MatchConfig()

    assert isinstance(loaded, MatchConfig)
    assert loaded.mode == default_config.mode
    assert loaded.start_score == 501
    assert [p.name for p in loaded.players] == ["Player 1", "Computer"]
    assert loaded.players[1].is_computer
    assert loaded.ai.dart_delay_sec == default_config.ai.dart_delay_sec


def test_build_match_config_applies_overrides(tmp_path: Path):
    """Overrides from YAML should populate match, players and ai settings."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(textwrap.dedent("""
        match:
          mode: x01
          start_score: 301
          double_in: true
          double_out: false
        players:
          - name: Ada
          - name: Bot
            is_computer: true
            skill: 9
        ai:
          dart_delay_sec: 0.2
          seed: 7
    """))

    loaded = load_match_config(config_path)

    assert loaded.start_score == 301
    assert loaded.double_in
    assert not loaded.double_out
    assert loaded.players[0] == PlayerProfile("Ada")
    assert loaded.players[1] == PlayerProfile("Bot", is_computer=True, skill=9)
    assert loaded.ai.dart_delay_sec == 0.2
    assert loaded.ai.start_delay_sec == 0.6
    assert loaded.ai.seed == 7

    mode = loaded.create_game_mode()
    assert isinstance(mode, ModeX01)
    assert mode.starting_score == 301
    assert mode.double_in and not mode.double_out


def test_unknown_keys_are_ignored(tmp_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(textwrap.dedent("""
        match:
          mode: cricket
          legs: 5
        players:
          - name: Ada
            handedness: left
          - name: Bob
        ai:
          thinking_style: aggressive
    """))

    loaded = load_match_config(config_path)
    assert loaded.mode == "cricket"
    assert isinstance(loaded.create_game_mode(), ModeCricket)
    assert [p.name for p in loaded.players] == ["Ada", "Bob"]


@pytest.mark.parametrize("yaml_text", [
    "match:\n  mode: shanghai\n",
    "match:\n  start_score: 1\n",
    "players:\n  - name: Solo\n",
    "players:\n  - name: A\n  - name: B\n    is_computer: true\n    skill: 11\n",
    "ai:\n  dart_delay_sec: -1\n",
])
def test_invalid_values_raise(tmp_path: Path, yaml_text):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml_text)

    with pytest.raises(ValueError):
        load_match_config(config_path)


def test_build_match_config_defaults():
    config = build_match_config()
    assert config == MatchConfig()
    assert config.ai == AiConfig()


def test_shipped_default_config():
    """The bundled YAML matches the built-in defaults."""
    path = Path(__file__).parent.parent / "config" / "default_config.yaml"
    assert load_match_config(path) == MatchConfig()

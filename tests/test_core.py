"""
Unit tests for core module.
"""
from pathlib import Path
import textwrap

import pytest
import yaml

from dartsim.core import (
    BULL, CRICKET_NUMBERS, MISS, SINGLE_BULL, DOUBLE_BULL,
    Segment, AimTarget, BoardGeometry, Config,
    all_segments, create_segment, atomic_write_yaml, load_yaml, save_match_results
)


def test_segment_scores_and_labels():
    """Test Segment score and label for every kind of bed."""
    assert Segment(20, 3).score == 60
    assert Segment(20, 3).label == "T20"
    assert Segment(16, 2).label == "D16"
    assert Segment(5).label == "S5"
    assert Segment(5).score == 5

    assert SINGLE_BULL.score == 25
    assert SINGLE_BULL.label == "25"
    assert DOUBLE_BULL.score == 50
    assert DOUBLE_BULL.label == "BULL"

    assert MISS.score == 0
    assert MISS.label == "MISS"
    assert str(Segment(19, 3)) == "T19"


def test_segment_doubles():
    """Inner bull counts as a double, a miss never does."""
    assert Segment(1, 2).is_double
    assert DOUBLE_BULL.is_double
    assert not SINGLE_BULL.is_double
    assert not Segment(20, 3).is_double
    assert not MISS.is_double

    assert DOUBLE_BULL.is_bull
    assert MISS.is_miss


def test_segment_validation():
    """Test invalid segments are rejected."""
    with pytest.raises(ValueError):
        Segment(BULL, 3)
    with pytest.raises(ValueError):
        Segment(21, 1)
    with pytest.raises(ValueError):
        Segment(0, 2)
    with pytest.raises(ValueError):
        Segment(5, 4)


def test_segment_is_hashable_value():
    """Segments compare by value."""
    assert Segment(20, 3) == Segment(20, 3)
    assert len({Segment(20, 3), Segment(20, 3), Segment(20, 1)}) == 2


def test_create_segment_maps_miss():
    """Any multiplier on number 0 becomes MISS."""
    assert create_segment(0, 3) == MISS
    assert create_segment(18, 2) == Segment(18, 2)


def test_all_segments():
    """Keypad offers 60 beds, both bulls and a miss."""
    segments = all_segments()
    assert len(segments) == 63
    assert len(set(segments)) == 63
    assert MISS in segments
    assert DOUBLE_BULL in segments


def test_aim_target():
    """Test AimTarget values and conversion."""
    target = AimTarget(20, 3)
    assert target.score == 60
    assert target.label == "T20"
    assert target.to_segment() == Segment(20, 3)
    assert AimTarget(BULL, 2).is_bull

    with pytest.raises(ValueError):
        AimTarget(0)
    with pytest.raises(ValueError):
        AimTarget(BULL, 3)


def test_cricket_numbers():
    assert CRICKET_NUMBERS == (20, 19, 18, 17, 16, 15, 25)


def test_board_geometry():
    """Test BoardGeometry defaults and validation."""
    geo = BoardGeometry()
    assert geo.board_radius == 170.0
    assert geo.sector_sequence[0] == 20
    assert len(set(geo.sector_sequence)) == 20

    with pytest.raises(ValueError):
        BoardGeometry(triple_inner_radius=200.0)
    with pytest.raises(ValueError):
        BoardGeometry(sector_sequence=(20, 1, 18))


def test_atomic_write_yaml(tmp_path: Path):
    """Test atomic YAML write and read back."""
    filepath = tmp_path / "nested" / "test.yaml"
    data = {'match': {'mode': 'cricket'}, 'values': [1, 2, 3]}

    atomic_write_yaml(filepath, data)
    assert filepath.exists()

    loaded = load_yaml(filepath)
    assert loaded == data

    # No temporary files left behind
    assert [p.name for p in filepath.parent.iterdir()] == ["test.yaml"]


def test_load_yaml_errors(tmp_path: Path):
    """Missing files raise, empty files give an empty dict."""
    with pytest.raises(FileNotFoundError):
        load_yaml(tmp_path / "missing.yaml")

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_yaml(empty) == {}

    broken = tmp_path / "broken.yaml"
    broken.write_text("match: [unclosed")
    with pytest.raises(yaml.YAMLError):
        load_yaml(broken)


def test_load_yaml_requires_mapping(tmp_path: Path):
    """A settings file must be a mapping of sections."""
    listed = tmp_path / "list.yaml"
    listed.write_text("- match\n- players\n")

    with pytest.raises(ValueError):
        load_yaml(listed)

    # Config logs and keeps its defaults
    assert Config(listed).get("match", "mode") == "x01"


def test_save_match_results(tmp_path: Path):
    """Results are written under a results key with a count."""
    out = tmp_path / "results" / "series.yaml"
    results = [{"winner_name": "Alice", "players": []}, {"winner_name": "Bob", "players": []}]

    assert save_match_results(out, iter(results)) == 2

    loaded = load_yaml(out)
    assert loaded["matches"] == 2
    assert [r["winner_name"] for r in loaded["results"]] == ["Alice", "Bob"]


def test_config_defaults():
    """Config without a file uses built-in defaults."""
    config = Config()
    assert config.get("match", "mode") == "x01"
    assert config.get("match", "start_score") == 501
    assert config.get("ai", "dart_delay_sec") == 1.5
    assert config.get("match", "unknown", "fallback") == "fallback"
    assert len(config.get_section("players")) == 2


def test_config_merges_file(tmp_path: Path):
    """Values from YAML override defaults section by section."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(textwrap.dedent("""
        match:
          mode: cricket
        ai:
          seed: 42
    """))

    config = Config(config_path)
    assert config.get("match", "mode") == "cricket"
    assert config.get("match", "start_score") == 501
    assert config.get("ai", "seed") == 42
    assert config.get("ai", "start_delay_sec") == 0.6

    # Defaults are not shared between instances
    assert Config().get("match", "mode") == "x01"


def test_config_broken_file_falls_back(tmp_path: Path):
    """A malformed file leaves the defaults in place."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("match: [unclosed")

    config = Config(config_path)
    assert config.get("match", "mode") == "x01"


def test_config_save(tmp_path: Path):
    """Saved config loads back with the same values."""
    config = Config()
    config.data["match"]["start_score"] = 301
    out = tmp_path / "saved.yaml"
    config.save(out)

    assert Config(out).get("match", "start_score") == 301


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

import json

from typeattack import config
from typeattack.config import DEFAULT_CFG, _deepcopy, _merge, _sanitize_cfg
from typeattack.models import Tuning
from typeattack.storage import ConfigHighScoreStore


def test_merge_is_deep():
    base = {"a": {"x": 1, "y": 2}, "b": 1}
    _merge(base, {"a": {"y": 5}, "c": 3})
    assert base == {"a": {"x": 1, "y": 5}, "b": 1, "c": 3}


def test_sanitize_clamps_out_of_range_values():
    cfg = _deepcopy(DEFAULT_CFG)
    cfg["lives"] = 99
    cfg["word"]["min_speed"] = -4
    cfg["word"]["max_speed"] = 0.01
    cfg["powerups"]["freeze_chance"] = 0.8
    cfg["powerups"]["nuke_chance"] = 0.8
    cfg["scoring"]["level_threshold"] = 0
    cfg["highscore"] = -10

    out = _sanitize_cfg(cfg)

    assert out["lives"] == 9
    assert out["word"]["min_speed"] == 0.05
    assert out["word"]["max_speed"] == 0.05
    assert out["powerups"]["nuke_chance"] <= 0.2 + 1e-9
    assert out["scoring"]["level_threshold"] == 1
    assert out["highscore"] == 0


def test_tuning_from_default_config():
    t = Tuning.from_cfg(_sanitize_cfg(_deepcopy(DEFAULT_CFG)))
    assert t == Tuning()


def test_save_config_merges_into_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"lives": 4, "audio": {"muted": True}}), encoding="utf-8")
    monkeypatch.setattr(config, "CONFIG_PATH", str(path))

    config.save_config({"audio": {"sfx_volume": 0.1}, "config_path": "/nowhere"})

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["lives"] == 4
    assert data["audio"] == {"muted": True, "sfx_volume": 0.1}
    assert "config_path" not in data


def test_load_config_survives_garbage(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    monkeypatch.setattr(config, "CONFIG_PATH", str(path))

    cfg = config.load_config()

    assert cfg["lives"] == DEFAULT_CFG["lives"]
    assert cfg["scoring"] == DEFAULT_CFG["scoring"]


def test_load_config_writes_defaults_when_missing(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config, "CONFIG_PATH", str(path))

    config.load_config()

    assert json.loads(path.read_text(encoding="utf-8"))["lives"] == DEFAULT_CFG["lives"]


def test_high_score_store_persists(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config, "CONFIG_PATH", str(path))
    cfg = {"highscore": 10}
    store = ConfigHighScoreStore(cfg)

    assert store.get_high_score() == 10
    store.set_high_score(250)

    assert cfg["highscore"] == 250
    assert json.loads(path.read_text(encoding="utf-8"))["highscore"] == 250


def test_high_score_store_ignores_junk():
    assert ConfigHighScoreStore({"highscore": "lots"}).get_high_score() == 0

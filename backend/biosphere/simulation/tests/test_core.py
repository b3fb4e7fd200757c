"""随机源与配置加载测试"""

from collections import Counter

import pytest

from ...core.config import Settings
from ...core.random import WeightedOption, WorldRNG
from ...models.config import EngineConfig, load_engine_config


class TestWorldRNG:
    """测试世界随机数源"""

    def test_same_seed_same_sequence(self):
        """测试相同种子序列一致"""
        a, b = WorldRNG(5), WorldRNG(5)
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_randint_inclusive(self):
        """测试整数区间为闭区间"""
        rng = WorldRNG(0)
        values = {rng.randint(1, 3) for _ in range(500)}
        assert values == {1, 2, 3}

    def test_gaussian_zero_std(self):
        """测试标准差为 0 时直接返回均值且不消耗随机数"""
        rng, ref = WorldRNG(8), WorldRNG(8)
        assert rng.gaussian(4.0, 0.0) == 4.0
        assert rng.random() == ref.random()

    def test_weighted_choice_skips_zero_weight(self):
        """测试零权重候选永远不会被选中"""
        rng = WorldRNG(1)
        options = [WeightedOption("a", 0.0), WeightedOption("b", 1.0), WeightedOption("c", 3.0)]
        counts = Counter(rng.weighted_choice(options) for _ in range(4000))

        assert counts["a"] == 0
        assert 0.2 < counts["b"] / 4000 < 0.3

    def test_weighted_choice_requires_positive_weight(self):
        """测试没有正权重时报错"""
        with pytest.raises(ValueError):
            WorldRNG(1).weighted_choice([WeightedOption("a", 0.0)])
        with pytest.raises(ValueError):
            WorldRNG(1).weighted_choice([])

    def test_token_is_seeded_and_independent(self):
        """测试标识按种子复现，且不影响模拟随机序列"""
        a, b, plain = WorldRNG(3), WorldRNG(3), WorldRNG(3)
        tokens = [a.token() for _ in range(10)]

        assert tokens == [b.token() for _ in range(10)]
        assert len(set(tokens)) == 10
        assert all(len(t) == 12 for t in tokens)
        assert a.random() == plain.random()

    def test_state_round_trip(self):
        """测试导出/恢复状态后序列一致"""
        rng = WorldRNG(42)
        rng.random()
        state = rng.get_state()
        expected = [rng.random() for _ in range(5)]
        expected_ids = [rng.token() for _ in range(3)]

        rng.set_state(state)
        assert [rng.random() for _ in range(5)] == expected
        assert [rng.token() for _ in range(3)] == expected_ids


class TestConfig:
    """测试配置加载"""

    def test_engine_config_from_yaml(self, tmp_path):
        """测试 YAML 只覆盖给出的字段"""
        path = tmp_path / "engine.yaml"
        path.write_text(
            "engine:\n"
            "  climate:\n"
            "    front_spawn_chance: 0.05\n"
            "  catastrophe:\n"
            "    trigger_check_interval: 10\n"
            "    unknown_knob: 3\n",
            encoding="utf-8",
        )
        config = load_engine_config(path)

        assert config.climate.front_spawn_chance == 0.05
        assert config.climate.front_decay == 0.97
        assert config.catastrophe.trigger_check_interval == 10
        assert config.ecosystem.incidental_size_ratio == 10.0

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        """测试配置文件不存在时使用默认值"""
        assert load_engine_config(tmp_path / "missing.yaml") == EngineConfig()
        assert load_engine_config(None) == EngineConfig()

    def test_settings_from_env(self, monkeypatch):
        """测试环境变量别名"""
        monkeypatch.setenv("WORLD_SEED", "1234")
        monkeypatch.setenv("STRICT_INVARIANTS", "true")
        settings = Settings()
        assert settings.world_seed == 1234
        assert settings.strict_invariants is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

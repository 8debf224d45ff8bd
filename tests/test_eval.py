"""
Tests for the evaluation harness and the baseline agent.
"""

import os

import pytest

from fruit_run.evaluation.run_eval import (
    evaluate_agent,
    evaluate_single_seed,
    load_agent,
    load_seed_bank,
    save_results,
)
from fruit_run.runner_core.config_loader import load_config
from fruit_run.runner_core.catalog import EntityCatalog
from fruit_run.runner_core.env_gym import ACTION_IDLE, ACTION_JUMP
from fruit_run.runner_core.game import RunnerGame


ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
BASELINE_DIR = os.path.join(ROOT, "agents", "baseline_jumper")


def idle_agent(obs):
    return ACTION_IDLE


@pytest.fixture
def config():
    return load_config()


class TestSeedBank:
    """Test seed bank loading."""

    def test_default_seed_bank(self):
        seeds = load_seed_bank()
        assert len(seeds) > 0
        assert all(isinstance(s, int) for s in seeds)

    def test_custom_seed_bank(self, tmp_path):
        path = tmp_path / "seeds.json"
        path.write_text('{"seeds": [3, 4]}')
        assert load_seed_bank(str(path)) == [3, 4]


class TestEvaluation:
    """Test episode running and summaries."""

    def test_single_seed_hits_frame_cap(self):
        result = evaluate_single_seed(idle_agent, seed=7, max_frames=200)
        assert result.frames == 200
        assert result.termination_reason == "frame_cap"
        assert result.final_score == 60
        assert result.jumps == 0
        assert result.actions is None

    def test_record_actions(self):
        result = evaluate_single_seed(idle_agent, seed=7, max_frames=50, record_actions=True)
        assert result.actions == [ACTION_IDLE] * 50

    def test_summary(self):
        summary = evaluate_agent(idle_agent, seeds=[1, 2, 3], max_frames=100, verbose=False)
        assert len(summary.results) == 3
        assert summary.min_score == summary.max_score == 30
        assert summary.std_score == 0.0
        assert summary.mean_frames == 100
        assert summary.survival_rate == 1.0
        assert summary.best_level == 1

    def test_empty_seed_list_rejected(self):
        with pytest.raises(ValueError):
            evaluate_agent(idle_agent, seeds=[], verbose=False)

    def test_save_results(self, tmp_path):
        summary = evaluate_agent(idle_agent, seeds=[1], max_frames=40, verbose=False)
        out = tmp_path / "results.json"
        save_results(summary, "idle", str(out))
        assert '"agent": "idle"' in out.read_text()


class TestAgentLoading:
    """Test loading agents from disk."""

    def test_load_baseline(self):
        agent = load_agent(BASELINE_DIR)
        assert agent.name == "baseline_jumper"
        assert callable(agent)
        assert agent.reset is not None

    def test_missing_agent(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_agent(str(tmp_path))

    def test_module_without_act(self, tmp_path):
        path = tmp_path / "agent.py"
        path.write_text("VALUE = 1\n")
        with pytest.raises(AttributeError):
            load_agent(str(path))

    def test_function_agent(self, tmp_path):
        path = tmp_path / "agent.py"
        path.write_text("def act(obs):\n    return 1\n")
        assert load_agent(str(path))({}) == 1


class TestBaselineJumper:
    """Test the heuristic agent's decisions."""

    @pytest.fixture
    def agent(self, config):
        return load_agent(BASELINE_DIR).act.__self__

    @pytest.fixture
    def game(self, config):
        game = RunnerGame(config=config, seed=0)
        game.start_new_session()
        return game

    def test_idle_on_empty_road(self, agent, game, config):
        obs = game.get_snapshot().to_obs_dict(config.observation.max_entities)
        assert agent.act(obs) == ACTION_IDLE

    def test_jumps_for_close_water(self, agent, game, config):
        water = EntityCatalog(config).obstacles.by_name("water")
        game.store.add_obstacle(water, 150, 320)
        obs = game.get_snapshot().to_obs_dict(config.observation.max_entities)
        assert agent.act(obs) == ACTION_JUMP

    def test_waits_for_distant_water(self, agent, game, config):
        water = EntityCatalog(config).obstacles.by_name("water")
        game.store.add_obstacle(water, 500, 320)
        obs = game.get_snapshot().to_obs_dict(config.observation.max_entities)
        assert agent.act(obs) == ACTION_IDLE

    def test_ignores_stumps(self, agent, game, config):
        stump = EntityCatalog(config).obstacles.by_name("stump")
        game.store.add_obstacle(stump, 150, 260)
        obs = game.get_snapshot().to_obs_dict(config.observation.max_entities)
        assert agent.act(obs) == ACTION_IDLE

    def test_no_jump_while_airborne(self, agent, game, config):
        water = EntityCatalog(config).obstacles.by_name("water")
        game.store.add_obstacle(water, 150, 320)
        game.request_jump()
        game.tick(1000.0 / 60.0)
        obs = game.get_snapshot().to_obs_dict(config.observation.max_entities)
        assert agent.act(obs) == ACTION_IDLE

    def test_baseline_outlasts_idle(self):
        act = load_agent(BASELINE_DIR)
        baseline = evaluate_single_seed(act, seed=42, max_frames=3000)
        idle = evaluate_single_seed(idle_agent, seed=42, max_frames=3000)
        assert baseline.frames >= idle.frames


class TestResetHook:
    """Test that class agents are reset per episode."""

    def test_reset_called_with_seed(self, tmp_path):
        path = tmp_path / "agent.py"
        path.write_text(
            "class FruitRunAgent:\n"
            "    def __init__(self):\n"
            "        self.seeds = []\n"
            "    def reset(self, seed=None):\n"
            "        self.seeds.append(seed)\n"
            "    def act(self, obs):\n"
            "        return 0\n"
        )
        agent = load_agent(str(path))
        evaluate_agent(agent, seeds=[5, 6], max_frames=10, verbose=False)
        assert agent.act.__self__.seeds == [5, 6]

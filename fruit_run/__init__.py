"""
Fruit Run Package
=================

Endless runner where the avatar jumps obstacles and collects fruit that
changes its form. Contains:

- runner_core: the deterministic simulation and Gymnasium wrapper
- evaluation: seed-bank harness for scoring agent policies

All tunable parameters are in game_config.yaml.
"""

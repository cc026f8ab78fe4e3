"""Orchestration core: models, option merging, fan-out and result combination."""

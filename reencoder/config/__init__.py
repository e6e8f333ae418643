"""
Configuration Package for the Media Re-encoder.

Static settings live here so that encoder parameters, output naming and
runtime limits can be changed without touching the pipeline code.

This package includes settings for:
- Logging format, output folder naming, outcome statuses and process limits
  (`common.py`), with optional overrides from `config.user.yaml`.
- Recognised media extensions and the command templates of the external
  encoders, decoder and quality scorer (`media.py`).
"""

"""Core pipeline: models, tracing, sampling, encoding and fan-out."""

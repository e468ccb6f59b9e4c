"""Adapters connecting the core pipeline to sinks, storage and frameworks."""

"""GitHub Actions queued job 카운터 (autoscaler용)."""

__version__ = "0.1.0"

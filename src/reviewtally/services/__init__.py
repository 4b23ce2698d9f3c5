"""Settings and telemetry services."""

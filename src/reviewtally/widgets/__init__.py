"""Optional Qt-backed widgets."""

"""Static platform and emulator tables."""

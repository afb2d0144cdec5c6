"""Pomodoro timer that logs focus sessions against goals kept in CSV files."""

__version__ = "0.1.0"

"""Domain layer for botgate.

Request signals, verdicts and deny reasons shared by the guard engine, the
Flask hooks and the CLI. Framework-agnostic: nothing here imports Flask.
"""

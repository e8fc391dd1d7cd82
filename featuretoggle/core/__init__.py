"""Core feature toggle subsystems: configuration, errors, storage, evaluation."""

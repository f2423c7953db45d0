"""Deterministic in-memory providers for tests and offline development."""
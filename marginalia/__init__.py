"""Document importers and fake providers for a voice-driven reading engine."""

__version__ = "0.1.0"
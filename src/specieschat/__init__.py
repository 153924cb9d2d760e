"""Species chat service: a topic-guarded chat assistant for animals and wildlife."""

__version__ = "0.1.0"

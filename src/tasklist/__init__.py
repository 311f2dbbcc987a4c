"""tasklist: a small persistent to-do task store with console and HTTP front-ends."""

__version__ = "0.1.0"

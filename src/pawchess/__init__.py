"""Chess mini-game engine for the pet: rules, opponent and HTTP adapter.

The engine core is pure and synchronous; scheduling and I/O live in
``pawchess.play`` and ``pawchess.protocol``.
"""

__version__ = "0.1.0"

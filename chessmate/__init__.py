"""ChessMate: a chess rules engine with a material-only alpha-beta search."""

__version__ = "1.0.0"

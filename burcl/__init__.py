"""Lexer and IR generator for a small B-like language, with a command that dumps both."""

__version__ = "0.1.0"
__all__ = ["__version__"]
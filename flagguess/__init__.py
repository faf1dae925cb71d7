"""
FlagGuess: backend for the guess-the-country-from-its-flag trivia game.
"""

__version__ = "1.0.0"

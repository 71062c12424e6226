"""Assessment Translator: batch machine translation of assessment spreadsheets."""

__version__ = "0.1.0"

"""Validation constants for feedings app."""

# Bottle volume in millilitres
MIN_AMOUNT_ML = 1
MAX_AMOUNT_ML = 500
DEFAULT_AMOUNT_ML = 100

MAX_NOTES_LENGTH = 500

AMOUNT_TOO_SMALL_MESSAGE = f"Miktar en az {MIN_AMOUNT_ML} ml olmalı"
AMOUNT_TOO_LARGE_MESSAGE = f"Miktar en fazla {MAX_AMOUNT_ML} ml olabilir"

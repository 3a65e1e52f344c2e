"""Validation constants for babies app."""

MAX_NAME_LENGTH = 100
DEFAULT_AVATAR_COLOR = "bg-primary/10"
MAX_AVATAR_COLOR_LENGTH = 50

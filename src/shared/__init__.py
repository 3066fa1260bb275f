# Shared module for configuration, exceptions and models
from .config import Settings, get_settings
from .exceptions import ApiResponseError, ConfigurationError, InputError, ItemFinderError
from .models import ConfidenceEvaluation, MatchOutcome

__all__ = [
    "Settings",
    "get_settings",
    "ItemFinderError",
    "ConfigurationError",
    "InputError",
    "ApiResponseError",
    "ConfidenceEvaluation",
    "MatchOutcome",
]

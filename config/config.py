import os
from dotenv import load_dotenv
from pathlib import Path
from enum import Enum

from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"
DEFAULT_PROVIDER_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_SUBJECT_LENGTH = 200


class ConcurrencyPolicy(Enum):
    """What happens when investigate() is called while a call is in flight."""
    RESTART = "restart"  # cancel the in-flight call, last call wins
    REJECT = "reject"    # ignore the new call


class Config:
    """Configuration management for the investigator."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # Load environment variables from .env file if it exists
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # API Configuration
        self.GEMINI_API_KEY = os.getenv('GEMINI_API_KEY') or os.getenv('GOOGLE_GEMINI_API_KEY')

        # Model Configuration
        self.DEFAULT_MODEL = os.getenv('DEFAULT_GEMINI_MODEL') or DEFAULT_GEMINI_MODEL
        self.PROVIDER_TIMEOUT_SECONDS = self._float_env(
            'PROVIDER_TIMEOUT_SECONDS', DEFAULT_PROVIDER_TIMEOUT_SECONDS
        )

        # Pipeline Configuration
        policy = os.getenv('CONCURRENCY_POLICY', ConcurrencyPolicy.RESTART.value).strip().lower()
        valid_policies = [p.value for p in ConcurrencyPolicy]
        if policy not in valid_policies:
            logger.warning(
                f"Unknown CONCURRENCY_POLICY '{policy}', falling back to 'restart'",
                extra={"extra_fields": {"valid_policies": valid_policies}},
            )
            policy = ConcurrencyPolicy.RESTART.value
        self.CONCURRENCY_POLICY = ConcurrencyPolicy(policy)
        self.MAX_SUBJECT_LENGTH = int(
            self._float_env('MAX_SUBJECT_LENGTH', DEFAULT_MAX_SUBJECT_LENGTH)
        )

        # HTTP surface
        self.API_KEYS = [k.strip() for k in os.getenv('API_KEYS', '').split(',') if k.strip()]

    @staticmethod
    def _float_env(name: str, default: float) -> float:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError:
            logger.warning(f"Invalid {name}={raw!r}, using default {default}")
            return default
        if value <= 0:
            logger.warning(f"{name} must be positive, using default {default}")
            return default
        return value

    def validate(self) -> bool:
        """
        Validate that the provider credential is present.

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        if not self.GEMINI_API_KEY:
            logger.error("GEMINI_API_KEY is not set. Please set it in the .env file.")
            return False
        return True

    def get_model_info(self) -> str:
        """
        Get information about the configured model.

        Returns:
            str: Formatted string with model information
        """
        return f"Google Gemini ({self.DEFAULT_MODEL}, search grounding)"

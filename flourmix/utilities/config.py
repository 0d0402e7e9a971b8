"""Configuration management for the flourmix blending service."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Data acquisition retries (exponential backoff: base, doubling, capped)
RETRY_ATTEMPTS: Final[int] = int(os.getenv('RETRY_ATTEMPTS', '3'))
RETRY_BASE_DELAY: Final[float] = float(os.getenv('RETRY_BASE_DELAY', '1.0'))
RETRY_MAX_DELAY: Final[float] = float(os.getenv('RETRY_MAX_DELAY', '8.0'))

# Saved mixes allowed per subscription tier (0 = no limit enforced)
MIX_LIMITS: Final[dict[str, int]] = {
    "pro": int(os.getenv('MIX_LIMIT_PRO', '3')),
    "enterprise": int(os.getenv('MIX_LIMIT_ENTERPRISE', '20')),
}

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('FLOURMIX_DATA_DIR', str(BASE_DIR / 'data')))

"""Configuration management for the Work Progress Tracker service."""
import os
from typing import Final
from pathlib import Path

# Load environment variables from .env file if it exists
from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Database
DATABASE_URL: Final[str] = os.getenv('DATABASE_URL', 'sqlite:///./workplan.db')
DATABASE_ECHO: Final[bool] = os.getenv('DATABASE_ECHO', 'False').lower() == 'true'

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()

# Plan renewal scheduling
SCHEDULER_ENABLED: Final[bool] = os.getenv('SCHEDULER_ENABLED', 'True').lower() == 'true'
RENEWAL_INTERVAL_HOURS: Final[int] = int(os.getenv('RENEWAL_INTERVAL_HOURS', '1'))
STARTUP_CHECK_DELAY_SECONDS: Final[int] = int(os.getenv('STARTUP_CHECK_DELAY_SECONDS', '5'))

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent

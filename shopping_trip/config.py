"""
Configuration constants and settings loading for the redirection suite.
"""

import copy
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Default file paths (relative to the working directory)
DEFAULT_INPUT_FILE = "shopping_trip_redirection.xlsx"
DEFAULT_CONFIG_FILE = "config/shopping_trip_config.json"
DEFAULT_OUTPUT_ROOT = "output/runs"

# Sign-in flow
SIGN_IN_URL = "https://www.rakuten.com/"
SIGN_IN_HEADER_BUTTON = '#sign_in_header_button'
AUTH_MODAL_FRAME = '#appshell-auth-modal-iframe'
EMAIL_INPUT = '#emailAddress'
PASSWORD_INPUT = '#password'
RECAPTCHA_FRAME = 'iframe[title="reCAPTCHA"]'
RECAPTCHA_CHECKBOX = '[role="checkbox"]'
SUBMIT_BUTTON = '#email-auth-btn'

# Browser
SCREEN_WIDTH = 1920
SCREEN_HEIGHT = 1080
USER_AGENT = 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'

DEFAULT_SETTINGS = {
    'input_file': DEFAULT_INPUT_FILE,
    'output_dir': None,  # derived per run when not set
    'headless': True,
    'stealth': True,
    'sign_in': True,
    'email': None,
    'password': None,
    'screenshots': True,
    'trace_failures': False,
    'verbose': False,

    # Per-store case (milliseconds)
    'case_timeout_ms': 70000,
    'redirect_timeout_ms': 45000,
    'poll_interval_ms': 1000,
    'landing_idle_timeout_ms': 10000,
    'landing_settle_ms': 2000,
    'merchant_load_timeout_ms': 5000,
    'merchant_settle_ms': 3000,

    # Sign-in (milliseconds)
    'sign_in_button_timeout_ms': 5000,
    'sign_in_modal_wait_ms': 2000,
    'challenge_check_timeout_ms': 3000,
    'challenge_pre_click_ms': 7000,
    'challenge_click_delay_ms': 200,
    'challenge_grace_ms': 15000,
    'sign_in_settle_ms': 4000,
}

# Environment variable -> settings key
ENV_OVERRIDES = {
    'RAKUTEN_EMAIL': 'email',
    'RAKUTEN_PASSWORD': 'password',
    'SHOPPING_TRIP_INPUT': 'input_file',
    'SHOPPING_TRIP_HEADLESS': 'headless',
}

BOOLEAN_KEYS = {'headless', 'stealth', 'sign_in', 'screenshots', 'trace_failures', 'verbose'}


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def _load_config_file(config_path: str) -> Dict:
    """Load JSON overrides, falling back to no overrides on any problem"""
    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        print(f"⚠️  Config file '{config_path}' not found, using defaults")
        return {}
    except json.JSONDecodeError as e:
        print(f"⚠️  Error parsing config file: {e}, using defaults")
        return {}

    if not isinstance(data, dict):
        print(f"⚠️  Config file '{config_path}' is not a JSON object, using defaults")
        return {}

    unknown = sorted(set(data) - set(DEFAULT_SETTINGS))
    if unknown:
        print(f"⚠️  Ignoring unknown config keys: {', '.join(unknown)}")
    return {key: value for key, value in data.items() if key in DEFAULT_SETTINGS}


def load_settings(config_path: Optional[str] = None, overrides: Optional[Dict] = None) -> Dict:
    """
    Build run settings from defaults, config file, environment and overrides.

    Precedence (lowest to highest):
    1. DEFAULT_SETTINGS
    2. JSON config file (config_path, or DEFAULT_CONFIG_FILE when it exists)
    3. Environment variables (RAKUTEN_EMAIL, RAKUTEN_PASSWORD, ...)
    4. Explicit overrides (CLI flags); None values are ignored

    Args:
        config_path: Optional path to a JSON config file; defaults to
            DEFAULT_CONFIG_FILE in the working directory if present
        overrides: Optional dict of settings that win over everything else

    Returns:
        Dict of settings
    """
    settings = copy.deepcopy(DEFAULT_SETTINGS)

    if config_path:
        settings.update(_load_config_file(config_path))
    elif Path(DEFAULT_CONFIG_FILE).is_file():
        settings.update(_load_config_file(DEFAULT_CONFIG_FILE))

    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            settings[key] = value

    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = value

    for key in BOOLEAN_KEYS:
        settings[key] = _parse_bool(settings[key])

    return settings


def get_run_output_dir(output_root: str = DEFAULT_OUTPUT_ROOT, now: Optional[datetime] = None) -> Path:
    """
    Derive a per-run output directory for screenshots and the report.

    Example:
        >>> get_run_output_dir('output/runs', datetime(2025, 10, 1, 9, 30, 0))
        PosixPath('output/runs/20251001-093000')
    """
    now = now or datetime.now()
    return Path(output_root) / now.strftime('%Y%m%d-%H%M%S')

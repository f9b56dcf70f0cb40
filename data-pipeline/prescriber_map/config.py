"""
Central configuration for credentials and output paths.

Settings come from environment variables, optionally loaded from a ``.env``
file at the repository root:
  - ACTIVECAMPAIGN_URL (required, account host e.g. myaccount.api-us1.com)
  - ACTIVECAMPAIGN_API_KEY (required)
  - GOOGLE_PLACES_API_KEY (optional, Google geocoding + Places enrichment)
  - GEOCODER (optional, "nominatim" (default) or "google")
  - PRESCRIBER_MAP_DATA_PATH (optional, archive copy of prescribers.json)
  - PRESCRIBER_MAP_PUBLIC_PATH (optional, public-serving copy of prescribers.json)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .constants import GEO_SOURCE_GOOGLE, GEO_SOURCE_NOMINATIM
from .errors import ConfigurationError

REPO_ROOT = Path(__file__).resolve().parent.parent.parent
WEBSITE_DIR = REPO_ROOT / "website"
OUTPUT_FILENAME = "prescribers.json"


def load_environment():
    """Load .env from the repository root, then from the working directory."""
    load_dotenv(REPO_ROOT / ".env")
    load_dotenv()


def get_data_output_path() -> Path:
    """Archive copy of the dataset (website/data/prescribers.json)."""
    env_path = os.environ.get("PRESCRIBER_MAP_DATA_PATH")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return WEBSITE_DIR / "data" / OUTPUT_FILENAME


def get_public_output_path() -> Path:
    """Public-serving copy the map page fetches (website/public/prescribers.json)."""
    env_path = os.environ.get("PRESCRIBER_MAP_PUBLIC_PATH")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return WEBSITE_DIR / "public" / OUTPUT_FILENAME


@dataclass(frozen=True)
class Settings:
    """Resolved pipeline settings."""

    crm_base_url: str
    crm_api_key: str
    google_api_key: Optional[str] = None
    geocoder: str = GEO_SOURCE_NOMINATIM

    @property
    def use_google_geocoder(self) -> bool:
        """Google is used only when explicitly selected AND a key is present."""
        return self.geocoder == GEO_SOURCE_GOOGLE and bool(self.google_api_key)

    @property
    def active_geocoder(self) -> str:
        return GEO_SOURCE_GOOGLE if self.use_google_geocoder else GEO_SOURCE_NOMINATIM

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        """
        Build settings from the environment.

        Raises:
            ConfigurationError: If CRM URL or API key is missing
        """
        env = os.environ if environ is None else environ
        base_url = (env.get("ACTIVECAMPAIGN_URL") or "").strip()
        api_key = (env.get("ACTIVECAMPAIGN_API_KEY") or "").strip()
        if not base_url or not api_key:
            raise ConfigurationError("Missing ACTIVECAMPAIGN_URL or ACTIVECAMPAIGN_API_KEY in .env")

        return cls(
            crm_base_url=base_url,
            crm_api_key=api_key,
            google_api_key=(env.get("GOOGLE_PLACES_API_KEY") or "").strip() or None,
            geocoder=(env.get("GEOCODER") or GEO_SOURCE_NOMINATIM).strip().lower(),
        )

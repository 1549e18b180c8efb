import os
import yaml
from pathlib import Path
from dotenv import load_dotenv

from colorinsight.utils.constants import DEFAULT_ARCHETYPES, MAX_UPLOAD_MB, SCHEME_COUNT


def _env_flag(name, default="false"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    def __init__(self):
        # Load appropriate .env file based on environment
        self.env = os.getenv("COLORINSIGHT_ENV", "dev")
        self._load_env_file()

        # Project paths
        self.package_root = Path(__file__).parent.parent
        self.archetypes_file = Path(
            os.getenv("ARCHETYPES_FILE", str(self.package_root / "archetypes.yaml"))
        )

        # Google AI settings
        self.google_ai_api_key = os.getenv("GOOGLE_AI_API_KEY")
        self.google_ai_model = os.getenv("GOOGLE_AI_MODEL", "gemini-2.5-flash")
        self.google_ai_image_model = os.getenv("GOOGLE_AI_IMAGE_MODEL", "gemini-2.5-flash-image")

        # Wizard settings
        self.search_mode = os.getenv("SEARCH_MODE", "grounded").lower()
        self.show_landing = _env_flag("SHOW_LANDING")
        self.max_upload_mb = float(os.getenv("MAX_UPLOAD_MB", MAX_UPLOAD_MB))
        self.progress_delay = float(os.getenv("PROGRESS_DELAY", 0))

        # Export settings
        self.export_strategy = os.getenv("EXPORT_STRATEGY", "structured").lower()
        self.output_dir = Path(os.getenv("OUTPUT_DIR", "reports"))
        self.report_font = os.getenv("REPORT_FONT")

        # Logging settings
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        # Load scheme archetypes from YAML
        self.archetypes = self._load_archetypes()

    @property
    def max_upload_bytes(self):
        """Upload size cap in bytes, or None when the check is disabled."""
        if self.max_upload_mb <= 0:
            return None
        return int(self.max_upload_mb * 1024 * 1024)

    def _load_env_file(self):
        """Load the appropriate .env file based on the environment."""
        env_file = ".env"

        # Check for environment-specific .env file
        if self.env != "dev":
            env_specific_file = f".env.{self.env}"
            if Path(env_specific_file).exists():
                env_file = env_specific_file
                print(f"Loading environment from {env_file}")
            else:
                print(f"Warning: {env_specific_file} not found, falling back to .env")

        # Load the environment file
        load_dotenv(env_file)

    def _load_archetypes(self):
        """
        Load scheme archetypes from YAML file.

        The generator is asked for one scheme per archetype and must return
        exactly SCHEME_COUNT schemes, so any other number of enabled
        archetypes falls back to the built-in set.
        """
        if not self.archetypes_file.exists():
            return list(DEFAULT_ARCHETYPES)

        with open(self.archetypes_file, 'r') as file:
            archetypes_config = yaml.safe_load(file) or {}
            archetypes = [
                {"name": archetype['name'], "brief": archetype.get('brief', "")}
                for archetype in archetypes_config.get('archetypes', [])
                if archetype.get('enabled', True)
            ]

        if len(archetypes) != SCHEME_COUNT:
            print(f"Warning: {self.archetypes_file} enables {len(archetypes)} archetypes, "
                  f"expected {SCHEME_COUNT}; using the built-in archetypes")
            return list(DEFAULT_ARCHETYPES)
        return archetypes

# Create a global config instance
config = Config()

"""Configuration management for the layout-test generator."""

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from layout_gentest import PROJECT_DIR, THIS_DIR

ENVIRONMENTS = ["prd", "acc", "dev", "local"]


class BrowserConfig(BaseModel):
    """Playwright browser settings used while extracting fixtures."""

    browser_type: str = Field(default="chromium", description="Playwright browser: chromium, firefox, webkit")
    headless: bool = Field(default=True, description="Run the browser without a window")
    device_scale_factor: float = Field(default=1.0, description="Pinned so geometry is measured in CSS pixels")
    page_timeout_ms: int = Field(default=30000, description="Navigation timeout per fixture")
    window_width: int = Field(default=1280, description="Browser viewport width")
    window_height: int = Field(default=800, description="Browser viewport height")

    @field_validator("browser_type")
    @classmethod
    def validate_browser_type(cls, v):
        """Only the engines Playwright ships are accepted."""
        if v not in ("chromium", "firefox", "webkit"):
            raise ValueError(f"Unsupported browser type '{v}'")
        return v


class PathsConfig(BaseModel):
    """Where fixtures are read from and generated files are written to."""

    feature_dir: Path = Field(default=Path("layout_test/feature"), description="Directory holding fixture HTML")
    fixture_glob: str = Field(default="*.html", description="Glob pattern for fixture files")
    destination_dir: Path = Field(default=Path("layout_test/destination"), description="Wrapped pages loaded by the browser")
    output_dir: Path = Field(default=Path("layout_test/cxx"), description="Generated per-fixture test headers")
    page_template: Path = Field(default=THIS_DIR / "layout_test" / "extraction" / "template.html")
    main_template: Path = Field(default=Path("layout_test/src/main.template"), description="Entry point template")
    main_output: Path = Field(default=Path("layout_test/src/main.cpp"), description="Generated entry point")


class EmitterConfig(BaseModel):
    """Backend selection and rendering options."""

    backend: str = Field(default="cxx", description="Registered emitter name")
    honor_insert_index: bool = Field(default=False, description="Render InsertChild indices instead of appending")


class GentestConfig(BaseModel):
    """Project configuration for one generator run."""

    env: str = "local"
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    emitter: EmitterConfig = Field(default_factory=EmitterConfig)

    model_config = {"arbitrary_types_allowed": True}  # Allow Path objects

    @classmethod
    def from_yaml_and_env(
        cls, config_path: str = "gentest_config.yml", env: str = "local", env_dir: str = "config"
    ) -> "GentestConfig":
        """Load configuration from both YAML and environment files.

        The YAML file is keyed by environment; a missing file or section leaves
        the defaults in place. Environment variables win over YAML values.
        """
        if env not in ENVIRONMENTS:
            raise ValueError(f"Invalid environment: {env}")

        # Load environment-specific .env file
        env_file = Path(env_dir) / f".env.{env}"
        if env_file.exists():
            load_dotenv(env_file, override=True)
        else:
            # Fallback to root .env if exists
            load_dotenv(override=True)

        env_config: dict = {}
        path = Path(config_path)
        if not path.is_absolute() and not path.exists():
            path = PROJECT_DIR / path
        if path.exists():
            with open(path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
                env_config = yaml_config.get(env) or {}

        browser = dict(env_config.get("browser") or {})
        if os.getenv("GENTEST_BROWSER"):
            browser["browser_type"] = os.getenv("GENTEST_BROWSER")
        if os.getenv("GENTEST_HEADLESS"):
            browser["headless"] = os.getenv("GENTEST_HEADLESS", "true").lower() == "true"

        paths = dict(env_config.get("paths") or {})
        for key, var in (
            ("feature_dir", "GENTEST_FEATURE_DIR"),
            ("destination_dir", "GENTEST_DESTINATION_DIR"),
            ("output_dir", "GENTEST_OUTPUT_DIR"),
            ("main_template", "GENTEST_MAIN_TEMPLATE"),
            ("main_output", "GENTEST_MAIN_OUTPUT"),
        ):
            if os.getenv(var):
                paths[key] = Path(os.environ[var])

        emitter = dict(env_config.get("emitter") or {})
        if os.getenv("GENTEST_BACKEND"):
            emitter["backend"] = os.getenv("GENTEST_BACKEND")
        if os.getenv("GENTEST_HONOR_INSERT_INDEX"):
            emitter["honor_insert_index"] = os.getenv("GENTEST_HONOR_INSERT_INDEX", "false").lower() == "true"

        return cls(
            env=env,
            browser=BrowserConfig(**browser),
            paths=PathsConfig(**paths),
            emitter=EmitterConfig(**emitter),
        )


# Singleton pattern for config
_config: Optional[GentestConfig] = None


def get_config(env: Optional[str] = None) -> GentestConfig:
    """Get or create configuration singleton."""
    global _config
    if _config is None:
        env = env or os.getenv("ENVIRONMENT", "local")
        _config = GentestConfig.from_yaml_and_env(env=env)
    return _config


def reset_config():
    """Reset configuration singleton (useful for testing)."""
    global _config
    _config = None

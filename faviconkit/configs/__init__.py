"""Configuration for faviconkit"""

from pathlib import Path

from dynaconf import Dynaconf, Validator

# Validators for faviconkit settings.
_validators = [
    Validator("logging.format", is_in=["mozlog", "pretty"]),
    Validator("logging.level", is_in=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    Validator("logging.can_propagate", is_type_of=bool),
    # Every favicon candidate is bounded by this timeout, keep it reasonable
    # since a site may yield many candidates.
    Validator("http.timeout_sec", is_type_of=float, gt=0, lte=60.0),
    Validator("http.connect_timeout_sec", is_type_of=float, gt=0, lte=60.0),
    Validator("http.retries", is_type_of=int, gte=0, lte=5),
    Validator("http.follow_redirects", is_type_of=bool),
    Validator("http.user_agent", is_type_of=str, must_exist=True),
    Validator("discovery.max_candidates", is_type_of=int, gte=1),
    Validator("discovery.process_manifest", is_type_of=bool),
    Validator("discovery.add_www", is_type_of=bool),
]

# `root_path` = The directory holding the settings files below.
# `envvar_prefix` = Export envvars with `export FAVICONKIT_FOO=bar`.
# `settings_files` = Load these files in the order.
# `environments` = Enable layered environments such as `development`, `production`, `testing` etc.
# `merge_enabled` = Environment sections override single keys of `[default]` tables.
# `env_switcher` = Switch environments with `export FAVICONKIT_ENV=production`.
# `validators` = Define validators for faviconkit settings.

settings = Dynaconf(
    root_path=str(Path(__file__).parent),
    envvar_prefix="FAVICONKIT",
    settings_files=[
        "default.toml",
        "development.toml",
        "production.toml",
        "testing.toml",
    ],
    environments=True,
    merge_enabled=True,
    env_switcher="FAVICONKIT_ENV",
    validators=_validators,
)

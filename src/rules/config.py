from __future__ import annotations

from typing import TYPE_CHECKING

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from pathlib import Path

CONFIG_FILENAME = "archtest.toml"

DOMAIN = "domain"
PORT = "port"
APPLICATION = "application"
ADAPTER = "adapter"
INFRASTRUCTURE = "infrastructure"

DEFAULT_PRIVATE_GLOBS = ["internal", "internal/*", "*/internal", "*/internal/*"]

DEFAULT_CONTRACT_GLOBS = [
    "contracts",
    "contracts/*",
    "*/contracts/*",
    "*-contract",
    "*/*-contract",
]

DEFAULT_IGNORE_DIRS = ["vendor", "testdata", "node_modules"]

DEFAULT_DOMAIN_DENY = [
    "database/sql",
    "net/http",
    "google.golang.org/grpc",
    "gorm.io",
    "github.com/jackc/pgx",
    "github.com/redis",
    "github.com/go-redis",
    "go.mongodb.org",
    "github.com/gin-gonic",
    "github.com/labstack/echo",
    "github.com/gofiber",
]


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class LayerDef(_StrictModel):
    """Definition of a single architectural layer."""

    name: str = Field(description="Layer tag (e.g., 'domain', 'adapter')")
    globs: list[str] = Field(
        description="Glob patterns over module-relative package directories"
    )
    rank: int | None = Field(
        default=None,
        description="Position in the inward-to-outward order; None is unordered",
    )


def _default_layers() -> list[LayerDef]:
    return [
        LayerDef(
            name=PORT,
            globs=[
                "internal/application/ports",
                "internal/application/ports/*",
                "internal/ports",
                "internal/ports/*",
            ],
            rank=1,
        ),
        LayerDef(
            name=DOMAIN,
            globs=["internal/domain", "internal/domain/*", "domain", "domain/*"],
            rank=0,
        ),
        LayerDef(
            name=APPLICATION,
            globs=[
                "internal/application",
                "internal/application/*",
                "internal/app",
                "internal/app/*",
            ],
            rank=1,
        ),
        LayerDef(
            name=ADAPTER,
            globs=[
                "internal/adapters",
                "internal/adapters/*",
                "adapters",
                "adapters/*",
            ],
            rank=2,
        ),
        LayerDef(
            name=INFRASTRUCTURE,
            globs=[
                "internal/infrastructure",
                "internal/infrastructure/*",
                "internal/infra",
                "internal/infra/*",
            ],
            rank=3,
        ),
    ]


class LayersConfig(_StrictModel):
    """Configuration for architectural layer classification."""

    layer: list[LayerDef] = Field(
        default_factory=_default_layers,
        description="Layer definitions (first match wins)",
    )
    private: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PRIVATE_GLOBS),
        description="Globs marking package directories as module-private",
    )

    @field_validator("layer")
    @classmethod
    def validate_unique_names(cls, v: list[LayerDef]) -> list[LayerDef]:
        seen: set[str] = set()
        for layer_def in v:
            if layer_def.name in seen:
                msg = f"Duplicate layer name '{layer_def.name}'"
                raise ValueError(msg)
            seen.add(layer_def.name)
        return v


class ContractsConfig(_StrictModel):
    """How public contract modules are recognized."""

    modules: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTRACT_GLOBS),
        description="Globs over module root paths or module names",
    )


class PurityConfig(_StrictModel):
    """Policy for the pure business logic layer."""

    forbidden_layers: list[str] = Field(
        default_factory=lambda: [INFRASTRUCTURE, ADAPTER],
        description="Layer tags the domain layer must never import",
    )
    deny: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DOMAIN_DENY),
        description="External import path fragments forbidden in the domain layer",
    )


class ArchTestConfig(_StrictModel):
    """Configuration for an arch-test run."""

    include_tests: bool = Field(
        default=False,
        description="Scan *_test.go files as compilation units",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns over root-relative paths to exclude",
    )
    ignore_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_DIRS),
        description="Directory names never descended into",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    layers: LayersConfig = Field(default_factory=LayersConfig)
    contracts: ContractsConfig = Field(default_factory=ContractsConfig)
    purity: PurityConfig = Field(default_factory=PurityConfig)
    disabled_rules: list[str] = Field(
        default_factory=list,
        description="Rule names that are never evaluated",
    )


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path, config_path: Path | None = None) -> ArchTestConfig:
    """Load configuration from archtest.toml (or ``config_path``) if it exists.

    An explicit ``config_path`` that does not exist is an error; a missing
    default file yields the built-in defaults.
    """
    if config_path is None:
        config_path = root / CONFIG_FILENAME
        if not config_path.is_file():
            return ArchTestConfig()
    elif not config_path.is_file():
        msg = f"Config file not found: {config_path}"
        raise ConfigError(msg)

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return ArchTestConfig.model_validate(data)
    except ValueError as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e

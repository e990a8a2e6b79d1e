"""Pipeline configuration and environment setup."""

from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from orgchart.errors import ConfigError
from orgchart.utils.io import load_toml_config
from orgchart.utils.types import TabularFormat

type ConfigDict = dict[str, str | int | float | bool | list[str]]
type SalaryBand = tuple[float, float]

PROJECT_ROOT = Path(__file__).parent.parent


@dataclass(frozen=True)
class SyntheticConfig:
    total: int = 50
    id_band_start: int = 10_000
    director_salary: SalaryBand = (80_000, 120_000)
    manager_salary: SalaryBand = (50_000, 80_000)
    employee_salary: SalaryBand = (30_000, 80_000)
    director_tenure_years: int = 10
    manager_tenure_years: tuple[int, int] = (2, 6)
    employee_tenure_days: int = 365 * 5
    city_cycle: int = 10
    state_cycle: int = 5


@dataclass(frozen=True)
class ExportConfig:
    tabular_format: TabularFormat = TabularFormat.EXCEL
    output_dir: Path | None = None


@dataclass(frozen=True)
class PipelineConfig:
    env: str
    synthetic: SyntheticConfig = field(default_factory=SyntheticConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    seed: int | None = None
    gratuity_months: int = 60
    default_page_size: int = 10


def _validate(config: PipelineConfig) -> PipelineConfig:
    synthetic = config.synthetic
    if synthetic.total < 0:
        raise ConfigError(f"Synthetic total must be >= 0, got {synthetic.total}")
    if synthetic.id_band_start < 1:
        raise ConfigError(f"Synthetic id band must start at >= 1, got {synthetic.id_band_start}")
    for name in ("director_salary", "manager_salary", "employee_salary"):
        low, high = getattr(synthetic, name)
        if low < 0 or high < low:
            raise ConfigError(f"Invalid salary band for {name}: ({low}, {high})")
    low, high = synthetic.manager_tenure_years
    if low < 0 or high <= low:
        raise ConfigError(f"Invalid manager tenure range: ({low}, {high})")
    if min(synthetic.employee_tenure_days, synthetic.city_cycle, synthetic.state_cycle) < 1:
        raise ConfigError("Synthetic tenure days and city/state cycles must be >= 1")
    if config.gratuity_months < 0:
        raise ConfigError(f"Gratuity threshold must be >= 0, got {config.gratuity_months}")
    if config.default_page_size < 1:
        raise ConfigError(f"Default page size must be >= 1, got {config.default_page_size}")
    return config


def load_pipeline_config(env: str = "production", overrides: ConfigDict | None = None) -> PipelineConfig:
    match env:
        case "production" | "staging":
            config = PipelineConfig(env=env)
        case "development":
            config = PipelineConfig(
                env=env,
                export=ExportConfig(output_dir=Path("output/employees")),
            )
        case "test":
            config = PipelineConfig(env=env, seed=42)
        case other:
            raise ConfigError(f"Unknown environment: {other}")

    if overrides:
        config = apply_overrides(config, overrides)
    return _validate(config)


def apply_overrides(config: PipelineConfig, overrides: ConfigDict) -> PipelineConfig:
    """Layer flat ``[tool.orgchart]``-style keys over a preset."""
    synthetic = config.synthetic
    export = config.export
    top: dict = {}

    for key, value in overrides.items():
        match key:
            case "synthetic_total":
                synthetic = replace(synthetic, total=int(value))
            case "synthetic_id_start":
                synthetic = replace(synthetic, id_band_start=int(value))
            case "seed":
                top["seed"] = int(value)
            case "gratuity_months":
                top["gratuity_months"] = int(value)
            case "page_size":
                top["default_page_size"] = int(value)
            case "export_format":
                try:
                    export = replace(export, tabular_format=TabularFormat(str(value)))
                except ValueError as exc:
                    raise ConfigError(f"Unsupported export format: {value}") from exc
            case "output_dir":
                export = replace(export, output_dir=Path(str(value)))
            case unknown:
                raise ConfigError(f"Unknown config key: {unknown}")

    return replace(config, synthetic=synthetic, export=export, **top)


def get_env_config(root: Path = PROJECT_ROOT) -> ConfigDict:
    """Read pipeline overrides from orgchart.yaml, falling back to pyproject.toml."""
    yaml_path = root / "orgchart.yaml"
    if yaml_path.exists():
        with open(yaml_path) as f:
            return yaml.safe_load(f) or {}

    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        return {}
    data = load_toml_config(pyproject)
    return data.get("tool", {}).get("orgchart", {})

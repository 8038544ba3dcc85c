"""
Typed service manifest for check_up.yml.

The manifest is the only input the check engine consumes:
  - an ordered list of services (declaration order is report order)
  - an optional top-level round interval
  - clear validation errors for common mistakes

Example:

    interval: 1
    services:
      - name: db
        command: pg_isready -h localhost
        timeout: 2
      - name: web
        command: curl -fsS http://localhost:8080/healthz
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator


class ServiceSpec(BaseModel):
    """One named service and the shell command that proves it is up."""

    model_config = ConfigDict(frozen=True)

    name: str
    command: str
    # Accepted for every service, but only the first declared value is used
    # as the round interval (see ServiceManifest.round_interval).
    interval: float | None = None
    timeout: float | None = None

    @field_validator("name", "command", mode="before")
    @classmethod
    def strip_required_strings(cls, value: str) -> str:
        if not isinstance(value, str):
            raise ValueError("must be a string")
        value = value.strip()
        if not value:
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, value: float | None) -> float | None:
        if value is not None and value < 0:
            raise ValueError("interval must be >= 0")
        return value

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("timeout must be > 0")
        return value


class ServiceManifest(BaseModel):
    """Contract for check_up.yml."""

    model_config = ConfigDict(frozen=True)

    interval: float | None = None
    services: tuple[ServiceSpec, ...]

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, value: float | None) -> float | None:
        if value is not None and value < 0:
            raise ValueError("interval must be >= 0")
        return value

    @model_validator(mode="after")
    def validate_services(self) -> ServiceManifest:
        if not self.services:
            raise ValueError("services must list at least one service")
        names = [s.name for s in self.services]
        if len(names) != len(set(names)):
            duplicates = sorted({name for name in names if names.count(name) > 1})
            raise ValueError(f"services contain duplicate names: {', '.join(duplicates)}")
        return self

    @property
    def service_names(self) -> list[str]:
        return [s.name for s in self.services]

    def round_interval(self, default: float) -> float:
        """Resolve the single interval applied between failed rounds.

        A top-level ``interval`` wins, then the first service that declares
        one, then ``default``. Later per-service intervals are ignored.
        """
        if self.interval is not None:
            return self.interval
        for service in self.services:
            if service.interval is not None:
                return service.interval
        return default


def load_manifest_yaml(path: Path) -> dict:
    with open(path, encoding="utf-8") as handle:
        try:
            payload = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"invalid YAML in {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise ValueError("manifest root must be a YAML mapping/object")
        return payload


def parse_manifest(path: str | Path) -> ServiceManifest:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Service manifest not found: {path}")
    payload = load_manifest_yaml(path)
    try:
        return ServiceManifest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(exc) from exc


def select_services(manifest: ServiceManifest, names: Sequence[str] = ()) -> list[ServiceSpec]:
    """Return the services to check.

    With no names, every service in declaration order. Otherwise the named
    services in the order they were requested.
    """
    if not names:
        return list(manifest.services)

    by_name = {s.name: s for s in manifest.services}
    unknown = [n for n in names if n not in by_name]
    if unknown:
        raise ValueError(
            f"unknown service(s): {', '.join(unknown)}\n"
            f"Available services: {', '.join(manifest.service_names)}"
        )
    selected: list[ServiceSpec] = []
    for name in names:
        if by_name[name] not in selected:
            selected.append(by_name[name])
    return selected

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

from .api_client import ServiceConfig
from .logger import get_logger, log_phase


logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "config" / "config.schema.json"

_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off")


@dataclass
class ApiConfig:
    host: str
    api_key_env_var: Optional[str] = None
    api_key_file: Optional[str] = None
    timeout_seconds: Optional[float] = None
    verify_ssl: bool = True


@dataclass
class MachineConfig:
    hostname_source: str = "system"
    hostname_override: Optional[str] = None


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "plain"
    console_enabled: bool = True
    file_enabled: bool = False
    file_name: Optional[str] = None


@dataclass
class Config:
    api: ApiConfig
    resolved_api_key: str = field(repr=False)
    # Répertoire du fichier de configuration : ancre des chemins relatifs
    base_dir: Path
    machine: MachineConfig = field(default_factory=MachineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    # Tags ajoutés à chaque payload envoyé par le CLI
    tags: List[str] = field(default_factory=list)

    def service_config(self) -> ServiceConfig:
        return ServiceConfig(
            host=self.api.host,
            api_key=self.resolved_api_key,
            timeout_seconds=self.api.timeout_seconds,
            verify_ssl=self.api.verify_ssl,
        )


class ConfigError(Exception):
    """Erreur de configuration invalide ou introuvable."""


class ConfigLoader:
    """
    Lit le YAML, applique les overrides d'environnement, valide le résultat
    contre config.schema.json puis résout la clé API.

    Les chemins relatifs (api_key_file) sont résolus depuis `base_dir`,
    par défaut le répertoire contenant le fichier de configuration.

    Variables d'environnement :
      - TELEMETRY_API_HOST
      - TELEMETRY_API_TIMEOUT (float > 0, ignorée sinon)
      - TELEMETRY_VERIFY_SSL (true/false)
    """

    def __init__(self, config_path: Path, base_dir: Optional[Path] = None) -> None:
        self.config_path = Path(config_path)
        self.base_dir = base_dir or self.config_path.resolve().parent

    def load(self) -> Config:
        log_phase(logger, "config.load", f"Chargement configuration depuis {self.config_path}")

        raw = self._read_yaml()
        api = raw.setdefault("api", {})
        if isinstance(api, dict):
            self._apply_env_overrides(api)

        try:
            jsonschema.validate(instance=raw, schema=_load_schema())
        except jsonschema.ValidationError as exc:
            raise ConfigError(f"Configuration invalide : {exc.message}") from exc

        api_cfg = ApiConfig(**api)
        api_cfg.host = api_cfg.host.rstrip("/")

        return Config(
            api=api_cfg,
            resolved_api_key=self._resolve_api_key(api_cfg),
            base_dir=self.base_dir,
            machine=MachineConfig(**(raw.get("machine") or {})),
            logging=LoggingConfig(**(raw.get("logging") or {})),
            tags=list(raw.get("tags") or []),
        )

    def _read_yaml(self) -> Dict[str, Any]:
        if not self.config_path.is_file():
            raise ConfigError(f"Fichier de configuration introuvable : {self.config_path}")
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Impossible de lire le fichier de configuration : {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("Le fichier de configuration doit contenir un objet YAML racine.")
        return data

    @staticmethod
    def _apply_env_overrides(api: Dict[str, Any]) -> None:
        host = os.getenv("TELEMETRY_API_HOST")
        if host:
            api["host"] = host

        timeout = os.getenv("TELEMETRY_API_TIMEOUT")
        if timeout is not None:
            try:
                value = float(timeout)
            except ValueError:
                value = 0.0
            if value > 0:
                api["timeout_seconds"] = value
            else:
                logger.warning("TELEMETRY_API_TIMEOUT=%r invalide (float > 0 attendu), ignorée.", timeout)

        verify = os.getenv("TELEMETRY_VERIFY_SSL")
        if verify is not None:
            flag = verify.strip().lower()
            if flag in _TRUE or flag in _FALSE:
                api["verify_ssl"] = flag in _TRUE
            else:
                logger.warning("TELEMETRY_VERIFY_SSL=%r invalide (booléen attendu), ignorée.", verify)

    def _resolve_api_key(self, api_cfg: ApiConfig) -> str:
        """Variable d'environnement `api_key_env_var` en priorité, sinon contenu de `api_key_file`."""
        if api_cfg.api_key_env_var:
            env_val = (os.getenv(api_cfg.api_key_env_var) or "").strip()
            if env_val:
                return env_val

        if not api_cfg.api_key_file:
            raise ConfigError("Aucune clé API : variable d'environnement non définie et api_key_file absent.")

        key_path = Path(api_cfg.api_key_file)
        if not key_path.is_absolute():
            key_path = self.base_dir / key_path
        try:
            key = key_path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Fichier de clé API illisible : {key_path} ({exc})") from exc
        if not key:
            raise ConfigError(f"Clé API vide dans le fichier : {key_path}")
        return key


def _load_schema() -> Dict[str, Any]:
    with SCHEMA_PATH.open("r", encoding="utf-8") as f:
        return json.load(f)

"""YAML config source with conf.d directory support.

Extends pydantic-settings ``YamlConfigSettingsSource`` to load:
- a main YAML file (e.g., conf/mongo.yaml)
- override files from a conf.d directory (e.g., conf/mongo.d/*.yaml),
  merged in alphabetical order
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic_settings import YamlConfigSettingsSource

if TYPE_CHECKING:
    from pydantic_settings import BaseSettings


class ConfDYamlConfigSettingsSource(YamlConfigSettingsSource):
    """YAML settings source with conf.d directory support.

    Supports the Linux conf.d pattern:
    - conf/app.yaml        (base configuration)
    - conf/app.d/*.yaml    (override files, merged alphabetically)

    The base directory can be moved with an environment variable,
    e.g. ``APP_CONFIG_DIR=/etc/account-service``.
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: str = "app.yaml",
        confd_dir: str | None = "app.d",
        config_dir_env: str = "CONFIG_DIR",
        base_dir: str = "conf",
        yaml_file_encoding: str | None = "utf-8",
    ) -> None:
        config_base = Path(os.getenv(config_dir_env, base_dir))

        yaml_files: list[Path] = []

        main_file = config_base / yaml_file
        if main_file.exists():
            yaml_files.append(main_file)

        if confd_dir:
            confd_path = config_base / confd_dir
            if confd_path.is_dir():
                yaml_files.extend(sorted(confd_path.glob("*.yaml")))
                yaml_files.extend(sorted(confd_path.glob("*.yml")))

        self._yaml_files = yaml_files

        super().__init__(
            settings_cls=settings_cls,
            yaml_file=yaml_files if yaml_files else None,
            yaml_file_encoding=yaml_file_encoding,
        )

    def __repr__(self) -> str:
        files_str = ", ".join(str(f) for f in self._yaml_files)
        return f"{self.__class__.__name__}(yaml_files=[{files_str}])"


def create_yaml_source(
    settings_cls: type[BaseSettings], domain: str,
) -> ConfDYamlConfigSettingsSource:
    """Create the YAML source for one settings domain.

    Loads ``conf/<domain>.yaml`` then ``conf/<domain>.d/*.yaml``. The
    directory can be overridden with ``<DOMAIN>_CONFIG_DIR``.
    """
    return ConfDYamlConfigSettingsSource(
        settings_cls,
        yaml_file=f"{domain}.yaml",
        confd_dir=f"{domain}.d",
        config_dir_env=f"{domain.upper()}_CONFIG_DIR",
    )


def create_app_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Create YAML source for AppSettings (conf/app.yaml, conf/app.d/)."""
    return create_yaml_source(settings_cls, "app")


def create_mongo_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Create YAML source for MongoSettings (conf/mongo.yaml, conf/mongo.d/)."""
    return create_yaml_source(settings_cls, "mongo")


def create_auth_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Create YAML source for AuthSettings (conf/auth.yaml, conf/auth.d/)."""
    return create_yaml_source(settings_cls, "auth")


def create_logging_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Create YAML source for LoggingSettings (conf/logging.yaml, conf/logging.d/)."""
    return create_yaml_source(settings_cls, "logging")


def create_graphql_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    """Create YAML source for GraphQLSettings (conf/graphql.yaml, conf/graphql.d/)."""
    return create_yaml_source(settings_cls, "graphql")


def create_activity_log_yaml_source(
    settings_cls: type[BaseSettings],
) -> ConfDYamlConfigSettingsSource:
    """Create YAML source for ActivityLogSettings (conf/activity_log.yaml, conf/activity_log.d/)."""
    return create_yaml_source(settings_cls, "activity_log")

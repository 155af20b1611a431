"""
Configuration loader for the Page Search engine.

Loads settings from config.json and provides typed access via dataclasses.
Supports singleton pattern for global access and runtime reload capability.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .exceptions import ConfigurationError

CONFIG_ENV_VAR = "PAGESEARCH_CONFIG"


@dataclass
class PathsConfig:
    """Configuration for file system paths."""
    data_directory: Path
    database_path: Path
    logs_directory: Path


@dataclass
class StoreConfig:
    """Configuration for the document store connection and writes."""
    connect_timeout: float
    write_retries: int
    retry_backoff_ms: int


@dataclass
class ExtractionConfig:
    """Configuration for PDF extraction settings."""
    primary_backend: str
    fallback_backend: str
    max_file_size_mb: int
    supported_extensions: List[str]


@dataclass
class IndexingConfig:
    """Configuration for the PDF import pipeline."""
    skip_existing: bool
    log_progress_every: int


@dataclass
class SearchConfig:
    """Configuration for search functionality."""
    max_titles: int
    snippet_length: int
    tokenizer: str
    use_fts_prefilter: bool
    sort_by_page_num: bool


@dataclass
class GUIConfig:
    """Configuration for Streamlit web interface."""
    page_title: str


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""
    level: str
    format: str
    max_file_size_mb: int
    backup_count: int


@dataclass
class Config:
    """
    Main configuration container holding all config sections.

    Provides singleton access via get_config() function.
    """
    paths: PathsConfig
    store: StoreConfig
    extraction: ExtractionConfig
    indexing: IndexingConfig
    search: SearchConfig
    gui: GUIConfig
    logging: LoggingConfig
    project_root: Path = field(default_factory=Path)

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the config.json file.

        Returns:
            Populated Config instance.

        Raises:
            ConfigurationError: If file is missing or invalid.
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)}
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}",
                {"path": str(config_path)}
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config file must contain a JSON object",
                {"path": str(config_path)}
            )

        project_root = config_path.resolve().parent.parent

        return cls._parse_config(data, project_root)

    @classmethod
    def _parse_config(cls, data: dict, project_root: Path) -> "Config":
        """Parse raw config dict into typed Config object."""
        paths_data = data.get("paths", {})
        paths = PathsConfig(
            data_directory=cls._resolve_path(paths_data.get("data_directory", "data"), project_root),
            database_path=cls._resolve_path(paths_data.get("database_path", "output/pages.db"), project_root),
            logs_directory=cls._resolve_path(paths_data.get("logs_directory", "output/logs"), project_root)
        )

        store_data = data.get("store", {})
        store = StoreConfig(
            connect_timeout=store_data.get("connect_timeout", 30.0),
            write_retries=store_data.get("write_retries", 3),
            retry_backoff_ms=store_data.get("retry_backoff_ms", 50)
        )

        ext_data = data.get("extraction", {})
        extraction = ExtractionConfig(
            primary_backend=ext_data.get("primary_backend", "pypdf"),
            fallback_backend=ext_data.get("fallback_backend", "pdfplumber"),
            max_file_size_mb=ext_data.get("max_file_size_mb", 500),
            supported_extensions=ext_data.get("supported_extensions", [".pdf"])
        )

        idx_data = data.get("indexing", {})
        indexing = IndexingConfig(
            skip_existing=idx_data.get("skip_existing", True),
            log_progress_every=idx_data.get("log_progress_every", 10)
        )

        search_data = data.get("search", {})
        search = SearchConfig(
            max_titles=search_data.get("max_titles", 40),
            snippet_length=search_data.get("snippet_length", 200),
            tokenizer=search_data.get("tokenizer", "unicode61 categories 'L* N*'"),
            use_fts_prefilter=search_data.get("use_fts_prefilter", True),
            sort_by_page_num=search_data.get("sort_by_page_num", False)
        )

        gui_data = data.get("gui", {})
        gui = GUIConfig(
            page_title=gui_data.get("page_title", "PDF Page Search")
        )

        log_data = data.get("logging", {})
        logging_cfg = LoggingConfig(
            level=log_data.get("level", "INFO"),
            format=log_data.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            max_file_size_mb=log_data.get("max_file_size_mb", 10),
            backup_count=log_data.get("backup_count", 5)
        )

        return cls(
            paths=paths,
            store=store,
            extraction=extraction,
            indexing=indexing,
            search=search,
            gui=gui,
            logging=logging_cfg,
            project_root=project_root
        )

    @staticmethod
    def _resolve_path(path_str: str, project_root: Path) -> Path:
        """Resolve a path string, making relative paths absolute."""
        path = Path(path_str)
        if path.is_absolute():
            return path
        return project_root / path


_config_instance: Optional[Config] = None


def get_config(config_path: Path = None) -> Config:
    """
    Get the singleton Config instance.

    Args:
        config_path: Optional path to config file. If not provided,
                    searches upward from current directory.

    Returns:
        The global Config instance.

    Raises:
        ConfigurationError: If config cannot be loaded.
    """
    global _config_instance

    if _config_instance is None or config_path is not None:
        if config_path is None:
            config_path = _find_config_file()
        _config_instance = Config.from_file(config_path)

    return _config_instance


def _find_config_file() -> Path:
    """
    Locate the config file.

    Uses the PAGESEARCH_CONFIG environment variable when set, otherwise
    searches upward from the current directory for config/config.json.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    current = Path.cwd()

    for _ in range(10):
        config_path = current / "config" / "config.json"
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    raise ConfigurationError(
        "Could not find config/config.json in current directory or parents"
    )


def reload_config(config_path: Path = None) -> Config:
    """
    Force reload of configuration.

    Args:
        config_path: Optional path to config file.

    Returns:
        Fresh Config instance.
    """
    global _config_instance
    _config_instance = None
    return get_config(config_path)

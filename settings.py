"""
Settings for the E-Shop demo.

Defaults live in the dataclass below. An optional ``[eshop]`` table in
``.streamlit/secrets.toml`` overrides them:

    [eshop]
    products_url = "https://fakestoreapi.com/products"
    state_path = ".eshop_state.json"
    request_timeout = 10
    log_level = "DEBUG"
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

import streamlit as st

PRODUCTS_URL = "https://fakestoreapi.com/products"
STATE_PATH = ".eshop_state.json"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    """Runtime settings"""
    products_url: str = PRODUCTS_URL
    state_path: str = STATE_PATH
    request_timeout: Optional[float] = None  # None: wait forever
    log_level: str = "INFO"


def _read_secrets() -> Mapping[str, Any]:
    try:
        return st.secrets.get("eshop", {})
    except FileNotFoundError:
        # no secrets.toml at all
        return {}


def load_settings(secrets: Optional[Mapping[str, Any]] = None) -> Settings:
    if secrets is None:
        secrets = _read_secrets()

    known = {f.name for f in fields(Settings)}
    values = {k: v for k, v in dict(secrets).items() if k in known}

    timeout = values.get("request_timeout")
    if timeout in (None, "", 0):
        values["request_timeout"] = None
    else:
        values["request_timeout"] = float(timeout)

    if "log_level" in values:
        values["log_level"] = str(values["log_level"]).upper()

    return Settings(**values)


def configure_logging(level: str = "INFO") -> None:
    # no-op once the root logger has handlers
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)

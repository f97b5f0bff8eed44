"""Data models for the Switch Library Manager."""

from .settings import (
    BUNDLED_DLC_TITLE_ID,
    TEMPLATE_DLC_NAME,
    TEMPLATE_REGION,
    TEMPLATE_TITLE_ID,
    TEMPLATE_TITLE_NAME,
    TEMPLATE_TYPE,
    TEMPLATE_VERSION,
    TEMPLATE_VERSION_TXT,
    AppSettings,
    CatalogFeed,
    OrganizeOptions,
)

__all__ = [
    "AppSettings",
    "BUNDLED_DLC_TITLE_ID",
    "CatalogFeed",
    "OrganizeOptions",
    "TEMPLATE_DLC_NAME",
    "TEMPLATE_REGION",
    "TEMPLATE_TITLE_ID",
    "TEMPLATE_TITLE_NAME",
    "TEMPLATE_TYPE",
    "TEMPLATE_VERSION",
    "TEMPLATE_VERSION_TXT",
]

"""
Shared test fixtures and configuration.
"""

import logging
from pathlib import Path

import pytest

from episync.adapters.mock import MockSchemaClient
from episync.core.models.schema import TypeDefinitionData

ARTICLE_PAGE = {
    "name": "ArticlePage",
    "displayName": "Article page",
    "description": "A news article",
    "guid": "9e1a0a3b-0001-4c2e-9d8e-000000000001",
    "properties": [
        {"name": "ContentLink", "displayName": "Content link", "description": "", "type": "ContentReference"},
        {"name": "Heading", "displayName": "Heading", "description": "Main heading", "type": "String"},
        {"name": "MainBody", "displayName": "", "description": None, "type": "XhtmlString"},
        {"name": "Teaser", "displayName": "Teaser", "description": "Teaser block", "type": "TeaserBlock"},
        {"name": "Related", "displayName": "Related", "description": "", "type": "ContentArea"},
        {"name": "Rating", "displayName": "Rating", "description": "", "type": "GeoCoordinate"},
    ],
}

TEASER_BLOCK = {
    "name": "TeaserBlock",
    "displayName": "Teaser",
    "description": "",
    "guid": "9e1a0a3b-0002-4c2e-9d8e-000000000002",
    "properties": [
        {"name": "Title", "displayName": "Title", "description": "", "type": "String"},
        {"name": "Link", "displayName": "Link", "description": "", "type": "Url"},
        {"name": "Visible", "displayName": "Visible", "description": "", "type": "Boolean"},
    ],
}


@pytest.fixture
def article_page() -> TypeDefinitionData:
    return TypeDefinitionData.model_validate(ARTICLE_PAGE)


@pytest.fixture
def teaser_block() -> TypeDefinitionData:
    return TypeDefinitionData.model_validate(TEASER_BLOCK)


@pytest.fixture
def known_types() -> list[str]:
    return ["ArticlePage", "TeaserBlock"]


@pytest.fixture
def schema_client() -> MockSchemaClient:
    """Mock Content Delivery client serving ArticlePage and TeaserBlock."""
    return MockSchemaClient([ARTICLE_PAGE, TEASER_BLOCK])


@pytest.fixture
def model_dir(tmp_path: Path) -> Path:
    """Return a temporary model output directory."""
    path = tmp_path / "src" / "Models" / "Episerver"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def article_payload() -> dict:
    return ARTICLE_PAGE


@pytest.fixture
def teaser_payload() -> dict:
    return TEASER_BLOCK


@pytest.fixture
def restore_root_logger():
    """Undo handler and level changes made by setup_logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    noisy = logging.getLogger("urllib3").level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("urllib3").setLevel(noisy)

"""Read and build the Notion property values the bridge cares about."""

import logging

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"


def plain_text(prop: dict | None) -> str | None:
    """Concatenate the plain text of a title or rich_text property.

    Returns None if the property is missing, empty, or of another type.
    """
    if not prop:
        return None

    prop_type = prop.get("type")
    if prop_type not in ("title", "rich_text"):
        logger.debug("Unsupported Notion property type: %s", prop_type)
        return None

    parts = prop.get(prop_type) or []
    return "".join(t.get("plain_text", "") for t in parts) or None


def find_title_property(properties: dict, name: str) -> dict | None:
    """Look up the title property by name, falling back to the first title-typed one."""
    prop = properties.get(name)
    if prop is not None and prop.get("type") == "title":
        return prop
    for candidate in properties.values():
        if candidate.get("type") == "title":
            return candidate
    return None


def extract_title(properties: dict, name: str = "Name") -> str:
    title = plain_text(find_title_property(properties, name))
    if title is None or not title.strip():
        return UNTITLED
    return title


def extract_folder_id(properties: dict, name: str = "Drive Folder ID") -> str | None:
    value = plain_text(properties.get(name))
    if value is None:
        return None
    return value.strip() or None


def rich_text_value(content: str) -> dict:
    """Build a rich_text property payload holding a single plain string."""
    return {"rich_text": [{"type": "text", "text": {"content": content}}]}

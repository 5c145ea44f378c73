"""
Pydantic schemas for payloads returned by the extraction service.

The wire format uses camelCase keys (logoUrl, startDate, ...); the models
expose snake_case attributes and accept either spelling on input.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError

from .config import DEFAULT_CITY, DEFAULT_EVENT_STATE, DEFAULT_STATE
from .exceptions import SchemaValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ============================================================================
# Single-page scrape (companies)
# ============================================================================

class ScrapedCompany(WireModel):
    name: str = Field(..., description="The name of the company.")
    description: str = Field(..., description="A brief description of what the company does.")
    website: Optional[HttpUrl] = Field(None, description="The company's official website URL.")
    industry: List[str] = Field(
        ...,
        description="An array of industries the company operates in (e.g., ['Software', 'Artificial Intelligence', 'Biotech'])",
    )
    size: Optional[int] = Field(None, description="Employee count or size of the company.")
    founded: Optional[int] = Field(None, description="The year the company was founded.")
    address: Optional[str] = Field(None, description="The street address of the company.")
    city: Optional[str] = Field(
        None,
        description="The city where the company is located. If there is no city, this field can be empty.",
    )
    state: Optional[str] = Field(
        None,
        description="The state or region where the company is located. If there is no state, this field can be empty.",
    )
    logo_url: Optional[HttpUrl] = Field(None, alias="logoUrl", description="The URL for the company's logo image.")


class ScrapeCompaniesPayload(WireModel):
    companies: List[ScrapedCompany] = Field(..., description="An array of tech companies found on the page.")


# ============================================================================
# Multi-URL extract (companies, events)
# ============================================================================

class ExtractedCompany(WireModel):
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    industry: List[str]
    size: Optional[float] = None  # may be a range midpoint; rounded during sync
    founded: Optional[float] = None
    address: Optional[str] = None
    city: Optional[str] = DEFAULT_CITY
    state: Optional[str] = DEFAULT_STATE
    logo_url: Optional[str] = Field(None, alias="logoUrl")
    source_url: Optional[str] = Field(None, alias="sourceUrl")
    source_type: str = Field("extracted", alias="sourceType")


class ExtractCompaniesPayload(WireModel):
    companies: Optional[List[ExtractedCompany]] = Field(None, alias="Companies")


class ExtractedEvent(WireModel):
    title: str
    description: Optional[str] = None
    start_date: str = Field(..., alias="startDate")  # ISO string, parsed during sync
    end_date: Optional[str] = Field(None, alias="endDate")
    venue: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = DEFAULT_CITY
    state: Optional[str] = DEFAULT_EVENT_STATE
    is_virtual: bool = Field(False, alias="isVirtual")
    event_url: Optional[str] = Field(None, alias="eventUrl")
    industry: List[str]
    organizer_name: Optional[str] = Field(None, alias="organizerName")
    organizer_website: Optional[str] = Field(None, alias="organizerWebsite")
    logo_url: Optional[str] = Field(None, alias="logoUrl")
    source_url: Optional[str] = Field(None, alias="sourceUrl")
    source_type: str = Field("extracted", alias="sourceType")


class ExtractEventsPayload(WireModel):
    events: Optional[List[ExtractedEvent]] = Field(None, alias="Events")


# ============================================================================
# Validation helpers
# ============================================================================

def validate_payload(model: Type[M], raw: Any) -> M:
    """
    Validate a raw extraction payload against one of the schemas above.

    The whole payload is rejected if any field is invalid; valid records in
    an invalid batch are not kept.

    Args:
        model: Payload model class (e.g. ExtractEventsPayload)
        raw: JSON value returned by the extraction service

    Returns:
        Validated model instance

    Raises:
        SchemaValidationError: With one {"path", "message"} entry per violated field
    """
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        errors = [
            {
                "path": ".".join(str(part) for part in err["loc"]) or "<root>",
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        logger.error(f"Schema validation failed for {model.__name__}: {errors}")
        raise SchemaValidationError(
            f"Extracted data does not match the expected {model.__name__} schema.",
            errors=errors,
        ) from e


def extraction_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """Return the JSON schema sent to the extraction service, with $refs inlined."""
    schema = model.model_json_schema(by_alias=True)
    defs = schema.pop("$defs", {})
    return _inline_refs(schema, defs)


def _inline_refs(node: Any, defs: Dict[str, Any]) -> Any:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if ref and ref.startswith("#/$defs/"):
            return _inline_refs(defs[ref.split("/")[-1]], defs)
        return {key: _inline_refs(value, defs) for key, value in node.items()}
    if isinstance(node, list):
        return [_inline_refs(item, defs) for item in node]
    return node

"""
Sync/upsert engine: reconciles validated extraction records with the store.

Companies are upserted by name (update on conflict). Events are deduplicated
on (title, start_date) and skipped when they already exist. Each record is
processed on its own: a failure is logged and the loop moves on.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from dateutil import parser as date_parser

from .config import DEFAULT_CITY, DEFAULT_EVENT_STATE, DEFAULT_STATE
from .models import ExtractedCompany, ExtractedEvent, ScrapedCompany
from .persistence import DirectoryStore, SourceType

logger = logging.getLogger(__name__)

CompanyRecord = Union[ScrapedCompany, ExtractedCompany]


@dataclass
class SyncResult:
    """Aggregate outcome of one sync pass."""
    count: int = 0
    data: List[Any] = field(default_factory=list)

    def add(self, entity: Any) -> None:
        self.count += 1
        self.data.append(entity)


def _text_or_default(value: Optional[str], default: str) -> str:
    if value is None or not value.strip():
        return default
    return value


def _as_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _source_type(value: Optional[str]) -> str:
    try:
        return SourceType((value or "").lower()).value
    except ValueError:
        return SourceType.EXTRACTED.value


def _as_int(value: Optional[float]) -> Optional[int]:
    return int(round(value)) if value is not None else None


def parse_timestamp(value: str) -> datetime:
    """
    Parse a date or datetime string (ISO 8601 or free-form like
    'March 12, 2025 6:00 PM').

    Offset-aware values are converted to naive UTC; naive values are kept
    as given.

    Raises:
        ValueError: If value cannot be parsed as a date
    """
    try:
        parsed = date_parser.parse(value)
    except OverflowError as e:
        raise ValueError(f"Date out of range: {value}") from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


# ============================================================================
# Companies
# ============================================================================

def _company_fields(record: CompanyRecord, default_city: str, default_state: str) -> Dict[str, Any]:
    return {
        "description": record.description,
        "website": _as_str(record.website),
        "industry": list(record.industry),
        "size": _as_int(record.size),
        "founded": _as_int(record.founded),
        "address": record.address,
        "city": _text_or_default(record.city, default_city),
        "state": _text_or_default(record.state, default_state),
        "logo_url": _as_str(record.logo_url),
    }


def sync_companies(
    records: Iterable[CompanyRecord],
    store: DirectoryStore,
    source_type: SourceType,
    source_url: Optional[str] = None,
    verify_new: bool = False,
    default_city: str = DEFAULT_CITY,
    default_state: str = DEFAULT_STATE,
) -> SyncResult:
    """
    Upsert companies keyed by name.

    On conflict the descriptive, location and metadata fields are
    overwritten. source_url is written on create, and on update only when a
    non-empty URL is known for the record (a stored URL is never blanked).

    Args:
        records: Validated company records
        store: Target store
        source_type: How the records were obtained
        source_url: Page the whole batch came from, if known
        verify_new: Mark newly created companies as verified
        default_city: City used when a record has none
        default_state: State used when a record has none

    Returns:
        SyncResult with the created/updated companies
    """
    result = SyncResult()

    for record in records:
        try:
            fields = _company_fields(record, default_city, default_state)
            record_source_url = source_url or getattr(record, "source_url", None) or None

            update = dict(fields, source_type=source_type.value)
            if record_source_url:
                update["source_url"] = record_source_url

            create = dict(
                fields,
                source_type=source_type.value,
                source_url=record_source_url,
                is_verified=verify_new,
            )

            company = store.upsert_company(record.name, create=create, update=update)
            result.add(company)
            logger.info(f"✅ Upserted company: {record.name}")
        except Exception as e:
            logger.error(f"❌ Failed to upsert company {getattr(record, 'name', '<unknown>')}: {e}", exc_info=True)

    logger.info(f"Company sync complete: {result.count} companies upserted")
    return result


# ============================================================================
# Events
# ============================================================================

def sync_events(
    records: Iterable[ExtractedEvent],
    store: DirectoryStore,
    default_city: str = DEFAULT_CITY,
    default_state: str = DEFAULT_EVENT_STATE,
) -> SyncResult:
    """
    Create events that are not already stored.

    An event matching an existing (title, start_date) pair is skipped
    without updating the stored row and is not counted. An event whose
    dates cannot be parsed is skipped on its own.

    Returns:
        SyncResult with the created events
    """
    result = SyncResult()

    for record in records:
        try:
            logger.debug(f"Processing event: {record.title}")
            try:
                start_date = parse_timestamp(record.start_date)
                end_date = parse_timestamp(record.end_date) if record.end_date else None
            except ValueError as e:
                logger.error(f"Date conversion failed for {record.title}: {e}")
                continue

            if store.find_event(record.title, start_date) is not None:
                logger.info(f"Skipping duplicate event: {record.title} ({start_date.date().isoformat()})")
                continue

            event = store.create_event(
                title=record.title,
                description=record.description,
                start_date=start_date,
                end_date=end_date,
                venue=record.venue,
                address=record.address,
                city=_text_or_default(record.city, default_city),
                state=_text_or_default(record.state, default_state),
                is_virtual=bool(record.is_virtual),
                event_url=record.event_url,
                industry=list(record.industry or []),
                organizer_name=record.organizer_name,
                organizer_website=record.organizer_website,
                logo_url=record.logo_url,
                source_url=record.source_url or None,
                source_type=_source_type(record.source_type),
            )
            result.add(event)
            logger.info(f"✅ Created event: {record.title}")
        except Exception as e:
            logger.error(f"❌ Failed to insert event {getattr(record, 'title', '<unknown>')}: {e}", exc_info=True)

    logger.info(f"Event sync complete: {result.count} events created")
    return result

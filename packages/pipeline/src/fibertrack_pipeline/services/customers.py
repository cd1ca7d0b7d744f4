"""Customer and consent-log data service."""

from __future__ import annotations

import structlog

from fibertrack_pipeline.utils.retry import with_retry_sync
from fibertrack_shared.constants import (
    TABLE_CONSENT_LOGS,
    TABLE_CUSTOMERS,
    VALID_CONSENT_STATUSES,
    ConsentStatus,
)
from fibertrack_shared.db import get_supabase_client
from fibertrack_shared.models import ConsentLog, Customer

log = structlog.get_logger(__name__)


@with_retry_sync()
def fetch_customers() -> list[Customer]:
    supabase = get_supabase_client()
    result = supabase.table(TABLE_CUSTOMERS).select("*").order("name").execute()
    return [Customer.from_db_row(row) for row in result.data or []]


def update_customer_consent(customer_id: str, consent_status: ConsentStatus) -> bool:
    if consent_status not in VALID_CONSENT_STATUSES:
        raise ValueError(f"invalid consent status {consent_status!r}")
    supabase = get_supabase_client()
    result = (
        supabase.table(TABLE_CUSTOMERS)
        .update({"consent_status": consent_status})
        .eq("id", customer_id)
        .execute()
    )
    log.info("customer_consent_updated", customer_id=customer_id, consent_status=consent_status)
    return bool(result.data)


@with_retry_sync()
def fetch_consent_logs(*, customer_id: str | None = None) -> list[ConsentLog]:
    """Consent audit trail, newest first; optionally for one customer."""
    supabase = get_supabase_client()
    query = supabase.table(TABLE_CONSENT_LOGS).select("*")
    if customer_id:
        query = query.eq("customer_id", customer_id)
    result = query.order("timestamp", desc=True).execute()
    return [ConsentLog.from_db_row(row) for row in result.data or []]


def create_consent_log(
    customer_id: str,
    agent_name: str,
    status: ConsentStatus,
    notes: str | None = None,
) -> ConsentLog | None:
    entry = ConsentLog(customer_id=customer_id, agent_name=agent_name, status=status, notes=notes or None)
    supabase = get_supabase_client()
    result = supabase.table(TABLE_CONSENT_LOGS).insert(entry.to_insert_dict()).execute()
    if not result.data:
        return None
    return ConsentLog.from_db_row(result.data[0])

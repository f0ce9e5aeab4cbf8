"""Rate store backed by an external SQL system through SQLAlchemy."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from rates_api.core.utils import new_id, utc_timestamp
from rates_api.db.models import RateRecord
from rates_api.db.session import get_session
from rates_api.domain.errors import InternalError, NotFoundError, ValidationError
from rates_api.domain.rates import (
    Currency,
    Rate,
    RateType,
    check_list_args,
    normalize_id,
    validate_rate,
)

logger = logging.getLogger(__name__)

_QUERY_COLUMNS = {
    "title": RateRecord.title,
    "description": RateRecord.description,
    "currency": RateRecord.currency,
    "type": RateRecord.rate_type,
}


def _record_to_rate(record: RateRecord) -> Rate:
    return Rate(
        id=record.id,
        title=record.title,
        amount=float(record.amount or 0),
        description=record.description or "",
        currency=Currency(record.currency),
        rate_type=RateType(record.rate_type),
        created_at=record.created_at,
        created_by=record.created_by,
        modified_at=record.modified_at,
        modified_by=record.modified_by,
        disabled=bool(record.disabled),
    )


class SQLRateRepository:
    """
    Same contract as FileRateStore against a relational database.

    Ids are always assigned here (client-supplied ids are rejected), listings
    are sorted by title and deletes only set the disabled flag.
    """

    def __init__(self, actor: str = "system") -> None:
        self.actor = actor

    def list(
        self,
        query_type: Optional[str] = None,
        query: Optional[str] = None,
        position: int = 0,
        size: Optional[int] = None,
    ) -> list[Rate]:
        check_list_args(query_type, position, size)
        stmt = select(RateRecord).where(RateRecord.disabled.is_(False))
        if query:
            column = _QUERY_COLUMNS[query_type or "title"]
            stmt = stmt.where(column.icontains(query, autoescape=True))
        stmt = stmt.order_by(RateRecord.title.asc(), RateRecord.id.asc()).offset(position)
        if size is not None:
            stmt = stmt.limit(size)
        try:
            with get_session() as session:
                records = session.execute(stmt).scalars().all()
                return [_record_to_rate(r) for r in records]
        except SQLAlchemyError as exc:
            raise InternalError(f"list() failed: {exc}") from exc

    def create(self, rate: Rate, actor: Optional[str] = None) -> Rate:
        if normalize_id(rate.id):
            raise ValidationError("id must not be supplied on create")
        validate_rate(rate)
        now = utc_timestamp()
        who = actor or self.actor
        record = RateRecord(
            id=new_id(),
            title=rate.title.strip(),
            amount=rate.amount,
            description=rate.description or "",
            currency=rate.currency.value,
            rate_type=rate.rate_type.value,
            created_at=now,
            created_by=who,
            modified_at=now,
            modified_by=who,
            disabled=False,
        )
        try:
            with get_session() as session:
                session.add(record)
                session.commit()
                session.refresh(record)
                logger.info("create(%s) by %s", record.id, who)
                return _record_to_rate(record)
        except SQLAlchemyError as exc:
            raise InternalError(f"create() failed: {exc}") from exc

    def read(self, id: str) -> Rate:
        try:
            with get_session() as session:
                record = self._get_active(session, id)
                return _record_to_rate(record)
        except SQLAlchemyError as exc:
            raise InternalError(f"read({id}) failed: {exc}") from exc

    def update(self, id: str, rate: Rate, actor: Optional[str] = None) -> Rate:
        id = normalize_id(id)
        body_id = normalize_id(rate.id)
        if body_id and body_id != id:
            raise ValidationError(f"id in body <{body_id}> does not match <{id}>")
        validate_rate(rate)
        try:
            with get_session() as session:
                record = self._get_active(session, id)
                record.title = rate.title.strip()
                record.amount = rate.amount
                record.description = rate.description or ""
                record.currency = rate.currency.value
                record.rate_type = rate.rate_type.value
                record.modified_at = utc_timestamp()
                record.modified_by = actor or self.actor
                session.commit()
                session.refresh(record)
                logger.info("update(%s) by %s", id, record.modified_by)
                return _record_to_rate(record)
        except SQLAlchemyError as exc:
            raise InternalError(f"update({id}) failed: {exc}") from exc

    def delete(self, id: str, actor: Optional[str] = None) -> None:
        try:
            with get_session() as session:
                record = self._get_active(session, id)
                record.disabled = True
                record.modified_at = utc_timestamp()
                record.modified_by = actor or self.actor
                session.commit()
                logger.info("delete(%s) by %s", id, record.modified_by)
        except SQLAlchemyError as exc:
            raise InternalError(f"delete({id}) failed: {exc}") from exc

    def count(self) -> int:
        stmt = select(func.count()).select_from(RateRecord).where(RateRecord.disabled.is_(False))
        try:
            with get_session() as session:
                return int(session.execute(stmt).scalar_one())
        except SQLAlchemyError as exc:
            raise InternalError(f"count() failed: {exc}") from exc

    def _get_active(self, session, id: str) -> RateRecord:
        record = session.get(RateRecord, normalize_id(id))
        if record is None or record.disabled:
            raise NotFoundError(f"no rate with ID <{id}> was found.")
        return record

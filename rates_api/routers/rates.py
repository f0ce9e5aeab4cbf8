from __future__ import annotations

from contextlib import contextmanager
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query, Request, Response
from pydantic import BaseModel

from rates_api.domain.errors import DuplicateError, InternalError, NotFoundError, ValidationError
from rates_api.domain.rates import DEFAULT_CURRENCY, DEFAULT_RATE_TYPE, Currency, Rate, RateType
from rates_api.repositories.base import RateStore

router = APIRouter(prefix="/rates", tags=["rates"])


class RateBody(BaseModel):
    """Client input for create/update; provenance fields are ignored."""

    id: Optional[str] = None
    title: str = ""
    rate: float = 0.0
    description: str = ""
    currency: Currency = DEFAULT_CURRENCY
    type: RateType = DEFAULT_RATE_TYPE

    def to_rate(self) -> Rate:
        return Rate(
            id=(self.id or "").strip(),
            title=self.title,
            amount=self.rate,
            description=self.description or "",
            currency=self.currency,
            rate_type=self.type,
        )


def _get_store(request: Request) -> RateStore:
    store = getattr(getattr(request.app, "state", None), "rate_store", None)
    if not store:
        raise RuntimeError("RateStore not configured")
    return store


@contextmanager
def _translate_errors():
    try:
        yield
    except DuplicateError as exc:
        raise HTTPException(409, str(exc) or "Rate already exists") from exc
    except NotFoundError as exc:
        raise HTTPException(404, str(exc) or "Rate not found") from exc
    except ValidationError as exc:
        raise HTTPException(400, str(exc) or "Invalid rate") from exc
    except InternalError as exc:
        raise HTTPException(500, str(exc) or "Internal error") from exc


@router.get("")
def list_rates(
    request: Request,
    query_type: Optional[str] = Query(None, alias="queryType"),
    query: Optional[str] = None,
    position: int = 0,
    size: Optional[int] = None,
):
    store = _get_store(request)
    with _translate_errors():
        rates = store.list(query_type, query, position, size)
    return [r.to_dict() for r in rates]


@router.get("/count")
def count_rates(request: Request):
    store = _get_store(request)
    with _translate_errors():
        return {"count": store.count()}


@router.post("", status_code=201)
def create_rate(body: RateBody, request: Request, x_user: Optional[str] = Header(None)):
    store = _get_store(request)
    with _translate_errors():
        rate = store.create(body.to_rate(), actor=x_user)
    return rate.to_dict()


@router.get("/{rate_id}")
def read_rate(rate_id: str, request: Request):
    store = _get_store(request)
    with _translate_errors():
        rate = store.read(rate_id)
    return rate.to_dict()


@router.put("/{rate_id}")
def update_rate(rate_id: str, body: RateBody, request: Request, x_user: Optional[str] = Header(None)):
    store = _get_store(request)
    with _translate_errors():
        rate = store.update(rate_id, body.to_rate(), actor=x_user)
    return rate.to_dict()


@router.delete("/{rate_id}", status_code=204)
def delete_rate(rate_id: str, request: Request, x_user: Optional[str] = Header(None)):
    store = _get_store(request)
    with _translate_errors():
        store.delete(rate_id, actor=x_user)
    return Response(status_code=204)

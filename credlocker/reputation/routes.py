"""
Security tool endpoints: pass-through IPQS lookups.

Missing input -> 400. IPQS refusing the call -> 200 with success=false.
Transport/parse failures -> ReputationError (502, or 503 without a key).
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from credlocker.auth.models import PublicUser
from credlocker.core.deps import get_current_user, get_reputation_client
from credlocker.reputation.client import (
    ReputationClient,
    api_failure,
    summarize_email,
    summarize_leak,
    summarize_request_log,
    summarize_url_scan,
)

router = APIRouter(prefix="/api", tags=["tools"])


class UrlScanInput(BaseModel):
    url: str = Field("", examples=["http://example.com/login"])


class BreachSearchInput(BaseModel):
    email: str = Field("", examples=["someone@example.com"])


class DarkWebInput(BaseModel):
    data: str = ""
    type: Optional[str] = Field(None, examples=["email", "password", "username"])


class PhoneInput(BaseModel):
    phone: str = ""
    country: Optional[str] = None


class RequestLogInput(BaseModel):
    type: Optional[str] = None
    start_date: Optional[str] = None
    stop_date: Optional[str] = None


def _required(value: str, message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise HTTPException(status_code=400, detail=message)
    return value


@router.post("/scan-url")
def scan_url(
    body: UrlScanInput,
    client: ReputationClient = Depends(get_reputation_client),
    user: PublicUser = Depends(get_current_user),
):
    url = _required(body.url, "URL is required")
    data = client.lookup("url", url)
    return api_failure(data) or summarize_url_scan(data, url)


@router.post("/breach-search")
def breach_search(
    body: BreachSearchInput,
    client: ReputationClient = Depends(get_reputation_client),
    user: PublicUser = Depends(get_current_user),
):
    email = _required(body.email, "Email is required")
    data = client.lookup("email", email)
    return api_failure(data) or summarize_email(data, email)


@router.post("/darkweb-monitor")
def darkweb_monitor(
    body: DarkWebInput,
    client: ReputationClient = Depends(get_reputation_client),
    user: PublicUser = Depends(get_current_user),
):
    query = _required(body.data, "Search data is required")
    data = client.lookup("leaked", query, leak_type=body.type or "email")
    return api_failure(data) or summarize_leak(data, query)


@router.post("/phone-validation")
def phone_validation(
    body: PhoneInput,
    client: ReputationClient = Depends(get_reputation_client),
    user: PublicUser = Depends(get_current_user),
):
    phone = _required(body.phone, "Phone number is required")
    # US is the IPQS default, only send other countries
    country = body.country if body.country and body.country != "US" else None
    data = client.lookup("phone", phone, country=country)
    return api_failure(data, key="message") or data


@router.post("/request-log")
def request_log(
    body: RequestLogInput,
    client: ReputationClient = Depends(get_reputation_client),
    user: PublicUser = Depends(get_current_user),
):
    data = client.lookup(
        "requests",
        type=body.type or "proxy",
        start_date=body.start_date,
        stop_date=body.stop_date,
    )
    return api_failure(data, key="message") or summarize_request_log(data)

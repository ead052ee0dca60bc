"""
IPQualityScore (IPQS) client.

Thin pass-through: one GET per lookup, no caching, no retries. Routes use
lookup(kind, value) and the summarize_* helpers to shape the replies.
"""
import logging
from typing import Optional
from urllib.parse import quote

import requests

from credlocker.core.config import IPQS_API_KEY, IPQS_BASE_URL, IPQS_TIMEOUT_SECONDS
from credlocker.core.errors import ReputationError, ReputationUnavailable

logger = logging.getLogger(__name__)

LOOKUP_KINDS = ("url", "email", "leaked", "phone", "requests")


def key_fingerprint(key: str) -> str:
    """Return masked key for safe logging: abcdef...1234"""
    if not key:
        return "(not set)"
    if len(key) <= 10:
        return key[:2] + "***"
    return key[:6] + "..." + key[-4:]


class ReputationClient:
    def __init__(
        self,
        api_key: str = IPQS_API_KEY,
        base_url: str = IPQS_BASE_URL,
        timeout: float = IPQS_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def key_present(self) -> bool:
        return bool(self.api_key)

    def build_url(self, kind: str, value: str, leak_type: str = "email") -> str:
        key = self.api_key
        if kind == "url":
            return f"{self.base_url}/url/{key}/{quote(value, safe='')}"
        if kind == "email":
            return f"{self.base_url}/email/{key}/{quote(value, safe='@')}"
        if kind == "leaked":
            return f"{self.base_url}/leaked/{quote(leak_type, safe='')}/{key}/{quote(value, safe='')}"
        if kind == "phone":
            return f"{self.base_url}/phone/{key}/{quote(value, safe='')}"
        if kind == "requests":
            return f"{self.base_url}/requests/{key}/list"
        raise ValueError(f"Unknown lookup kind: {kind}")

    def lookup(self, kind: str, value: str = "", **params) -> dict:
        """
        Run one IPQS lookup and return the decoded JSON.

        Raises ReputationError when no key is configured, the request fails
        or the body is not JSON. An IPQS reply with success=false is returned
        as-is; callers decide how to show it.
        """
        if not self.key_present():
            raise ReputationUnavailable("IPQS_API_KEY is not configured")

        leak_type = params.pop("leak_type", None) or "email"
        url = self.build_url(kind, value, leak_type=leak_type)
        query = {k: v for k, v in params.items() if v}

        try:
            resp = self.session.get(url, params=query or None, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("[IPQS] %s lookup failed: %s", kind, type(exc).__name__)
            raise ReputationError(f"IPQS {kind} lookup failed") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            logger.error("[IPQS] %s lookup returned non-JSON (status=%s)", kind, resp.status_code)
            raise ReputationError("Failed to parse API response") from exc

        if not isinstance(data, dict):
            raise ReputationError("Failed to parse API response")
        return data

    def log_startup(self):
        """Print one-time startup diagnostics."""
        print(f"[IPQS] IPQS_API_KEY present: {self.key_present()}", flush=True)
        print(f"[IPQS] key fingerprint: {key_fingerprint(self.api_key)}", flush=True)


# ======================================================
# RESPONSE SHAPING
# ======================================================

def api_failure(data: dict, key: str = "error", fallback: str = "API Key invalid") -> Optional[dict]:
    """{success: false, <key>: message} when IPQS refused the call, else None."""
    if data.get("success") is False:
        return {"success": False, key: data.get("message") or fallback}
    return None


def summarize_url_scan(data: dict, url: str) -> dict:
    domain_age = data.get("domain_age")
    return {
        "success": True,
        "unsafe": bool(data.get("unsafe") or data.get("phishing") or data.get("malware")),
        "risk_score": data.get("risk_score") or 0,
        "domain": data.get("domain") or url,
        "domain_age": (domain_age.get("human") if isinstance(domain_age, dict) else None) or "Unknown",
        "threats": {
            "phishing": data.get("phishing") is True,
            "malware": data.get("malware") is True,
            "spamming": data.get("spamming") is True,
            "suspicious": data.get("suspicious") is True,
        },
    }


def summarize_email(data: dict, email: str) -> dict:
    return {
        "success": True,
        "valid": data.get("valid"),
        "fraud_score": data.get("fraud_score") or 0,
        "leaked": data.get("leaked") or False,
        "recent_abuse": data.get("recent_abuse") or False,
        "email": email,
    }


def summarize_leak(data: dict, query: str) -> dict:
    return {
        "success": True,
        "leaked": data.get("leaked") or False,
        "query": query,
        "results": data.get("results") or [],
    }


def summarize_request_log(data: dict) -> dict:
    requests_out = []
    for item in data.get("requests") or []:
        query = (
            item.get("search_term")
            or item.get("ip")
            or item.get("email")
            or item.get("url")
            or item.get("phone")
            or "Unknown"
        )
        fraud_score = item.get("fraud_score")
        requests_out.append({
            "date": item.get("created_at") or "N/A",
            "query": query,
            "fraud_score": fraud_score if fraud_score is not None else 0,
            "country_code": item.get("country_code") or "N/A",
        })
    return {"success": True, "requests": requests_out}

"""URL reputation oracles backing the `scanURL` capability."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
import ipaddress
from typing import Any, Callable

import requests

from phish_content_analyzer.config.settings import AppConfig
from phish_content_analyzer.core.errors import ConfigError
from phish_content_analyzer.core.logging import get_logger
from phish_content_analyzer.domain.contracts import ScanResult
from phish_content_analyzer.domain.url.extract import canonicalize_url, url_domain

logger = get_logger(__name__)

UrlReputationOracle = Callable[[str], ScanResult]

VT_BASE_URL = "https://www.virustotal.com/api/v3"

_SHORTENERS = ("bit.ly", "tinyurl.com", "t.co", "rb.gy", "is.gd", "goo.gl")
_BAIT_TOKENS = ("verify", "secure", "login", "signin", "account", "update", "password", "wallet")
_STRUCTURAL_FLAGS = frozenset(
    {"unparseable_url", "url_shortener", "punycode_domain", "userinfo_in_host", "raw_ip_host"}
)


def _is_ip_host(domain: str) -> bool:
    try:
        ipaddress.ip_address(domain.strip("[]"))
    except ValueError:
        return False
    return True


def _registrable_label(domain: str) -> str:
    labels = [item for item in domain.split(".") if item]
    return labels[-2] if len(labels) >= 2 else ""


def heuristic_url_flags(url: str) -> list[str]:
    """Local red flags for one URL; an empty list means nothing was found.

    Bait words such as "login" or "account" count only on a hyphenated
    registrable label (`secure-paypal-login.com`) or next to a structural flag.
    """

    raw = canonicalize_url(url).lower()
    domain = url_domain(raw)
    flags: list[str] = []
    if not domain:
        flags.append("unparseable_url")
    if any(domain == item or domain.endswith("." + item) for item in _SHORTENERS):
        flags.append("url_shortener")
    if "xn--" in domain:
        flags.append("punycode_domain")
    if "@" in raw.split("//", maxsplit=1)[-1].split("/", maxsplit=1)[0]:
        flags.append("userinfo_in_host")
    if domain and _is_ip_host(domain):
        flags.append("raw_ip_host")
    if "suspicious" in raw:
        flags.append("marker:suspicious")

    label = _registrable_label(domain)
    if "-" in label:
        flags.extend(f"lookalike_domain:{token}" for token in _BAIT_TOKENS if token in label)
    if _STRUCTURAL_FLAGS.intersection(flags):
        flags.extend(f"token:{token}" for token in _BAIT_TOKENS if token in raw)
    return flags


@dataclass(frozen=True)
class HeuristicUrlReputation:
    """Local lookalike/obfuscation checks; no network access."""

    def __call__(self, url: str) -> ScanResult:
        flags = heuristic_url_flags(url)
        if flags:
            return ScanResult(
                is_safe=False,
                message=f"URL is potentially malicious (local heuristics: {', '.join(flags)}).",
            )
        return ScanResult(is_safe=True, message="URL is safe (no local heuristic flags).")


def _virustotal_url_id(url: str) -> str:
    return base64.urlsafe_b64encode(url.encode("utf-8")).decode("ascii").rstrip("=")


@dataclass
class VirusTotalUrlReputation:
    """VirusTotal v3 URL report lookup; unknown URLs fall back to local heuristics."""

    api_key: str
    timeout_s: float = 10.0
    base_url: str = VT_BASE_URL
    fallback: UrlReputationOracle = field(default_factory=HeuristicUrlReputation)
    http_get: Callable[..., Any] = requests.get

    def __call__(self, url: str) -> ScanResult:
        response = self.http_get(
            f"{self.base_url}/urls/{_virustotal_url_id(url)}",
            headers={"x-apikey": self.api_key, "Accept": "application/json"},
            timeout=self.timeout_s,
        )
        if response.status_code == 404:
            logger.info("virustotal_url_unknown", url=url)
            result = self.fallback(url)
            return ScanResult(is_safe=result.is_safe, message=f"Not in VirusTotal; {result.message}")
        response.raise_for_status()
        stats = response.json().get("data", {}).get("attributes", {}).get("last_analysis_stats", {})
        malicious = int(stats.get("malicious", 0) or 0)
        suspicious = int(stats.get("suspicious", 0) or 0)
        harmless = int(stats.get("harmless", 0) or 0)
        if malicious or suspicious:
            return ScanResult(
                is_safe=False,
                message=(
                    f"URL is potentially malicious (VirusTotal: {malicious} malicious, "
                    f"{suspicious} suspicious engines)."
                ),
            )
        return ScanResult(
            is_safe=True,
            message=f"URL is safe (VirusTotal: {harmless} harmless engines, none malicious).",
        )


def build_url_reputation(cfg: AppConfig) -> UrlReputationOracle:
    backend = (cfg.url_reputation_backend or "heuristic").strip().lower()
    if backend == "heuristic":
        return HeuristicUrlReputation()
    if backend == "virustotal":
        if not cfg.virustotal_api_key:
            raise ConfigError("url_reputation_backend=virustotal requires a VirusTotal API key.")
        return VirusTotalUrlReputation(api_key=cfg.virustotal_api_key, timeout_s=cfg.url_scan_timeout_s)
    raise ConfigError(f"Unsupported url_reputation_backend: {backend!r}")

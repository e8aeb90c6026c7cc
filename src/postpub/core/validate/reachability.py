"""HEAD-request reachability probes for the featured image and cited links"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import requests

from postpub.config import Settings


logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    url:          str
    status:       Optional[int] = None
    content_type: str = ""
    error:        Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status is not None and self.status < 400


class ReachabilityChecker:
    """Probes URLs with HEAD through one pooled session; failures become ProbeResult.error."""

    def __init__(self, timeout: float = 5.0, user_agent: str = None, session: requests.Session = None, max_workers: int = 5):
        self.timeout = timeout
        self.max_workers = max(1, max_workers)
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers.update({"User-Agent": user_agent})

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReachabilityChecker":
        return cls(
            timeout=settings.request_timeout,
            user_agent=settings.user_agent,
            max_workers=settings.link_sample_size or 1,
        )

    def head(self, url: str) -> ProbeResult:
        """HEAD url; hosts answering 405 get a streamed GET whose body is never read."""
        try:
            resp = self.session.head(url, timeout=self.timeout, allow_redirects=True)
            if resp.status_code == 405:
                resp = self.session.get(url, timeout=self.timeout, allow_redirects=True, stream=True)
                resp.close()
        except (requests.RequestException, ValueError) as e:
            logger.debug("Probe failed for %s: %s", url, e)
            return ProbeResult(url=url, error=str(e) or type(e).__name__)
        return ProbeResult(url=url, status=resp.status_code, content_type=resp.headers.get("Content-Type", "") or "")

    def probe_many(self, urls: list[str]) -> list[ProbeResult]:
        """Probe urls concurrently; results keep the input order."""
        if not urls:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(urls))) as pool:
            return list(pool.map(self.head, urls))

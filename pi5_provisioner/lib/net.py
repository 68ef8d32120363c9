from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, Optional

from .command import CommandRunner

logger = logging.getLogger(__name__)


def fetch_text(run: CommandRunner, url: str) -> str:
    r = run(["curl", "-fsSL", url])
    return r.stdout or ""


def fetch_json(run: CommandRunner, url: str) -> Any:
    text = fetch_text(run, url)
    if not text.strip():
        return {}
    return json.loads(text)


def download(run: CommandRunner, url: str, dest: str) -> None:
    run(["curl", "-fsSL", "-o", dest, url])


def run_remote_script(run: CommandRunner, url: str, *, shell: str = "bash") -> None:
    """Fetch an installer script and feed it to a shell (``curl | bash``)."""

    script = fetch_text(run, url)
    run([shell], input_text=script)


def http_ok(run: CommandRunner, url: str) -> bool:
    r = run(["curl", "-fs", "-o", "/dev/null", url], check=False)
    return r.returncode == 0


def wait_for_http(
    run: CommandRunner,
    url: str,
    *,
    attempts: int,
    interval: float,
    sleep: Callable[[float], None],
) -> bool:
    """Poll url until it answers 2xx, at most ``attempts`` times."""

    for attempt in range(1, attempts + 1):
        if http_ok(run, url):
            logger.info("%s healthy after %d attempt(s)", url, attempt)
            return True
        if attempt < attempts:
            sleep(interval)
    return False


def find_release_asset_url(release: Dict[str, Any], pattern: str) -> Optional[str]:
    """Return browser_download_url of the first asset whose name matches pattern."""

    rx = re.compile(pattern)
    for asset in release.get("assets") or []:
        name = str(asset.get("name") or "")
        url = asset.get("browser_download_url")
        if rx.search(name) and url:
            return str(url)
    return None


def primary_ip(run: CommandRunner) -> str:
    r = run(["hostname", "-I"], check=False)
    parts = (r.stdout or "").split()
    return parts[0] if parts else "localhost"

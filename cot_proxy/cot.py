"""
Cursor on Target (CoT) event generation.

Builds the XML position reports that browser clients push through the proxy.
Used by ``bin/send-test-cot.py`` to exercise a running instance.
"""

import random
import string
import time
from datetime import datetime, timedelta, timezone
from typing import Optional
from xml.sax.saxutils import quoteattr

STALE_AFTER = timedelta(minutes=5)
FRIENDLY_GROUND_UNIT = "a-f-G-U-C"

_BASE36 = string.digits + string.ascii_lowercase


def generate_uid() -> str:
    timestamp = int(time.time() * 1000)
    suffix = "".join(random.choice(_BASE36) for _ in range(13))
    return f"ANDROID-{timestamp}-{suffix}"


def format_cot_time(moment: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision, e.g. 2026-01-16T03:00:00.000Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def build_cot_event(
    lat: float,
    lon: float,
    alt: float = 0.0,
    accuracy: float = 10.0,
    uid: Optional[str] = None,
    callsign: Optional[str] = None,
    team: Optional[str] = None,
    role: Optional[str] = None,
    speed: float = 0,
    heading: float = 0,
    now: Optional[datetime] = None,
) -> str:
    now = now or datetime.now(timezone.utc)
    stamp = format_cot_time(now)
    stale = format_cot_time(now + STALE_AFTER)
    uid = uid or generate_uid()

    return f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<event version="2.0" uid={quoteattr(uid)} type="{FRIENDLY_GROUND_UNIT}" time="{stamp}" start="{stamp}" stale="{stale}" how="m-g">
    <point lat="{lat:.7f}" lon="{lon:.7f}" hae="{alt:.1f}" ce="{accuracy:.1f}" le="9999999.0"/>
    <detail>
        <contact callsign={quoteattr(callsign or "UNKNOWN")}/>
        <__group name={quoteattr(team or "Cyan")} role={quoteattr(role or "Team Member")}/>
        <status battery="100"/>
        <takv device="CoT Publisher PWA" platform="Web Browser" os="WebAPI" version="1.0.0"/>
        <track speed="{speed}" course="{heading}"/>
    </detail>
</event>"""

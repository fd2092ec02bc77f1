
from dataclasses import dataclass
from typing import Optional

@dataclass
class StatsDTO:
    """Um bucket de `/stats/total`, achatado. Campos ausentes no payload valem 0."""
    time: Optional[str] = None
    accepted_incoming: int = 0
    accepted_outgoing: int = 0
    clicked_total: int = 0
    complained_total: int = 0
    delivered_http: int = 0
    delivered_smtp: int = 0
    failed_permanent_bounce: int = 0
    failed_permanent_delayed_bounce: int = 0
    failed_permanent_suppress_bounce: int = 0
    failed_permanent_suppress_complaint: int = 0
    failed_permanent_suppress_unsubscribe: int = 0
    failed_temporary_espblock: int = 0
    opened_total: int = 0
    stored_total: int = 0
    unsubscribed_total: int = 0

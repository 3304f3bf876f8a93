from __future__ import annotations

from dataclasses import dataclass


UNKNOWN_ADDRESS = 'unknown'


@dataclass(frozen=True)
class RequestSignal:
    """The three request facts the guard classifies on.

    Built once per request by the HTTP layer and discarded after the decision.
    """

    path: str
    user_agent: str
    source_address: str = UNKNOWN_ADDRESS

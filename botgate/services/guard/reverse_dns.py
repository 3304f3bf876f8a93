"""Non-blocking reverse-DNS lookups with typed failure kinds.

Callers never see resolver exceptions: every outcome is a ReverseLookup,
either a tuple of hostnames or a LookupFailure kind. UNSUPPORTED is set only
when the runtime cannot do reverse lookups at all (no resolver configuration,
no platform support). The guard uses it to fail open.
"""

from __future__ import annotations

from dataclasses import dataclass

import dns.asyncresolver
import dns.exception
import dns.resolver


class LookupFailure:
    UNSUPPORTED = 'unsupported'
    NOT_FOUND = 'not_found'
    TIMEOUT = 'timeout'
    RESOLVER_ERROR = 'resolver_error'

    ALL = (UNSUPPORTED, NOT_FOUND, TIMEOUT, RESOLVER_ERROR)


@dataclass(frozen=True)
class ReverseLookup:
    hostnames: tuple[str, ...] = ()
    failure: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def resolved(cls, hostnames) -> 'ReverseLookup':
        return cls(hostnames=tuple(hostnames))

    @classmethod
    def failed(cls, failure: str, error: Exception | str | None = None) -> 'ReverseLookup':
        return cls(failure=failure, error=str(error) if error is not None else None)


class AsyncReverseResolver:
    """PTR lookups through dnspython's asyncio resolver.

    The underlying resolver's lifetime bounds each lookup; nothing is retried
    here. A failed lookup is reported once and the next request starts fresh.
    """

    def __init__(self, resolver: dns.asyncresolver.Resolver | None = None):
        self._resolver = resolver

    def _get_resolver(self) -> dns.asyncresolver.Resolver:
        if self._resolver is None:
            # Reads /etc/resolv.conf (or the registry); raises
            # NoResolverConfiguration when there is nothing to read.
            self._resolver = dns.asyncresolver.Resolver()
        return self._resolver

    async def reverse(self, address: str) -> ReverseLookup:
        try:
            resolver = self._get_resolver()
            answer = await resolver.resolve_address(address)
        except (dns.resolver.NoResolverConfiguration, NotImplementedError) as exc:
            return ReverseLookup.failed(LookupFailure.UNSUPPORTED, exc)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer) as exc:
            return ReverseLookup.failed(LookupFailure.NOT_FOUND, exc)
        except dns.exception.Timeout as exc:
            return ReverseLookup.failed(LookupFailure.TIMEOUT, exc)
        except (dns.exception.DNSException, ValueError, OSError) as exc:
            return ReverseLookup.failed(LookupFailure.RESOLVER_ERROR, exc)

        hostnames = [rdata.target.to_text(omit_final_dot=True) for rdata in answer]
        return ReverseLookup.resolved(hostnames)

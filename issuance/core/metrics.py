"""Registry metrics using the Prometheus client library.

All instruments live here so there is a single inventory of what the
registry measures.  The registry imports them and updates them at the
point of action.

Counters only go up: ``registry_operations_total`` records every
mutating call with its outcome, so ``rate(...{outcome="paused"}[5m])``
shows callers hammering a halted registry.  Gauges track current
state (paused flag, active issuer and credential counts).  The active
counts are running totals kept by the registry and published when they
change, so a write never rescans the stores.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge

REGISTRY_OPERATIONS = Counter(
    "registry_operations_total",
    "Mutating registry operations by operation name and outcome",
    ["operation", "outcome"],  # outcome: "ok" or the lower-case error kind
)

# Unlabelled: vaccine type is issuer-supplied free text and would give
# every distinct spelling its own time series.
CREDENTIALS_ISSUED = Counter(
    "credentials_issued_total",
    "Credentials successfully issued",
)

REGISTRY_PAUSED = Gauge(
    "registry_paused",
    "1 while the registry is paused, 0 otherwise",
)

ACTIVE_ISSUERS = Gauge(
    "registry_active_issuers",
    "Number of registered issuers currently active",
)

ACTIVE_CREDENTIALS = Gauge(
    "registry_active_credentials",
    "Number of issued credentials not revoked",
)

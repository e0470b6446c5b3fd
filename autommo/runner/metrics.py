"""Counters the worker reports to, exposed in Prometheus format."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge

if TYPE_CHECKING:
    from autommo.config import EnabledFlag


class EventCounterSink(Protocol):
    """Counters written by the engine. Implementations must tolerate
    concurrent increments from the tick loop and the reward callback."""

    def increment_auth_requests(self) -> None: ...

    def increment_steps(self, step_type: str) -> None: ...

    def increment_items(self, rarity: str, name: str) -> None: ...

    def increment_attacks(self, mob_name: str) -> None: ...

    def increment_attack_clicks(self) -> None: ...

    def increment_resources(self, resource_type: str) -> None: ...

    def increment_resources_stats(self, rarity: str, name: str) -> None: ...

    def increment_resource_clicks(self, item_type: str, item_id: str) -> None: ...

    def increment_captcha(self) -> None: ...


class MmoMetrics:
    """``EventCounterSink`` backed by prometheus_client.

    prometheus_client appends ``_total`` to counter names on exposition,
    so ``mmo_steps`` is scraped as ``mmo_steps_total``.
    """

    def __init__(self, enabled: EnabledFlag | None = None, registry: CollectorRegistry = REGISTRY):
        self.registry = registry
        self.auth_requests = Counter(
            "mmo_auth_requests", "Total number of MMO authentication requests", registry=registry
        )
        self.steps = Counter("mmo_steps", "Total number of steps", ["type"], registry=registry)
        self.found_items = Counter(
            "mmo_found_items", "Total number of found items", ["rarity", "name"], registry=registry
        )
        self.attacks = Counter("mmo_attacks", "Total number of attacks", ["mob_name"], registry=registry)
        self.attack_clicks = Counter(
            "mmo_attack_clicks", "Total number of clicks in all attacks", registry=registry
        )
        self.resources = Counter("mmo_resources", "Total number of resources", ["type"], registry=registry)
        self.resources_stats = Counter(
            "mmo_resources_stats", "Total number of resources", ["rarity", "name"], registry=registry
        )
        self.resource_clicks = Counter(
            "mmo_resource_clicks",
            "Total number of clicks in all resources",
            ["item_type", "item_id"],
            registry=registry,
        )
        self.captcha = Counter("mmo_captcha", "Total number of captchas encountered", registry=registry)
        self.is_enabled = Gauge(
            "mmo_is_enabled", "Indicates if the MMO worker is enabled or not", registry=registry
        )
        if enabled is not None:
            # Read at scrape time.
            self.is_enabled.set_function(lambda: 1.0 if enabled.is_enabled else 0.0)

    def increment_auth_requests(self) -> None:
        self.auth_requests.inc()

    def increment_steps(self, step_type: str) -> None:
        self.steps.labels(step_type).inc()

    def increment_items(self, rarity: str, name: str) -> None:
        self.found_items.labels(rarity, name).inc()

    def increment_attacks(self, mob_name: str) -> None:
        self.attacks.labels(mob_name).inc()

    def increment_attack_clicks(self) -> None:
        self.attack_clicks.inc()

    def increment_resources(self, resource_type: str) -> None:
        self.resources.labels(resource_type).inc()

    def increment_resources_stats(self, rarity: str, name: str) -> None:
        self.resources_stats.labels(rarity, name).inc()

    def increment_resource_clicks(self, item_type: str, item_id: str) -> None:
        self.resource_clicks.labels(item_type, item_id).inc()

    def increment_captcha(self) -> None:
        self.captcha.inc()

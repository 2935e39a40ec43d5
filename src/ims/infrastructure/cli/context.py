"""Per-invocation CLI state: the acting principal and the service graph."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from ims.domain.model.user import Principal
from ims.infrastructure.bootstrap import Services, build_services


class CliState:

    def __init__(self, actor: Principal) -> None:
        self.actor = actor
        self._services: Services | None = None

    @property
    def services(self) -> Services:
        if self._services is None:
            self._services = build_services()
        return self._services


pass_state = click.make_pass_decorator(CliState)


def parse_pairs(raw: tuple[str, ...], expected: str) -> list[list[str]]:
    """Split each 'a:b[:c]' option value into its parts."""
    parsed = []
    for value in raw:
        parts = [p.strip() for p in value.split(":")]
        if len(parts) < 2 or not all(parts):
            raise click.BadParameter(f"Invalid item format '{value}'. Expected '{expected}'.")
        parsed.append(parts)
    return parsed


def parse_int(value: str, label: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise click.BadParameter(f"Invalid {label} '{value}'.")


def as_utc(moment: datetime) -> datetime:
    """click.DateTime yields naive values; treat them as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)

"""Sidebar badge counts derived from the opportunities and networks feeds."""

from numbers import Real

from arbview.api.models import NetworkList, OpportunityList
from arbview.core.types import SidebarBadges


def _count(value: object) -> int | None:
    if isinstance(value, Real) and not isinstance(value, bool):
        return int(value)
    return None


def compute_badges(
    opportunities: OpportunityList | None,
    networks: NetworkList | None,
) -> SidebarBadges:
    """
    Compute sidebar badge counts.

    Opportunities: the reported total, else the number of listed items.
    Wallets: the reported active connection count, else connected networks.
    Alerts: disconnected networks.

    Examples:
        >>> compute_badges(None, None)
        SidebarBadges(opportunities=0, wallets=0, alerts=0)
    """
    opportunity_count = 0
    if opportunities is not None:
        total = _count(opportunities.total)
        opportunity_count = total if total is not None else len(opportunities.opportunities)

    wallet_count = 0
    alert_count = 0
    if networks is not None:
        connected = sum(1 for n in networks.networks if n.connected)
        active = _count(networks.active_connections)
        wallet_count = active if active is not None else connected
        alert_count = len(networks.networks) - connected

    return SidebarBadges(
        opportunities=opportunity_count,
        wallets=wallet_count,
        alerts=alert_count,
    )

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

import structlog

from tradedash.market.status import MarketStatus, SessionState

log = structlog.get_logger(__name__)

# Limit orders in extended hours sit 1% through the current price.
EXTENDED_HOURS_OFFSET_PCT = 0.01


class MarketClosedError(RuntimeError):
    def __init__(self, status: MarketStatus) -> None:
        super().__init__(f"Market is closed: {status.next_status_description}")
        self.status = status


@dataclass(frozen=True)
class AccountContext:
    """Brokerage account an action is performed on. Passed explicitly, never held globally."""

    account_id: str
    paper: bool = True


@dataclass(frozen=True)
class PositionSnapshot:
    symbol: str
    qty: float
    side: str  # "long" or "short"
    current_price: float

    def __post_init__(self) -> None:
        if self.side not in {"long", "short"}:
            raise ValueError(f"Unknown position side: {self.side}")
        if self.qty <= 0:
            raise ValueError(f"Position quantity must be positive, got {self.qty}")
        if self.current_price <= 0:
            raise ValueError(f"Current price must be positive, got {self.current_price}")

    @property
    def closing_side(self) -> str:
        return "sell" if self.side == "long" else "buy"


@dataclass(frozen=True)
class CloseOrderPlan:
    """
    Order that closes one position, routed by market session.

    - OPEN: market order in the regular session.
    - EXTENDED_HOURS: day limit order 1% through the current price with the
      extended-hours flag.
    - CLOSED: no plan; routing raises MarketClosedError.
    """

    account_id: str
    symbol: str
    qty: float
    side: str
    order_type: str
    time_in_force: str = "day"
    limit_price: float | None = None
    extended_hours: bool = False

    def to_order_request(self) -> dict[str, Any]:
        request: dict[str, Any] = {
            "symbol": self.symbol,
            "qty": self.qty,
            "side": self.side,
            "type": self.order_type,
            "time_in_force": self.time_in_force,
            "extended_hours": self.extended_hours,
        }
        if self.limit_price is not None:
            request["limit_price"] = self.limit_price
        return request


def extended_hours_limit_price(side: str, price: float) -> float:
    """Limit price for an extended-hours close: sells at -1%, buys at +1%, in cents."""
    if side == "sell":
        return round(price * (1 - EXTENDED_HOURS_OFFSET_PCT), 2)
    if side == "buy":
        return round(price * (1 + EXTENDED_HOURS_OFFSET_PCT), 2)
    raise ValueError(f"Unknown order side: {side}")


def plan_close_order(account: AccountContext, position: PositionSnapshot, status: MarketStatus) -> CloseOrderPlan:
    """
    Decide how to close ``position`` given the current market status.

    Raises:
        MarketClosedError: when the market is closed.
    """
    side = position.closing_side

    if status.status is SessionState.CLOSED:
        log.warning(
            "close_order_rejected",
            account_id=account.account_id,
            symbol=position.symbol,
            reason=status.next_status_description,
        )
        raise MarketClosedError(status)

    if status.status is SessionState.OPEN:
        plan = CloseOrderPlan(
            account_id=account.account_id,
            symbol=position.symbol,
            qty=position.qty,
            side=side,
            order_type="market",
        )
    else:
        plan = CloseOrderPlan(
            account_id=account.account_id,
            symbol=position.symbol,
            qty=position.qty,
            side=side,
            order_type="limit",
            limit_price=extended_hours_limit_price(side, position.current_price),
            extended_hours=True,
        )

    log.info(
        "close_order_planned",
        account_id=account.account_id,
        symbol=plan.symbol,
        side=plan.side,
        order_type=plan.order_type,
        limit_price=plan.limit_price,
        session=status.status.value,
    )
    return plan


def plan_close_all(
    account: AccountContext, positions: Iterable[PositionSnapshot], status: MarketStatus
) -> list[CloseOrderPlan]:
    """Plan closes for every position; the whole batch is refused when the market is closed."""
    if status.status is SessionState.CLOSED:
        log.warning("close_all_rejected", account_id=account.account_id, reason=status.next_status_description)
        raise MarketClosedError(status)
    return [plan_close_order(account, p, status) for p in positions]

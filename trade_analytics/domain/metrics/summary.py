"""Trade Summary: Win/loss statistics over a set of trades.

Shared by the totals, per-group and profit analysis calculations.

Conventions:
- Scratch trades (net == 0) count toward trade_count but are excluded
  from win rate and loss rate denominators
- avg_loss is a magnitude (positive), so expectancy reads
  win_rate × avg_win - loss_rate × avg_loss
- Ratios with an empty denominator are None ("undefined"), never
  NaN or Infinity
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from trade_analytics.domain.models import RoundTurnTrade


def _ratio(numerator: float, denominator: float) -> float | None:
    if denominator == 0:
        return None
    return numerator / denominator


@dataclass(frozen=True, slots=True)
class TradeSummary:
    """Aggregate statistics over a set of trades.

    Attributes:
        trade_count: All trades, scratches included
        win_count / loss_count / scratch_count: Outcome counts
        gross_proceeds: Σ gross
        commissions: Σ commissions (<= 0)
        net_proceeds: Σ net
        gross_wins: Σ net of winning trades
        gross_losses: Σ net of losing trades (<= 0)
        largest_win / largest_loss: Extremes of net (None if absent)
    """

    trade_count: int = 0
    win_count: int = 0
    loss_count: int = 0
    scratch_count: int = 0
    gross_proceeds: float = 0.0
    commissions: float = 0.0
    net_proceeds: float = 0.0
    gross_wins: float = 0.0
    gross_losses: float = 0.0
    largest_win: float | None = None
    largest_loss: float | None = None

    @property
    def decisive_count(self) -> int:
        """Wins plus losses; the win-rate denominator."""
        return self.win_count + self.loss_count

    @property
    def win_rate(self) -> float | None:
        return _ratio(self.win_count, self.decisive_count)

    @property
    def loss_rate(self) -> float | None:
        return _ratio(self.loss_count, self.decisive_count)

    @property
    def avg_win(self) -> float | None:
        return _ratio(self.gross_wins, self.win_count)

    @property
    def avg_loss(self) -> float | None:
        """Average losing trade as a positive magnitude."""
        return _ratio(abs(self.gross_losses), self.loss_count)

    @property
    def profit_factor(self) -> float | None:
        """gross_wins / |gross_losses|; None when there are no losses."""
        if self.loss_count == 0:
            return None
        return _ratio(self.gross_wins, abs(self.gross_losses))

    @property
    def avg_net(self) -> float | None:
        return _ratio(self.net_proceeds, self.trade_count)

    def to_dict(self) -> dict:
        """Convert to dictionary for DataFrame creation or display."""
        return {
            "trade_count": self.trade_count,
            "win_count": self.win_count,
            "loss_count": self.loss_count,
            "scratch_count": self.scratch_count,
            "gross_proceeds": self.gross_proceeds,
            "commissions": self.commissions,
            "net_proceeds": self.net_proceeds,
            "gross_wins": self.gross_wins,
            "gross_losses": self.gross_losses,
            "avg_win": self.avg_win,
            "avg_loss": self.avg_loss,
            "win_rate": self.win_rate,
            "profit_factor": self.profit_factor,
            "largest_win": self.largest_win,
            "largest_loss": self.largest_loss,
        }


def summarize(trades: Iterable[RoundTurnTrade]) -> TradeSummary:
    """Compute a TradeSummary in one pass.

    Example:
        >>> summarize([]).trade_count
        0
        >>> summarize([]).profit_factor is None
        True
    """
    count = wins = losses = scratches = 0
    gross = commissions = net = gross_wins = gross_losses = 0.0
    largest_win: float | None = None
    largest_loss: float | None = None

    for trade in trades:
        count += 1
        gross += trade.gross_proceeds
        commissions += trade.commissions
        net += trade.net_proceeds
        outcome = trade.outcome
        if outcome == "win":
            wins += 1
            gross_wins += trade.net_proceeds
            if largest_win is None or trade.net_proceeds > largest_win:
                largest_win = trade.net_proceeds
        elif outcome == "loss":
            losses += 1
            gross_losses += trade.net_proceeds
            if largest_loss is None or trade.net_proceeds < largest_loss:
                largest_loss = trade.net_proceeds
        else:
            scratches += 1

    return TradeSummary(
        trade_count=count,
        win_count=wins,
        loss_count=losses,
        scratch_count=scratches,
        gross_proceeds=gross,
        commissions=commissions,
        net_proceeds=net,
        gross_wins=gross_wins,
        gross_losses=gross_losses,
        largest_win=largest_win,
        largest_loss=largest_loss,
    )

"""
Economy collaborators used by the tech tree controller.

The controller only talks to two narrow interfaces:
- CurrencyLedger: read the balance, atomically try to spend
- EffectTarget: receive the bonus of an unlocked node

CellLedger and GameStats are the game's in-memory implementations.
"""

from typing import Callable, Optional, Protocol


class CurrencyLedger(Protocol):
    """Holds the spendable balance."""

    @property
    def balance(self) -> float: ...

    def try_spend(self, amount: float) -> bool: ...


class EffectTarget(Protocol):
    """Receives node bonuses, each at most once per unlock."""

    def apply_flat_cpc_bonus(self, amount: float) -> None: ...

    def apply_cpc_multiplier(self, factor: float) -> None: ...

    def apply_flat_cps_bonus(self, amount: float) -> None: ...


class CellLedger:
    """
    In-memory cell balance.

    ``try_spend`` is the only way to decrease the balance and is atomic:
    either the full amount is taken or nothing changes.
    """

    def __init__(self, balance: float = 0.0,
                 on_change: Optional[Callable[[float], None]] = None):
        self._balance = float(balance)
        self.on_change = on_change

    @property
    def balance(self) -> float:
        return self._balance

    def can_afford(self, cost: float) -> bool:
        return self._balance >= cost

    def add(self, amount: float) -> None:
        self._balance += amount
        self._changed()

    def try_spend(self, amount: float) -> bool:
        """Returns False and does nothing if the balance is too low."""
        if not amount <= self._balance:  # also refuses NaN
            return False
        self._balance -= amount
        self._changed()
        return True

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self._balance)


class GameStats:
    """Click and idle rates that node effects modify."""

    def __init__(self):
        self.cells_per_click = 1.0
        self.cpc_multiplier = 1.0
        self.cells_per_second = 0.0

    @property
    def effective_cpc(self) -> float:
        """Cells per click after multipliers."""
        return self.cells_per_click * self.cpc_multiplier

    def apply_flat_cpc_bonus(self, amount: float) -> None:
        self.cells_per_click += amount

    def apply_cpc_multiplier(self, factor: float) -> None:
        self.cpc_multiplier *= factor

    def apply_flat_cps_bonus(self, amount: float) -> None:
        self.cells_per_second += amount

    def reset_derived_stats(self) -> None:
        """Back to base rates, before effects are replayed from a save."""
        self.cells_per_click = 1.0
        self.cpc_multiplier = 1.0
        self.cells_per_second = 0.0

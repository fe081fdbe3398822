"""
AI module - checkout solver, throw simulation and target selection.
"""
from .checkout import (
    CHECKOUT_TABLE,
    PREFERRED_CHECKOUTS,
    CheckoutTable,
    format_checkout,
    is_valid_checkout,
)
from .simulator import Throw, ThrowSimulator, spread_for_skill
from .strategy import (
    CRICKET_RULES,
    X01_RULES,
    PREFERRED_LEAVES,
    CricketSituation,
    X01Situation,
    TargetRule,
    choose_cricket_target,
    choose_x01_target,
    explain_cricket_target,
    explain_x01_target,
    first_matching_rule,
)

__all__ = [
    # Checkout
    "CHECKOUT_TABLE",
    "PREFERRED_CHECKOUTS",
    "CheckoutTable",
    "format_checkout",
    "is_valid_checkout",
    # Simulation
    "Throw",
    "ThrowSimulator",
    "spread_for_skill",
    # Strategy
    "CRICKET_RULES",
    "X01_RULES",
    "PREFERRED_LEAVES",
    "CricketSituation",
    "X01Situation",
    "TargetRule",
    "choose_cricket_target",
    "choose_x01_target",
    "explain_cricket_target",
    "explain_x01_target",
    "first_matching_rule",
]

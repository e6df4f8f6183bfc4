"""Declarative reconciliation engine.

Submodules:
    differ  -- desired vs. observed secret mutation sets.
    drift   -- folds remote snapshots into observed state.
    freeze  -- conditional freeze of computed attributes at plan time.
    secrets -- batched set/unset with compensating reads.
"""

from flystate.reconcile.differ import diff
from flystate.reconcile.drift import refresh
from flystate.reconcile.freeze import freeze
from flystate.reconcile.secrets import SecretReconciler, SecretStore, SetOutcome

__all__ = [
    "SecretReconciler",
    "SecretStore",
    "SetOutcome",
    "diff",
    "freeze",
    "refresh",
]

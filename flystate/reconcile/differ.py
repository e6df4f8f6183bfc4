"""Differ: minimal mutation sets between desired and observed secrets.

Comparison uses the last value the caller declared, tracked locally in
observed state. Remote digests are never compared: they cannot be derived
from plaintext without the store's private hash function. A remote digest
that changed while the declared value did not is the drift detector's
concern, not the differ's.
"""

from __future__ import annotations

from collections.abc import Mapping

from flystate.models.secrets import SecretDiff, SecretEntry
from flystate.models.values import Known


def diff(desired: Mapping[str, str], observed: Mapping[str, SecretEntry]) -> SecretDiff:
    """Compute add/remove/change sets.

    ``observed`` holds only managed entries, so ``to_remove`` can never name
    an entry the caller never declared. An ``Unresolved`` observed value
    never equals a declared one and is therefore re-set.
    """
    desired_keys = desired.keys()
    observed_keys = observed.keys()
    to_change = frozenset(
        name for name in desired_keys & observed_keys if observed[name].value != Known(desired[name])
    )
    return SecretDiff(
        to_add=frozenset(desired_keys - observed_keys),
        to_remove=frozenset(observed_keys - desired_keys),
        to_change=to_change,
    )

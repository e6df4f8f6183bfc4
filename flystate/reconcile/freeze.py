"""Conditional freeze for computed attributes derived from a write-only input.

A digest or creation timestamp is computed remotely from a sensitive value
the engine can never re-derive. Without intervention every plan would show
such attributes as "unresolved -> unresolved". Freezing pins them to their
prior value as long as the correlated input is determined and unchanged.
"""

from __future__ import annotations

from flystate.models.values import Known, Unresolved, Value


def freeze(
    prior: Value | None,
    planned: Value,
    correlated_prior: Value | None,
    correlated_planned: Value,
) -> Value:
    """Return *prior* when freezing applies, otherwise *planned* unchanged.

    Freezing applies only when all of the following hold:

    * a prior value exists and is known;
    * the planned value is currently unresolved;
    * the correlated input's planned value is determined;
    * the correlated input's planned value equals its prior value.
    """
    if not isinstance(prior, Known):
        return planned
    if not isinstance(planned, Unresolved):
        return planned
    if not isinstance(correlated_planned, Known):
        return planned
    if correlated_prior != correlated_planned:
        return planned
    return prior

"""Deterministic commit acceptance policy."""

from __future__ import annotations


def should_accept_commit(
    *,
    incoming_sequence: int,
    committed_sequence: int,
    closed: bool,
) -> bool:
    """Decide whether a refresh result may replace the current snapshot.

    Policy:
    - Nothing is accepted once the owner has been torn down.
    - Otherwise accept only a sequence strictly newer than the committed one,
      so a slow response from an older request never overwrites a newer one.
    """
    if closed:
        return False
    return incoming_sequence > committed_sequence

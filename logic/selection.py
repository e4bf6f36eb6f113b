"""
Selection tracking for the map and list panel.

Holds the currently selected spot and the most recent different spot that
was selected before it. Every change is pushed to an injected listener,
normally the camera transition controller.
"""

from typing import Any, Callable, Dict, Optional, Tuple

Spot = Dict[str, Any]
SelectionListener = Callable[[Optional[Spot], Optional[Spot]], None]


def _spot_id(spot: Optional[Spot]) -> Optional[str]:
    return spot.get("id") if spot is not None else None


class SelectionStore:
    """Current and previous spot selection.

    Args:
        listener: Called with (previous, selected) whenever select()
            changes the selection.
    """

    def __init__(self, listener: Optional[SelectionListener] = None):
        self._listener = listener
        self.selected: Optional[Spot] = None
        self.previous: Optional[Spot] = None

    def subscribe(self, listener: Optional[SelectionListener]) -> None:
        self._listener = listener

    def select(self, spot: Optional[Spot]) -> Tuple[Optional[Spot], Optional[Spot]]:
        """Select a spot, or clear the selection with None.

        previous only moves when the outgoing selection was a real spot
        with a different id, so re-selecting the same spot keeps it. The
        listener is not called when the selection did not change.

        Args:
            spot: Spot dictionary or None.

        Returns:
            The (previous, selected) pair after the update.
        """
        outgoing = self.selected
        changed = _spot_id(outgoing) != _spot_id(spot)
        if outgoing is not None and changed:
            self.previous = outgoing
        self.selected = spot

        if changed and self._listener is not None:
            self._listener(self.previous, self.selected)
        return self.previous, self.selected

    def snapshot(self) -> Dict[str, Optional[Spot]]:
        return {"selected": self.selected, "previous": self.previous}

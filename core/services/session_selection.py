# =============================================================================
# core/services/session_selection.py - Active Place Selection
# =============================================================================
# Transient pointer to the favorite whose weather is being shown. None means
# "use the live device location". Never persisted.
#
# Invariant: the pointer never references a place id absent from the current
# favorite set. The selection subscribes to the synchronizer and clears
# itself when the selected place disappears (removed locally, or dropped by
# a merge); if the record changes under the same id, the pointer follows it.
# =============================================================================

import logging
from typing import Callable
from uuid import UUID

from app.exceptions import PlaceNotFoundError
from core.models.place import Place
from core.models.sync import FavoritesSnapshot
from core.services.favorites_synchronizer import FavoritesSynchronizer

logger = logging.getLogger(__name__)

SelectionListener = Callable[[Place | None], None]


class SessionSelection:
    """
    Which favorite, if any, is the active weather location.

    Example:
        selection = SessionSelection(synchronizer)
        selection.select(place)
        selection.selected      # -> place
        await synchronizer.remove(place)
        selection.selected      # -> None
    """

    def __init__(self, synchronizer: FavoritesSynchronizer):
        self._synchronizer = synchronizer
        self._selected: Place | None = None
        self._listeners: list[SelectionListener] = []
        self._unsubscribe = synchronizer.subscribe(self._on_favorites_changed)

    @property
    def selected(self) -> Place | None:
        return self._selected

    @property
    def is_using_device_location(self) -> bool:
        return self._selected is None

    def select(self, place: Place) -> Place:
        """
        Make a favorite the active location.

        Raises:
            PlaceNotFoundError: If the place is not in the favorite set
        """
        return self.select_by_id(place.id)

    def select_by_id(self, place_id: UUID) -> Place:
        """
        Select the favorite with the given id.

        Raises:
            PlaceNotFoundError: If no favorite has that id
        """
        current = self._synchronizer.get(place_id)
        if current is None:
            raise PlaceNotFoundError(str(place_id))
        self._set(current)
        return current

    def clear(self) -> None:
        """Fall back to the device location."""
        self._set(None)

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """Register a selection-change listener; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def detach(self) -> None:
        """Stop following the synchronizer."""
        self._unsubscribe()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _on_favorites_changed(self, snapshot: FavoritesSnapshot) -> None:
        if self._selected is None:
            return

        current = snapshot.find(self._selected.id)
        if current is None:
            logger.info(f"Selected favorite {self._selected.id} is gone, using device location")
            self._set(None)
        elif current != self._selected:
            self._set(current)

    def _set(self, place: Place | None) -> None:
        if place == self._selected:
            return
        self._selected = place
        for listener in list(self._listeners):
            try:
                listener(place)
            except Exception:
                logger.exception("Selection listener failed")

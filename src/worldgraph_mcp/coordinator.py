"""Async owner of the published layout snapshot.

Layout work, the force-directed simulation above all, is CPU-bound and runs
in a worker thread so the event loop (a UI or a server) stays responsive.
Requests are numbered when they are made; a finished computation is only
published if no newer request has been published already, so a slow stale
layout can never overwrite a fresh one.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import replace
from typing import Callable, Optional, Sequence

from .layouts import LayoutAlgorithm, LayoutOptions
from .models import Element, ElementType, Relationship
from .network import LayoutSnapshot, recompute, reselect

logger = logging.getLogger(__name__)

Observer = Callable[[LayoutSnapshot], None]

_UNSET = object()


class LayoutCoordinator:
    """Holds the world input and the current ``LayoutSnapshot``.

    All mutations go through discrete calls (``load``, ``recompute``,
    ``set_algorithm``, ``filter_by_type``, ``toggle_labels``, ``select``),
    each of which replaces the snapshot with a new immutable one.
    """

    def __init__(
        self,
        algorithm: LayoutAlgorithm = LayoutAlgorithm.FORCE_DIRECTED,
        type_filter: Optional[ElementType] = None,
        options: Optional[LayoutOptions] = None,
        seed: Optional[int] = None,
        show_labels: bool = True,
    ):
        self.options = options or LayoutOptions()
        self.seed = seed
        self._elements: tuple[Element, ...] = ()
        self._relationships: tuple[Relationship, ...] = ()
        # Requested settings; they lead the published snapshot while a
        # request is in flight
        self._algorithm = algorithm
        self._type_filter = type_filter
        self._show_labels = show_labels
        self._snapshot = LayoutSnapshot(
            algorithm=algorithm,
            type_filter=type_filter,
            show_labels=show_labels,
        )
        self._requests = itertools.count(1)
        self._observers: list[Observer] = []

    @property
    def snapshot(self) -> LayoutSnapshot:
        return self._snapshot

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer``; returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self, snapshot: LayoutSnapshot) -> None:
        self._snapshot = snapshot
        for observer in list(self._observers):
            observer(snapshot)

    # --- Layout requests ---

    async def load(
        self,
        elements: Sequence[Element],
        relationships: Sequence[Relationship],
    ) -> LayoutSnapshot:
        """Replace the world input and lay it out with the current settings."""
        self._elements = tuple(elements)
        self._relationships = tuple(relationships)
        return await self.recompute()

    async def recompute(
        self,
        algorithm: Optional[LayoutAlgorithm] = None,
        type_filter=_UNSET,
        show_labels: Optional[bool] = None,
    ) -> LayoutSnapshot:
        """Recompute from the full input, in a worker thread.

        Any setting passed here becomes the coordinator's requested setting
        before the computation starts, so later requests inherit it even if
        this one has not been published yet.  Omitted settings keep their
        last requested value; pass ``type_filter=None`` explicitly to clear
        the filter.  Returns the snapshot that is published once this
        request finishes, which is a newer one if this request was
        superseded.
        """
        if algorithm is not None:
            self._algorithm = algorithm
        if type_filter is not _UNSET:
            self._type_filter = type_filter
        if show_labels is not None:
            self._show_labels = show_labels
        algorithm = self._algorithm
        type_filter = self._type_filter

        sequence = next(self._requests)
        elements = self._elements
        relationships = self._relationships

        nodes, edges = await asyncio.to_thread(
            recompute,
            elements,
            relationships,
            algorithm,
            type_filter,
            options=self.options,
            seed=self.seed,
        )

        published = self._snapshot
        if sequence < published.sequence:
            logger.debug("Discarding layout request %d, %d already published",
                         sequence, published.sequence)
            return published

        snapshot = LayoutSnapshot(
            algorithm=algorithm,
            type_filter=type_filter,
            show_labels=self._show_labels,
            nodes=nodes,
            edges=edges,
            sequence=sequence,
        )
        # Carry the selection over to the fresh nodes
        snapshot = reselect(snapshot, published.selected_id)
        self._publish(snapshot)
        return snapshot

    async def set_algorithm(self, algorithm: LayoutAlgorithm) -> LayoutSnapshot:
        return await self.recompute(algorithm=algorithm)

    async def filter_by_type(self, element_type: Optional[ElementType]) -> LayoutSnapshot:
        return await self.recompute(type_filter=element_type)

    # --- Synchronous state changes ---

    def toggle_labels(self) -> LayoutSnapshot:
        self._show_labels = not self._show_labels
        snapshot = replace(self._snapshot, show_labels=self._show_labels)
        self._publish(snapshot)
        return snapshot

    def select(self, node_id: Optional[str]) -> LayoutSnapshot:
        """Select a node (or clear with ``None``) on the published snapshot."""
        snapshot = reselect(self._snapshot, node_id)
        self._publish(snapshot)
        return snapshot

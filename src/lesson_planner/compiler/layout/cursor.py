"""
Module: compiler.layout.cursor

Purpose:
    Track the vertical write position on the current page and decide
    when content must continue on a new page.

Key Classes:
    - PageCursor: Mutable layout state (page index + y) and page buffer

Algorithm:
    Page-break decisions are made per block (one wrapped line or one
    heading), never per section:
    1. Before placing a block of height h at y, check y + h > limit
    2. If it overflows, finalize the current page and restart at margin_top
    3. Return the position to write at, then move y down by h

Invariant:
    margin_top <= y <= limit before and after every placement.

Dependencies:
    - compiler.layout.config: LayoutConfig
    - compiler.layout.models: PagePlan, DrawOp

Used By:
    - compiler.layout.sections: Section rendering
    - compiler.layout.toc: TOC page count simulation
    - compiler.layout.assembler: Document composition
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from .config import LayoutConfig
from .models import DrawOp, PageKind, PagePlan

logger = logging.getLogger(__name__)

# Called with each page as it is finalized; may return a replacement
FinalizeHook = Callable[[PagePlan], PagePlan]


class PageCursor:
    """
    Vertical cursor over a growing list of pages.

    A cursor owns its pages exclusively; one cursor is created per
    document and discarded when the document is finished.

    Attributes:
        config: Layout configuration
        limit: Lowest y a block may reach (defaults to config.body_limit)
        page_index: Index of the open page (-1 before the first page)
        y: Current baseline position on the open page

    Example:
        >>> cursor = PageCursor(LayoutConfig())
        >>> cursor.new_page(PageKind.RECORD)
        0
        >>> cursor.advance(5.0)
        (0, 30.0)
        >>> cursor.y
        35.0
    """

    def __init__(
        self,
        config: LayoutConfig,
        *,
        limit: Optional[float] = None,
        on_finalize: Optional[FinalizeHook] = None,
        first_index: int = 0,
    ) -> None:
        self.config = config
        self.limit = config.body_limit if limit is None else limit
        if not (config.margin_top < self.limit <= config.body_limit):
            raise ValueError(f"cursor limit outside the page body: {self.limit}")
        self._on_finalize = on_finalize
        self._pages: List[PagePlan] = []
        self._ops: List[DrawOp] = []
        self._kind: Optional[PageKind] = None
        self._record_index: Optional[int] = None
        self._next_index = first_index
        self.page_index = first_index - 1
        self.y = config.margin_top

    # ─────────────────────────────────────────────────────────────────────────
    # Page lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def has_open_page(self) -> bool:
        return self._kind is not None

    @property
    def pages(self) -> Tuple[PagePlan, ...]:
        """Pages finalized so far."""
        return tuple(self._pages)

    @property
    def kind(self) -> Optional[PageKind]:
        """Kind of the open page."""
        return self._kind

    @property
    def record_index(self) -> Optional[int]:
        """Record index of the open page."""
        return self._record_index

    def new_page(self, kind: PageKind, record_index: Optional[int] = None) -> int:
        """
        Finalize the open page (if any) and start a fresh one at margin_top.

        Args:
            kind: Role of the new page
            record_index: Record laid out on the new page, if any

        Returns:
            Index of the new page
        """
        self._finalize()
        self._kind = kind
        self._record_index = record_index
        self.page_index = self._next_index
        self._next_index += 1
        self.y = self.config.margin_top
        return self.page_index

    def finish(self) -> Tuple[PagePlan, ...]:
        """Finalize the open page and return every page in order."""
        self._finalize()
        return self.pages

    def _finalize(self) -> None:
        if self._kind is None:
            return
        page = PagePlan(
            index=self.page_index,
            kind=self._kind,
            ops=tuple(self._ops),
            record_index=self._record_index,
        )
        if self._on_finalize is not None:
            page = self._on_finalize(page)
        self._pages.append(page)
        self._ops = []
        self._kind = None

    # ─────────────────────────────────────────────────────────────────────────
    # Vertical movement
    # ─────────────────────────────────────────────────────────────────────────

    def fits(self, height: float) -> bool:
        """Check if a block of this height fits below the current y."""
        return self.y + height <= self.limit

    def ensure(self, height: float) -> bool:
        """
        Break to a new page (same kind and record) if height does not fit.

        Returns:
            True if a page break happened
        """
        self._require_page()
        if self.fits(height):
            return False
        if self.y == self.config.margin_top:
            # Already at the top of a page; breaking again would not help
            logger.warning(
                f"Block of {height:.1f}mm exceeds the usable page height on page {self.page_index + 1}"
            )
            return False
        logger.debug(f"Page break at y={self.y:.1f}mm before a {height:.1f}mm block")
        self.break_page()
        return True

    def break_page(self) -> int:
        """Continue on a new page of the same kind and record."""
        self._require_page()
        return self.new_page(self._kind, self._record_index)

    def advance(self, height: float) -> Tuple[int, float]:
        """
        Reserve a block of the given height.

        Args:
            height: Block height in mm

        Returns:
            (page_index, y_before_write) for the block
        """
        if height <= 0:
            raise ValueError(f"height must be positive: {height}")
        self.ensure(height)
        position = (self.page_index, self.y)
        self.y = min(self.y + height, self.limit)
        return position

    def skip(self, height: float) -> None:
        """Add vertical spacing without writing; clamped to the limit."""
        self._require_page()
        self.y = min(self.y + height, self.limit)

    def place(self, op: DrawOp) -> None:
        """Attach a draw operation to the open page."""
        self._require_page()
        self._ops.append(op)

    def _require_page(self) -> None:
        if self._kind is None:
            raise RuntimeError("PageCursor has no open page; call new_page() first")

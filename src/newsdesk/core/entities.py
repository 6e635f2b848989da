"""Core domain entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from newsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)

LOADING_PLACEHOLDER = "Loading summary"


@dataclass
class FeedItem:
    """Single entry of a syndicated feed."""

    link: str
    title: str = ""
    image_url: Optional[str] = None
    pub_date: str = "No date available"
    loaded_image: Optional[bytes] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.link:
            raise ValueError("Link cannot be empty")


@dataclass
class ParsedFeed:
    """Feed document with its channel metadata and items."""

    source_url: str
    title: str
    link: str
    pub_date: str
    items: list[FeedItem] = field(default_factory=list)


@dataclass
class UnreadCounts:
    """Read state of the items of one feed."""

    total: int
    unread: int
    new: int


class BlockKind(str, Enum):
    """Kind of content block inside an article."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    IMAGE = "image"
    TABLE = "table"


@dataclass
class ContentBlock:
    """Ordered piece of article content."""

    kind: BlockKind
    text: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    rows: list[list[str]] = field(default_factory=list)

    @classmethod
    def heading(cls, text: str) -> "ContentBlock":
        return cls(BlockKind.HEADING, text)

    @classmethod
    def paragraph(cls, text: str, **attributes: str) -> "ContentBlock":
        return cls(BlockKind.PARAGRAPH, text, attributes=dict(attributes))

    @classmethod
    def image(cls, src: str, caption: str = "") -> "ContentBlock":
        attributes = {"src": src}
        if caption:
            attributes["caption"] = caption
        return cls(BlockKind.IMAGE, caption, attributes=attributes)

    @classmethod
    def table(cls, title: str, rows: list[list[str]]) -> "ContentBlock":
        """Table block; the first row is the header."""
        return cls(BlockKind.TABLE, title, rows=rows)


class SummaryState(str, Enum):
    """State of the generated summary of an article."""

    PENDING = "pending"
    READY = "ready"
    ERROR = "error"


SlotListener = Callable[["SummarySlot"], None]


@dataclass
class SummarySlot:
    """Asynchronously populated summary of an article.

    The slot starts ``pending`` and moves exactly once, either to ``ready`` or
    to ``error``. Listeners are called on every loading tick and on the final
    state change.
    """

    placeholder: str = LOADING_PLACEHOLDER
    state: SummaryState = SummaryState.PENDING
    content: str = ""
    ticks: int = 0
    _listeners: list[SlotListener] = field(default_factory=list, repr=False, compare=False)

    @property
    def is_pending(self) -> bool:
        return self.state is SummaryState.PENDING

    @property
    def text(self) -> str:
        """Text to display for the current state."""
        if self.is_pending:
            return self.placeholder + "." * (self.ticks % 4)
        return self.content

    def subscribe(self, listener: SlotListener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def advance_tick(self) -> None:
        """Advance the loading indicator; ignored once the slot is final."""
        if not self.is_pending:
            return
        self.ticks += 1
        self._notify()

    def resolve(self, text: str) -> bool:
        """Move to ``ready``. Returns False if the slot was already final."""
        return self._finish(SummaryState.READY, text)

    def fail(self, message: str) -> bool:
        """Move to ``error``. Returns False if the slot was already final."""
        return self._finish(SummaryState.ERROR, message)

    def _finish(self, state: SummaryState, text: str) -> bool:
        if not self.is_pending:
            logger.debug("Summary slot already final", state=self.state.value, rejected=state.value)
            return False
        self.state = state
        self.content = text
        self._notify()
        return True

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Summary slot listener failed")


@dataclass
class ArticleDocument:
    """Canonical, site-independent result of article extraction."""

    headline: str
    author: str
    published_date: str
    blocks: list[ContentBlock] = field(default_factory=list)
    summary: SummarySlot = field(default_factory=SummarySlot)
    source_url: str = ""
    image_url: Optional[str] = None
    extractor: str = ""
    body_text: str = ""

    @property
    def has_body(self) -> bool:
        return any(
            block.kind in (BlockKind.PARAGRAPH, BlockKind.HEADING, BlockKind.TABLE)
            for block in self.blocks
        )

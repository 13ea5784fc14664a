from PySide6.QtCore import QObject, QPointF, Signal


class ScrollAreaViewportSource:
    """Reports content offset changes of a `QAbstractScrollArea`."""

    def __init__(self, scroll_area):
        self._scroll_area = scroll_area
        self._subscriptions = []  # (handler, slot)

    def current_offset(self) -> QPointF:
        return QPointF(self._scroll_area.horizontalScrollBar().value(),
                       self._scroll_area.verticalScrollBar().value())

    def subscribe(self, handler):
        if any(existing == handler for existing, _ in self._subscriptions):
            return

        def slot(_value):
            handler(self.current_offset())

        self._scroll_area.horizontalScrollBar().valueChanged.connect(slot)
        self._scroll_area.verticalScrollBar().valueChanged.connect(slot)
        self._subscriptions.append((handler, slot))

    def unsubscribe(self, handler):
        for position, (existing, slot) in enumerate(self._subscriptions):
            if existing == handler:
                break
        else:
            return
        del self._subscriptions[position]
        self._scroll_area.horizontalScrollBar().valueChanged.disconnect(slot)
        self._scroll_area.verticalScrollBar().valueChanged.disconnect(slot)


class ManualViewportSource(QObject):
    """Viewport source for hosts that push offsets themselves."""

    offset_changed = Signal(QPointF)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._handlers = []

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler):
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler):
        if handler in self._handlers:
            self._handlers.remove(handler)

    def push_offset(self, offset):
        """Call subscribers in order, then emit `offset_changed`.

        Subscribers run as plain calls so their errors reach the caller.
        """
        offset = QPointF(offset)
        for handler in list(self._handlers):
            handler(QPointF(offset))
        self.offset_changed.emit(offset)

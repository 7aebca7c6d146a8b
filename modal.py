OVERLAY = "overlay"
CONTENT = "content"
CLOSE = "close"


class DetailModal:
    """Closed when selected is None, open otherwise. At most one product."""

    def __init__(self):
        self.selected = None

    @property
    def is_open(self) -> bool:
        return self.selected is not None

    def view(self, product):
        self.selected = product

    def close(self):
        self.selected = None

    def click(self, target: str):
        if target in (OVERLAY, CLOSE):
            self.close()
        elif target != CONTENT:
            raise ValueError(f"unknown modal click target: {target!r}")

from typing import Any, List


class RenderBuffer:
    """String accumulator holding the inner markup of an open form."""

    def __init__(self) -> None:
        self._parts: List[str] = []
        self.closed: bool = False

    def write(self, content: Any) -> int:
        if self.closed:
            raise ValueError("write to a closed render buffer")
        text = "" if content is None else str(content)
        self._parts.append(text)
        return len(text)

    def getvalue(self) -> str:
        return "".join(self._parts)

    def close(self) -> str:
        """Mark the buffer closed and return everything written so far."""
        value = self.getvalue()
        self.closed = True
        return value

    def __str__(self) -> str:
        return self.getvalue()

    def __repr__(self) -> str:
        return f"RenderBuffer(parts={len(self._parts)}, closed={self.closed})"

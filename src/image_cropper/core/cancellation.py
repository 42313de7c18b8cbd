"""批处理的协作式取消令牌。"""

from __future__ import annotations

import threading


class CancellationToken:
    """跨线程共享的取消标记。

    由调用方持有并传入批处理；批处理在每个文件开始前轮询一次。
    标记一旦置位，在下一次 reset() 之前始终保持为真。
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

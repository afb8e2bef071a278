import threading


class IngestionLock:
    """Set of transcript IDs currently being ingested.

    try_acquire never blocks: a held ID is reported as busy instead of
    queueing the caller.
    """

    def __init__(self) -> None:
        self._held: set[str] = set()
        self._mutex = threading.Lock()

    def try_acquire(self, transcript_id: str) -> bool:
        with self._mutex:
            if transcript_id in self._held:
                return False
            self._held.add(transcript_id)
            return True

    def release(self, transcript_id: str) -> None:
        with self._mutex:
            self._held.discard(transcript_id)

    def is_held(self, transcript_id: str) -> bool:
        with self._mutex:
            return transcript_id in self._held

# blueprints/planning/locks.py
from __future__ import annotations
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

# One lock per student guards the read-remaining / write-back sequence of an
# allocation. Process-local: several worker processes still need a DB lock.
# Entries are never evicted, so the registry holds one RLock per student id
# seen since start-up (a few hundred bytes each).
_registry_guard = threading.Lock()
_student_locks: Dict[int, threading.RLock] = {}

def _lock_for(student_id: int) -> threading.RLock:
    with _registry_guard:
        lock = _student_locks.get(student_id)
        if lock is None:
            lock = threading.RLock()
            _student_locks[student_id] = lock
        return lock

@contextmanager
def student_lock(student_id: int) -> Iterator[None]:
    lock = _lock_for(int(student_id))
    with lock:
        yield

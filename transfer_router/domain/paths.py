"""Path discovery between accounts over the transfer matrix"""

import logging
import threading
from collections import OrderedDict, deque
from typing import Dict, Iterable, List, Optional, Tuple
from transfer_router.domain.models import TransferPath, TransferRelationship

logger = logging.getLogger(__name__)

Path = List[TransferRelationship]
AdjacencyList = Dict[str, List[TransferRelationship]]


class PathCache:
    """
    Memo of discovered paths keyed by (source, target).

    Cached answers are only valid for the transfer matrix they were computed
    from; callers that change the matrix between calls must clear() it.
    Safe to share between threads.
    """

    def __init__(self) -> None:
        self._paths: Dict[Tuple[str, str], Path] = {}
        self._lock = threading.Lock()

    def get(self, source_id: str, target_id: str) -> Optional[Path]:
        with self._lock:
            return self._paths.get((source_id, target_id))

    def set(self, source_id: str, target_id: str, path: Path) -> None:
        with self._lock:
            self._paths[(source_id, target_id)] = path

    def clear(self) -> int:
        """Drop every cached path, returning how many were held"""
        with self._lock:
            count = len(self._paths)
            self._paths.clear()
        logger.debug("Path cache cleared", extra={"entries": count})
        return count

    invalidate = clear

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)


def fingerprint_matrix(transfer_matrix: Iterable[TransferRelationship]) -> Tuple[tuple, ...]:
    """
    Identity of a transfer matrix for path caching.

    Order is part of the fingerprint because BFS breaks ties in matrix order.
    """
    return tuple(
        (rel.from_account_id, rel.to_account_id, rel.speed, rel.fee_cents, rel.is_available)
        for rel in transfer_matrix
    )


class PathCacheRegistry:
    """
    One PathCache per distinct transfer matrix, least recently used evicted
    beyond max_matrices.

    Requests over different matrices (different users, or a user whose
    transfer rules changed) never see each other's paths.
    """

    def __init__(self, max_matrices: int = 256) -> None:
        self.max_matrices = max_matrices
        self._caches: "OrderedDict[Tuple[tuple, ...], PathCache]" = OrderedDict()
        self._lock = threading.Lock()

    def for_matrix(self, transfer_matrix: Iterable[TransferRelationship]) -> PathCache:
        fingerprint = fingerprint_matrix(transfer_matrix)
        with self._lock:
            cache = self._caches.get(fingerprint)
            if cache is None:
                cache = PathCache()
                self._caches[fingerprint] = cache
                while len(self._caches) > self.max_matrices:
                    self._caches.popitem(last=False)
            else:
                self._caches.move_to_end(fingerprint)
            return cache

    def clear(self) -> int:
        """Drop every matrix's cache, returning how many paths were held"""
        with self._lock:
            caches = list(self._caches.values())
            self._caches.clear()
        return sum(cache.clear() for cache in caches)

    invalidate = clear

    def __len__(self) -> int:
        with self._lock:
            return len(self._caches)


def build_adjacency_list(transfer_matrix: Iterable[TransferRelationship]) -> AdjacencyList:
    """Outgoing available relationships per account, in matrix order"""
    adjacency: AdjacencyList = {}
    for rel in transfer_matrix:
        if rel.is_available:
            adjacency.setdefault(rel.from_account_id, []).append(rel)
    return adjacency


def find_path_bfs(source_id: str, target_id: str, adjacency: AdjacencyList) -> Path:
    """Shortest hop sequence from source to target, or [] when unreachable"""
    queue = deque([(source_id, [])])
    visited = {source_id}

    while queue:
        current_id, current_path = queue.popleft()
        for rel in adjacency.get(current_id, []):
            next_id = rel.to_account_id
            if next_id == target_id:
                return current_path + [rel]
            if next_id not in visited:
                visited.add(next_id)
                queue.append((next_id, current_path + [rel]))

    return []


def find_all_paths_to_target(
    target_account_id: str,
    transfer_matrix: List[TransferRelationship],
    cache: Optional[PathCache] = None,
) -> Dict[str, Path]:
    """
    Discover a shortest path to the target from every account in the matrix.

    Only available relationships are traversed. The target maps to an empty
    path (itself) and so does every account that cannot reach it. Among
    equal-length paths the first discovered in matrix order wins.
    """
    adjacency = build_adjacency_list(transfer_matrix)

    account_ids: Dict[str, None] = {}
    for rel in transfer_matrix:
        if rel.is_available:
            account_ids.setdefault(rel.from_account_id)
            account_ids.setdefault(rel.to_account_id)

    result: Dict[str, Path] = {}
    for source_id in account_ids:
        if source_id == target_account_id:
            result[source_id] = []
            continue

        path = cache.get(source_id, target_account_id) if cache is not None else None
        if path is None:
            path = find_path_bfs(source_id, target_account_id, adjacency)
            if cache is not None:
                cache.set(source_id, target_account_id, path)
        result[source_id] = path

    logger.debug(
        "Paths discovered",
        extra={
            "target_account_id": target_account_id,
            "accounts": len(result),
            "reachable": sum(1 for p in result.values() if p),
        },
    )
    return result


def find_transfer_path(
    source_account_id: str,
    target_account_id: str,
    transfer_matrix: List[TransferRelationship],
) -> TransferPath:
    """Shortest path between one pair of accounts"""
    if source_account_id == target_account_id:
        hops: Path = []
    else:
        hops = find_path_bfs(source_account_id, target_account_id, build_adjacency_list(transfer_matrix))
    return TransferPath(
        source_account_id=source_account_id,
        target_account_id=target_account_id,
        hops=hops,
    )


def get_reachable_accounts(from_account_id: str, adjacency: AdjacencyList) -> List[str]:
    """Every account reachable from the start (start included), in BFS order"""
    visited = {from_account_id}
    order = [from_account_id]
    queue = deque([from_account_id])
    while queue:
        current = queue.popleft()
        for rel in adjacency.get(current, []):
            if rel.to_account_id not in visited:
                visited.add(rel.to_account_id)
                order.append(rel.to_account_id)
                queue.append(rel.to_account_id)
    return order


def has_path(from_account_id: str, to_account_id: str, adjacency: AdjacencyList) -> bool:
    if from_account_id == to_account_id:
        return True
    return to_account_id in get_reachable_accounts(from_account_id, adjacency)

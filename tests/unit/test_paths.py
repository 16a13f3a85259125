"""Unit tests for path discovery and the path cache"""

from transfer_router.domain.models import TransferSpeed
from transfer_router.domain.paths import (
    PathCache,
    PathCacheRegistry,
    build_adjacency_list,
    find_all_paths_to_target,
    find_path_bfs,
    find_transfer_path,
    fingerprint_matrix,
    get_reachable_accounts,
    has_path,
)


def test_build_adjacency_list_skips_unavailable(make_rule):
    matrix = [
        make_rule("a", "b"),
        make_rule("a", "c", is_available=False),
        make_rule("b", "c"),
    ]

    adjacency = build_adjacency_list(matrix)

    assert [r.to_account_id for r in adjacency["a"]] == ["b"]
    assert [r.to_account_id for r in adjacency["b"]] == ["c"]
    assert "c" not in adjacency


def test_find_path_bfs_prefers_fewest_hops(make_rule):
    matrix = [
        make_rule("a", "b"),
        make_rule("b", "c"),
        make_rule("c", "target"),
        make_rule("a", "target", speed=TransferSpeed.THREE_DAY),
    ]

    path = find_path_bfs("a", "target", build_adjacency_list(matrix))

    assert len(path) == 1
    assert path[0].speed == TransferSpeed.THREE_DAY


def test_find_path_bfs_first_in_matrix_order_wins_ties(make_rule):
    matrix = [
        make_rule("a", "target", speed=TransferSpeed.ONE_DAY),
        make_rule("a", "target", speed=TransferSpeed.INSTANT),
    ]

    path = find_path_bfs("a", "target", build_adjacency_list(matrix))

    assert path[0].speed == TransferSpeed.ONE_DAY


def test_find_path_bfs_handles_cycles(make_rule):
    matrix = [make_rule("a", "b"), make_rule("b", "a"), make_rule("b", "target")]

    path = find_path_bfs("a", "target", build_adjacency_list(matrix))

    assert [(r.from_account_id, r.to_account_id) for r in path] == [("a", "b"), ("b", "target")]


def test_find_path_bfs_unreachable(make_rule):
    matrix = [make_rule("a", "b"), make_rule("b", "a")]
    assert find_path_bfs("a", "target", build_adjacency_list(matrix)) == []


def test_find_all_paths_to_target(make_rule):
    matrix = [
        make_rule("checking", "venmo"),
        make_rule("venmo", "cash_app"),
        make_rule("savings", "checking"),
        make_rule("cash_app", "paypal"),
    ]

    paths = find_all_paths_to_target("cash_app", matrix)

    assert len(paths["checking"]) == 2
    assert len(paths["venmo"]) == 1
    assert len(paths["savings"]) == 3
    assert paths["cash_app"] == []
    assert paths["paypal"] == []


def test_find_all_paths_ignores_unavailable_relationships(make_rule):
    matrix = [make_rule("a", "target", is_available=False)]

    paths = find_all_paths_to_target("target", matrix)

    # Accounts only appear through available relationships
    assert "a" not in paths


def test_find_all_paths_uses_cache(make_rule):
    cache = PathCache()
    matrix = [make_rule("a", "target")]

    find_all_paths_to_target("target", matrix, cache=cache)
    assert len(cache) == 1

    # A stale cached answer is returned until the cache is cleared
    changed = [make_rule("a", "b"), make_rule("b", "target")]
    stale = find_all_paths_to_target("target", changed, cache=cache)
    assert len(stale["a"]) == 1

    cache.invalidate()
    fresh = find_all_paths_to_target("target", changed, cache=cache)
    assert len(fresh["a"]) == 2


def test_path_cache_clear_returns_count(make_rule):
    cache = PathCache()
    cache.set("a", "target", [make_rule("a", "target")])
    cache.set("b", "target", [])

    assert cache.get("a", "target")[0].from_account_id == "a"
    assert cache.get("c", "target") is None
    assert cache.clear() == 2
    assert len(cache) == 0


def test_find_transfer_path(make_rule):
    matrix = [make_rule("a", "b"), make_rule("b", "c")]

    path = find_transfer_path("a", "c", matrix)

    assert path.source_account_id == "a"
    assert path.target_account_id == "c"
    assert path.total_steps == 2


def test_find_transfer_path_to_self_is_empty(make_rule):
    assert find_transfer_path("a", "a", [make_rule("a", "b")]).total_steps == 0


def test_get_reachable_accounts_in_bfs_order(make_rule):
    matrix = [make_rule("a", "b"), make_rule("a", "c"), make_rule("b", "d"), make_rule("d", "a")]

    reachable = get_reachable_accounts("a", build_adjacency_list(matrix))

    assert reachable == ["a", "b", "c", "d"]


def test_has_path(make_rule):
    adjacency = build_adjacency_list([make_rule("a", "b"), make_rule("b", "c")])

    assert has_path("a", "c", adjacency)
    assert has_path("c", "c", adjacency)
    assert not has_path("c", "a", adjacency)


def test_fingerprint_matrix_distinguishes_fees_and_availability(make_rule):
    base = [make_rule("a", "target", fee_cents=100)]

    assert fingerprint_matrix(base) == fingerprint_matrix([make_rule("a", "target", fee_cents=100)])
    assert fingerprint_matrix(base) != fingerprint_matrix([make_rule("a", "target", fee_cents=0)])
    assert fingerprint_matrix(base) != fingerprint_matrix([make_rule("a", "target", fee_cents=100, is_available=False)])


def test_fingerprint_matrix_is_order_sensitive(make_rule):
    first = make_rule("a", "target", TransferSpeed.ONE_DAY)
    second = make_rule("a", "target", TransferSpeed.INSTANT)

    assert fingerprint_matrix([first, second]) != fingerprint_matrix([second, first])


def test_path_cache_registry_scopes_paths_to_matrix(make_rule):
    registry = PathCacheRegistry()
    via_b = [make_rule("a", "b"), make_rule("b", "target")]
    direct = [make_rule("a", "target")]

    two_hops = find_all_paths_to_target("target", via_b, cache=registry.for_matrix(via_b))
    one_hop = find_all_paths_to_target("target", direct, cache=registry.for_matrix(direct))

    assert len(two_hops["a"]) == 2
    assert len(one_hop["a"]) == 1
    assert registry.for_matrix(list(via_b)) is registry.for_matrix(via_b)
    assert len(registry) == 2


def test_path_cache_registry_evicts_least_recently_used(make_rule):
    registry = PathCacheRegistry(max_matrices=2)
    first, second, third = [make_rule("a", "b")], [make_rule("a", "c")], [make_rule("a", "d")]

    first_cache = registry.for_matrix(first)
    registry.for_matrix(second)
    registry.for_matrix(first)
    registry.for_matrix(third)

    assert len(registry) == 2
    assert registry.for_matrix(first) is first_cache


def test_path_cache_registry_clear_counts_paths(make_rule):
    registry = PathCacheRegistry()
    via_b = [make_rule("a", "b"), make_rule("b", "target")]
    direct = [make_rule("a", "target")]
    find_all_paths_to_target("target", via_b, cache=registry.for_matrix(via_b))
    find_all_paths_to_target("target", direct, cache=registry.for_matrix(direct))

    # a and b for the first matrix, a for the second
    assert registry.clear() == 3
    assert len(registry) == 0

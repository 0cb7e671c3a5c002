"""Plain BST engine tests: ordering, deletion, search, traversals, balance."""

import asyncio
import math
import random

import pytest

from bsttrainer.config import create_fast_config
from bsttrainer.node import Highlight, Marker
from bsttrainer.stats import TreeStats, in_order_keys
from bsttrainer.step_gate import StepMode
from bsttrainer.tree import Discipline, TreeEngine, Traversal

SAMPLE_KEYS = [5, 3, 8, 1, 4, 7, 9]


def _make_engine(discipline: Discipline = Discipline.BST, **overrides) -> TreeEngine:
    return TreeEngine(create_fast_config(**overrides), discipline=discipline)


async def _fill(engine: TreeEngine, keys):
    for key in keys:
        await engine.insert(key)


async def _settle(ticks: int = 5):
    for _ in range(ticks):
        await asyncio.sleep(0)


def _build(keys, discipline: Discipline = Discipline.BST) -> TreeEngine:
    engine = _make_engine(discipline)
    asyncio.run(_fill(engine, keys))
    return engine


def _annotated(engine: TreeEngine):
    return [node for node in engine.nodes()
            if node.highlight is not Highlight.NONE or node.marker is not Marker.NONE]


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_random_inserts_keep_bst_order(seed):
    rng = random.Random(seed)
    keys = rng.sample(range(1000), 40)
    engine = _build(keys)

    assert engine.keys() == sorted(keys)
    assert engine.stats.count == len(keys)


def test_duplicates_route_right_in_plain_bst():
    engine = _build([5, 5, 3, 5])

    assert engine.keys() == [3, 5, 5, 5]
    assert engine.root.right.key == 5
    assert engine.root.right.right.key == 5


def test_first_insert_lands_on_root_anchor():
    engine = _build([42])

    assert engine.root.key == 42
    assert tuple(engine.root.target) == engine.config.root_anchor
    assert engine.pending is None


def test_insert_drops_pending_node_before_linking():
    async def scenario():
        engine = _make_engine()
        engine.gate.set_mode(StepMode.MANUAL)
        task = asyncio.create_task(engine.insert(10))
        await _settle()

        assert engine.pending is not None
        assert engine.pending.key == 10
        assert engine.root is None
        start_y = engine.pending.position[1]

        engine.gate.advance()
        await _settle()
        assert engine.pending.position[1] > start_y

        engine.gate.set_mode(StepMode.AUTO)
        assert await asyncio.wait_for(task, timeout=1.0)
        assert engine.pending is None
        assert engine.root.key == 10

    asyncio.run(scenario())


@pytest.mark.parametrize("key", ["5", None, float("nan"), float("inf"), True, [1]])
def test_invalid_keys_are_rejected(key):
    async def scenario():
        engine = _make_engine()
        await _fill(engine, [2, 1])
        assert not await engine.insert(key)
        assert not await engine.delete(key)
        assert not await engine.search(key)
        return engine

    engine = asyncio.run(scenario())
    assert engine.keys() == [1, 2]
    assert engine.last_search_found is None


def test_stats_of_sample_tree():
    engine = _build(SAMPLE_KEYS)
    assert engine.stats == TreeStats(height=3, count=7, leaves=4)


def test_stats_of_empty_tree():
    engine = _make_engine()
    asyncio.run(engine.clear())
    assert engine.stats == TreeStats(height=0, count=0, leaves=0)


@pytest.mark.parametrize("kind, expected", [
    (Traversal.PRE_ORDER, [5, 3, 1, 4, 8, 7, 9]),
    (Traversal.IN_ORDER, [1, 3, 4, 5, 7, 8, 9]),
    (Traversal.POST_ORDER, [1, 4, 3, 7, 9, 8, 5]),
])
def test_traversal_sequences(kind, expected):
    engine = _build(SAMPLE_KEYS)
    result = asyncio.run(engine.traverse(kind))

    assert result == expected
    assert engine.output == expected
    assert engine.output_label == kind.label
    assert _annotated(engine) == []


def test_traversal_output_grows_one_visit_per_advance():
    async def scenario():
        engine = _make_engine()
        await _fill(engine, SAMPLE_KEYS)
        engine.gate.set_mode(StepMode.MANUAL)

        task = asyncio.create_task(engine.in_order())
        await _settle()
        assert engine.output == [1]
        visiting = [node for node in engine.nodes() if node.marker is Marker.IN]
        assert [node.key for node in visiting] == [1]

        engine.gate.advance()
        await _settle()
        assert engine.output == [1, 3]

        engine.gate.set_mode(StepMode.AUTO)
        assert await asyncio.wait_for(task, timeout=1.0) == [1, 3, 4, 5, 7, 8, 9]

    asyncio.run(scenario())


def test_traversal_of_empty_tree():
    engine = _make_engine()
    assert asyncio.run(engine.pre_order()) == []
    assert engine.output_label == "PreOrder"


def test_delete_leaf_single_child_and_two_children():
    async def scenario():
        engine = _make_engine()
        await _fill(engine, SAMPLE_KEYS + [6])

        assert await engine.delete(1)
        assert engine.keys() == [3, 4, 5, 6, 7, 8, 9]

        # 7 has a single child (6)
        assert await engine.delete(7)
        assert engine.root.right.left.key == 6

        # Root has two children: its key is replaced by the successor
        assert await engine.delete(5)
        assert engine.root.key == 6
        assert engine.keys() == [3, 4, 6, 8, 9]
        return engine

    engine = asyncio.run(scenario())
    assert engine.stats.count == 5


def test_delete_absent_key_is_noop():
    engine = _build(SAMPLE_KEYS)
    assert not asyncio.run(engine.delete(100))
    assert engine.keys() == sorted(SAMPLE_KEYS)


@pytest.mark.parametrize("key", SAMPLE_KEYS)
def test_delete_then_reinsert_restores_keys(key):
    engine = _build(SAMPLE_KEYS)
    original = engine.keys()

    async def round_trip():
        await engine.delete(key)
        await engine.insert(key)

    asyncio.run(round_trip())
    assert engine.keys() == original


def test_search_hit_leaves_found_node_highlighted():
    events = []
    engine = _build(SAMPLE_KEYS)
    engine.set_event_callback(lambda event, payload: events.append(event))

    assert asyncio.run(engine.search(4))
    highlighted = _annotated(engine)
    assert [node.key for node in highlighted] == [4]
    assert highlighted[0].highlight is Highlight.SEARCH_PATH
    assert "found" in events
    assert engine.last_search_found is True


@pytest.mark.parametrize("keys", [[], SAMPLE_KEYS])
def test_search_miss_signals_not_found_and_clears(keys):
    events = []
    engine = _build(keys)
    engine.set_event_callback(lambda event, payload: events.append((event, payload)))

    assert not asyncio.run(engine.search(6))
    assert ("not_found", 6) in events
    assert _annotated(engine) == []
    assert engine.last_search_found is False


def test_search_path_follows_comparisons():
    async def scenario():
        engine = _make_engine()
        await _fill(engine, SAMPLE_KEYS)
        engine.gate.set_mode(StepMode.MANUAL)

        task = asyncio.create_task(engine.search(7))
        path = []
        while not task.done():
            await _settle()
            path.extend(node.key for node in _annotated(engine) if node.key not in path)
            engine.gate.advance()
        assert await task
        return path

    assert asyncio.run(scenario()) == [5, 8, 7]


def test_balance_degenerate_chain():
    engine = _build([1, 2, 3, 4, 5, 6, 7])
    assert engine.stats.height == 7

    asyncio.run(engine.balance())
    assert engine.root.key == 4
    assert engine.stats.height == 3
    assert engine.keys() == [1, 2, 3, 4, 5, 6, 7]


def test_balance_takes_lower_middle():
    engine = _build([1, 2, 3, 4])
    asyncio.run(engine.balance())
    assert engine.root.key == 2


@pytest.mark.parametrize("size", [0, 1, 2, 5, 16, 31, 50])
def test_balance_reaches_minimal_height(size):
    rng = random.Random(size)
    keys = rng.sample(range(500), size)
    engine = _build(keys)
    before = engine.keys()

    asyncio.run(engine.balance())
    assert engine.stats.height == math.ceil(math.log2(size + 1))
    assert in_order_keys(engine.root) == before


def test_clear_and_discipline_switch_reset_tree():
    async def scenario():
        engine = _make_engine()
        await _fill(engine, SAMPLE_KEYS)
        await engine.in_order()

        await engine.clear()
        assert engine.root is None
        assert engine.output == []
        assert engine.output_label == ""

        await _fill(engine, [1, 2])
        await engine.set_discipline("AVL")
        assert engine.discipline is Discipline.AVL
        assert engine.root is None
        assert engine.stats == TreeStats()

    asyncio.run(scenario())


def test_operations_are_serialized():
    async def scenario():
        engine = _make_engine()
        await _fill(engine, SAMPLE_KEYS)
        engine.gate.set_mode(StepMode.MANUAL)

        traversal = asyncio.create_task(engine.pre_order())
        await _settle()
        deletion = asyncio.create_task(engine.delete(5))
        await _settle()

        # The delete waits behind the traversal
        assert engine.is_busy
        assert not deletion.done()
        assert 5 in engine.keys()

        engine.gate.set_mode(StepMode.AUTO)
        assert await asyncio.wait_for(traversal, timeout=1.0) == [5, 3, 1, 4, 8, 7, 9]
        assert await asyncio.wait_for(deletion, timeout=1.0)
        assert 5 not in engine.keys()

    asyncio.run(scenario())

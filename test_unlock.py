#!/usr/bin/env python3
"""Unlock state machine tests (no controller, no ledger)."""

import pytest

from techtree.core import NodeState, TechGraph, make_node
from techtree.unlock import UnlockStateMachine


def build_machine(nodes):
    graph = TechGraph(nodes)
    machine = UnlockStateMachine(graph)
    machine.reset()
    return graph, machine


def test_initial_states():
    graph, machine = build_machine([
        make_node('root'),
        make_node('child', prerequisites=['root']),
    ])
    assert graph.get('root').state is NodeState.AVAILABLE
    assert graph.get('child').state is NodeState.LOCKED


def test_available_only_when_all_prerequisites_unlocked():
    graph, machine = build_machine([
        make_node('a'),
        make_node('b'),
        make_node('ab', prerequisites=['a', 'b']),
    ])
    machine.force_unlock(graph.get('a'))
    machine.reevaluate_all()
    assert graph.get('ab').state is NodeState.LOCKED

    machine.force_unlock(graph.get('b'))
    machine.reevaluate_all()
    assert graph.get('ab').state is NodeState.AVAILABLE


def test_dangling_prerequisite_locks_forever():
    graph, machine = build_machine([
        make_node('a'),
        make_node('orphan', prerequisites=['a', 'not_loaded']),
    ])
    machine.force_unlock(graph.get('a'))
    machine.reevaluate_all()
    assert graph.get('orphan').state is NodeState.LOCKED
    assert graph.dangling_prerequisites() == {'orphan': ['not_loaded']}


def test_self_prerequisite_never_available():
    graph, machine = build_machine([make_node('loop', prerequisites=['loop'])])
    machine.reevaluate_all()
    assert graph.get('loop').state is NodeState.LOCKED
    assert graph.edges == [('loop', 'loop')]


def test_reevaluation_is_idempotent():
    graph, machine = build_machine([
        make_node('a'),
        make_node('b', prerequisites=['a']),
        make_node('c', prerequisites=['b']),
    ])
    machine.force_unlock(graph.get('a'))
    first = machine.reevaluate_all()
    second = machine.reevaluate_all()
    assert first == second
    assert first == {'a': NodeState.UNLOCKED, 'b': NodeState.AVAILABLE, 'c': NodeState.LOCKED}


def test_unlocked_is_terminal():
    graph, machine = build_machine([
        make_node('a', prerequisites=['b']),
        make_node('b'),
    ])
    # Trusted replay can unlock a node whose prerequisites are not met
    machine.force_unlock(graph.get('a'))
    for _ in range(3):
        machine.reevaluate_all()
        assert graph.get('a').state is NodeState.UNLOCKED


def test_reset_keeps_unlocked_nodes():
    graph, machine = build_machine([
        make_node('a'),
        make_node('b', prerequisites=['a']),
    ])
    machine.force_unlock(graph.get('a'))
    machine.reevaluate_all()
    machine.reset()
    assert graph.get('a').state is NodeState.UNLOCKED
    assert graph.get('b').state is NodeState.LOCKED


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        TechGraph([make_node('same'), make_node('same', cost=5)])


def test_negative_cost_rejected():
    with pytest.raises(ValueError):
        TechGraph([make_node('cheap', cost=-1)])


@pytest.mark.parametrize('cost', [float('nan'), float('inf')])
def test_non_finite_cost_rejected(cost):
    with pytest.raises(ValueError):
        TechGraph([make_node('odd', cost=cost)])


def test_dependents_follow_edges():
    graph = TechGraph([
        make_node('a'),
        make_node('b', prerequisites=['a']),
        make_node('c', prerequisites=['a', 'ghost']),
    ])
    assert graph.dependents_of('a') == ['b', 'c']
    assert graph.edges == [('a', 'b'), ('a', 'c')]

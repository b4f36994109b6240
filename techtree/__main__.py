#!/usr/bin/env python3
"""
Tech tree demo harness.

Builds the tech tree, prints the layout, optionally buys nodes and runs the
rope simulation so the settling can be watched from the console.

Usage:
    python -m techtree
    python -m techtree --seed 7 --balance 500 --unlock node_mitosis node_atp
    python -m techtree --nodes my_tree.json --layout tiered --ticks 300
"""

import argparse
import sys

from .config import DEFAULT_NODE_TABLE, load_config, load_node_table
from .controller import TechTreeController
from .economy import CellLedger, GameStats
from .events import EventBus
from .layout import mean_edge_length, mean_pairwise_distance


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Build and simulate a tech tree')
    parser.add_argument('--nodes', help='JSON node table (default: built-in cell game tree)')
    parser.add_argument('--config', help='JSON engine config')
    parser.add_argument('--layout', help='Layout name (overrides config)')
    parser.add_argument('--seed', type=int, help='Random seed (overrides config)')
    parser.add_argument('--balance', type=float, default=0.0, help='Starting cell balance')
    parser.add_argument('--unlock', nargs='*', default=[], help='Node ids to buy, in order')
    parser.add_argument('--ticks', type=int, default=0, help='Rope ticks to run at 60 Hz')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    cfg = load_config(args.config)
    if args.layout:
        cfg.layout.name = args.layout
    if args.seed is not None:
        cfg.seed = args.seed

    table = load_node_table(args.nodes) if args.nodes else DEFAULT_NODE_TABLE

    bus = EventBus()
    ledger = CellLedger(args.balance, on_change=bus.cell_count_changed.emit)
    stats = GameStats()
    changes = []
    bus.tech_tree_changed.connect(lambda: changes.append(1))

    tree = TechTreeController(table, ledger, stats,
                              notify=bus.tech_tree_changed.emit, config=cfg)
    bus.cell_count_changed.connect(tree.on_currency_changed)

    print('=' * 50)
    print('Tech Tree')
    print('=' * 50)
    print(f'Layout: {tree.layout_engine.name}, {len(tree.graph)} nodes, {len(tree.ropes)} ropes')

    positions = {n.id: n.position for n in tree.nodes}
    print(f'Mean edge length: {mean_edge_length(positions, tree.graph.edges):.1f}')
    print(f'Mean pairwise distance: {mean_pairwise_distance(positions):.1f}')
    print()
    for view in tree.snapshot():
        print(f'  {view.id:<20} {view.state.value:<10} '
              f'({view.position.x:8.1f}, {view.position.y:8.1f})  cost {view.cost:g}')

    if args.unlock:
        print('\nUnlocking...')
        for node_id in args.unlock:
            ok = tree.attempt_unlock(node_id)
            print(f'  {node_id}: {"OK" if ok else "FAILED"} (balance {ledger.balance:g})')
        print(f'Effective CPC: {stats.effective_cpc:g}, CPS: {stats.cells_per_second:g}')
        print(f'Graph changed notifications: {len(changes)}')

    if args.ticks:
        print(f'\nSimulating {args.ticks} ticks...')
        for _ in range(args.ticks):
            tree.tick(1.0 / 60.0)
        wobble = max((r.displacement_from_rest() for r in tree.ropes), default=0.0)
        print(f'Max rope displacement from rest: {wobble:.4f}')

    print(f'\nUnlocked: {tree.all_unlocked_ids()}')
    return 0


if __name__ == '__main__':
    sys.exit(main())

"""Benchmark harness for the core clipboard operations.

    clipaste-bench --iterations 200 --json --phases
"""

import argparse
import asyncio
import json
import logging
import sys
import time

from .clipboard import ClipboardManager
from .config import ClipboardConfig


def setup_logging(debug=False):
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def stat_summary(samples):
    if not samples:
        return None
    total = sum(samples)
    avg = total / len(samples)
    return {
        'total': round(total, 3),
        'avg': round(avg, 3),
        'min': round(min(samples), 3),
        'max': round(max(samples), 3),
        'ops_per_sec': round(1000 / avg, 2) if avg else None,
    }


async def _timed(samples, operation, *args):
    start = time.perf_counter()
    await operation(*args)
    samples.append((time.perf_counter() - start) * 1000)


async def run_bench(manager, iterations, image_path=None):
    measures = {
        'has_content': [],
        'read_text': [],
        'write_text': [],
        'get_content_type': [],
    }
    if image_path:
        measures['write_image'] = []
        measures['read_image'] = []

    # Loads the backend once so init cost is not measured
    await manager.write_text('')
    payloads = [f"sample-payload-{i}-{'x' * 20}" for i in range(5)]

    for i in range(iterations):
        await _timed(measures['write_text'], manager.write_text, payloads[i % len(payloads)])
        await _timed(measures['has_content'], manager.has_content)
        await _timed(measures['read_text'], manager.read_text)
        await _timed(measures['get_content_type'], manager.get_content_type)
        if image_path:
            await _timed(measures['write_image'], manager.write_image, image_path)
            await _timed(measures['read_image'], manager.read_image)

    results = {
        'iterations': iterations,
        'platform': sys.platform,
        'timings': {name: stat_summary(samples) for name, samples in measures.items()},
    }
    if manager.profiler.enabled:
        results['phases'] = manager.profiler.export(reset=True)
    return results


def print_results(results):
    print(f"Clipboard benchmark ({results['iterations']} iterations, {results['platform']})")
    for name, stats in results['timings'].items():
        if not stats:
            continue
        print(f"  {name:<18} avg {stats['avg']:.3f}ms  min {stats['min']:.3f}ms  "
              f"max {stats['max']:.3f}ms  {stats['ops_per_sec']} ops/s")
    for name, stats in results.get('phases', {}).items():
        print(f"  [{name}] count={stats['count']} total={stats['total_ms']}ms avg={stats['avg_ms']}ms")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Benchmark clipboard operations')
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    parser.add_argument('-n', '--iterations', type=int, default=100, help='iterations per operation')
    parser.add_argument('--json', action='store_true', help='print results as JSON')
    parser.add_argument('--phases', action='store_true', help='include per-phase profiling')
    parser.add_argument('--image', metavar='PATH', help='also benchmark image write/read with PATH')
    parser.add_argument('--version', action='store_true', help='show version and exit')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if args.version:
        from . import __version__
        print(f"clipaste version {__version__}")
        return 0
    setup_logging(args.verbose)

    config = ClipboardConfig.from_env()
    manager = ClipboardManager(config)
    if args.phases:
        manager.profiler.enable()

    results = asyncio.run(run_bench(manager, max(1, args.iterations), args.image))
    if args.json:
        print(json.dumps(results, indent=2))
    else:
        print_results(results)
    return 0


if __name__ == "__main__":
    sys.exit(main())

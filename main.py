"""
main.py — Master Entry Point
=============================
Top-level script that runs the convection demo.

Usage:
    python main.py                    # Headless run (default)
    python main.py --mode live        # Live matplotlib window
    python main.py --mode benchmark   # Per-phase timing breakdown
    python main.py -v                 # Debug logging
"""

import argparse
import logging

import numpy as np

from convection import ConvectionParams, ConvectionSimulation, InteractionMode

logger = logging.getLogger("convection")


def run_live(N: int = 64, seed: int = None):
    """Live interactive visualization."""
    from visualizer import ConvectionVisualizer

    logger.info("Starting live simulation (N=%d). Close the window to exit.", N)
    sim = ConvectionSimulation(ConvectionParams(size=N, seed=seed))
    viz = ConvectionVisualizer(sim)
    viz.run(fps=30)


def run_headless(N: int = 64, frames: int = 100, seed: int = None) -> list:
    """Run without display, holding the heat brush at the bottom centre."""
    logger.info("Headless simulation | N=%d | %d ticks", N, frames)

    sim = ConvectionSimulation(ConvectionParams(size=N, seed=seed))
    sim.set_interaction(N // 2, 3, InteractionMode.HEAT)
    total_times = []

    for f in range(frames):
        metrics = sim.step()
        total_times.append(metrics["total_ms"])

        if f % 10 == 0:
            logger.info("Tick %03d | %6.2fms | div_max=%.5f | avg=%.4f",
                        f, metrics["total_ms"], metrics["divergence_max"],
                        metrics["average_density"])

    sim.log_status()
    logger.info("Average: %.2fms/tick, min %.2fms, max %.2fms",
                np.mean(total_times), np.min(total_times), np.max(total_times))
    return sim.perf_log


def run_benchmark(N: int = 64, frames: int = 50, seed: int = None):
    """
    Detailed performance breakdown.
    Shows how long each physics phase takes.
    """
    print(f"\n{'='*60}")
    print(f"  CONVECTION BENCHMARK | N={N} | {frames} ticks")
    print(f"{'='*60}")

    sim = ConvectionSimulation(ConvectionParams(size=N, seed=seed))
    sim.set_interaction(N // 2, 3, InteractionMode.HEAT)

    # Warm up
    for _ in range(5):
        sim.step()

    logs = [sim.step() for _ in range(frames)]

    keys = ["forces_ms", "diffuse_vel_ms", "project1_ms",
            "advect_vel_ms", "project2_ms", "diffuse_den_ms",
            "advect_den_ms", "cooling_ms", "total_ms"]

    print(f"\n{'Step':<20} {'Mean':>8} {'Min':>8} {'Max':>8}")
    print(f"{'─'*50}")
    for k in keys:
        vals = [m[k] for m in logs]
        print(f"  {k:<18} {np.mean(vals):>7.2f}ms {np.min(vals):>7.2f}ms {np.max(vals):>7.2f}ms")

    total_vals = [m["total_ms"] for m in logs]
    print(f"\n{'─'*50}")
    print(f"  Ticks/s (physics only): {1000/np.mean(total_vals):.1f}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="2D buoyancy-driven convection")
    parser.add_argument(
        "--mode", choices=["live", "headless", "benchmark"],
        default="headless",
        help="Run mode (default: headless)"
    )
    parser.add_argument("--N",      type=int, default=64,  help="Grid resolution (default: 64)")
    parser.add_argument("--frames", type=int, default=100, help="Number of ticks")
    parser.add_argument("--seed",   type=int, default=None, help="Seed for the cooling jitter")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.mode == "live":
        run_live(N=args.N, seed=args.seed)
    elif args.mode == "headless":
        run_headless(N=args.N, frames=args.frames, seed=args.seed)
    elif args.mode == "benchmark":
        run_benchmark(N=args.N, frames=args.frames, seed=args.seed)


if __name__ == "__main__":
    main()

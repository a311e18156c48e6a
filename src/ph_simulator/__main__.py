"""
Headless Simulation Driver
==========================

Runs a scripted beaker session: select a solute (autofill), then run the
water faucet, drain and dropper at fixed rates, logging volumes, pH and
particle counts. Optionally saves a picture of the particle field.

Example:
    python -m ph_simulator --solute coffee --duration 10 --water-flow 0.05 \\
        --plot coffee.png

Author: Guilherme F. G. Santos
Date: January 2026
"""

import argparse
import logging
import signal
import sys
from typing import Optional

import numpy as np

from .core import (
    FlowIntegrator,
    ModelConfiguration,
    SolutionConfiguration,
    get_solute,
)
from .core.solute import CATALOG
from .particles import (
    Bounds,
    ParticleCountModel,
    ParticleFieldCache,
    render_particle_field,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# Global running flag for graceful shutdown
running = True

# Beaker interior in screen pixels
BEAKER_BOUNDS = Bounds(0, 0, 400, 400)


def signal_handler(sig, frame):
    """Handle Ctrl+C for clean shutdown."""
    global running
    logger.info("Shutdown signal received. Stopping simulation...")
    running = False


class Session:
    """Flow model wired to particle counts and a particle field cache."""

    def __init__(self, config: ModelConfiguration, seed: Optional[int] = None):
        self.model = FlowIntegrator(config)
        self.counts = ParticleCountModel(self.model.solution)
        self.field = ParticleFieldCache(BEAKER_BOUNDS, np.random.default_rng(seed))
        self.counts.counts.link(lambda counts, old: self.field.update_counts(counts))

    def fill_fraction(self) -> float:
        solution = self.model.solution
        return solution.total_volume.value / solution.max_volume


def build_config(args: argparse.Namespace) -> ModelConfiguration:
    return ModelConfiguration(
        solution=SolutionConfiguration(max_volume=args.max_volume),
        autofill_enabled=not args.no_autofill,
        autofill_volume=args.autofill_volume,
    )


def log_status(session: Session, sim_time: float) -> None:
    solution = session.model.solution
    pH = solution.pH.value
    counts = session.counts.counts.value
    logger.info(
        f"t={sim_time:6.2f}s  {session.model.state.value.value:<11} "
        f"solute={solution.solute_volume.value:.3f}L "
        f"water={solution.water_volume.value:.3f}L "
        f"pH={'--' if pH is None else f'{pH:.2f}'}  "
        f"H3O+={counts.h3o} OH-={counts.oh}"
    )


def run(args: argparse.Namespace) -> Session:
    """Run the scripted session and return it for inspection."""
    session = Session(build_config(args), seed=args.seed)
    model = session.model
    model.set_solute(get_solute(args.solute))

    n_steps = int(round(args.duration / args.dt))
    log_every = max(1, int(round(args.log_interval / args.dt)))

    for step in range(n_steps):
        if not running:
            break

        # Stand-in for the drag handlers: reapply the requested flows each
        # tick, the faucets ignore them while disabled
        if not model.is_autofilling:
            model.water_faucet.set_flow_rate(args.water_flow)
            model.drain_faucet.set_flow_rate(args.drain_flow)
            if model.dropper.enabled.value:
                model.dropper.is_dispensing.set(args.dispense)

        model.step(args.dt)

        if step % log_every == 0:
            log_status(session, (step + 1) * args.dt)

    log_status(session, n_steps * args.dt)
    return session


def save_plot(session: Session, path: str) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    solution = session.model.solution
    fig, ax = plt.subplots(figsize=(6, 6))
    render_particle_field(
        session.field,
        ax=ax,
        fill_fraction=session.fill_fraction(),
        solution_color=solution.color.value,
    )
    pH = solution.pH.value
    ax.set_title(
        f"{solution.solute.value.name}: "
        f"pH {'--' if pH is None else f'{pH:.2f}'}, "
        f"{solution.total_volume.value:.3f} L"
    )
    ax.legend(loc="upper right")
    fig.savefig(path, dpi=150)
    plt.close(fig)
    logger.info(f"Particle field saved to {path}")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ph_simulator",
        description="Headless beaker pH simulation with particle visualization",
    )
    parser.add_argument(
        "--solute", default="water", choices=sorted(CATALOG), help="Solute to select"
    )
    parser.add_argument("--duration", type=float, default=5.0, help="Simulated time [s]")
    parser.add_argument("--dt", type=float, default=1 / 60, help="Time step [s]")
    parser.add_argument("--water-flow", type=float, default=0.0, help="Water faucet [L/s]")
    parser.add_argument("--drain-flow", type=float, default=0.0, help="Drain faucet [L/s]")
    parser.add_argument("--dispense", action="store_true", help="Keep the dropper on")
    parser.add_argument("--max-volume", type=float, default=1.2, help="Beaker volume [L]")
    parser.add_argument(
        "--autofill-volume", type=float, default=0.5, help="Autofill target [L]"
    )
    parser.add_argument("--no-autofill", action="store_true", help="Disable autofill")
    parser.add_argument("--seed", type=int, default=None, help="Particle placement seed")
    parser.add_argument(
        "--log-interval", type=float, default=1.0, help="Status log period [s]"
    )
    parser.add_argument("--plot", metavar="PATH", help="Save the particle field image")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    if args.dt <= 0:
        parser.error("--dt must be positive")
    if args.duration < 0:
        parser.error("--duration cannot be negative")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        session = run(args)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    if args.plot:
        save_plot(session, args.plot)
    return 0


if __name__ == "__main__":
    sys.exit(main())

# main.py
"""
Main entry point for the particle background.

This script orchestrates the whole lifecycle:
1. Loads configuration from `config.json` (optional; defaults apply).
2. Initializes the logging system.
3. Opens the pygame host and starts the lifecycle controller.
4. Runs the frame loop until the window is closed or max_steps is hit.
5. Tears down the controller and the host.
"""
import logging
import sys
from utils import setup_logging, load_config, config_section
import cProfile
import pstats
import io

def main(config_path: str = 'config.json'):
    """
    The main function to run the particle background.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path, required=False)
        sim_params = config_section(config, 'simulation')
        vis_params = config_section(config, 'visualization')
        run_params = config_section(config, 'run_control')
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Background Starting ---")

    from constants import HEIGHT_FRACTION
    from particle import make_rng
    from lifecycle import LifecycleController
    from visualization import PygameHost

    host = PygameHost(vis_params)
    controller = LifecycleController(
        surface_provider=host.acquire_surface,
        frames=host.frames,
        events=host,
        rng=make_rng(sim_params.get('seed')),
        height_fraction=vis_params.get('height_fraction', HEIGHT_FRACTION),
        log_throttle=run_params.get('log_throttle_steps', 600),
    )

    max_steps = run_params.get('max_steps') or None
    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    if not controller.start():
        host.close()
        logging.info("--- Particle Background Shutting Down (no surface) ---")
        return

    if profiler:
        profiler.enable()
    try:
        frames_run = host.run(max_steps)
        logging.info(f"Frame loop finished after {frames_run} frames.")
    finally:
        if profiler:
            profiler.disable()
        controller.stop()
        host.close()

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Background Shutting Down ---")


if __name__ == "__main__":
    main(*sys.argv[1:2])

# main.py
"""
Main entry point for the Geoflux plexus field.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the window and sizes the particle population to it.
4. Drives the frame engine from a clock-paced scheduler.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
import numpy as np
import cProfile
import pstats
import io


def main():
    """
    The main function to run the plexus field.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Geoflux Starting ---")

    sim_params = config['simulation_parameters']
    run_params = config['run_control']
    vis_params = config['visualization']

    from parameters import Parameters, ParameterStore
    from particle import ParticleSystem
    from population import PopulationManager
    from scheduler import ClockScheduler
    from simulation import FrameEngine
    from viewport import ViewportTracker
    from visualization import PygameSurface, Visualizer, SurfaceUnavailableError, save_frame

    # --- Component Initialization ---
    try:
        visualizer = Visualizer(vis_params['width'], vis_params['height'], vis_params['fullscreen'])
    except SurfaceUnavailableError as e:
        print(f"FATAL: {e}")
        return

    device_pixel_ratio = vis_params['device_pixel_ratio']
    store = ParameterStore(Parameters.from_dict(sim_params))
    surface = PygameSurface()
    tracker = ViewportTracker(surface)
    manager = PopulationManager()
    engine = FrameEngine()

    # The population handle and viewport are replaced, never patched, so the
    # tick below always reads a complete snapshot of both.
    state = {
        'particles': ParticleSystem.empty(np.random.default_rng(sim_params.get('seed'))),
        'viewport': None,
    }
    state['viewport'] = tracker.handle_resize(*visualizer.window_size, device_pixel_ratio)
    state['particles'] = manager.sync(state['particles'], store.snapshot(), state['viewport'])
    logging.info(f"Spawned {state['particles'].particle_count} particles.")

    log_throttle = run_params['log_throttle_steps']

    def tick() -> bool:
        if not visualizer.handle_events(store):
            return False

        if visualizer.pending_resize is not None:
            width, height = visualizer.pending_resize
            visualizer.pending_resize = None
            state['viewport'] = tracker.handle_resize(width, height, device_pixel_ratio, state['particles'])

        params = store.snapshot()
        particles = manager.sync(state['particles'], params, state['viewport'])
        if particles is not state['particles']:
            logging.info(f"Population resized to {particles.particle_count} particles.")
            state['particles'] = particles

        stats = engine.tick(particles, params, state['viewport'], surface)
        visualizer.present(surface, params)

        if visualizer.export_requested:
            visualizer.export_requested = False
            save_frame(surface, vis_params['export_dir'])

        # Hot loops must throttle logs
        if log_throttle and stats.time % log_throttle == 0:
            logging.info(f"Frame {stats.time}")
            logging.debug(
                f"Frame {stats.time} | Particles: {stats.particle_count} | "
                f"Connections: {stats.connection_count} | "
                f"Mean gravity velocity: {np.mean(particles.gravity_velocities):.3f}"
            )
        return True

    scheduler = ClockScheduler(run_params['fps'], run_params['max_steps'])

    profiler = cProfile.Profile() if run_params['profile'] else None
    if profiler:
        profiler.enable()
    scheduler.run(tick)
    if profiler:
        profiler.disable()

    visualizer.close()
    logging.info("Frame loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Geoflux Shutting Down ---")


if __name__ == "__main__":
    main()

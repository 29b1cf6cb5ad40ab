"""
Entry point for the terminal dashboard.

Usage:
    python -m arbview
    arbview  # if installed via pip
"""

import asyncio
import sys


# Try to use uvloop for better performance
try:
    import uvloop

    uvloop.install()
    UVLOOP_ENABLED = True
except ImportError:
    UVLOOP_ENABLED = False


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success).
    """
    from arbview import __version__
    from arbview.api.client import DashboardClient
    from arbview.api.demo import DemoDataSource
    from arbview.api.source import DashboardDataSource
    from arbview.config.settings import get_settings
    from arbview.dashboard.context import DashboardContext
    from arbview.dashboard.terminal import TerminalDashboard
    from arbview.telemetry.logger import setup_logging
    from arbview.telemetry.metrics import PollMetrics

    # Print banner
    print(
        f"""
╔═══════════════════════════════════════════════════════════════╗
║     ARBVIEW DASHBOARD v{__version__:<33}      ║
║                                                               ║
║     Live monitoring for the arbitrage backend                 ║
╚═══════════════════════════════════════════════════════════════╝
    """
    )

    # Load settings
    try:
        settings = get_settings()
    except Exception as e:
        print(f"Configuration error: {e}")
        print("\nSettings are read from ARBVIEW_* variables or a .env file, e.g.:")
        print("  ARBVIEW_API_BASE_URL=http://localhost:3000/api/proxy/api/v2")
        print("  ARBVIEW_ACCESS_TOKEN=your_token")
        print("  ARBVIEW_USE_DEMO_DATA=true")
        return 1

    # Print configuration summary
    print("Configuration:")
    print(f"  Data source:    {'DEMO' if settings.use_demo_data else settings.api_base_url}")
    print(f"  Auth token:     {'Set' if settings.token else 'None'}")
    print(f"  Animation:      {settings.animation_duration_ms:.0f}ms @ {settings.fps}fps")
    print(f"  Log file:       {settings.log_file or 'None'}")
    print(f"  uvloop:         {'Enabled' if UVLOOP_ENABLED else 'Disabled'}")
    print()

    # The panel owns stdout, so logs go to the file only
    async_logger = setup_logging(settings.log_level, settings.log_file, console=False)

    async def run_dashboard() -> int:
        source: DashboardDataSource
        if settings.use_demo_data:
            source = DemoDataSource(seed=settings.demo_seed)
        else:
            source = DashboardClient(
                settings.api_base_url,
                access_token=settings.token,
                timeout_s=settings.request_timeout_s,
            )

        context = DashboardContext(settings.preferences_path)
        context.load()
        dashboard = TerminalDashboard(source, context, settings, PollMetrics())

        try:
            await dashboard.run()
            dashboard.print_summary()
            return 0

        except Exception as e:
            print(f"\nFatal error: {e}")
            import traceback

            traceback.print_exc()
            return 1

        finally:
            await source.close()

    try:
        return asyncio.run(run_dashboard())
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 0
    finally:
        async_logger.stop()


if __name__ == "__main__":
    sys.exit(main())

"""Entry point: delegates to CLI app (serve, ingest, template, validate-config, provision-admin, init-db)."""

from rich.traceback import install

from vendor_pricing.cli import app
from vendor_pricing.utils.tracing import shutdown_tracing


def run() -> None:
    try:
        install(show_locals=False, max_frames=5, word_wrap=True)
        app()
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    run()

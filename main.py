"""Entry point for checking the JamboJet client configuration."""

from jambojet.core.config import get_settings
from jambojet.core.logging import setup_logging
from jambojet.diagnostics import check_configuration


def main() -> int:
    """Configure logging, then report on the loaded settings."""
    settings = get_settings()

    # Setup logging first
    setup_logging(settings)

    return check_configuration(settings)


if __name__ == "__main__":
    raise SystemExit(main())
